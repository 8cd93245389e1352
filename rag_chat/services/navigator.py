"""Turn a clicked citation into an editor navigation.

``resolve`` is pure: it parses ``lines``, converts the 1-based range to the
0-based coordinates editors use, and anchors ``file`` at the workspace root.
``CitationNavigator`` runs it against a host bridge and performs the open.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from rag_chat.errors import NavigationError
from rag_chat.schemas.editor import END_OF_LINE, NavigationTarget
from rag_chat.services.citations import parse_line_range

if TYPE_CHECKING:
    from pathlib import Path

    from rag_chat.services.host import HostBridge

logger = structlog.get_logger()

NO_WORKSPACE_MESSAGE = "No workspace folder is open"


def resolve(file: str, lines: str, workspace_root: Path | None) -> NavigationTarget:
    """Resolve a citation to a ``NavigationTarget``.

    Raises:
        CitationParseError: If *lines* has no valid start line.
        NavigationError: If no workspace is open, or *file* escapes it or
            is not a usable path.
    """
    line_range = parse_line_range(lines)
    if workspace_root is None:
        raise NavigationError(NO_WORKSPACE_MESSAGE)

    try:
        path = workspace_root / file
        inside = path.resolve().is_relative_to(workspace_root.resolve())
    except (ValueError, OSError) as exc:
        msg = f"Failed to open file: {exc}"
        raise NavigationError(msg) from exc
    if not inside:
        msg = f"Failed to open file: {file} is outside the workspace"
        raise NavigationError(msg)

    return NavigationTarget(
        path=path,
        start_line=line_range.start - 1,
        end_line=line_range.last - 1,
        start_column=0,
        end_column=END_OF_LINE,
    )


class CitationNavigator:
    """Open citations through a host bridge."""

    def __init__(self, host: HostBridge) -> None:
        self._host = host

    async def open(self, file: str, lines: str) -> NavigationTarget:
        """Open *file* and select *lines*; returns the target that was opened.

        Raises:
            NavigationError: On bad syntax, no workspace, or an open failure.
                Nothing is opened when *lines* cannot be parsed.
        """
        target = resolve(file, lines, self._host.get_workspace_root())
        try:
            await self._host.open_and_select(target)
        except NavigationError:
            raise
        except Exception as exc:
            msg = f"Failed to open file: {exc}"
            raise NavigationError(msg) from exc

        logger.info(
            "citation_opened",
            file=file,
            start_line=target.start_line,
            end_line=target.end_line,
        )
        return target
