"""Host bridge: the editor/UI runtime the chat core calls into.

The core only needs five things from its host: the active document context,
the workspace root, the ``ragChat`` options, a way to open and select a
document range, and a transient error notification.

``WorkspaceHost`` backs these with a local workspace directory and relays
navigation and notifications to the connected panel.  ``InMemoryHostBridge``
is the test double.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol

import structlog

from rag_chat.config import CONFIG_NAMESPACE, ChatOptions
from rag_chat.errors import ConfigurationError
from rag_chat.schemas.panel import RevealRange, ShowError

if TYPE_CHECKING:
    from pathlib import Path

    from rag_chat.schemas.editor import DocumentContext, NavigationTarget
    from rag_chat.services.channel import PanelChannel

logger = structlog.get_logger()


class HostBridge(Protocol):
    """Protocol for the editor runtime hosting the chat panel."""

    def get_active_document_context(self) -> DocumentContext | None:
        """Return the active document and selection, or None."""
        ...

    def get_workspace_root(self) -> Path | None:
        """Return the first workspace root, or None if no folder is open."""
        ...

    def get_configuration(self, namespace: str) -> ChatOptions:
        """Return the typed option bag for *namespace*."""
        ...

    async def open_and_select(self, target: NavigationTarget) -> None:
        """Open the target document, select the range, and reveal it.

        Raises on failure (missing file, permission denied, ...).
        """
        ...

    async def show_error(self, message: str) -> None:
        """Show a transient error notification."""
        ...


def _check_namespace(namespace: str) -> None:
    if namespace != CONFIG_NAMESPACE:
        msg = f"Unknown configuration namespace: {namespace!r}"
        raise ConfigurationError(msg)


def _probe_readable(path: Path) -> None:
    """Open *path* for reading, raising ``OSError`` if that is not possible."""
    with path.open("rb") as fh:
        fh.read(1)


class WorkspaceHost:
    """Host bridge backed by a workspace directory on the local filesystem.

    The panel reports the active document along with each ``sendMessage``;
    the latest report is what ``get_active_document_context`` returns.
    Navigation is verified locally, then relayed to the panel as
    ``revealRange`` so the editor side performs the actual selection.
    """

    def __init__(self, workspace_root: Path | None, options: ChatOptions | None = None) -> None:
        self._root = workspace_root
        self.options = options or ChatOptions()
        self._context: DocumentContext | None = None
        self._channel: PanelChannel | None = None

    def attach(self, channel: PanelChannel) -> None:
        self._channel = channel

    def detach(self) -> None:
        self._channel = None
        self._context = None

    def set_active_document(self, context: DocumentContext | None) -> None:
        self._context = context

    def get_active_document_context(self) -> DocumentContext | None:
        return self._context

    def get_workspace_root(self) -> Path | None:
        return self._root

    def get_configuration(self, namespace: str) -> ChatOptions:
        _check_namespace(namespace)
        return self.options

    async def open_and_select(self, target: NavigationTarget) -> None:
        await asyncio.to_thread(_probe_readable, target.path)
        if self._channel is not None:
            await self._channel.post(RevealRange(target=target))

    async def show_error(self, message: str) -> None:
        logger.warning("host_notification", message=message)
        if self._channel is not None:
            await self._channel.post(ShowError(message=message))


class InMemoryHostBridge:
    """Test double with settable state that records navigation and notifications.

    Set ``open_error`` to make ``open_and_select`` raise it.
    """

    def __init__(
        self,
        workspace_root: Path | None = None,
        options: ChatOptions | None = None,
        context: DocumentContext | None = None,
    ) -> None:
        self.workspace_root = workspace_root
        self.options = options or ChatOptions(webhook_url="http://rag.test/webhook")
        self.context = context
        self.opened: list[NavigationTarget] = []
        self.errors: list[str] = []
        self.open_error: Exception | None = None

    def get_active_document_context(self) -> DocumentContext | None:
        return self.context

    def get_workspace_root(self) -> Path | None:
        return self.workspace_root

    def get_configuration(self, namespace: str) -> ChatOptions:
        _check_namespace(namespace)
        return self.options

    async def open_and_select(self, target: NavigationTarget) -> None:
        if self.open_error is not None:
            raise self.open_error
        self.opened.append(target)

    async def show_error(self, message: str) -> None:
        self.errors.append(message)
