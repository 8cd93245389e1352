"""Build the webhook request body from user text, options, and editor context.

Precedence when names collide, lowest first: configured ``additionalParams``,
then editor context fields, then ``query``/``collection``.  A structural field
that is absent leaves an extra of the same name untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from rag_chat.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from pydantic import JsonValue

    from rag_chat.config import ChatOptions
    from rag_chat.schemas.editor import DocumentContext

MISSING_WEBHOOK_MESSAGE = (
    "Webhook URL is not configured. Please set ragChat.webhookUrl in settings."
)
MISSING_COLLECTION_MESSAGE = (
    "Collection is not configured. Please set ragChat.collection in settings."
)


@dataclass(frozen=True)
class RequestParameters:
    """One webhook request, built fresh per send and discarded afterwards."""

    query: str
    collection: str | None = None
    file_path: str | None = None
    line_number: int | None = None
    start_line: int | None = None
    end_line: int | None = None
    extras: Mapping[str, JsonValue] = field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON object body sent to the webhook."""
        payload: dict[str, Any] = dict(self.extras)
        context = {
            "file_path": self.file_path,
            "line_number": self.line_number,
            "start_line": self.start_line,
            "end_line": self.end_line,
        }
        payload.update({key: value for key, value in context.items() if value is not None})
        payload["query"] = self.query
        if self.collection:
            payload["collection"] = self.collection
        return payload


def validate_endpoint(url: str) -> str:
    """Return *url* stripped, or raise if it is missing or not http(s).

    Raises:
        ConfigurationError: On an empty URL or an unsupported scheme.
    """
    url = url.strip()
    if not url:
        raise ConfigurationError(MISSING_WEBHOOK_MESSAGE)
    scheme = urlsplit(url).scheme.lower()
    if scheme not in ("http", "https"):
        msg = f"Webhook URL must use http or https, got {url!r}"
        raise ConfigurationError(msg)
    return url


def build_request(
    text: str,
    options: ChatOptions,
    context: DocumentContext | None = None,
    workspace_root: Path | None = None,
) -> RequestParameters:
    """Build ``RequestParameters`` for one send.

    Args:
        text: Raw user input; sent trimmed.
        options: The ``ragChat`` option bag.
        context: Active document snapshot, or None when no editor is active.
        workspace_root: First workspace root, or None when no folder is open.

    Raises:
        ValueError: If *text* is empty after trimming.
        ConfigurationError: If a collection is required but not configured.
    """
    query = text.strip()
    if not query:
        msg = "query must not be empty"
        raise ValueError(msg)

    collection = options.collection.strip() or None
    if collection is None and options.require_collection:
        raise ConfigurationError(MISSING_COLLECTION_MESSAGE)

    fields: dict[str, Any] = {}
    if options.include_context and context is not None and workspace_root is not None:
        fields["file_path"] = context.relative_path
        selection = context.selection
        if selection is not None:
            if selection.is_empty:
                fields["line_number"] = selection.active_line + 1
            else:
                fields["start_line"] = selection.start_line + 1
                fields["end_line"] = selection.end_line + 1

    return RequestParameters(
        query=query,
        collection=collection,
        extras=dict(options.additional_params),
        **fields,
    )
