"""Exception hierarchy for the chat send pipeline and citation navigation.

Everything under ``ClientError`` (plus ``ConfigurationError``) is caught at the
send boundary in ``ChatSession.send`` and turned into an ``error`` transcript
turn.  ``NavigationError`` is reported as a transient host notification and is
never appended to the transcript.
"""

from __future__ import annotations


class RagChatError(Exception):
    """Base class for all rag-chat errors."""


class ConfigurationError(RagChatError):
    """A required setting is missing or invalid."""


class ClientError(RagChatError):
    """Base class for failures of a single webhook round trip."""


class TransportError(ClientError):
    """Network-level failure: DNS, connect, TLS, protocol, or abort."""


class RequestTimeoutError(ClientError):
    """The round trip did not complete within the configured timeout."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"Request timeout after {timeout_ms}ms")
        self.timeout_ms = timeout_ms


class MalformedResponseError(ClientError):
    """The response body is not a JSON object or carries invalid citations."""


class ApplicationError(ClientError):
    """A well-formed response whose ``code`` is not 200.

    ``str(exc)`` is the message followed by the hint, separated by a blank
    line, which is exactly what the transcript shows.
    """

    def __init__(self, message: str, hint: str | None = None, code: int | None = None) -> None:
        text = f"{message}\n\n{hint}" if hint else message
        super().__init__(text)
        self.message = message
        self.hint = hint
        self.code = code


class NavigationError(RagChatError):
    """A citation could not be opened in the editor."""


class CitationParseError(NavigationError):
    """The ``lines`` part of a citation has no parseable start line."""
