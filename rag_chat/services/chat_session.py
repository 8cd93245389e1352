"""Chat panel session: transcript owner and send pipeline.

Send orchestration:
user turn -> showLoading -> read options -> validate endpoint -> build request
-> RAG round trip -> assistant or error turn -> hideLoading.

``hideLoading`` is posted from a ``finally`` block, so the panel's input is
re-enabled whatever the outcome.  Sends are queued: a lock serializes them,
so transcript appends never interleave.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from rag_chat.config import CONFIG_NAMESPACE
from rag_chat.errors import ClientError, ConfigurationError, NavigationError
from rag_chat.schemas.chat import ConversationTurn
from rag_chat.schemas.panel import (
    AddMessage,
    HideLoading,
    LoadHistory,
    OpenFile,
    SendMessage,
    ShowLoading,
)
from rag_chat.services.navigator import CitationNavigator
from rag_chat.services.request_builder import build_request, validate_endpoint
from rag_chat.services.transcript import Transcript

if TYPE_CHECKING:
    from types import TracebackType

    from rag_chat.schemas.editor import NavigationTarget
    from rag_chat.services.channel import Outbound, PanelChannel
    from rag_chat.services.host import HostBridge
    from rag_chat.services.rag_client import RagClient

logger = structlog.get_logger()


class ChatSession:
    """One chat panel's state, owned by whoever creates the panel.

    The transcript outlives panel attachments: detaching and re-attaching a
    channel replays the history with ``loadHistory``.
    """

    def __init__(self, host: HostBridge, client: RagClient) -> None:
        self._host = host
        self._client = client
        self._navigator = CitationNavigator(host)
        self._channel: PanelChannel | None = None
        self._send_lock = asyncio.Lock()
        self._closed = False
        self.transcript = Transcript()

    # -- lifecycle ---------------------------------------------------------

    async def attach(self, channel: PanelChannel) -> None:
        """Bind a panel and replay the transcript if there is one."""
        self._ensure_open()
        self._channel = channel
        if len(self.transcript):
            await channel.post(LoadHistory(messages=list(self.transcript.snapshot())))

    def detach(self) -> None:
        self._channel = None

    async def close(self) -> None:
        """Detach and refuse further sends, waiting for an in-flight send to settle."""
        async with self._send_lock:
            self._closed = True
            self._channel = None

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> ChatSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -- inbound -----------------------------------------------------------

    async def handle(self, message: SendMessage | OpenFile) -> None:
        """Dispatch one inbound panel message."""
        if isinstance(message, SendMessage):
            await self.send(message.message)
        elif isinstance(message, OpenFile):
            await self.open_citation(message.file, message.lines)

    async def send(self, text: str) -> ConversationTurn | None:
        """Run one send and return the reply turn (None for blank input)."""
        if not text.strip():
            return None

        async with self._send_lock:
            self._ensure_open()
            question = ConversationTurn.user(text)
            self._append(question)
            await self._post(AddMessage.for_turn(question))
            await self._post(ShowLoading())
            try:
                reply = await self._exchange(text)
                self._append(reply)
                await self._post(AddMessage.for_turn(reply))
            finally:
                await self._post(HideLoading())
        return reply

    async def open_citation(self, file: str, lines: str) -> NavigationTarget | None:
        """Open a citation; failures become a host notification, not a turn."""
        try:
            return await self._navigator.open(file, lines)
        except NavigationError as exc:
            logger.warning("citation_open_failed", file=file, lines=lines, error=str(exc))
            await self._host.show_error(str(exc))
            return None

    # -- internals ---------------------------------------------------------

    async def _exchange(self, text: str) -> ConversationTurn:
        """Perform the round trip, converting every failure into an error turn."""
        try:
            options = self._host.get_configuration(CONFIG_NAMESPACE)
            endpoint = validate_endpoint(options.webhook_url)
            parameters = build_request(
                text,
                options,
                context=self._host.get_active_document_context(),
                workspace_root=self._host.get_workspace_root(),
            )
            answer = await self._client.query(
                endpoint,
                parameters,
                timeout_ms=options.timeout,
                validate_certificates=options.validate_ssl,
            )
        except (ConfigurationError, ClientError) as exc:
            logger.warning("rag_send_failed", error_type=type(exc).__name__, error=str(exc))
            return ConversationTurn.error(exc)
        except Exception as exc:
            logger.exception("rag_send_crashed")
            return ConversationTurn.error(exc)
        return ConversationTurn.assistant(answer)

    def _append(self, turn: ConversationTurn) -> None:
        self.transcript.append(turn)

    async def _post(self, message: Outbound) -> None:
        """Deliver to the attached panel; a panel that fails to receive is detached.

        The transcript is updated regardless, so a send that loses its panel
        halfway still records both of its turns.
        """
        if self._channel is None:
            return
        try:
            await self._channel.post(message)
        except Exception:
            logger.warning("panel_post_failed", message_type=message.type, exc_info=True)
            self._channel = None

    def _ensure_open(self) -> None:
        if self._closed:
            msg = "Chat session is closed"
            raise RuntimeError(msg)
