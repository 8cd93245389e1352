"""Outbound panel channel with protocol-based swappable implementations.

The server uses ``WebSocketChannel`` to push messages to a connected panel.
Tests use ``InMemoryPanelChannel``, which records every posted message in
order so assertions can check sequencing (``showLoading`` before
``addMessage`` before ``hideLoading``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from fastapi import WebSocket

    from rag_chat.schemas.panel import (
        AddMessage,
        HideLoading,
        LoadHistory,
        RevealRange,
        ShowError,
        ShowLoading,
    )

    Outbound = AddMessage | ShowLoading | HideLoading | LoadHistory | RevealRange | ShowError


def encode(message: Outbound) -> dict[str, Any]:
    """Serialize an outbound message to its JSON wire form."""
    return message.model_dump(mode="json", by_alias=True)


class PanelChannel(Protocol):
    """Protocol for delivering outbound messages to a panel."""

    async def post(self, message: Outbound) -> None:
        """Deliver *message* to the panel."""
        ...


class WebSocketChannel:
    """Channel writing JSON text frames to a FastAPI WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    async def post(self, message: Outbound) -> None:
        await self._websocket.send_json(encode(message))


class InMemoryPanelChannel:
    """Test double that records posted messages."""

    def __init__(self) -> None:
        self.messages: list[Outbound] = []

    async def post(self, message: Outbound) -> None:
        """Append *message* to the in-memory list."""
        self.messages.append(message)

    @property
    def types(self) -> list[str]:
        """The ``type`` tag of every posted message, in order."""
        return [message.type for message in self.messages]
