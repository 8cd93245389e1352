"""WebSocket endpoint carrying the chat panel's message channel.

Each text frame is one JSON panel message.  Inbound frames are
``sendMessage`` / ``openFile``; everything the session and the host bridge
emit goes back over the same socket.  Only one panel is attached at a time:
a new connection takes over the session and receives ``loadHistory``.
"""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from rag_chat.dependencies import get_chat_session, get_workspace_host
from rag_chat.schemas.panel import SendMessage, inbound_adapter
from rag_chat.services.channel import WebSocketChannel
from rag_chat.services.chat_session import ChatSession
from rag_chat.services.host import WorkspaceHost

logger = structlog.get_logger()

router = APIRouter(tags=["panel"])


@router.websocket("/panel")
async def panel(
    websocket: WebSocket,
    session: Annotated[ChatSession, Depends(get_chat_session)],
    host: Annotated[WorkspaceHost, Depends(get_workspace_host)],
) -> None:
    """Attach a panel to the session and pump its inbound messages.

    Messages are handled one at a time, so a send completes (and
    ``hideLoading`` is delivered) before the next frame is read.
    """
    await websocket.accept()
    channel = WebSocketChannel(websocket)
    host.attach(channel)
    await session.attach(channel)
    logger.info("panel_connected", turns=len(session.transcript))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = inbound_adapter.validate_json(raw)
            except ValidationError as exc:
                logger.warning("panel_message_rejected", errors=exc.error_count())
                continue

            if isinstance(message, SendMessage):
                host.set_active_document(message.context)
            await session.handle(message)
    except WebSocketDisconnect:
        logger.info("panel_disconnected")
    finally:
        session.detach()
        host.detach()
