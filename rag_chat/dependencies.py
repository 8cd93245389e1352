"""Centralized FastAPI dependencies for use with Depends().

The panel session and its host bridge are created by the application
lifespan and live on ``app.state``; these accessors hand them to routes.
They work for both HTTP requests and WebSocket connections.
"""

from fastapi.requests import HTTPConnection

from rag_chat.services.chat_session import ChatSession
from rag_chat.services.host import WorkspaceHost


def get_chat_session(conn: HTTPConnection) -> ChatSession:
    """Return the panel session owned by the running application."""
    return conn.app.state.session


def get_workspace_host(conn: HTTPConnection) -> WorkspaceHost:
    """Return the host bridge owned by the running application."""
    return conn.app.state.host


__all__ = [
    "get_chat_session",
    "get_workspace_host",
]
