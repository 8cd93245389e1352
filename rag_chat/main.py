"""FastAPI application factory with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rag_chat.config import Settings, settings
from rag_chat.logging_config import configure_logging
from rag_chat.routers import health, panel
from rag_chat.services.chat_session import ChatSession
from rag_chat.services.host import WorkspaceHost
from rag_chat.services.rag_client import RagClient, WebhookRagClient


def create_app(app_settings: Settings, rag_client: RagClient | None = None) -> FastAPI:
    """Build the panel server.

    The lifespan owns the panel session: it is created on startup, stored on
    ``app.state`` together with its host bridge, and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(json_logs=not app_settings.debug, log_level=app_settings.log_level)
        host = WorkspaceHost(app_settings.workspace_root, app_settings.chat_options())
        async with ChatSession(host, rag_client or WebhookRagClient()) as session:
            app.state.host = host
            app.state.session = session
            structlog.get_logger().info(
                "session_started",
                workspace_root=str(app_settings.workspace_root),
                webhook_configured=bool(app_settings.webhook_url),
            )
            yield

    app = FastAPI(title=app_settings.app_name, lifespan=lifespan)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(health.router)
    app.include_router(panel.router)
    return app


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app = create_app(settings)


def run() -> None:
    """Console entry point: serve the panel with uvicorn."""
    uvicorn.run(
        "rag_chat.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
