"""Health check endpoint reporting whether a webhook is configured."""

from typing import Annotated

from fastapi import APIRouter, Depends

from rag_chat.config import CONFIG_NAMESPACE
from rag_chat.dependencies import get_workspace_host
from rag_chat.schemas.health import HealthResponse
from rag_chat.services.host import WorkspaceHost

router = APIRouter()

Host = Annotated[WorkspaceHost, Depends(get_workspace_host)]


@router.get("/healthz", response_model=HealthResponse)
async def healthz(host: Host) -> HealthResponse:
    """Report liveness and whether ``ragChat.webhookUrl`` is set.

    The webhook itself is not contacted; a missing URL only fails sends.
    """
    options = host.get_configuration(CONFIG_NAMESPACE)
    webhook = "configured" if options.webhook_url.strip() else "missing"
    return HealthResponse(status="ok", webhook=webhook)
