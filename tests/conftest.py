"""Shared test fixtures: in-memory host, RAG client, panel channel, and app."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from rag_chat.config import ChatOptions, Settings
from rag_chat.main import create_app
from rag_chat.services.channel import InMemoryPanelChannel
from rag_chat.services.chat_session import ChatSession
from rag_chat.services.host import InMemoryHostBridge
from rag_chat.services.rag_client import InMemoryRagClient

if TYPE_CHECKING:
    from pathlib import Path

    from fastapi import FastAPI

WEBHOOK_URL = "http://rag.test/webhook"


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """A workspace directory containing ``src/app.py`` with 60 lines."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "app.py").write_text("".join(f"line {n}\n" for n in range(1, 61)))
    return tmp_path


@pytest.fixture
def host(workspace: Path) -> InMemoryHostBridge:
    """Host bridge with a workspace open and a webhook configured."""
    return InMemoryHostBridge(
        workspace_root=workspace,
        options=ChatOptions(webhook_url=WEBHOOK_URL),
    )


@pytest.fixture
def rag_client() -> InMemoryRagClient:
    """Create a fresh in-memory RAG client for test inspection."""
    return InMemoryRagClient()


@pytest.fixture
def channel() -> InMemoryPanelChannel:
    """Create a fresh in-memory panel channel for test inspection."""
    return InMemoryPanelChannel()


@pytest.fixture
async def session(
    host: InMemoryHostBridge,
    rag_client: InMemoryRagClient,
    channel: InMemoryPanelChannel,
) -> ChatSession:
    """A chat session attached to the in-memory channel."""
    chat_session = ChatSession(host, rag_client)
    await chat_session.attach(channel)
    return chat_session


@pytest.fixture
def app(workspace: Path, rag_client: InMemoryRagClient) -> FastAPI:
    """Panel server wired to the in-memory RAG client and the temp workspace."""
    app_settings = Settings(
        _env_file=None,
        webhook_url=WEBHOOK_URL,
        workspace_root=workspace,
        debug=True,
    )
    return create_app(app_settings, rag_client=rag_client)
