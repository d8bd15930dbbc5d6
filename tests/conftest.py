"""Pytest fixtures and shared test configuration.

Fixtures:
    - client_config: ClientConfig pointing at temporary directories
    - conversation_service: In-memory fake conversation service state
    - conversation_client: ConversationClient wired to the fake service
    - recorded_sleep: Sleep replacement that records delays
"""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport

from companion.api.client import ConversationClient
from companion.config import ClientConfig
from tests.helpers import (
    API_KEY,
    FakeConversationService,
    RecordingSleep,
    build_conversation_app,
)


@pytest.fixture
def client_config(tmp_path: Path) -> ClientConfig:
    """Return a config isolated to a temporary directory."""
    return ClientConfig(
        server_url="http://conversation.test",
        api_key=API_KEY,
        asset_url="http://assets.test/avatars",
        avatar_dir=tmp_path / "avatars",
        data_dir=tmp_path / "data",
        summarization_poll_interval=0.01,
    )


@pytest.fixture
def conversation_service() -> FakeConversationService:
    return FakeConversationService()


@pytest.fixture
async def conversation_client(
    client_config: ClientConfig,
    conversation_service: FakeConversationService,
) -> AsyncIterator[ConversationClient]:
    """Create a conversation client talking to the fake service.

    Yields:
        ConversationClient using an ASGI transport.
    """
    transport = ASGITransport(app=build_conversation_app(conversation_service))
    async with ConversationClient(client_config, transport=transport) as client:
        yield client


@pytest.fixture
def recorded_sleep() -> RecordingSleep:
    return RecordingSleep()
