"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - settings: Test-environment settings with no external credentials
    - store: Fresh in-memory message store
    - gateway: Echo gateway with a fixed reply
    - app / async_client: FastAPI app wired to the fixtures and an HTTPX client
    - failing_store, rejecting_gateway, recording_gateway: fault and spy doubles

No test reaches the network.
"""

from collections.abc import AsyncGenerator, Sequence

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from chatline.api.app import create_app
from chatline.config import Environment, Settings
from chatline.errors import StoreError, UpstreamError
from chatline.gateway import CompletionGateway, CompletionStream, EchoCompletionGateway
from chatline.models.schemas import ChatMessage, Role, StoredMessage
from chatline.services import Services
from chatline.store import InMemoryMessageStore, MessageStore

REPLY_TEXT = "Hello there, how can I help?"


class FailingStore(MessageStore):
    """Store whose every operation fails the way an unreachable database does."""

    def __init__(self) -> None:
        self.append_attempts: list[tuple[str, str]] = []

    async def append(
        self,
        role: str | Role,
        content: str | None,
        *,
        session_id: str | None = None,
        user_id: str | None = None,
    ) -> StoredMessage:
        self.append_attempts.append((Role(role).value, content or ""))
        raise StoreError("Failed to save message", details="connection refused")

    async def fetch_ordered(
        self,
        *,
        session_id: str | None = None,
        user_id: str | None = None,
    ) -> list[StoredMessage]:
        return []


class RejectingGateway(CompletionGateway):
    """Gateway that rejects every request like an invalid API key does."""

    def __init__(self, status_code: int = 401) -> None:
        self.status_code = status_code
        self.calls = 0

    async def start(self, messages: Sequence[ChatMessage]) -> CompletionStream:
        self.calls += 1
        raise UpstreamError(
            "LLM API authentication failed. Check that the LLM API key is configured correctly.",
            details={"error": {"code": "invalid_api_key"}},
            status_code=self.status_code,
        )


class RecordingGateway(EchoCompletionGateway):
    """Echo gateway that records what it was asked and what the store held."""

    def __init__(self, store: MessageStore, reply: str | None = None) -> None:
        super().__init__(reply=reply)
        self._store = store
        self.requests: list[list[ChatMessage]] = []
        self.history_at_start: list[list[StoredMessage]] = []

    async def start(self, messages: Sequence[ChatMessage]) -> CompletionStream:
        self.requests.append(list(messages))
        self.history_at_start.append(await self._store.fetch_ordered())
        return await super().start(messages)


@pytest.fixture
def settings() -> Settings:
    """Return settings for the test environment without credentials."""
    return Settings(
        environment=Environment.TEST,
        openai_api_key="",
        database_url="",
        database_key="",
        create_schema=False,
    )


@pytest.fixture
def store() -> InMemoryMessageStore:
    return InMemoryMessageStore()


@pytest.fixture
def gateway() -> EchoCompletionGateway:
    return EchoCompletionGateway(reply=REPLY_TEXT)


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def rejecting_gateway() -> RejectingGateway:
    return RejectingGateway()


@pytest.fixture
def recording_gateway(store: InMemoryMessageStore) -> RecordingGateway:
    return RecordingGateway(store, reply=REPLY_TEXT)


def build_test_app(settings: Settings, store: MessageStore, gateway: CompletionGateway) -> FastAPI:
    """Create the FastAPI app around explicit test doubles."""
    return create_app(settings, Services(store=store, gateway=gateway))


@pytest.fixture
def app(settings: Settings, store: InMemoryMessageStore, gateway: EchoCompletionGateway) -> FastAPI:
    return build_test_app(settings, store, gateway)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
