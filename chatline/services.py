"""Explicit construction of the process-wide clients.

``build_services`` is called once per process. The resulting
``Services`` is handed to the FastAPI app and to the chat page, so no
module holds a client of its own.
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from chatline.config import Settings
from chatline.gateway import CompletionGateway, EchoCompletionGateway, OpenAICompletionGateway
from chatline.store import InMemoryMessageStore, MessageStore, SqlMessageStore
from chatline.store.engine import create_engine, create_session_factory, init_schema

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Clients shared by every request in this process.

    Attributes:
        store: Persisted message history.
        gateway: Streamed completions.
        engine: Database engine when the store is SQL-backed.
    """

    store: MessageStore
    gateway: CompletionGateway
    engine: AsyncEngine | None = None

    async def startup(self, create_schema: bool = False) -> None:
        if self.engine is not None and create_schema:
            await init_schema(self.engine)
            logger.info("Message store schema is ready")

    async def aclose(self) -> None:
        await self.gateway.close()
        await self.store.close()
        if self.engine is not None:
            await self.engine.dispose()


def build_services(settings: Settings) -> Services:
    """Construct the store and gateway for the configured environment.

    Production requires real credentials. Elsewhere, a missing database
    URL selects the in-memory store and a missing LLM key selects the
    echo gateway.

    Raises:
        ConfigurationError: In production when credentials are missing.
    """
    settings.validate_for_production()

    engine: AsyncEngine | None = None
    store: MessageStore
    if settings.has_database:
        engine = create_engine(settings)
        store = SqlMessageStore(create_session_factory(engine))
    else:
        logger.warning(
            "DATABASE_URL is not set. Using an in-memory message store; "
            "history will not survive a restart."
        )
        store = InMemoryMessageStore()

    gateway: CompletionGateway
    if settings.has_llm_credentials:
        gateway = OpenAICompletionGateway.from_settings(settings)
    else:
        logger.warning(
            "LLM_API_KEY / OPENAI_API_KEY is not set. Using the echo completion gateway."
        )
        gateway = EchoCompletionGateway(delay=0.05)

    return Services(store=store, gateway=gateway, engine=engine)
