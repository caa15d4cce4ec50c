"""Async SQLAlchemy engine construction for the message store.

The engine and session factory are built once per process by
``chatline.services.build_services`` and disposed on shutdown.
"""

import logging

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from chatline.config import Settings
from chatline.store.models import Base

logger = logging.getLogger(__name__)

# Plain driver names mapped to their asyncio drivers
_ASYNC_DRIVERS = {
    "postgres": "postgresql+asyncpg",
    "postgresql": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}


def build_database_url(database_url: str, database_key: str = "") -> URL:
    """Resolve the configured database URL into an async SQLAlchemy URL.

    Hosted Postgres providers hand out ``postgres://`` URLs; those are
    switched to the asyncpg driver. A non-empty ``database_key`` replaces
    the URL password.

    Args:
        database_url: The configured URL.
        database_key: Optional store access key.

    Returns:
        The URL to pass to ``create_async_engine``.
    """
    url = make_url(database_url)
    driver = _ASYNC_DRIVERS.get(url.drivername)
    if driver is not None:
        url = url.set(drivername=driver)
    if database_key:
        url = url.set(password=database_key)
    return url


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured store."""
    url = build_database_url(settings.database_url, settings.database_key)
    logger.info(f"Connecting message store to {url.render_as_string(hide_password=True)}")
    return create_async_engine(url, pool_pre_ping=True)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_schema(engine: AsyncEngine) -> None:
    """Create the messages table if it does not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
