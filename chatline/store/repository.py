"""Message store adapters.

Two operations back the whole application:

- ``append`` writes one message and raises ``StoreError`` on failure.
  Callers on the chat path treat that as non-fatal.
- ``fetch_ordered`` returns the history oldest-first and degrades to an
  empty list on failure so the chat page can always render.

``SqlMessageStore`` talks to a relational database through SQLAlchemy.
``InMemoryMessageStore`` is the development and test stand-in used when
no database is configured.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from chatline.errors import StoreError
from chatline.models.schemas import Role, StoredMessage, normalize_role
from chatline.store.models import MessageRow

logger = logging.getLogger(__name__)


def _validate_role(role: str | Role) -> str:
    try:
        return Role(normalize_role(role)).value
    except ValueError as e:
        raise StoreError(f"Invalid message role: {role!r}") from e


class MessageStore(ABC):
    """Append-only, ordered chat message storage."""

    @abstractmethod
    async def append(
        self,
        role: str | Role,
        content: str | None,
        *,
        session_id: str | None = None,
        user_id: str | None = None,
    ) -> StoredMessage:
        """Persist one message.

        Args:
            role: Speaker role. Legacy names such as ``"ai"`` are normalized.
            content: Message text. ``None`` is stored as ``""``.
            session_id: Optional conversation grouping.
            user_id: Optional owning user.

        Returns:
            The stored message with its identifier and timestamp.

        Raises:
            StoreError: On validation or connectivity failure.
        """

    @abstractmethod
    async def fetch_ordered(
        self,
        *,
        session_id: str | None = None,
        user_id: str | None = None,
    ) -> list[StoredMessage]:
        """Return messages ordered by creation time, oldest first.

        Failures are logged and yield an empty list.
        """

    async def close(self) -> None:
        """Release any held resources."""


class SqlMessageStore(MessageStore):
    """Message store backed by an async SQLAlchemy session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def append(
        self,
        role: str | Role,
        content: str | None,
        *,
        session_id: str | None = None,
        user_id: str | None = None,
    ) -> StoredMessage:
        row = MessageRow(
            id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
            role=_validate_role(role),
            content=content or "",
            session_id=session_id,
            user_id=user_id,
        )
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(f"Failed to save {row.role} message", details=str(e)) from e

        logger.debug(f"Saved {row.role} message {row.id}")
        return StoredMessage.model_validate(row)

    async def fetch_ordered(
        self,
        *,
        session_id: str | None = None,
        user_id: str | None = None,
    ) -> list[StoredMessage]:
        query = select(MessageRow).order_by(MessageRow.created_at.asc(), MessageRow.seq.asc())
        if session_id is not None:
            query = query.where(MessageRow.session_id == session_id)
        if user_id is not None:
            query = query.where(MessageRow.user_id == user_id)

        try:
            async with self._session_factory() as session:
                rows = (await session.scalars(query)).all()
            return [StoredMessage.model_validate(row) for row in rows]
        except (SQLAlchemyError, OSError, ValidationError):
            logger.error("Failed to fetch message history", exc_info=True)
            return []


class InMemoryMessageStore(MessageStore):
    """Process-local message store for development and tests.

    Nothing survives a restart.
    """

    def __init__(self) -> None:
        self._messages: list[StoredMessage] = []

    async def append(
        self,
        role: str | Role,
        content: str | None,
        *,
        session_id: str | None = None,
        user_id: str | None = None,
    ) -> StoredMessage:
        message = StoredMessage(
            id=uuid.uuid4().hex,
            role=_validate_role(role),
            content=content or "",
            created_at=datetime.now(timezone.utc),
            session_id=session_id,
            user_id=user_id,
        )
        self._messages.append(message)
        return message

    async def fetch_ordered(
        self,
        *,
        session_id: str | None = None,
        user_id: str | None = None,
    ) -> list[StoredMessage]:
        # sorted() is stable, so equal timestamps keep insertion order
        return sorted(
            (
                message
                for message in self._messages
                if (session_id is None or message.session_id == session_id)
                and (user_id is None or message.user_id == user_id)
            ),
            key=lambda message: message.created_at,
        )
