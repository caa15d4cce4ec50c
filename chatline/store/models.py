"""SQLAlchemy ORM model for the append-only ``messages`` table.

Rows are written once and never updated or deleted. ``created_at`` is
the sort key; ``seq`` breaks ties between rows created in the same
instant so history order always matches insertion order.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from chatline.models.schemas import Role

ROLE_VALUES = tuple(role.value for role in Role)


class Base(DeclarativeBase):
    """Declarative base with a deterministic constraint naming convention."""


Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}


def _new_message_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageRow(Base):
    """One persisted chat message."""

    __tablename__ = "messages"

    # SQLite only autoincrements INTEGER primary keys
    seq: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    id: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        default=_new_message_id,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    session_id: Mapped[str | None] = mapped_column(String, nullable=True)
    user_id: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(
            "role IN ({})".format(", ".join(f"'{value}'" for value in ROLE_VALUES)),
            name="role_allowed",
        ),
        Index("ix_messages_created_at", "created_at"),
        Index("ix_messages_session_id_created_at", "session_id", "created_at"),
        Index("ix_messages_user_id_created_at", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<MessageRow(id={self.id!r}, role={self.role!r}, session_id={self.session_id!r})>"
