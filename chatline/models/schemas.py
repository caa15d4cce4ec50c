from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Legacy role names accepted at the write boundary and their canonical form
ROLE_ALIASES = {"ai": "assistant"}


class Role(str, Enum):
    """Speaker of a message, using the OpenAI chat vocabulary."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


def normalize_role(value: object) -> object:
    """Map legacy role names onto the canonical vocabulary.

    Non-string values are returned unchanged so Pydantic reports them.
    """
    if isinstance(value, Role):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        return ROLE_ALIASES.get(lowered, lowered)
    return value


class ChatMessage(BaseModel):
    """A single message-like object in a chat request.

    Attributes:
        role: The speaker (user, assistant, system or tool).
        content: The message text. May be empty, never null.
    """

    model_config = ConfigDict(use_enum_values=True)

    role: Role = Field(..., description="Message role: 'user', 'assistant', 'system' or 'tool'")
    content: str = Field("", description="The message content")

    @field_validator("role", mode="before")
    @classmethod
    def canonical_role(cls, v: object) -> object:
        """Accept legacy role names such as 'ai'."""
        return normalize_role(v)

    @field_validator("content", mode="before")
    @classmethod
    def content_not_null(cls, v: object) -> object:
        """Coerce a null content to the empty string."""
        return "" if v is None else v


class ChatRequest(BaseModel):
    """Request payload for the chat endpoint.

    Attributes:
        messages: The full conversation, oldest first. Must be non-empty.
    """

    messages: list[ChatMessage] = Field(..., min_length=1)

    @property
    def last_message(self) -> ChatMessage:
        return self.messages[-1]


class StoredMessage(BaseModel):
    """A persisted message as returned by the store.

    Attributes:
        id: Unique message identifier.
        role: The speaker.
        content: The message text.
        created_at: Creation timestamp, the ordering key.
        session_id: Optional conversation grouping.
        user_id: Optional owning user for access scoping.
    """

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: str
    role: Role
    content: str = ""
    created_at: datetime
    session_id: str | None = None
    user_id: str | None = None

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class ErrorResponse(BaseModel):
    """JSON body returned for failed chat requests."""

    error: str
    details: Any = None
