"""Pydantic models for API requests, responses and stored messages.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatMessage: Individual message in a chat request
    - ChatRequest: Incoming chat request payload
    - StoredMessage: Persisted message with identifier and timestamp
    - ErrorResponse: Error body for failed requests
"""

from chatline.models.schemas import (
    ChatMessage,
    ChatRequest,
    ErrorResponse,
    Role,
    StoredMessage,
    normalize_role,
)

__all__ = [
    "ChatMessage",
    "ChatRequest",
    "ErrorResponse",
    "Role",
    "StoredMessage",
    "normalize_role",
]
