"""Error taxonomy shared by the endpoint, the gateway and the store.

Errors that reach the HTTP caller carry a ``status_code`` and are
rendered as ``{"error": ..., "details": ...}`` by the handler registered
in ``chatline.api.app``. Store errors never reach the caller.
"""

from typing import Any


class ChatlineError(Exception):
    """Base class for all application errors.

    Attributes:
        error: Short human-readable summary.
        details: Optional extra payload (upstream body, validation errors).
        status_code: HTTP status used when the error reaches a caller.
    """

    status_code: int = 500

    def __init__(self, error: str, details: Any = None, status_code: int | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.details = details
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(ChatlineError):
    """The request body is missing, malformed or has no messages."""

    status_code = 400


class UpstreamError(ChatlineError):
    """The completion service rejected the request before streaming began."""


class ServerError(ChatlineError):
    """An unexpected failure while handling a chat request."""


class CompletionStreamError(ChatlineError):
    """The completion stream failed after it had started."""


class StoreError(ChatlineError):
    """A message store read or write failed."""


class ConfigurationError(ChatlineError):
    """Required configuration is missing or invalid."""
