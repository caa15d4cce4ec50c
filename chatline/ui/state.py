"""Chat view state: message list, input text and request phase.

The page binds its elements to a ``ChatViewState`` and feeds it the
chunks read from the chat endpoint. The state decides what may happen
next; the page only renders it.

Phases::

    idle --submit()--> submitting --first chunk--> streaming
      ^                    |                          |
      +---- finish()/fail() ---------------------------+
"""

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum

from chatline.models.schemas import ChatMessage, Role, StoredMessage

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    """Where the view is in a request/response cycle."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    STREAMING = "streaming"


@dataclass
class ViewMessage:
    """A transient, view-owned copy of a message."""

    role: str
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def from_any(cls, message: StoredMessage | ChatMessage | dict) -> "ViewMessage":
        if isinstance(message, StoredMessage):
            return cls(role=Role(message.role).value, content=message.content, id=message.id)
        if isinstance(message, dict):
            message = ChatMessage.model_validate(message)
        return cls(role=Role(message.role).value, content=message.content)

    def to_payload(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class ChatViewState:
    """State machine behind the chat page.

    Args:
        history: Messages to seed the view with at mount time.
    """

    def __init__(self, history: Iterable[StoredMessage | ChatMessage | dict] = ()) -> None:
        self.messages: list[ViewMessage] = [ViewMessage.from_any(m) for m in history]
        self.input_text: str = ""
        self.phase: Phase = Phase.IDLE
        self.error: str | None = None
        self._listeners: list[Callable[[], None]] = []

    # --- derived flags used by bindings ---

    @property
    def in_flight(self) -> bool:
        return self.phase is not Phase.IDLE

    @property
    def is_waiting(self) -> bool:
        """True while a request is out and the model has not started replying."""
        return self.in_flight and bool(self.messages) and self.messages[-1].role == Role.USER.value

    @property
    def is_streaming(self) -> bool:
        return self.phase is Phase.STREAMING

    @property
    def can_submit(self) -> bool:
        return not self.in_flight and bool(self.input_text.strip())

    @property
    def send_label(self) -> str:
        if self.is_waiting:
            return "Wait..."
        if self.in_flight:
            return "Processing..."
        return "Send"

    # --- change notification ---

    def on_change(self, listener: Callable[[], None]) -> None:
        """Register a callback run whenever the message list changes."""
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    # --- transitions ---

    def submit(self) -> list[dict[str, str]] | None:
        """Move the current input into the thread and start a request.

        Returns:
            The conversation payload to send, or None when submission is
            not allowed (empty input or a request already in flight).
        """
        if not self.can_submit:
            return None

        self.messages.append(ViewMessage(role=Role.USER.value, content=self.input_text))
        self.input_text = ""
        self.error = None
        self.phase = Phase.SUBMITTING
        self._notify()
        return [message.to_payload() for message in self.messages]

    def receive_chunk(self, text: str) -> None:
        """Append streamed text to the in-progress assistant message."""
        if not text or not self.in_flight:
            return

        if self.phase is Phase.SUBMITTING:
            self.phase = Phase.STREAMING
            self.messages.append(ViewMessage(role=Role.ASSISTANT.value, content=text))
        else:
            self.messages[-1].content += text
        self._notify()

    def finish(self) -> None:
        """End the request normally."""
        self.phase = Phase.IDLE

    def fail(self, error: str) -> None:
        """End the request with an error, keeping every message shown so far."""
        logger.warning(f"Chat request failed: {error}")
        self.error = error
        self.phase = Phase.IDLE
