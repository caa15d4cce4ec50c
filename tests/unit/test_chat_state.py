"""Unit tests for the chat view state machine."""

from datetime import datetime, timezone

import pytest

from chatline.models.schemas import StoredMessage
from chatline.ui.state import ChatViewState, Phase


def _stored(role: str, content: str, message_id: str) -> StoredMessage:
    return StoredMessage(
        id=message_id,
        role=role,
        content=content,
        created_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def state() -> ChatViewState:
    return ChatViewState()


class TestHydration:
    """Seeding the view from persisted history."""

    def test_history_seeds_messages(self) -> None:
        state = ChatViewState(
            [_stored("user", "hi", "m1"), _stored("assistant", "hello", "m2")]
        )

        assert [(m.id, m.role, m.content) for m in state.messages] == [
            ("m1", "user", "hi"),
            ("m2", "assistant", "hello"),
        ]
        assert state.phase is Phase.IDLE

    def test_history_accepts_plain_dicts(self) -> None:
        state = ChatViewState([{"role": "ai", "content": "legacy"}])

        assert state.messages[0].role == "assistant"

    def test_empty_history(self, state: ChatViewState) -> None:
        assert state.messages == []
        assert not state.in_flight


class TestSubmit:
    """Submit transition from idle."""

    def test_submit_appends_user_message_and_clears_input(self, state: ChatViewState) -> None:
        state.input_text = "hello"

        payload = state.submit()

        assert payload == [{"role": "user", "content": "hello"}]
        assert state.input_text == ""
        assert state.phase is Phase.SUBMITTING
        assert state.is_waiting
        assert not state.is_streaming

    def test_submit_keeps_text_as_typed(self, state: ChatViewState) -> None:
        state.input_text = "  indented\n    code  "

        payload = state.submit()

        assert payload == [{"role": "user", "content": "  indented\n    code  "}]
        assert state.messages[-1].content == "  indented\n    code  "

    def test_payload_includes_history(self) -> None:
        state = ChatViewState([_stored("user", "hi", "m1"), _stored("assistant", "yo", "m2")])
        state.input_text = "again"

        payload = state.submit()

        assert [m["content"] for m in payload] == ["hi", "yo", "again"]

    @pytest.mark.parametrize("text", ["", "   "])
    def test_blank_input_is_ignored(self, state: ChatViewState, text: str) -> None:
        state.input_text = text

        assert not state.can_submit
        assert state.submit() is None
        assert state.messages == []

    def test_submit_disabled_while_in_flight(self, state: ChatViewState) -> None:
        state.input_text = "first"
        state.submit()
        state.input_text = "second"

        assert not state.can_submit
        assert state.submit() is None
        assert [m.content for m in state.messages] == ["first"]

    def test_submit_clears_previous_error(self, state: ChatViewState) -> None:
        state.input_text = "first"
        state.submit()
        state.fail("boom")
        state.input_text = "retry"

        state.submit()

        assert state.error is None


class TestStreaming:
    """Chunk arrival and completion."""

    def test_first_chunk_starts_assistant_message(self, state: ChatViewState) -> None:
        state.input_text = "hello"
        state.submit()

        state.receive_chunk("Hi")

        assert state.phase is Phase.STREAMING
        assert state.is_streaming
        assert not state.is_waiting
        assert state.messages[-1].role == "assistant"
        assert state.messages[-1].content == "Hi"

    def test_chunks_append_in_order(self, state: ChatViewState) -> None:
        state.input_text = "hello"
        state.submit()

        for chunk in ["Hi", " ", "there", "!"]:
            state.receive_chunk(chunk)

        assert len(state.messages) == 2
        assert state.messages[-1].content == "Hi there!"

    def test_empty_chunk_keeps_waiting(self, state: ChatViewState) -> None:
        state.input_text = "hello"
        state.submit()

        state.receive_chunk("")

        assert state.phase is Phase.SUBMITTING
        assert len(state.messages) == 1

    def test_chunk_when_idle_is_ignored(self, state: ChatViewState) -> None:
        state.receive_chunk("stray")

        assert state.messages == []

    def test_finish_returns_to_idle(self, state: ChatViewState) -> None:
        state.input_text = "hello"
        state.submit()
        state.receive_chunk("Hi")

        state.finish()

        assert state.phase is Phase.IDLE
        assert state.send_label == "Send"
        assert [m.content for m in state.messages] == ["hello", "Hi"]

    def test_fail_keeps_messages_and_error(self, state: ChatViewState) -> None:
        state.input_text = "hello"
        state.submit()
        state.receive_chunk("Par")

        state.fail("Connection failed")

        assert state.phase is Phase.IDLE
        assert state.error == "Connection failed"
        assert [m.content for m in state.messages] == ["hello", "Par"]


class TestDerivedFlags:
    """Flags that drive the page affordances."""

    def test_send_label_follows_phase(self, state: ChatViewState) -> None:
        assert state.send_label == "Send"
        state.input_text = "hello"
        state.submit()
        assert state.send_label == "Wait..."
        state.receive_chunk("Hi")
        assert state.send_label == "Processing..."

    def test_listeners_notified_on_message_changes(self, state: ChatViewState) -> None:
        calls: list[int] = []
        state.on_change(lambda: calls.append(len(state.messages)))

        state.input_text = "hello"
        state.submit()
        state.receive_chunk("a")
        state.receive_chunk("b")
        state.finish()

        assert calls == [1, 2, 2]
