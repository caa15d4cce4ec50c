"""Unit tests for request and message schemas."""

import pytest
from pydantic import ValidationError

from chatline.models.schemas import ChatMessage, ChatRequest, Role, normalize_role


class TestChatMessage:
    """Tests for ChatMessage validation."""

    @pytest.mark.parametrize("role", ["user", "assistant", "system", "tool"])
    def test_accepts_known_roles(self, role: str) -> None:
        message = ChatMessage(role=role, content="hi")

        assert message.role == role

    def test_legacy_ai_role_is_normalized(self) -> None:
        message = ChatMessage(role="ai", content="hello")

        assert message.role == Role.ASSISTANT.value

    def test_rejects_unknown_role(self) -> None:
        with pytest.raises(ValidationError):
            ChatMessage(role="moderator", content="hi")

    def test_null_content_becomes_empty(self) -> None:
        message = ChatMessage(role="user", content=None)

        assert message.content == ""

    def test_dump_uses_plain_strings(self) -> None:
        message = ChatMessage(role=Role.USER, content="hi")

        assert message.model_dump() == {"role": "user", "content": "hi"}


class TestChatRequest:
    """Tests for ChatRequest validation."""

    def test_empty_messages_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ChatRequest(messages=[])

    def test_missing_messages_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ChatRequest.model_validate({})

    def test_last_message(self) -> None:
        request = ChatRequest.model_validate(
            {
                "messages": [
                    {"role": "system", "content": "Be brief."},
                    {"role": "user", "content": "hello"},
                ]
            }
        )

        assert request.last_message.role == Role.USER.value
        assert request.last_message.content == "hello"


def test_normalize_role_leaves_non_strings() -> None:
    assert normalize_role(42) == 42
    assert normalize_role(" AI ") == "assistant"
    assert normalize_role(Role.TOOL) is Role.TOOL
