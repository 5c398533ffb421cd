"""Tests for switchboard.llm.message."""

from __future__ import annotations

from switchboard.llm.message import ChatMessage, ChatResult, TokenUsage


class TestChatMessage:
    def test_constructors(self) -> None:
        assert ChatMessage.system("s").role == "system"
        assert ChatMessage.user("u").role == "user"
        assert ChatMessage.assistant("a").role == "assistant"

    def test_to_dict(self) -> None:
        assert ChatMessage.user("hello").to_dict() == {"role": "user", "content": "hello"}

    def test_default_content(self) -> None:
        assert ChatMessage(role="assistant").content == ""


class TestChatResult:
    def test_defaults(self) -> None:
        result = ChatResult()
        assert result.content == ""
        assert result.finish_reason is None
        assert result.usage == TokenUsage()
