"""LLM abstraction layer, unified via litellm."""

from switchboard.llm.message import ChatMessage, ChatResult, TokenUsage
from switchboard.llm.provider import (
    ChatProvider,
    LiteLLMProvider,
    ProviderConfig,
    create_provider,
)

__all__ = [
    "ChatMessage",
    "ChatResult",
    "TokenUsage",
    "ChatProvider",
    "LiteLLMProvider",
    "ProviderConfig",
    "create_provider",
]
