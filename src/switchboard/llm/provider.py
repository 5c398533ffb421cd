"""LLM provider abstraction, unified via litellm.

The dispatch core consumes exactly one operation from a provider:
``await provider.chat(messages, temperature=None)`` returning a
``ChatResult``. litellm handles provider detection from the model prefix
("openai/...", "anthropic/...", "lm_studio/...", "ollama/...") and reads
API keys from the environment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from switchboard.llm.message import ChatMessage, ChatResult, TokenUsage

if TYPE_CHECKING:
    from litellm import ModelResponse

logger = logging.getLogger(__name__)


@dataclass
class ProviderConfig:
    """Configuration for an LLM provider."""

    model: str
    temperature: float | None = None
    max_tokens: int | None = None
    api_base: str | None = None


@runtime_checkable
class ChatProvider(Protocol):
    """Protocol for chat transports."""

    @property
    def config(self) -> ProviderConfig: ...

    async def chat(
        self, messages: list[ChatMessage], temperature: float | None = None
    ) -> ChatResult:
        """Return a single completion for ``messages``."""
        ...


@dataclass
class LiteLLMProvider:
    """Chat transport backed by ``litellm.acompletion``."""

    _config: ProviderConfig

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def chat(
        self, messages: list[ChatMessage], temperature: float | None = None
    ) -> ChatResult:
        kwargs: dict[str, Any] = {
            "model": self._config.model,
            "messages": [m.to_dict() for m in messages],
        }

        temperature = temperature if temperature is not None else self._config.temperature
        if temperature is not None:
            kwargs["temperature"] = temperature

        if self._config.max_tokens is not None:
            kwargs["max_tokens"] = self._config.max_tokens

        if self._config.api_base:
            kwargs["api_base"] = self._config.api_base

        response = await _acompletion_with_retry(**kwargs)
        return _response_to_result(response)


@retry(
    retry=retry_if_exception_type((ConnectionError, TimeoutError, OSError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=30),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
async def _acompletion_with_retry(**kwargs: Any) -> ModelResponse:
    """Call litellm.acompletion with retry on transient transport errors."""
    import litellm

    return await litellm.acompletion(**kwargs)


def _response_to_result(response: Any) -> ChatResult:
    """Convert a litellm ModelResponse (OpenAI-shaped) to a ChatResult."""
    content = ""
    finish_reason = None

    choices = getattr(response, "choices", None)
    if choices:
        choice = choices[0]
        message = getattr(choice, "message", None)
        content = (getattr(message, "content", None) or "") if message else ""
        finish_reason = getattr(choice, "finish_reason", None)

    usage = TokenUsage()
    raw_usage = getattr(response, "usage", None)
    if raw_usage:
        usage = TokenUsage(
            input_tokens=getattr(raw_usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(raw_usage, "completion_tokens", 0) or 0,
            total_tokens=getattr(raw_usage, "total_tokens", 0) or 0,
        )

    return ChatResult(content=content, usage=usage, finish_reason=finish_reason)


def create_provider(
    model: str,
    temperature: float | None = None,
    max_tokens: int | None = None,
    api_base: str | None = None,
) -> ChatProvider:
    """Create a LiteLLM-backed provider.

    Args:
        model: Model name with provider prefix (e.g. "openai/gpt-4o-mini",
               "lm_studio/qwen2.5-7b-instruct", "ollama/llama3.1").
        temperature: Default sampling temperature.
        max_tokens: Max output tokens.
        api_base: Override the endpoint (local servers).
    """
    config = ProviderConfig(
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
        api_base=api_base,
    )
    return LiteLLMProvider(_config=config)
