"""Agent contract: request context, response, and the BaseAgent interface."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from switchboard.llm.message import ChatMessage
from switchboard.tool.base import ExecutorLike, ToolCall, ToolDefinition

# Metadata keys layered onto a context when one agent hands off to another.
PREVIOUS_AGENT = "previous_agent"
PREVIOUS_RESPONSE = "previous_response"
REQUESTED_AGENT = "requested_agent"


@dataclass(frozen=True)
class AgentContext:
    """One user request as seen by agents.

    Created once per top-level request. Hooks and delegation derive new
    contexts with ``replace`` / ``with_metadata`` instead of mutating.
    """

    user_input: str
    conversation_history: list[ChatMessage] = field(default_factory=list)
    available_tools: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    def with_metadata(self, **updates: Any) -> AgentContext:
        """Shallow copy with ``updates`` layered over the existing metadata."""
        return dataclasses.replace(self, metadata={**self.metadata, **updates})

    def replace(self, **changes: Any) -> AgentContext:
        return dataclasses.replace(self, **changes)

    def as_messages(self, system: str | None = None) -> list[ChatMessage]:
        """System prompt, history, then the current user input."""
        messages: list[ChatMessage] = []
        if system:
            messages.append(ChatMessage.system(system))
        messages.extend(self.conversation_history)
        messages.append(ChatMessage.user(self.user_input))
        return messages


@dataclass
class AgentResponse:
    """Result of one agent invocation.

    When ``tool_calls`` is non-empty the dispatcher returns immediately and
    ``next_agent`` is ignored. ``skip_other_agents`` also stops delegation.
    """

    message: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    next_agent: str | None = None
    skip_other_agents: bool = False

    @property
    def has_tool_calls(self) -> bool:
        return len(self.tool_calls) > 0


class BaseAgent(ABC):
    """Base class for all agents.

    Subclasses set ``name`` (unique registry key), ``description`` and
    ``capabilities``, and implement ``can_handle`` and ``process``.
    ``can_handle`` must be side-effect free: the registry evaluates every
    agent's predicate concurrently for each request.

    An agent can also own tools. Overriding ``get_tool_definitions`` and
    ``get_tool_executor`` makes it a tool provider that can be passed to
    ``ToolRegistry.register_provider``.
    """

    name: str
    description: str = ""
    capabilities: tuple[str, ...] = ()

    @abstractmethod
    async def can_handle(self, context: AgentContext) -> bool:
        """Whether this agent wants to own ``context``."""
        ...

    @abstractmethod
    async def process(self, context: AgentContext) -> AgentResponse:
        """Do the agent's work."""
        ...

    async def pre_process(self, context: AgentContext) -> AgentContext:
        return context

    async def post_process(
        self, response: AgentResponse, context: AgentContext
    ) -> AgentResponse:
        return response

    def get_tool_definitions(self) -> list[ToolDefinition]:
        return []

    def get_tool_executor(self, tool_name: str) -> ExecutorLike | None:
        return None

    # Hand-off helpers

    def is_requested(self, context: AgentContext) -> bool:
        """A previous agent asked for this one by name."""
        return context.metadata.get(REQUESTED_AGENT) == self.name

    def defers(self, context: AgentContext) -> bool:
        """A previous agent asked for a different agent."""
        requested = context.metadata.get(REQUESTED_AGENT)
        return requested is not None and requested != self.name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
