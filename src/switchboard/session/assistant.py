"""Assistant: one conversation wired through the agent and tool registries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from switchboard.agent.base import AgentContext, AgentResponse
from switchboard.agent.builtin import (
    CommandAgent,
    ConversationalAgent,
    FileSystemAgent,
    ReasoningAgent,
)
from switchboard.agent.definition import discover_agents
from switchboard.agent.metrics import AgentMetricsTracker
from switchboard.agent.observer import AgentObserver
from switchboard.agent.registry import AgentRegistry
from switchboard.config import SwitchboardConfig
from switchboard.llm.message import ChatMessage
from switchboard.llm.provider import ChatProvider, create_provider
from switchboard.tool.base import ToolCall, ToolError, ToolResult
from switchboard.tool.registry import ToolRegistry

logger = logging.getLogger(__name__)

BUILTIN_PRIORITIES = {
    "reasoning": 0,
    "conversational": 10,
    "file-system": 20,
    "command": 30,
}


@dataclass
class ToolOutcome:
    call: ToolCall
    result: ToolResult


@dataclass
class Turn:
    """One user input and everything the assistant did about it."""

    user_input: str
    response: AgentResponse
    tool_results: list[ToolOutcome] = field(default_factory=list)

    @property
    def agent_chain(self) -> list[str]:
        return list(self.response.metadata.get("agent_chain", []))

    @property
    def text(self) -> str:
        parts = []
        if self.response.message:
            parts.append(self.response.message)
        for outcome in self.tool_results:
            status = "error" if outcome.result.is_error else "ok"
            parts.append(f"[{outcome.call.tool}: {status}]\n{outcome.result.output}")
        return "\n\n".join(parts)


@dataclass
class AssistantSetup:
    """All the pieces an Assistant runs on."""

    provider: ChatProvider
    tools: ToolRegistry
    agents: AgentRegistry


def setup_assistant(
    config: SwitchboardConfig, provider: ChatProvider | None = None
) -> AssistantSetup:
    """Build the tool and agent registries from config.

    Tool-owning agents are registered as tool providers so their tools are
    visible to every agent. Markdown agents from ``config.agents_dir`` are
    registered after the built-ins with their own priorities.
    """
    if provider is None:
        provider = create_provider(
            model=config.llm.model,
            temperature=config.llm.temperature,
            max_tokens=config.llm.max_tokens,
            api_base=config.llm.api_base,
        )

    dispatch = config.dispatch
    tools = ToolRegistry()
    agents = AgentRegistry(
        metrics=AgentMetricsTracker(),
        observer=AgentObserver(enabled=dispatch.observe),
        max_chain_length=dispatch.max_chain_length,
        debug=dispatch.debug_agents,
    )

    file_agent = FileSystemAgent(provider, workspace=config.workspace_dir)
    command_agent = CommandAgent(provider, workspace=config.workspace_dir)
    tools.register_provider(file_agent.name, file_agent)
    tools.register_provider(command_agent.name, command_agent)

    for agent in (
        ReasoningAgent(provider, tools),
        ConversationalAgent(provider),
        file_agent,
        command_agent,
    ):
        agents.register(agent, BUILTIN_PRIORITIES[agent.name])

    for agent in discover_agents([config.agents_dir], provider, tools):
        agents.register(agent, agent.priority)
        logger.info("Discovered agent: %s", agent.name)

    if dispatch.default_agent:
        if dispatch.default_agent in agents:
            agents.set_default_agent(dispatch.default_agent)
        else:
            logger.warning("Default agent %s is not registered", dispatch.default_agent)

    return AssistantSetup(provider=provider, tools=tools, agents=agents)


class Assistant:
    """Conversation state plus dispatch.

    ``chat`` sends the input through the agent registry, then validates
    and runs any tool calls the chosen agent returned. Tool calls run one
    at a time, in the order the agent listed them.
    """

    def __init__(
        self,
        config: SwitchboardConfig | None = None,
        provider: ChatProvider | None = None,
    ) -> None:
        self.config = config or SwitchboardConfig()
        setup = setup_assistant(self.config, provider)
        self.provider = setup.provider
        self.tools = setup.tools
        self.agents = setup.agents
        self._history: list[ChatMessage] = []

    @property
    def history(self) -> list[ChatMessage]:
        return list(self._history)

    def clear_history(self) -> None:
        self._history.clear()

    async def chat(self, text: str) -> Turn:
        context = AgentContext(
            user_input=text,
            conversation_history=list(self._history),
            available_tools=self.tools.names(),
        )
        response = await self.agents.process(context)

        turn = Turn(user_input=text, response=response)
        for call in response.tool_calls:
            turn.tool_results.append(ToolOutcome(call, await self._run_tool(call)))

        self._history.append(ChatMessage.user(text))
        self._history.append(ChatMessage.assistant(turn.text))
        return turn

    async def _run_tool(self, call: ToolCall) -> ToolResult:
        validation = self.tools.validate_tool_call(call)
        if not validation.valid:
            logger.warning("Rejected call to %s: %s", call.tool, validation.errors)
            return ToolError(
                error=f"Invalid call to {call.tool}: {'; '.join(validation.errors)}",
                call_id=call.id,
            )
        logger.info("Executing tool %s", call.tool)
        return await self.tools.execute_tool(call)
