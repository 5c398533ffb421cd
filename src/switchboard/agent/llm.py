"""Shared behaviour for agents that answer through the chat transport."""

from __future__ import annotations

import logging

from switchboard.agent.base import AgentContext, AgentResponse, BaseAgent
from switchboard.agent.prompts import NO_TOOLS, RESPONSE_FORMAT
from switchboard.interpret import Interpretation, interpret
from switchboard.llm.provider import ChatProvider
from switchboard.tool.base import ToolCall
from switchboard.tool.registry import ToolRegistry

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "I wasn't able to produce an answer for that."


class LLMAgent(BaseAgent):
    """An agent whose ``process`` is: prompt, complete, interpret, map.

    Subclasses provide ``system_prompt`` and, when they expose tools,
    ``visible_tools``. Tool calls the model makes for tools outside
    ``visible_tools`` are dropped by ``map_tool_call``.
    """

    temperature: float | None = None

    def __init__(self, provider: ChatProvider) -> None:
        self.provider = provider

    def visible_tools(self, context: AgentContext) -> ToolRegistry:
        return ToolRegistry()

    def system_prompt(self, context: AgentContext, tools: ToolRegistry) -> str:
        return RESPONSE_FORMAT

    async def complete(self, context: AgentContext, system: str) -> str:
        result = await self.provider.chat(
            context.as_messages(system), temperature=self.temperature
        )
        return result.content

    async def process(self, context: AgentContext) -> AgentResponse:
        tools = self.visible_tools(context)
        raw = await self.complete(context, self.system_prompt(context, tools))
        return self.to_response(interpret(raw), raw, tools)

    def map_tool_call(self, call: ToolCall, tools: ToolRegistry) -> ToolCall | None:
        """Translate a parsed call into this agent's vocabulary, or drop it."""
        if call.tool in tools:
            return call
        logger.info("%s: dropping call to unavailable tool %s", self.name, call.tool)
        return None

    def to_response(
        self, interpretation: Interpretation, raw: str, tools: ToolRegistry
    ) -> AgentResponse:
        calls = []
        for call in interpretation.tool_calls:
            mapped = self.map_tool_call(call, tools)
            if mapped is not None:
                calls.append(mapped)

        metadata = {"agent": self.name, "steps": interpretation.to_dict()["steps"]}
        if calls:
            return AgentResponse(
                message=interpretation.final_answer or None,
                tool_calls=calls,
                metadata=metadata,
            )

        if interpretation.next_agent:
            return AgentResponse(
                message=interpretation.final_answer or None,
                metadata=metadata,
                next_agent=interpretation.next_agent,
            )

        # Plain prose without any sentinel is still an answer.
        message = interpretation.final_answer
        if not message and not interpretation.tool_calls:
            message = raw.strip()
        return AgentResponse(message=message or FALLBACK_MESSAGE, metadata=metadata)


def catalogue(tools: ToolRegistry) -> str:
    return tools.describe() or NO_TOOLS
