"""General-purpose reasoning agent, used as the default."""

from __future__ import annotations

from switchboard.agent.base import AgentContext
from switchboard.agent.llm import LLMAgent, catalogue
from switchboard.agent.prompts import REASONING_PROMPT, RESPONSE_FORMAT
from switchboard.llm.provider import ChatProvider
from switchboard.tool.registry import ToolRegistry


class ReasoningAgent(LLMAgent):
    """Answers directly or picks tools from the request's visible catalogue.

    Claims a request only when another agent hands off to it by name;
    otherwise it is reached as the registry's default agent.
    """

    name = "reasoning"
    description = "General questions, step-by-step reasoning and tool selection"
    capabilities = ("general questions", "reasoning", "tool selection")

    def __init__(self, provider: ChatProvider, tools: ToolRegistry) -> None:
        super().__init__(provider)
        self.tools = tools

    async def can_handle(self, context: AgentContext) -> bool:
        return self.is_requested(context)

    def visible_tools(self, context: AgentContext) -> ToolRegistry:
        return self.tools.subset(
            [name for name in context.available_tools if name in self.tools]
        )

    def system_prompt(self, context: AgentContext, tools: ToolRegistry) -> str:
        prompt = REASONING_PROMPT.format(tools=catalogue(tools))
        return f"{prompt}\n\n{RESPONSE_FORMAT}"
