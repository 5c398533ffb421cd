"""Small-talk agent that hands real work over to the reasoning agent."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from switchboard.agent.base import AgentContext, AgentResponse
from switchboard.agent.llm import FALLBACK_MESSAGE, LLMAgent
from switchboard.agent.prompts import CONVERSATION_PROMPT, INTENT_PROMPT
from switchboard.interpret import interpret
from switchboard.llm.message import ChatMessage

logger = logging.getLogger(__name__)

_ACTION_RE = re.compile(
    r"\b(process|file|folder|directory|system|weather|show|create|check|"
    r"how many|delete|remove|run|execute|read|write|list)\b"
    r"|\.(js|ts|py|txt|json|md|html|css|ya?ml)\b",
    re.IGNORECASE,
)

_CONVERSATION_PATTERNS = [
    re.compile(r"^\s*(hello|hi|hey|good (morning|afternoon|evening))[\s!.]*$", re.IGNORECASE),
    re.compile(r"what.*\byour name\b", re.IGNORECASE),
    re.compile(r"who.*are.*you", re.IGNORECASE),
    re.compile(r"what.*can.*you.*do", re.IGNORECASE),
    re.compile(r"^\s*(thanks|thank you)\b", re.IGNORECASE),
]


class ConversationalAgent(LLMAgent):
    """Greetings, identity and capability questions.

    Before answering it asks the model whether the input is really an
    action request; if so it delegates to ``delegate_to``.
    """

    name = "conversational"
    description = "Handles greetings and general conversation"
    capabilities = ("chat", "greetings", "general questions")
    temperature = 0.7

    delegate_to = "reasoning"

    async def can_handle(self, context: AgentContext) -> bool:
        if self.is_requested(context):
            return True
        if self.defers(context):
            return False
        text = context.user_input
        if _ACTION_RE.search(text):
            return False
        return any(p.search(text) for p in _CONVERSATION_PATTERNS)

    async def process(self, context: AgentContext) -> AgentResponse:
        if not self.is_requested(context):
            verdict = await self._analyze_intent(context.user_input)
            if verdict.get("is_action_request", verdict.get("isActionRequest")):
                logger.info("Conversational input looks like an action: %s", verdict.get("reason"))
                return AgentResponse(
                    metadata={"intent": verdict},
                    next_agent=self.delegate_to,
                )

        raw = await self.complete(context, CONVERSATION_PROMPT)
        answer = interpret(raw).final_answer or raw.strip()
        return AgentResponse(message=answer or FALLBACK_MESSAGE, metadata={"agent": self.name})

    async def _analyze_intent(self, text: str) -> dict[str, Any]:
        result = await self.provider.chat(
            [ChatMessage.system(INTENT_PROMPT), ChatMessage.user(text)],
            temperature=0.0,
        )
        return parse_verdict(result.content)


def parse_verdict(text: str) -> dict[str, Any]:
    """First JSON object in ``text``; empty dict when there is none."""
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return {}
