"""Response interpreter: free-form model text -> steps, final answer, tool calls.

Different model families answer in different sentinel conventions, so the
interpreter runs a fixed, ordered list of independent strategies over the
same text and merges what each one contributes:

- ``THOUGHT:`` / ``ACTION:`` / ``OBSERVATION:`` lines become reasoning steps
- ``REASONING:`` blocks become steps, ``ANSWER:``-style lines an answer
- ``ANALYSIS: CHAT|INFO|NO_TOOLS_NEEDED`` + ``RESPONSE:`` overrides the answer
- ``DELEGATE:`` / ``NEXT_AGENT:`` / ``HANDOFF:`` name a follow-up agent
- JSON tool-call fragments (see ``toolcalls``)

When no answer was found a last pass tries ``FINAL ANSWER``-style patterns.
Interpretation never raises; unrecognizable text yields an empty result
with a single placeholder step.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from switchboard.interpret.toolcalls import extract_tool_calls
from switchboard.tool.base import ToolCall

logger = logging.getLogger(__name__)

PLACEHOLDER_THOUGHT = "Processed request"

NO_TOOL_ANALYSES = frozenset({"CHAT", "INFO", "NO_TOOLS_NEEDED"})

_SENTINELS = (
    "THOUGHT",
    "REASONING",
    "ANALYSIS",
    "ACTION",
    "OBSERVATION",
    "TOOL_CALL",
    "USE_TOOL",
    "TOOL_CONFIG",
    "TOOL",
    "FINAL[ _]ANSWER",
    "DIRECT_ANSWER",
    "ANSWER",
    "RESPONSE",
    "REPLY",
    "MESSAGE",
    "DELEGATE",
    "NEXT_AGENT",
    "HANDOFF",
)

# A block ends at the next sentinel line or at the end of the text.
_UNTIL_NEXT = r"(?=\n[ \t]*(?:" + "|".join(_SENTINELS) + r")[ \t]*:|\Z)"

_FLAGS = re.IGNORECASE | re.DOTALL

_STEP_LINE_RE = re.compile(
    r"^[ \t]*(THOUGHT|ACTION|OBSERVATION)[ \t]*:[ \t]*(.*)$",
    re.IGNORECASE | re.MULTILINE,
)
_REASONING_RE = re.compile(r"(?:^|\n)[ \t]*REASONING[ \t]*:\s*(.+?)" + _UNTIL_NEXT, _FLAGS)
_ANSWER_RE = re.compile(
    r"(?:^|\n)[ \t]*(?:DIRECT_ANSWER|ANSWER|RESPONSE|MESSAGE)[ \t]*:\s*(.+?)" + _UNTIL_NEXT,
    _FLAGS,
)
_ANALYSIS_RE = re.compile(r"ANALYSIS[ \t]*:[ \t]*(\w+)", re.IGNORECASE)
_REPLY_RE = re.compile(
    r"(?:^|\n)[ \t]*(?:RESPONSE|REPLY)[ \t]*:\s*(.+?)" + _UNTIL_NEXT, _FLAGS
)
_DELEGATE_RE = re.compile(
    r"(?:^|\n)[ \t]*(?:DELEGATE|NEXT_AGENT|HANDOFF)[ \t]*:[ \t]*([\w.-]+)",
    re.IGNORECASE,
)

FINAL_ANSWER_PATTERNS = [
    re.compile(r"FINAL ANSWER[ \t]*:\s*(.*?)" + _UNTIL_NEXT, _FLAGS),
    re.compile(r"FINAL_ANSWER[ \t]*:\s*(.*?)" + _UNTIL_NEXT, _FLAGS),
    re.compile(r"^ANSWER[ \t]*:\s*(.*?)" + _UNTIL_NEXT, _FLAGS | re.MULTILINE),
]


@dataclass
class ReasoningStep:
    thought: str
    action: str | None = None
    observation: str | None = None


@dataclass
class Interpretation:
    """Normalized reading of one model completion."""

    steps: list[ReasoningStep] = field(default_factory=list)
    final_answer: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    next_agent: str | None = None

    @property
    def is_empty(self) -> bool:
        """True when the model produced nothing usable."""
        return not self.final_answer and not self.tool_calls

    def to_dict(self) -> dict[str, Any]:
        return {
            "steps": [
                {k: v for k, v in vars(s).items() if v is not None} for s in self.steps
            ],
            "final_answer": self.final_answer,
            "tool_calls": [c.to_dict() for c in self.tool_calls],
            "next_agent": self.next_agent,
        }


@dataclass
class Contribution:
    """What a single strategy extracted. ``None`` means "no opinion"."""

    steps: list[ReasoningStep] = field(default_factory=list)
    answer: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)
    next_agent: str | None = None


Strategy = Callable[[str], Contribution]


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def thought_action(text: str) -> Contribution:
    """``THOUGHT:`` lines open steps; ``ACTION:``/``OBSERVATION:`` annotate them."""
    steps: list[ReasoningStep] = []
    for match in _STEP_LINE_RE.finditer(text):
        kind, value = match.group(1).upper(), match.group(2).strip()
        if kind == "THOUGHT":
            if value:
                steps.append(ReasoningStep(thought=value))
        elif steps and value and not value.startswith("{"):
            if kind == "ACTION":
                steps[-1].action = value
            else:
                steps[-1].observation = value
    return Contribution(steps=steps)


def reasoning_answer(text: str) -> Contribution:
    """``REASONING:`` block plus a direct ``ANSWER:``/``RESPONSE:``/``MESSAGE:``."""
    contribution = Contribution()
    reasoning = _REASONING_RE.search(text)
    if reasoning and reasoning.group(1).strip():
        contribution.steps.append(ReasoningStep(thought=reasoning.group(1).strip()))
    answer = _ANSWER_RE.search(text)
    if answer and answer.group(1).strip():
        contribution.answer = answer.group(1).strip()
    return contribution


def analysis_response(text: str) -> Contribution:
    """``ANALYSIS: CHAT`` (or INFO / NO_TOOLS_NEEDED) followed by ``RESPONSE:``."""
    analysis = _ANALYSIS_RE.search(text)
    if not analysis or analysis.group(1).upper() not in NO_TOOL_ANALYSES:
        return Contribution()
    reply = _REPLY_RE.search(text)
    if reply and reply.group(1).strip():
        return Contribution(answer=reply.group(1).strip())
    return Contribution()


def delegation(text: str) -> Contribution:
    match = _DELEGATE_RE.search(text)
    return Contribution(next_agent=match.group(1) if match else None)


def tool_calls(text: str) -> Contribution:
    return Contribution(tool_calls=extract_tool_calls(text))


# Later strategies win when two of them supply an answer.
STRATEGIES: list[Strategy] = [
    thought_action,
    reasoning_answer,
    analysis_response,
    delegation,
    tool_calls,
]


def find_final_answer(text: str) -> str:
    """Fallback pass over ``FINAL ANSWER``-style patterns; first hit wins."""
    for pattern in FINAL_ANSWER_PATTERNS:
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return ""


def interpret(text: str | None, strategies: list[Strategy] | None = None) -> Interpretation:
    """Interpret a raw model completion."""
    text = text or ""
    result = Interpretation()

    for strategy in strategies if strategies is not None else STRATEGIES:
        contribution = strategy(text)
        result.steps.extend(contribution.steps)
        result.tool_calls.extend(contribution.tool_calls)
        if contribution.answer is not None:
            result.final_answer = contribution.answer
        if contribution.next_agent is not None and result.next_agent is None:
            result.next_agent = contribution.next_agent

    if not result.final_answer:
        result.final_answer = find_final_answer(text)

    if not result.steps:
        result.steps.append(ReasoningStep(thought=PLACEHOLDER_THOUGHT))

    logger.debug(
        "Interpreted completion: %d steps, %d tool calls, answer=%s",
        len(result.steps),
        len(result.tool_calls),
        bool(result.final_answer),
    )
    return result


def format_steps(steps: list[ReasoningStep]) -> str:
    """Plain-text rendering of a reasoning trace."""
    lines = []
    for index, step in enumerate(steps, start=1):
        lines.append(f"{index}. Thought: {step.thought}")
        if step.action:
            lines.append(f"   -> Action: {step.action}")
        if step.observation:
            lines.append(f"   <- Result: {step.observation}")
    return "\n".join(lines)
