"""Response interpretation: turn raw model text into structured results."""

from switchboard.interpret.interpreter import (
    PLACEHOLDER_THOUGHT,
    STRATEGIES,
    Contribution,
    Interpretation,
    ReasoningStep,
    find_final_answer,
    format_steps,
    interpret,
)
from switchboard.interpret.toolcalls import (
    NORMALIZERS,
    STRICT_NORMALIZERS,
    extract_tool_calls,
    normalize_tool_call,
)

__all__ = [
    "PLACEHOLDER_THOUGHT",
    "STRATEGIES",
    "Contribution",
    "Interpretation",
    "ReasoningStep",
    "find_final_answer",
    "format_steps",
    "interpret",
    "NORMALIZERS",
    "STRICT_NORMALIZERS",
    "extract_tool_calls",
    "normalize_tool_call",
]
