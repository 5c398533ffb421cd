"""Tests for switchboard.interpret.interpreter."""

from __future__ import annotations

from switchboard.interpret import (
    PLACEHOLDER_THOUGHT,
    Contribution,
    ReasoningStep,
    find_final_answer,
    format_steps,
    interpret,
)
from switchboard.tool.base import ToolCall


# ---------------------------------------------------------------------------
# Reasoning traces
# ---------------------------------------------------------------------------


class TestSteps:
    def test_thought_action_observation(self) -> None:
        text = (
            "THOUGHT: I should list files\n"
            "ACTION: list the workspace\n"
            "OBSERVATION: three files\n"
            "FINAL ANSWER: There are three files."
        )
        result = interpret(text)
        assert len(result.steps) == 1
        step = result.steps[0]
        assert step.thought == "I should list files"
        assert step.action == "list the workspace"
        assert step.observation == "three files"
        assert result.final_answer == "There are three files."

    def test_multiple_thoughts(self) -> None:
        text = "THOUGHT: first\nTHOUGHT: second\nANSWER: done"
        result = interpret(text)
        assert [s.thought for s in result.steps] == ["first", "second"]

    def test_json_action_is_not_a_step_action(self) -> None:
        text = 'THOUGHT: read it\nACTION: {"tool": "read_file", "parameters": {"path": "a"}}'
        result = interpret(text)
        assert result.steps[0].action is None
        assert [c.tool for c in result.tool_calls] == ["read_file"]

    def test_reasoning_block(self) -> None:
        result = interpret("REASONING: The user greets me.\nANSWER: Hello there!")
        assert result.steps[0].thought == "The user greets me."
        assert result.final_answer == "Hello there!"

    def test_placeholder_step_when_no_trace(self) -> None:
        result = interpret("FINAL ANSWER: 42")
        assert len(result.steps) == 1
        assert result.steps[0].thought == PLACEHOLDER_THOUGHT


# ---------------------------------------------------------------------------
# Final answers
# ---------------------------------------------------------------------------


class TestFinalAnswer:
    def test_final_answer_underscore(self) -> None:
        assert interpret("FINAL_ANSWER: yes").final_answer == "yes"

    def test_final_answer_stops_at_next_sentinel(self) -> None:
        text = "FINAL ANSWER: line one\nline two\nTHOUGHT: extra"
        assert interpret(text).final_answer == "line one\nline two"

    def test_analysis_chat_uses_response(self) -> None:
        result = interpret("ANALYSIS: CHAT\nRESPONSE: Hi!")
        assert result.final_answer == "Hi!"

    def test_later_strategy_wins(self) -> None:
        text = "ANALYSIS: NO_TOOLS_NEEDED\nANSWER: first\nRESPONSE: second"
        assert interpret(text).final_answer == "second"

    def test_analysis_needing_tools_does_not_answer(self) -> None:
        result = interpret("ANALYSIS: TOOL_NEEDED")
        assert result.final_answer == ""

    def test_find_final_answer_fallback(self) -> None:
        assert find_final_answer("blah\nFinal Answer: ok") == "ok"
        assert find_final_answer("nothing here") == ""

    def test_answer_label_must_open_a_line(self) -> None:
        assert find_final_answer("notes\nAnswer: 42") == "42"
        assert find_final_answer("what the answer: might be") == ""

    def test_prose_mentioning_answer_is_not_cut(self) -> None:
        result = interpret("I am not sure what the answer: might be here")
        assert result.final_answer == ""


# ---------------------------------------------------------------------------
# Tool calls and delegation
# ---------------------------------------------------------------------------


class TestToolCallsAndDelegation:
    def test_tool_call_with_answer(self) -> None:
        text = (
            "THOUGHT: read it\n"
            'TOOL_CALL: {"tool": "read_file", "parameters": {"path": "notes.md"}}\n'
            "FINAL ANSWER: Reading the file."
        )
        result = interpret(text)
        assert len(result.tool_calls) == 1
        assert result.tool_calls[0].parameters == {"path": "notes.md"}
        assert result.final_answer == "Reading the file."

    def test_delegation(self) -> None:
        result = interpret("THOUGHT: not mine\nDELEGATE: file-system")
        assert result.next_agent == "file-system"
        assert result.final_answer == ""

    def test_handoff_alias(self) -> None:
        assert interpret("HANDOFF: command").next_agent == "command"

    def test_function_arguments_call(self) -> None:
        result = interpret('TOOL: {"function": "search", "arguments": {"q": "x"}}')
        assert result.tool_calls == [ToolCall(tool="search", parameters={"q": "x"})]

    def test_malformed_call_dropped_others_kept(self) -> None:
        text = (
            'TOOL_CALL: {"tool":"a","parameters":{"x": }\n'
            'TOOL: {"function":"search","arguments":{"q":"x"}}\n'
            "FINAL ANSWER: done"
        )
        result = interpret(text)
        assert result.tool_calls == [ToolCall(tool="search", parameters={"q": "x"})]
        assert result.final_answer == "done"


# ---------------------------------------------------------------------------
# Degenerate input
# ---------------------------------------------------------------------------


class TestDegenerateInput:
    def test_empty(self) -> None:
        result = interpret("")
        assert result.is_empty
        assert result.tool_calls == []
        assert result.steps[0].thought == PLACEHOLDER_THOUGHT

    def test_none(self) -> None:
        assert interpret(None).is_empty

    def test_unstructured_prose(self) -> None:
        result = interpret("lorem ipsum dolor sit amet")
        assert result.is_empty
        assert result.next_agent is None

    def test_custom_strategies(self) -> None:
        def always(text: str) -> Contribution:
            return Contribution(answer="fixed", steps=[ReasoningStep(thought="t")])

        result = interpret("ANSWER: ignored", strategies=[always])
        assert result.final_answer == "fixed"
        assert result.steps[0].thought == "t"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRendering:
    def test_to_dict_drops_empty_step_fields(self) -> None:
        d = interpret("THOUGHT: hi\nANSWER: yo").to_dict()
        assert d["steps"] == [{"thought": "hi"}]
        assert d["final_answer"] == "yo"
        assert d["tool_calls"] == []
        assert d["next_agent"] is None

    def test_format_steps(self) -> None:
        text = format_steps(
            [ReasoningStep(thought="look", action="ls", observation="2 files")]
        )
        assert "1. Thought: look" in text
        assert "-> Action: ls" in text
        assert "<- Result: 2 files" in text
