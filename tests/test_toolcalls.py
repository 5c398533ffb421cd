"""Tests for switchboard.interpret.toolcalls."""

from __future__ import annotations

from switchboard.interpret.toolcalls import (
    STRICT_NORMALIZERS,
    extract_tool_calls,
    normalize_tool_call,
)


# ---------------------------------------------------------------------------
# normalize_tool_call
# ---------------------------------------------------------------------------


class TestNormalizeToolCall:
    def test_tool_parameters(self) -> None:
        call = normalize_tool_call({"tool": "read_file", "parameters": {"path": "a.txt"}})
        assert call is not None
        assert call.tool == "read_file"
        assert call.parameters == {"path": "a.txt"}

    def test_function_arguments(self) -> None:
        call = normalize_tool_call({"function": "list_files", "arguments": {"path": "."}})
        assert call is not None
        assert call.tool == "list_files"
        assert call.parameters == {"path": "."}

    def test_name_params(self) -> None:
        call = normalize_tool_call({"name": "delete_file", "params": {"path": "x"}})
        assert call is not None
        assert call.tool == "delete_file"

    def test_tool_args(self) -> None:
        call = normalize_tool_call({"tool": "run_command", "args": {"command": "ls"}})
        assert call is not None
        assert call.parameters == {"command": "ls"}

    def test_openai_shape_with_string_arguments(self) -> None:
        call = normalize_tool_call(
            {
                "type": "function",
                "function": {"name": "read_file", "arguments": '{"path": "b.md"}'},
            }
        )
        assert call is not None
        assert call.tool == "read_file"
        assert call.parameters == {"path": "b.md"}

    def test_anthropic_input_shape(self) -> None:
        call = normalize_tool_call({"name": "read_file", "input": {"path": "c"}})
        assert call is not None
        assert call.parameters == {"path": "c"}

    def test_flattened_promotes_keys(self) -> None:
        call = normalize_tool_call({"name": "write_file", "path": "a", "content": "hi"})
        assert call is not None
        assert call.tool == "write_file"
        assert call.parameters == {"path": "a", "content": "hi"}

    def test_flattened_excluded_from_strict(self) -> None:
        obj = {"name": "Alice", "age": 30}
        assert normalize_tool_call(obj, STRICT_NORMALIZERS) is None

    def test_id_is_kept(self) -> None:
        call = normalize_tool_call(
            {"id": "call_1", "tool": "read_file", "parameters": {"path": "a"}}
        )
        assert call is not None
        assert call.id == "call_1"
        assert "id" not in call.parameters

    def test_non_dict_rejected(self) -> None:
        assert normalize_tool_call(["tool", "x"]) is None
        assert normalize_tool_call("read_file") is None

    def test_non_string_name_rejected(self) -> None:
        assert normalize_tool_call({"tool": 3, "parameters": {}}) is None

    def test_undecodable_argument_string_rejected(self) -> None:
        assert normalize_tool_call({"function": "x", "arguments": "{not json"}) is None


# ---------------------------------------------------------------------------
# extract_tool_calls
# ---------------------------------------------------------------------------


class TestExtractToolCalls:
    def test_sentinel_fragment(self) -> None:
        text = 'THOUGHT: need the file\nTOOL_CALL: {"tool": "read_file", "parameters": {"path": "a.txt"}}'
        calls = extract_tool_calls(text)
        assert len(calls) == 1
        assert calls[0].tool == "read_file"

    def test_nested_objects_decoded_whole(self) -> None:
        text = 'TOOL: {"tool": "write_file", "parameters": {"path": "a.json", "content": "{\\"k\\": {\\"n\\": 1}}"}}'
        calls = extract_tool_calls(text)
        assert len(calls) == 1
        assert calls[0].parameters["content"] == '{"k": {"n": 1}}'

    def test_sentinel_allows_flattened(self) -> None:
        text = 'USE_TOOL: {"tool": "list_files", "path": "src"}'
        calls = extract_tool_calls(text)
        assert calls[0].tool == "list_files"
        assert calls[0].parameters == {"path": "src"}

    def test_bare_object_in_prose(self) -> None:
        text = 'Sure, I will run {"tool": "run_command", "args": {"command": "ls"}} for you.'
        calls = extract_tool_calls(text)
        assert len(calls) == 1
        assert calls[0].tool == "run_command"

    def test_bare_object_without_explicit_shape_ignored(self) -> None:
        text = 'The user record is {"name": "Alice", "age": 30}.'
        assert extract_tool_calls(text) == []

    def test_malformed_fragment_dropped_others_kept(self) -> None:
        text = (
            'TOOL_CALL: {"tool": "read_file", "parameters": {"path": \n'
            'TOOL_CALL: {"tool": "list_files", "parameters": {}}'
        )
        calls = extract_tool_calls(text)
        assert [c.tool for c in calls] == ["list_files"]

    def test_no_duplicates_between_passes(self) -> None:
        text = 'TOOL_CALL: {"tool": "read_file", "parameters": {"path": "a"}}'
        assert len(extract_tool_calls(text)) == 1

    def test_multiple_calls_in_text_order(self) -> None:
        text = (
            '{"name": "list_files", "arguments": {}}\n'
            'ACTION: {"tool": "read_file", "parameters": {"path": "a"}}'
        )
        assert [c.tool for c in extract_tool_calls(text)] == ["list_files", "read_file"]

    def test_sentinel_case_insensitive(self) -> None:
        text = 'tool_call: {"tool": "list_files", "parameters": {}}'
        assert len(extract_tool_calls(text)) == 1

    def test_sentinel_needs_word_start(self) -> None:
        # "MYTOOL:" is not a sentinel, and the bare pass rejects flattened objects.
        text = 'MYTOOL: {"name": "x", "path": "y"}'
        assert extract_tool_calls(text) == []

    def test_empty_text(self) -> None:
        assert extract_tool_calls("") == []
