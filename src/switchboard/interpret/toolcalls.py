"""Tool-call extraction from free-form model text.

Models emit tool calls as JSON objects, either after a sentinel
(``TOOL:``, ``TOOL_CALL:``, ``USE_TOOL:``, ``TOOL_CONFIG:``, ``ACTION:``)
or bare in the middle of prose, and every model family picks its own field
names. Extraction is done in two passes over the text:

1. sentinel fragments, decoded with ``json.JSONDecoder.raw_decode`` so
   nested objects are handled, and normalized with every normalizer;
2. bare objects that open with a ``"tool"``, ``"function"`` or ``"name"``
   key, normalized with the explicit-shape normalizers only (a bare object
   with a ``name`` field is not necessarily a tool call).

Fragments that fail to decode or normalize are dropped.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable

from switchboard.tool.base import ToolCall

logger = logging.getLogger(__name__)

Normalizer = Callable[[dict[str, Any]], "ToolCall | None"]

SENTINEL_RE = re.compile(
    r"(?<![A-Za-z_])(?:TOOL_CALL|USE_TOOL|TOOL_CONFIG|TOOL|ACTION)\s*:\s*(?=\{)",
    re.IGNORECASE,
)
BARE_OBJECT_RE = re.compile(r'\{\s*"(?:tool|function|name)"\s*:')

_decoder = json.JSONDecoder()


# ---------------------------------------------------------------------------
# Normalizers: one per field-naming convention
# ---------------------------------------------------------------------------


def _as_params(value: Any) -> dict[str, Any] | None:
    """Accept a parameter object, or a JSON string encoding one."""
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        try:
            decoded = json.loads(value) if value.strip() else {}
        except json.JSONDecodeError:
            return None
        return decoded if isinstance(decoded, dict) else None
    return None


def _call(name: Any, params: dict[str, Any] | None, obj: dict[str, Any]) -> ToolCall | None:
    if not isinstance(name, str) or not name or params is None:
        return None
    call_id = obj.get("id")
    return ToolCall(
        tool=name,
        parameters=params,
        id=call_id if isinstance(call_id, str) else None,
    )


def tool_parameters(obj: dict[str, Any]) -> ToolCall | None:
    """``{"tool": ..., "parameters": {...}}``"""
    if "tool" not in obj or "parameters" not in obj:
        return None
    return _call(obj["tool"], _as_params(obj["parameters"]), obj)


def function_arguments(obj: dict[str, Any]) -> ToolCall | None:
    """``{"function": "name", "arguments": {...}}``"""
    if not isinstance(obj.get("function"), str) or "arguments" not in obj:
        return None
    return _call(obj["function"], _as_params(obj["arguments"]), obj)


def name_params(obj: dict[str, Any]) -> ToolCall | None:
    """``{"name": ..., "params": {...}}``"""
    if "name" not in obj or "params" not in obj:
        return None
    return _call(obj["name"], _as_params(obj["params"]), obj)


def tool_args(obj: dict[str, Any]) -> ToolCall | None:
    """``{"tool": ..., "args": {...}}``"""
    if "tool" not in obj or "args" not in obj:
        return None
    return _call(obj["tool"], _as_params(obj["args"]), obj)


def openai_function(obj: dict[str, Any]) -> ToolCall | None:
    """``{"type": "function", "function": {"name": ..., "arguments": "..."}}``"""
    fn = obj.get("function")
    if not isinstance(fn, dict) or "name" not in fn:
        return None
    return _call(fn["name"], _as_params(fn.get("arguments", {})), obj)


def name_arguments(obj: dict[str, Any]) -> ToolCall | None:
    """``{"name": ..., "arguments": {...}}`` or ``{"name": ..., "input": {...}}``"""
    if "name" not in obj:
        return None
    for key in ("arguments", "input"):
        if key in obj:
            return _call(obj["name"], _as_params(obj[key]), obj)
    return None


def flattened(obj: dict[str, Any]) -> ToolCall | None:
    """``{"name": "write_file", "path": ..., "content": ...}``

    Every key other than the tool name (and ``id``/``type``) is promoted
    into the parameter map.
    """
    for key in ("tool", "name"):
        if isinstance(obj.get(key), str):
            params = {
                k: v for k, v in obj.items() if k not in (key, "id", "type")
            }
            return _call(obj[key], params, obj)
    return None


STRICT_NORMALIZERS: list[Normalizer] = [
    tool_parameters,
    function_arguments,
    name_params,
    tool_args,
    openai_function,
    name_arguments,
]

NORMALIZERS: list[Normalizer] = [*STRICT_NORMALIZERS, flattened]


def normalize_tool_call(
    obj: Any, normalizers: list[Normalizer] | None = None
) -> ToolCall | None:
    """Map a decoded JSON fragment to a ToolCall using the first normalizer that fits."""
    if not isinstance(obj, dict):
        return None
    for normalizer in normalizers if normalizers is not None else NORMALIZERS:
        call = normalizer(obj)
        if call is not None:
            return call
    return None


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def _decode_at(text: str, pos: int) -> tuple[Any, int] | None:
    try:
        return _decoder.raw_decode(text, pos)
    except json.JSONDecodeError:
        return None


def extract_tool_calls(text: str) -> list[ToolCall]:
    """Extract every recognizable tool call from ``text``, in text order."""
    found: list[tuple[int, ToolCall]] = []
    spans: list[tuple[int, int]] = []

    def _covered(pos: int) -> bool:
        return any(start <= pos < end for start, end in spans)

    for match in SENTINEL_RE.finditer(text):
        start = match.end()
        if _covered(start):
            continue
        decoded = _decode_at(text, start)
        if decoded is None:
            logger.debug("Dropping malformed tool-call fragment at offset %d", start)
            continue
        obj, end = decoded
        spans.append((start, end))
        call = normalize_tool_call(obj)
        if call is not None:
            found.append((start, call))

    for match in BARE_OBJECT_RE.finditer(text):
        start = match.start()
        if _covered(start):
            continue
        decoded = _decode_at(text, start)
        if decoded is None:
            continue
        obj, end = decoded
        call = normalize_tool_call(obj, STRICT_NORMALIZERS)
        if call is not None:
            spans.append((start, end))
            found.append((start, call))

    found.sort(key=lambda item: item[0])
    return [call for _, call in found]
