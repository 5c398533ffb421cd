"""Tool registry: register definitions and executors, validate and dispatch calls."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any

from switchboard.tool.base import (
    BaseTool,
    ExecutorLike,
    ToolCall,
    ToolDefinition,
    ToolError,
    ToolOk,
    ToolProvider,
    ToolResult,
)

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Outcome of ``ToolRegistry.validate_tool_call``."""

    valid: bool
    errors: list[str] = field(default_factory=list)


class ToolRegistry:
    """Registry of available tools.

    Definitions and executors are stored separately: a definition without
    an executor is valid (the model may see it) but cannot be executed.
    ``execute_tool`` and ``validate_tool_call`` never raise.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._executors: dict[str, ExecutorLike] = {}
        self._providers: dict[str, ToolProvider] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self, definition: ToolDefinition, executor: ExecutorLike | None = None
    ) -> None:
        """Register a tool definition, optionally with its executor."""
        if definition.name in self._tools:
            logger.warning("Tool %s already registered, overwriting", definition.name)
        self._tools[definition.name] = definition
        if executor is not None:
            self._executors[definition.name] = executor

    def register_tool(self, tool: BaseTool) -> None:
        """Register a BaseTool as both definition and executor."""
        self.register(tool.definition(), tool)

    def register_many(self, tools: list[BaseTool]) -> None:
        for tool in tools:
            self.register_tool(tool)

    def register_provider(self, name: str, provider: ToolProvider) -> None:
        """Import every tool a provider exposes, with executors where supplied."""
        self._providers[name] = provider
        definitions = provider.get_tool_definitions()
        for definition in definitions:
            self.register(definition, provider.get_tool_executor(definition.name))
        logger.info("Registered %d tools from provider %s", len(definitions), name)

    def clear(self) -> None:
        self._tools.clear()
        self._executors.clear()
        self._providers.clear()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_tool(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def get_tools(self) -> list[ToolDefinition]:
        return list(self._tools.values())

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def has_executor(self, name: str) -> bool:
        return name in self._executors

    def get_executor(self, name: str) -> ExecutorLike | None:
        return self._executors.get(name)

    def names(self) -> list[str]:
        """Get all registered tool names."""
        return list(self._tools.keys())

    def get_tools_by_capability(self, capability: str) -> list[ToolDefinition]:
        """Tools whose description mentions ``capability`` (case-insensitive)."""
        needle = capability.lower()
        return [t for t in self._tools.values() if needle in t.description.lower()]

    def subset(self, names: list[str]) -> ToolRegistry:
        """Create a new registry with only the specified tools."""
        reg = ToolRegistry()
        for name in names:
            definition = self._tools.get(name)
            if definition is None:
                logger.warning("Tool %s not found in registry", name)
                continue
            reg.register(definition, self._executors.get(name))
        return reg

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def _selected(self, names: list[str] | None) -> list[ToolDefinition]:
        if names is None:
            return self.get_tools()
        return [t for t in self._tools.values() if t.name in names]

    def to_openai_format(self, names: list[str] | None = None) -> list[dict[str, Any]]:
        """Tool specs wrapped as OpenAI ``function`` objects."""
        return [
            {
                "type": "function",
                "function": {
                    "name": t.name,
                    "description": t.description,
                    "parameters": t.to_json_schema(),
                },
            }
            for t in self._selected(names)
        ]

    def to_anthropic_format(
        self, names: list[str] | None = None
    ) -> list[dict[str, Any]]:
        """Flat name / description / input_schema specs."""
        return [
            {
                "name": t.name,
                "description": t.description,
                "input_schema": t.to_json_schema(),
            }
            for t in self._selected(names)
        ]

    def describe(self, names: list[str] | None = None) -> str:
        """One line per tool, for embedding the catalogue in a prompt."""
        lines = []
        for t in self._selected(names):
            params = ", ".join(
                f"{pname}: {p.type}{'' if p.required else '?'}"
                for pname, p in t.parameters.items()
            )
            lines.append(f"- {t.name}({params}): {t.description}")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute_tool(self, call: ToolCall, context: Any = None) -> ToolResult:
        """Run a tool call. Always returns a result, never raises."""
        executor = self._executors.get(call.tool)
        if executor is None:
            return ToolError(
                error=f"No executor found for tool: {call.tool}", call_id=call.id
            )

        try:
            if hasattr(executor, "execute"):
                outcome = executor.execute(call.parameters, context)
            else:
                outcome = executor(call.parameters)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as e:
            logger.error("Tool %s execution error: %s", call.tool, e, exc_info=True)
            return ToolError(error=_error_message(e), call_id=call.id)

        if isinstance(outcome, ToolResult):
            outcome.call_id = call.id
            return outcome
        return ToolOk(result=outcome, call_id=call.id)

    def validate_tool_call(self, call: ToolCall) -> ValidationResult:
        """Check a call against the declared schema without running it."""
        definition = self._tools.get(call.tool)
        if definition is None:
            return ValidationResult(valid=False, errors=[f"Tool '{call.tool}' not found"])

        errors: list[str] = []
        for name in definition.required:
            if name not in call.parameters:
                errors.append(f"Missing required parameter: {name}")

        for name, value in call.parameters.items():
            param = definition.parameters.get(name)
            if param is None:
                errors.append(f"Unknown parameter: {name}")
                continue

            actual = _json_type(value)
            if not _type_matches(param.type, value, actual):
                errors.append(f"Parameter '{name}' should be {param.type} but got {actual}")

            if param.enum is not None and _enum_form(value) not in param.enum:
                errors.append(
                    f"Parameter '{name}' should be one of: {', '.join(param.enum)}"
                )

        return ValidationResult(valid=not errors, errors=errors)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools


def _error_message(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def _json_type(value: Any) -> str:
    """The JSON type name of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _type_matches(declared: str, value: Any, actual: str) -> bool:
    # ``object`` accepts anything
    if declared == "object":
        return True
    if declared == "integer":
        return actual == "number" and (
            isinstance(value, int) or float(value).is_integer()
        )
    return declared == actual


def _enum_form(value: Any) -> str:
    """String form used for enum comparison (JSON spelling for literals)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
