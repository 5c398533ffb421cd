"""Tool definitions, invocations and results, plus the pydantic-backed BaseTool."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    ClassVar,
    Generic,
    Literal,
    Protocol,
    TypeVar,
    Union,
    runtime_checkable,
)

from pydantic import BaseModel, Field, ValidationError

from switchboard.tool.truncation import truncate_output

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

ParamType = Literal["string", "number", "integer", "boolean", "object", "array"]


# ---------------------------------------------------------------------------
# Declarative schema
# ---------------------------------------------------------------------------


class ToolParameter(BaseModel):
    """Schema of a single tool parameter."""

    type: ParamType = "string"
    description: str = ""
    required: bool = False
    enum: list[str] | None = None
    default: Any = None
    items: ToolParameter | None = None

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.default is not None:
            schema["default"] = self.default
        if self.items is not None:
            schema["items"] = self.items.to_json_schema()
        return schema


class ToolDefinition(BaseModel):
    """A named tool with a natural-language description and a parameter schema.

    The description is consumed by the model, never by code. ``parameters``
    maps parameter name to its schema; ``required`` lives on each parameter.
    """

    name: str
    description: str = ""
    parameters: dict[str, ToolParameter] = Field(default_factory=dict)

    @property
    def required(self) -> list[str]:
        return [name for name, p in self.parameters.items() if p.required]

    def to_json_schema(self) -> dict[str, Any]:
        """Render the parameter map as a JSON-schema ``object``."""
        return {
            "type": "object",
            "properties": {
                name: p.to_json_schema() for name, p in self.parameters.items()
            },
            "required": self.required,
        }

    @classmethod
    def from_json_schema(
        cls, name: str, description: str, schema: dict[str, Any]
    ) -> ToolDefinition:
        """Build a definition from a JSON-schema ``object`` (e.g. pydantic's)."""
        required = set(schema.get("required", []))
        params: dict[str, ToolParameter] = {}
        for pname, prop in schema.get("properties", {}).items():
            params[pname] = ToolParameter(
                type=_schema_type(prop),
                description=prop.get("description", ""),
                required=pname in required,
                enum=[str(v) for v in prop["enum"]] if "enum" in prop else None,
                default=prop.get("default"),
            )
        return cls(name=name, description=description, parameters=params)


_KNOWN_TYPES = {"string", "number", "integer", "boolean", "object", "array"}


def _schema_type(prop: dict[str, Any]) -> str:
    """Pick a declared type out of a JSON-schema property.

    Optional fields come out of pydantic as ``anyOf: [{type: X}, {type: null}]``.
    Anything we cannot pin down is treated as the permissive ``object``.
    """
    declared = prop.get("type")
    if declared in _KNOWN_TYPES:
        return declared
    for option in prop.get("anyOf", []):
        if option.get("type") in _KNOWN_TYPES:
            return option["type"]
    if "enum" in prop:
        return "string"
    return "object"


# ---------------------------------------------------------------------------
# Invocations and results
# ---------------------------------------------------------------------------


@dataclass
class ToolCall:
    """A concrete request to run a tool."""

    tool: str
    parameters: dict[str, Any] = field(default_factory=dict)
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"tool": self.tool, "parameters": self.parameters}
        if self.id is not None:
            d["id"] = self.id
        return d


@dataclass
class ToolResult:
    """Outcome of one tool execution."""

    result: Any = None
    error: str | None = None
    success: bool = True
    is_error: bool = False
    call_id: str | None = None

    @property
    def output(self) -> str:
        """Text form suitable for showing to a user or feeding to a model."""
        if self.is_error:
            return self.error or "Unknown error"
        if self.result is None:
            return ""
        return self.result if isinstance(self.result, str) else str(self.result)


@dataclass
class ToolOk(ToolResult):
    """Successful tool result."""

    success: bool = True
    is_error: bool = False


@dataclass
class ToolError(ToolResult):
    """Failed tool result."""

    success: bool = False
    is_error: bool = True


# ---------------------------------------------------------------------------
# Executor / provider contracts
# ---------------------------------------------------------------------------


@runtime_checkable
class ToolExecutor(Protocol):
    """Anything with an ``execute`` method; may be sync or async, may raise."""

    def execute(self, parameters: dict[str, Any], context: Any = None) -> Any: ...


# Bare callables are accepted too and receive only the parameters.
ExecutorLike = Union[ToolExecutor, Callable[[dict[str, Any]], Any]]


@runtime_checkable
class ToolProvider(Protocol):
    """An object that owns a set of tool definitions and their executors."""

    def get_tool_definitions(self) -> list[ToolDefinition]: ...

    def get_tool_executor(self, tool_name: str) -> ExecutorLike | None: ...


# ---------------------------------------------------------------------------
# BaseTool
# ---------------------------------------------------------------------------


class BaseTool(ABC, Generic[T]):
    """Base class for tools whose parameters are a pydantic model.

    Usage:
        class ReadParams(BaseModel):
            path: str = Field(description="File to read")

        class ReadTool(BaseTool[ReadParams]):
            name = "read"
            description = "Read a file"
            param_model = ReadParams

            async def run(self, params: ReadParams) -> ToolResult:
                return ToolOk(result="...")

    A BaseTool is its own executor, so ``registry.register_tool(tool)``
    registers both the definition and the executor.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    param_model: ClassVar[type[BaseModel]]

    async def execute(
        self, parameters: dict[str, Any], context: Any = None
    ) -> ToolResult:
        """Validate parameters, run, and bound textual output."""
        try:
            params = self.param_model.model_validate(parameters)
        except ValidationError as e:
            return ToolError(error=f"Invalid parameters for {self.name}: {e}")

        result = await self.run(params)  # type: ignore[arg-type]
        if isinstance(result.result, str):
            result.result = truncate_output(result.result)
        return result

    @abstractmethod
    async def run(self, params: T) -> ToolResult:
        """Execute the tool with validated parameters."""
        ...

    def definition(self) -> ToolDefinition:
        schema = self.param_model.model_json_schema()
        return ToolDefinition.from_json_schema(self.name, self.description, schema)
