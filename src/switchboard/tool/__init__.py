"""Tool system: definitions, registry, and output truncation."""

from switchboard.tool.base import (
    BaseTool,
    ToolCall,
    ToolDefinition,
    ToolError,
    ToolExecutor,
    ToolOk,
    ToolParameter,
    ToolProvider,
    ToolResult,
)
from switchboard.tool.registry import ToolRegistry, ValidationResult
from switchboard.tool.truncation import truncate_output

__all__ = [
    "BaseTool",
    "ToolCall",
    "ToolDefinition",
    "ToolError",
    "ToolExecutor",
    "ToolOk",
    "ToolParameter",
    "ToolProvider",
    "ToolResult",
    "ToolRegistry",
    "ValidationResult",
    "truncate_output",
]
