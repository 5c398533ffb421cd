"""Built-in general-purpose tools."""

from switchboard.tool.builtin.command import RunCommandTool
from switchboard.tool.builtin.filesystem import (
    DeleteFileTool,
    ListFilesTool,
    ReadFileTool,
    WriteFileTool,
)

__all__ = [
    "RunCommandTool",
    "ListFilesTool",
    "ReadFileTool",
    "WriteFileTool",
    "DeleteFileTool",
]
