"""File-system tools scoped to a workspace directory."""

from __future__ import annotations

import os
import shutil
from typing import ClassVar

from pydantic import BaseModel, Field

from switchboard.tool.base import BaseTool, ToolError, ToolOk, ToolResult


class _WorkspaceTool:
    """Resolves relative paths against the workspace root."""

    def __init__(self, cwd: str | None = None) -> None:
        self._cwd = cwd or os.getcwd()

    def _resolve(self, path: str) -> str:
        if not os.path.isabs(path):
            path = os.path.join(self._cwd, path)
        return os.path.normpath(path)


class ListFilesParams(BaseModel):
    path: str = Field(default=".", description="Directory path to list.")


class ListFilesTool(_WorkspaceTool, BaseTool[ListFilesParams]):
    """List directory entries, directories suffixed with '/'."""

    name: ClassVar[str] = "list_files"
    description: ClassVar[str] = "List files in a directory."
    param_model: ClassVar[type[BaseModel]] = ListFilesParams

    async def run(self, params: ListFilesParams) -> ToolResult:
        path = self._resolve(params.path)
        if not os.path.isdir(path):
            return ToolError(error=f"Not a directory: {path}")

        try:
            entries = sorted(os.listdir(path))
        except PermissionError:
            return ToolError(error=f"Permission denied: {path}")

        formatted = []
        for e in entries:
            suffix = "/" if os.path.isdir(os.path.join(path, e)) else ""
            formatted.append(f"{e}{suffix}")
        return ToolOk(result="\n".join(formatted))


class ReadFileParams(BaseModel):
    path: str = Field(description="File path to read.")
    offset: int = Field(
        default=0, description="Line number to start reading from (0-indexed)."
    )
    limit: int = Field(default=2000, description="Maximum number of lines to read.")


class ReadFileTool(_WorkspaceTool, BaseTool[ReadFileParams]):
    """Read file contents as numbered lines."""

    name: ClassVar[str] = "read_file"
    description: ClassVar[str] = (
        "Read the contents of a file. Returns numbered lines. "
        "Use offset and limit for large files."
    )
    param_model: ClassVar[type[BaseModel]] = ReadFileParams

    async def run(self, params: ReadFileParams) -> ToolResult:
        path = self._resolve(params.path)
        if not os.path.exists(path):
            return ToolError(error=f"File not found: {path}")
        if os.path.isdir(path):
            return ToolError(error=f"Is a directory: {path}")

        try:
            with open(path, "r", errors="replace") as f:
                all_lines = f.readlines()
        except PermissionError:
            return ToolError(error=f"Permission denied: {path}")

        total = len(all_lines)
        start = min(params.offset, total)
        end = min(start + params.limit, total)

        numbered = [
            f"{i}: {line.rstrip()}"
            for i, line in enumerate(all_lines[start:end], start=start + 1)
        ]
        result = "\n".join(numbered)
        if end < total:
            result += f"\n\n[{total - end} more lines. Use offset={end} to continue.]"
        return ToolOk(result=result)


class WriteFileParams(BaseModel):
    path: str = Field(description="File path to write.")
    content: str = Field(description="Content to write.")


class WriteFileTool(_WorkspaceTool, BaseTool[WriteFileParams]):
    """Write a file, creating parent directories as needed."""

    name: ClassVar[str] = "write_file"
    description: ClassVar[str] = (
        "Write content to a file. Creates the file and parent directories "
        "if they don't exist. Overwrites existing content."
    )
    param_model: ClassVar[type[BaseModel]] = WriteFileParams

    async def run(self, params: WriteFileParams) -> ToolResult:
        path = self._resolve(params.path)
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w") as f:
            f.write(params.content)

        lines = params.content.count("\n") + 1
        return ToolOk(result=f"Wrote {lines} lines to {path}")


class DeleteFileParams(BaseModel):
    path: str = Field(description="Path to delete.")


class DeleteFileTool(_WorkspaceTool, BaseTool[DeleteFileParams]):
    name: ClassVar[str] = "delete_file"
    description: ClassVar[str] = "Delete a file or directory."
    param_model: ClassVar[type[BaseModel]] = DeleteFileParams

    async def run(self, params: DeleteFileParams) -> ToolResult:
        path = self._resolve(params.path)
        if not os.path.lexists(path):
            return ToolError(error=f"File not found: {path}")
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)
        return ToolOk(result=f"Deleted {path}")
