"""Command tool: one-shot subprocess execution."""

from __future__ import annotations

import asyncio
import os
import signal
from typing import ClassVar

from pydantic import BaseModel, Field

from switchboard.tool.base import BaseTool, ToolError, ToolOk, ToolResult
from switchboard.tool.truncation import sanitize_binary_output, strip_ansi


class RunCommandParams(BaseModel):
    command: str = Field(description="The shell command to execute.")
    timeout: int = Field(default=60, description="Timeout in seconds.")
    workdir: str | None = Field(
        default=None, description="Working directory. Defaults to the workspace."
    )


class RunCommandTool(BaseTool[RunCommandParams]):
    """Run a shell command and capture combined stdout/stderr.

    The command runs in its own process group so a timeout can kill any
    children it spawned.
    """

    name: ClassVar[str] = "run_command"
    description: ClassVar[str] = (
        "Execute a shell command in the workspace and return its output. "
        "A non-zero exit code is reported as an error."
    )
    param_model: ClassVar[type[BaseModel]] = RunCommandParams

    def __init__(self, cwd: str | None = None) -> None:
        self._cwd = cwd or os.getcwd()

    async def run(self, params: RunCommandParams) -> ToolResult:
        workdir = params.workdir or self._cwd
        if not os.path.isdir(workdir):
            return ToolError(error=f"Directory does not exist: {workdir}")

        process = await asyncio.create_subprocess_shell(
            params.command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
            cwd=workdir,
            start_new_session=True,
            env={**os.environ, "TERM": "dumb"},
        )

        try:
            stdout, _ = await asyncio.wait_for(
                process.communicate(), timeout=params.timeout
            )
        except asyncio.TimeoutError:
            try:
                os.killpg(os.getpgid(process.pid), signal.SIGKILL)
            except ProcessLookupError:
                pass
            await process.wait()
            return ToolError(
                error=f"Command timed out after {params.timeout}s: {params.command}"
            )

        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        output = sanitize_binary_output(strip_ansi(output))

        exit_code = process.returncode or 0
        if exit_code != 0:
            return ToolError(error=f"[Exit code: {exit_code}]\n{output}")
        return ToolOk(result=output)
