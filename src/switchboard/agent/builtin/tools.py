"""Agents that own tools: file-system and shell commands."""

from __future__ import annotations

import logging
import re
from typing import ClassVar

from switchboard.agent.base import AgentContext
from switchboard.agent.llm import LLMAgent, catalogue
from switchboard.agent.prompts import RESPONSE_FORMAT, TOOL_AGENT_PROMPT
from switchboard.llm.provider import ChatProvider
from switchboard.tool.base import BaseTool, ExecutorLike, ToolCall, ToolDefinition
from switchboard.tool.builtin import (
    DeleteFileTool,
    ListFilesTool,
    ReadFileTool,
    RunCommandTool,
    WriteFileTool,
)
from switchboard.tool.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolAgent(LLMAgent):
    """An agent that is also a tool provider.

    It claims requests matching ``pattern`` and asks the model for a call
    to one of its own tools. Names in ``aliases`` and parameter names in
    ``param_aliases`` are rewritten to the canonical ones; calls to any
    other tool, or to one of its tools the request does not make
    available, are dropped.
    """

    pattern: ClassVar[re.Pattern[str]]
    aliases: ClassVar[dict[str, str]] = {}
    param_aliases: ClassVar[dict[str, str]] = {}
    temperature = 0.1

    def __init__(self, provider: ChatProvider, tools: list[BaseTool]) -> None:
        super().__init__(provider)
        self.tools = ToolRegistry()
        self.tools.register_many(tools)

    async def can_handle(self, context: AgentContext) -> bool:
        if self.is_requested(context):
            return True
        if self.defers(context):
            return False
        return bool(self.pattern.search(context.user_input))

    def get_tool_definitions(self) -> list[ToolDefinition]:
        return self.tools.get_tools()

    def get_tool_executor(self, tool_name: str) -> ExecutorLike | None:
        return self.tools.get_executor(tool_name)

    def visible_tools(self, context: AgentContext) -> ToolRegistry:
        return self.tools.subset(
            [name for name in context.available_tools if name in self.tools]
        )

    def system_prompt(self, context: AgentContext, tools: ToolRegistry) -> str:
        prompt = TOOL_AGENT_PROMPT.format(
            name=self.name, description=self.description, tools=catalogue(tools)
        )
        return f"{prompt}\n\n{RESPONSE_FORMAT}"

    def map_tool_call(self, call: ToolCall, tools: ToolRegistry) -> ToolCall | None:
        name = self.aliases.get(call.tool, call.tool)
        if name not in tools:
            logger.info("%s: dropping call to foreign tool %s", self.name, call.tool)
            return None
        params = {self.param_aliases.get(k, k): v for k, v in call.parameters.items()}
        return ToolCall(tool=name, parameters=params, id=call.id)


class FileSystemAgent(ToolAgent):
    name = "file-system"
    description = "Lists, reads, writes and deletes files in the workspace"
    capabilities = ("list files", "read files", "write files", "delete files")

    pattern = re.compile(
        r"\b(files?|folders?|director(y|ies)|ls|cat)\b"
        r"|\b(read|write|open|save|delete|remove|list)\b.*\b\S+\.\w{1,5}\b",
        re.IGNORECASE,
    )
    aliases = {
        "listFiles": "list_files",
        "list_directory": "list_files",
        "ls": "list_files",
        "readFile": "read_file",
        "cat": "read_file",
        "writeFile": "write_file",
        "createFile": "write_file",
        "deleteFile": "delete_file",
        "rm": "delete_file",
    }
    param_aliases = {
        "file": "path",
        "filename": "path",
        "file_path": "path",
        "filePath": "path",
        "directory": "path",
        "text": "content",
    }

    def __init__(self, provider: ChatProvider, workspace: str | None = None) -> None:
        super().__init__(
            provider,
            [
                ListFilesTool(workspace),
                ReadFileTool(workspace),
                WriteFileTool(workspace),
                DeleteFileTool(workspace),
            ],
        )


class CommandAgent(ToolAgent):
    name = "command"
    description = "Runs shell commands in the workspace"
    capabilities = ("shell commands", "build and test commands")

    pattern = re.compile(
        r"\b(run|execute|command|shell|terminal)\b"
        r"|^\s*(git|npm|pip|python|make|pytest|ls -|grep)\b",
        re.IGNORECASE,
    )
    aliases = {
        "bash": "run_command",
        "shell": "run_command",
        "execute": "run_command",
        "runCommand": "run_command",
        "execute_command": "run_command",
    }
    param_aliases = {"cmd": "command", "cwd": "workdir"}

    def __init__(self, provider: ChatProvider, workspace: str | None = None) -> None:
        super().__init__(provider, [RunCommandTool(workspace)])
