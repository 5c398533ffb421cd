"""Agents defined in markdown files with YAML frontmatter."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any

from switchboard.agent.base import AgentContext
from switchboard.agent.llm import LLMAgent, catalogue
from switchboard.agent.prompts import RESPONSE_FORMAT
from switchboard.llm.provider import ChatProvider
from switchboard.tool.registry import ToolRegistry

logger = logging.getLogger(__name__)


@dataclass
class AgentDefinition:
    """Frontmatter fields of an agent file."""

    name: str
    description: str = ""
    capabilities: list[str] = field(default_factory=list)
    priority: int = 0
    keywords: list[str] = field(default_factory=list)
    tools: list[str] = field(default_factory=list)
    temperature: float | None = None


class PromptAgent(LLMAgent):
    """An agent whose behaviour is a system prompt.

    Agent files look like:

        ---
        name: reviewer
        description: Reviews code for bugs
        priority: 25
        keywords: [review, bug, refactor]
        tools: [read_file]
        ---

        You are a careful code reviewer...

    The agent claims requests containing any keyword (whole words,
    case-insensitive) and may call only the tools it lists.
    """

    def __init__(
        self,
        definition: AgentDefinition,
        system_prompt: str,
        provider: ChatProvider,
        tools: ToolRegistry,
    ) -> None:
        super().__init__(provider)
        self.definition = definition
        self.name = definition.name
        self.description = definition.description
        self.capabilities = tuple(definition.capabilities)
        self.temperature = definition.temperature
        self.prompt = system_prompt
        self.tools = tools
        self._keywords = [
            re.compile(rf"\b{re.escape(k)}\b", re.IGNORECASE) for k in definition.keywords
        ]

    @property
    def priority(self) -> int:
        return self.definition.priority

    async def can_handle(self, context: AgentContext) -> bool:
        if self.is_requested(context):
            return True
        if self.defers(context):
            return False
        return any(k.search(context.user_input) for k in self._keywords)

    def visible_tools(self, context: AgentContext) -> ToolRegistry:
        return self.tools.subset([t for t in self.definition.tools if t in self.tools])

    def system_prompt(self, context: AgentContext, tools: ToolRegistry) -> str:
        parts = [self.prompt]
        if len(tools):
            parts.append(f"Available tools:\n{catalogue(tools)}")
        parts.append(RESPONSE_FORMAT)
        return "\n\n".join(p for p in parts if p)

    @classmethod
    def from_markdown(
        cls, path: str, provider: ChatProvider, tools: ToolRegistry
    ) -> PromptAgent:
        """Load an agent from a markdown file with YAML frontmatter."""
        with open(path, "r") as f:
            content = f.read()

        config, prompt = _parse_frontmatter(content)
        if not config.get("name"):
            raise ValueError("Agent frontmatter has no name")
        return cls(AgentDefinition(**config), prompt.strip(), provider, tools)


def _parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML frontmatter from markdown content.

    Returns (config_dict, body_text).
    """
    import yaml  # only needed when loading agent files

    pattern = re.compile(r"^---\s*\n(.*?)\n---\s*\n(.*)", re.DOTALL)
    match = pattern.match(content)
    if not match:
        return {}, content

    config = yaml.safe_load(match.group(1)) or {}
    if not isinstance(config, dict):
        raise ValueError("Agent frontmatter must be a mapping")
    return config, match.group(2)


def discover_agents(
    search_dirs: list[str], provider: ChatProvider, tools: ToolRegistry
) -> list[PromptAgent]:
    """Load every ``*.md`` agent file in ``search_dirs``.

    Files without a ``name`` or that fail to parse are skipped with a warning.
    """
    agents = []
    for dir_path in search_dirs:
        if not os.path.isdir(dir_path):
            continue
        for fname in sorted(os.listdir(dir_path)):
            if not fname.endswith(".md"):
                continue
            full_path = os.path.join(dir_path, fname)
            try:
                agent = PromptAgent.from_markdown(full_path, provider, tools)
            except Exception as e:
                logger.warning("Skipping agent file %s: %s", full_path, e)
                continue
            agents.append(agent)
    return agents
