"""Built-in agents."""

from switchboard.agent.builtin.conversational import ConversationalAgent
from switchboard.agent.builtin.reasoning import ReasoningAgent
from switchboard.agent.builtin.tools import CommandAgent, FileSystemAgent, ToolAgent

__all__ = [
    "CommandAgent",
    "ConversationalAgent",
    "FileSystemAgent",
    "ReasoningAgent",
    "ToolAgent",
]
