"""Session layer: a conversation driven through the dispatcher."""

from switchboard.session.assistant import (
    Assistant,
    AssistantSetup,
    ToolOutcome,
    Turn,
    setup_assistant,
)

__all__ = ["Assistant", "AssistantSetup", "ToolOutcome", "Turn", "setup_assistant"]
