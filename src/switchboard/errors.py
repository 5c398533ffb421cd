"""Exception hierarchy for switchboard.

Only configuration mistakes and agent execution failures are raised.
Routing anomalies and tool failures are returned as values.
"""


class SwitchboardError(Exception):
    """Base exception for all switchboard errors."""

    pass


class AgentNotFoundError(SwitchboardError, LookupError):
    """Raised when a caller names an agent that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Agent {name} not found")
        self.name = name


class EmptyAgentResponseError(SwitchboardError):
    """Raised when an agent lifecycle finishes without producing a response."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Agent {name} did not return a response")
        self.name = name
