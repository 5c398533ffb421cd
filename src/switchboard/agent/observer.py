"""Dispatch observer: records which agent was considered and what it did.

Disabled by default. When enabled, the registry reports every
eligibility decision and hook timing of the current top-level request.
Nothing here may affect dispatch; the registry swallows observer errors.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from switchboard.agent.base import AgentContext, AgentResponse

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 100


class Phase(enum.Enum):
    CAN_HANDLE = "can_handle"
    PRE_PROCESS = "pre_process"
    PROCESS = "process"
    POST_PROCESS = "post_process"


@dataclass
class Observation:
    """One recorded dispatch event."""

    agent_name: str
    phase: Phase
    timestamp: datetime = field(default_factory=datetime.now)
    decision: bool | None = None
    duration_ms: float | None = None
    error: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass
class ObservationReport:
    operation_id: str | None
    total_agents_checked: int
    agents_claimed: list[str]
    agent_selected: str | None
    tools_requested: list[str]
    errors: list[str]
    total_duration_ms: float
    observations: list[Observation]


class AgentObserver:
    """Collects observations for the current operation."""

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self._operation_id: str | None = None
        self._started: datetime | None = None
        self._observations: list[Observation] = []

    def enable(self) -> None:
        self.enabled = True
        logger.info("Agent observation enabled")

    def disable(self) -> None:
        self.enabled = False

    @property
    def observations(self) -> list[Observation]:
        return list(self._observations)

    def start_operation(self, operation_id: str) -> None:
        """Begin a new top-level request; drops earlier observations."""
        if not self.enabled:
            return
        self._operation_id = operation_id
        self._started = datetime.now()
        self._observations = []

    def _record(self, observation: Observation) -> None:
        if self.enabled:
            self._observations.append(observation)

    def observe_can_handle(
        self, agent_name: str, context: AgentContext, decision: bool
    ) -> None:
        self._record(
            Observation(
                agent_name=agent_name,
                phase=Phase.CAN_HANDLE,
                decision=decision,
                data={"input": context.user_input[:_PREVIEW_CHARS]},
            )
        )

    def observe_pre_process(
        self, agent_name: str, context: AgentContext, duration_ms: float
    ) -> None:
        self._record(
            Observation(
                agent_name=agent_name,
                phase=Phase.PRE_PROCESS,
                duration_ms=duration_ms,
                data={"input": context.user_input[:_PREVIEW_CHARS]},
            )
        )

    def observe_process(
        self, agent_name: str, response: AgentResponse, duration_ms: float
    ) -> None:
        self._record(
            Observation(
                agent_name=agent_name,
                phase=Phase.PROCESS,
                duration_ms=duration_ms,
                data=_summarize(response),
            )
        )

    def observe_post_process(
        self, agent_name: str, response: AgentResponse, duration_ms: float
    ) -> None:
        self._record(
            Observation(
                agent_name=agent_name,
                phase=Phase.POST_PROCESS,
                duration_ms=duration_ms,
                data=_summarize(response),
            )
        )

    def observe_error(self, agent_name: str, phase: Phase, error: BaseException) -> None:
        self._record(
            Observation(
                agent_name=agent_name,
                phase=phase,
                error=str(error) or type(error).__name__,
            )
        )

    def generate_report(self) -> ObservationReport:
        checks = [o for o in self._observations if o.phase is Phase.CAN_HANDLE]
        processed = [o for o in self._observations if o.phase is Phase.PROCESS]
        total_ms = 0.0
        if self._started is not None:
            total_ms = (datetime.now() - self._started).total_seconds() * 1000
        return ObservationReport(
            operation_id=self._operation_id,
            total_agents_checked=len(checks),
            agents_claimed=[o.agent_name for o in checks if o.decision],
            agent_selected=processed[0].agent_name if processed else None,
            tools_requested=[
                tool for o in processed for tool in o.data.get("tool_calls", [])
            ],
            errors=[
                f"{o.agent_name} {o.phase.value}: {o.error}"
                for o in self._observations
                if o.error
            ],
            total_duration_ms=total_ms,
            observations=list(self._observations),
        )

    def format_report(self, detailed: bool = False) -> str:
        report = self.generate_report()
        lines = [
            f"Agent observation report ({report.operation_id or 'no operation'})",
            f"  agents checked: {report.total_agents_checked}",
            f"  agents claiming: {', '.join(report.agents_claimed) or 'none'}",
            f"  selected: {report.agent_selected or 'none'}",
            f"  tools requested: {', '.join(report.tools_requested) or 'none'}",
            f"  errors: {len(report.errors)}",
            f"  total: {report.total_duration_ms:.0f}ms",
        ]
        if detailed:
            for o in report.observations:
                line = f"  [{o.timestamp:%H:%M:%S}] {o.agent_name} {o.phase.value}"
                if o.decision is not None:
                    line += f" -> {o.decision}"
                if o.duration_ms is not None:
                    line += f" ({o.duration_ms:.0f}ms)"
                if o.error:
                    line += f" ERROR: {o.error}"
                lines.append(line)
        return "\n".join(lines)


def _summarize(response: AgentResponse) -> dict[str, Any]:
    return {
        "message": (response.message or "")[:_PREVIEW_CHARS],
        "tool_calls": [c.tool for c in response.tool_calls],
        "next_agent": response.next_agent,
    }
