"""Per-agent call metrics."""

from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime

# Response times kept per agent for the rolling average.
RESPONSE_TIME_WINDOW = 100


@dataclass
class AgentMetrics:
    """Aggregated call statistics for one agent."""

    agent_name: str
    total_calls: int = 0
    successful_calls: int = 0
    failed_calls: int = 0
    average_response_time: float = 0.0  # milliseconds
    last_used: datetime | None = None
    tools_used: Counter[str] = field(default_factory=Counter)

    @property
    def success_rate(self) -> float:
        if self.total_calls == 0:
            return 0.0
        return self.successful_calls / self.total_calls


class AgentMetricsTracker:
    """Records one entry per agent invocation.

    The registry calls ``record_call`` exactly once per
    ``process_with_agent`` call, whether it succeeded or raised.
    """

    def __init__(self, window: int = RESPONSE_TIME_WINDOW) -> None:
        self._window = window
        self._metrics: dict[str, AgentMetrics] = {}
        self._response_times: dict[str, deque[float]] = {}

    def record_call(
        self,
        agent_name: str,
        success: bool,
        response_time_ms: float,
        tools_used: list[str] | None = None,
    ) -> None:
        metrics = self._metrics.get(agent_name)
        if metrics is None:
            metrics = self._metrics[agent_name] = AgentMetrics(agent_name=agent_name)
            self._response_times[agent_name] = deque(maxlen=self._window)

        metrics.total_calls += 1
        if success:
            metrics.successful_calls += 1
        else:
            metrics.failed_calls += 1
        metrics.last_used = datetime.now()

        times = self._response_times[agent_name]
        times.append(response_time_ms)
        metrics.average_response_time = sum(times) / len(times)

        metrics.tools_used.update(tools_used or [])

    def get_metrics(self, agent_name: str) -> AgentMetrics | None:
        return self._metrics.get(agent_name)

    def all_metrics(self) -> list[AgentMetrics]:
        return list(self._metrics.values())

    def top_agents(self, limit: int = 5) -> list[AgentMetrics]:
        """Most-called agents first."""
        return sorted(self._metrics.values(), key=lambda m: -m.total_calls)[:limit]

    def success_rate(self, agent_name: str) -> float:
        metrics = self._metrics.get(agent_name)
        return metrics.success_rate if metrics else 0.0

    def reset(self) -> None:
        self._metrics.clear()
        self._response_times.clear()

    def format_report(self) -> str:
        if not self._metrics:
            return "No agent calls recorded."

        lines = ["Agent Performance Report", ""]
        for m in sorted(self._metrics.values(), key=lambda m: -m.total_calls):
            lines.append(f"{m.agent_name}:")
            lines.append(
                f"  calls: {m.total_calls} "
                f"(ok {m.successful_calls}, failed {m.failed_calls}, "
                f"{m.success_rate:.0%} success)"
            )
            lines.append(f"  avg response: {m.average_response_time:.0f}ms")
            if m.tools_used:
                top = ", ".join(
                    f"{tool} ({count})" for tool, count in m.tools_used.most_common(3)
                )
                lines.append(f"  top tools: {top}")
            if m.last_used:
                lines.append(f"  last used: {m.last_used:%H:%M:%S}")
        return "\n".join(lines)
