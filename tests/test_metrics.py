"""Tests for switchboard.agent.metrics."""

from __future__ import annotations

from switchboard.agent.metrics import AgentMetricsTracker


class TestAgentMetricsTracker:
    def test_record_success_and_failure(self) -> None:
        tracker = AgentMetricsTracker()
        tracker.record_call("a", True, 100.0, ["read_file"])
        tracker.record_call("a", False, 300.0)
        m = tracker.get_metrics("a")
        assert m is not None
        assert m.total_calls == 2
        assert m.successful_calls == 1
        assert m.failed_calls == 1
        assert m.average_response_time == 200.0
        assert m.last_used is not None
        assert tracker.success_rate("a") == 0.5

    def test_unknown_agent(self) -> None:
        tracker = AgentMetricsTracker()
        assert tracker.get_metrics("ghost") is None
        assert tracker.success_rate("ghost") == 0.0

    def test_rolling_window(self) -> None:
        tracker = AgentMetricsTracker(window=3)
        for ms in (1000.0, 10.0, 20.0, 30.0):
            tracker.record_call("a", True, ms)
        assert tracker.get_metrics("a").average_response_time == 20.0
        assert tracker.get_metrics("a").total_calls == 4

    def test_tool_counts(self) -> None:
        tracker = AgentMetricsTracker()
        tracker.record_call("a", True, 1.0, ["read_file", "list_files"])
        tracker.record_call("a", True, 1.0, ["read_file"])
        assert tracker.get_metrics("a").tools_used == {"read_file": 2, "list_files": 1}

    def test_top_agents(self) -> None:
        tracker = AgentMetricsTracker()
        tracker.record_call("a", True, 1.0)
        for _ in range(3):
            tracker.record_call("b", True, 1.0)
        assert [m.agent_name for m in tracker.top_agents(1)] == ["b"]
        assert len(tracker.all_metrics()) == 2

    def test_format_report(self) -> None:
        tracker = AgentMetricsTracker()
        assert tracker.format_report() == "No agent calls recorded."
        tracker.record_call("file-system", True, 42.0, ["list_files"])
        report = tracker.format_report()
        assert "file-system:" in report
        assert "calls: 1 (ok 1, failed 0, 100% success)" in report
        assert "avg response: 42ms" in report
        assert "top tools: list_files (1)" in report

    def test_reset(self) -> None:
        tracker = AgentMetricsTracker()
        tracker.record_call("a", True, 1.0)
        tracker.reset()
        assert tracker.all_metrics() == []
