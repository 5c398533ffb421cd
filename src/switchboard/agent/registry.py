"""Agent registry and dispatcher.

Holds the registered agents, picks one agent per request, runs its
lifecycle with instrumentation, and follows delegation hand-offs with
loop and depth protection.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any

from switchboard.agent.base import (
    PREVIOUS_AGENT,
    PREVIOUS_RESPONSE,
    REQUESTED_AGENT,
    AgentContext,
    AgentResponse,
    BaseAgent,
)
from switchboard.agent.metrics import AgentMetricsTracker
from switchboard.agent.observer import AgentObserver, Phase
from switchboard.errors import AgentNotFoundError, EmptyAgentResponseError

logger = logging.getLogger(__name__)

MAX_AGENT_CHAIN_LENGTH = 3

NO_AGENT_MESSAGE = "No suitable agent found to handle this request"
LOOP_MESSAGE = (
    "I encountered a processing loop. Let me provide a direct answer instead."
)
CHAIN_TOO_LONG_MESSAGE = "Processing chain is too long. Providing direct response."

# Response metadata key carrying the agents visited for one request.
AGENT_CHAIN = "agent_chain"


@dataclass(frozen=True)
class AgentInfo:
    name: str
    description: str
    capabilities: tuple[str, ...]
    priority: int


@dataclass
class AgentTask:
    """One named agent invocation for ``execute_multiple_agents``."""

    agent_name: str
    context: AgentContext


class AgentRegistry:
    """Registry of agents and the dispatch loop over them.

    Selection: every agent's ``can_handle`` runs concurrently; among the
    agents answering True the highest priority wins, and equal priorities
    go to the agent registered first. Re-registering a name replaces the
    agent and its priority but keeps its original position.
    """

    def __init__(
        self,
        metrics: AgentMetricsTracker | None = None,
        observer: AgentObserver | None = None,
        max_chain_length: int = MAX_AGENT_CHAIN_LENGTH,
        debug: bool = False,
    ) -> None:
        self._agents: dict[str, BaseAgent] = {}
        self._priorities: dict[str, int] = {}
        self._default_agent: str | None = None
        self.metrics = metrics if metrics is not None else AgentMetricsTracker()
        self.observer = observer if observer is not None else AgentObserver()
        self.max_chain_length = max_chain_length
        self.debug = debug

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, agent: BaseAgent, priority: int = 0) -> None:
        if agent.name in self._agents:
            logger.warning("Agent %s already registered, replacing", agent.name)
        self._agents[agent.name] = agent
        self._priorities[agent.name] = priority
        logger.info("Registered agent: %s (priority %d)", agent.name, priority)

    def set_default_agent(self, name: str) -> None:
        if name not in self._agents:
            raise AgentNotFoundError(name)
        self._default_agent = name

    @property
    def default_agent(self) -> str | None:
        return self._default_agent

    def get(self, name: str) -> BaseAgent | None:
        return self._agents.get(name)

    def priority(self, name: str) -> int:
        if name not in self._priorities:
            raise AgentNotFoundError(name)
        return self._priorities[name]

    def names(self) -> list[str]:
        return list(self._agents.keys())

    def all_agents(self) -> list[BaseAgent]:
        return list(self._agents.values())

    def list_agents(self) -> list[AgentInfo]:
        """Agents in dispatch preference order."""
        infos = [
            AgentInfo(
                name=a.name,
                description=a.description,
                capabilities=tuple(a.capabilities),
                priority=self._priorities[a.name],
            )
            for a in self._agents.values()
        ]
        return sorted(infos, key=lambda i: -i.priority)

    def __len__(self) -> int:
        return len(self._agents)

    def __contains__(self, name: str) -> bool:
        return name in self._agents

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    async def find_best_agent(self, context: AgentContext) -> BaseAgent | None:
        agents = self.all_agents()

        async def check(agent: BaseAgent) -> bool:
            decision = bool(await agent.can_handle(context))
            self._notify("observe_can_handle", agent.name, context, decision)
            return decision

        decisions = await asyncio.gather(*(check(a) for a in agents))

        candidates = [
            (-self._priorities[agent.name], order, agent)
            for order, (agent, claimed) in enumerate(zip(agents, decisions))
            if claimed
        ]
        if candidates:
            return min(candidates, key=lambda c: (c[0], c[1]))[2]

        if self._default_agent is not None:
            logger.debug("No agent claimed request, using default %s", self._default_agent)
            return self._agents.get(self._default_agent)
        return None

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def process_with_agent(
        self, name: str, context: AgentContext
    ) -> AgentResponse:
        """Run one agent's pre_process, process and post_process.

        Exceptions propagate after being recorded. Exactly one metrics
        entry is written per call.
        """
        agent = self._agents.get(name)
        if agent is None:
            raise AgentNotFoundError(name)

        success = True
        response: AgentResponse | None = None
        phase = Phase.PRE_PROCESS
        start = time.perf_counter()
        try:
            step = time.perf_counter()
            prepared = await agent.pre_process(context)
            self._notify("observe_pre_process", name, prepared, _elapsed_ms(step))

            phase = Phase.PROCESS
            step = time.perf_counter()
            response = await agent.process(prepared)
            if response is None:
                raise EmptyAgentResponseError(name)
            self._notify("observe_process", name, response, _elapsed_ms(step))

            phase = Phase.POST_PROCESS
            step = time.perf_counter()
            response = await agent.post_process(response, prepared)
            if response is None:
                raise EmptyAgentResponseError(name)
            self._notify("observe_post_process", name, response, _elapsed_ms(step))
        except Exception as e:
            success = False
            logger.error("Agent %s failed during %s: %s", name, phase.value, e)
            self._notify("observe_error", name, phase, e)
            raise
        finally:
            tools_used = [c.tool for c in response.tool_calls] if response else []
            self.metrics.record_call(name, success, _elapsed_ms(start), tools_used)

        return response

    async def process(self, context: AgentContext) -> AgentResponse:
        """Top-level entry: dispatch ``context`` with a fresh delegation chain."""
        self._notify("start_operation", f"op_{uuid.uuid4().hex[:8]}")
        try:
            return await self._process_with_chain_protection(context, ())
        finally:
            if self.debug and self.observer.enabled:
                logger.info("%s", self.observer.format_report(detailed=True))

    async def _process_with_chain_protection(
        self, context: AgentContext, chain: tuple[str, ...]
    ) -> AgentResponse:
        agent = await self.find_best_agent(context)
        if agent is None:
            logger.warning("No suitable agent found for request")
            return AgentResponse(message=NO_AGENT_MESSAGE, metadata={AGENT_CHAIN: list(chain)})

        if agent.name in chain:
            logger.warning(
                "Agent loop detected: %s -> %s", " -> ".join(chain), agent.name
            )
            return AgentResponse(
                message=LOOP_MESSAGE, metadata={AGENT_CHAIN: [*chain, agent.name]}
            )

        if len(chain) >= self.max_chain_length:
            logger.warning(
                "Agent chain too long (%d): %s", len(chain), " -> ".join(chain)
            )
            return AgentResponse(
                message=CHAIN_TOO_LONG_MESSAGE, metadata={AGENT_CHAIN: list(chain)}
            )

        chain = (*chain, agent.name)
        logger.info("Using agent: %s", agent.name)
        response = await self.process_with_agent(agent.name, context)

        if response.has_tool_calls:
            return _with_chain(response, chain)

        if response.next_agent and not response.skip_other_agents:
            logger.info("Switching from %s to %s", agent.name, response.next_agent)
            next_context = context.with_metadata(
                **{
                    PREVIOUS_AGENT: agent.name,
                    PREVIOUS_RESPONSE: response,
                    REQUESTED_AGENT: response.next_agent,
                }
            )
            return await self._process_with_chain_protection(next_context, chain)

        return _with_chain(response, chain)

    async def execute_multiple_agents(
        self, tasks: list[AgentTask], parallel: bool = True
    ) -> list[AgentResponse]:
        """Run named agent invocations; results come back in task order."""
        if parallel:
            return list(
                await asyncio.gather(
                    *(self.process_with_agent(t.agent_name, t.context) for t in tasks)
                )
            )

        results = []
        for task in tasks:
            results.append(await self.process_with_agent(task.agent_name, task.context))
        return results

    def _notify(self, method: str, *args: Any) -> None:
        try:
            getattr(self.observer, method)(*args)
        except Exception:
            logger.debug("Observer %s failed", method, exc_info=True)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


def _with_chain(response: AgentResponse, chain: tuple[str, ...]) -> AgentResponse:
    return dataclasses.replace(
        response, metadata={**response.metadata, AGENT_CHAIN: list(chain)}
    )
