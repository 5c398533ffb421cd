"""Agent system: contract, registry/dispatcher, and instrumentation."""

from switchboard.agent.base import AgentContext, AgentResponse, BaseAgent
from switchboard.agent.definition import AgentDefinition, PromptAgent, discover_agents
from switchboard.agent.llm import LLMAgent
from switchboard.agent.metrics import AgentMetrics, AgentMetricsTracker
from switchboard.agent.observer import AgentObserver, Observation, Phase
from switchboard.agent.registry import AgentInfo, AgentRegistry, AgentTask

__all__ = [
    "AgentContext",
    "AgentResponse",
    "BaseAgent",
    "AgentDefinition",
    "PromptAgent",
    "discover_agents",
    "LLMAgent",
    "AgentMetrics",
    "AgentMetricsTracker",
    "AgentObserver",
    "Observation",
    "Phase",
    "AgentInfo",
    "AgentRegistry",
    "AgentTask",
]
