"""Configuration: Pydantic models for switchboard settings."""

from __future__ import annotations

import json
import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    """LLM transport configuration.

    Model names use litellm's provider-prefix format:
        "openai/gpt-4o-mini"
        "lm_studio/qwen2.5-7b-instruct"
        "ollama/llama3.1"
    """

    model: str = Field(default="lm_studio/local-model")
    temperature: float | None = Field(default=0.3)
    max_tokens: int | None = Field(default=None)
    api_base: str | None = Field(
        default=None, description="Endpoint override for local servers"
    )


class DispatchConfig(BaseModel):
    """Agent dispatch configuration."""

    max_chain_length: int = Field(
        default=3, ge=1, description="Maximum number of agents in one delegation chain"
    )
    default_agent: str | None = Field(
        default="reasoning",
        description="Agent used when no registered agent claims a request",
    )
    observe: bool = Field(
        default=False, description="Record per-request agent observations"
    )
    debug_agents: bool = Field(
        default=False,
        description="Log the observation report after every top-level request",
    )


class SwitchboardConfig(BaseModel):
    """Top-level switchboard configuration."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    agents_dir: str = Field(
        default="agents", description="Directory for markdown agent definitions"
    )
    workspace_dir: str = Field(
        default=".", description="Root directory for file-system and command tools"
    )

    @classmethod
    def load(cls, config_path: str | None = None) -> SwitchboardConfig:
        """Load config from file, env vars, or defaults.

        Priority: env vars > config file > defaults.

        Env vars:
            SWITCHBOARD_MODEL             - Model (litellm format with provider prefix)
            SWITCHBOARD_API_BASE          - Endpoint override
            SWITCHBOARD_TEMPERATURE       - Sampling temperature
            SWITCHBOARD_MAX_CHAIN_LENGTH  - Delegation chain limit
            SWITCHBOARD_DEFAULT_AGENT     - Fallback agent name ("" disables it)
            SWITCHBOARD_AGENTS_DIR        - Markdown agent directory
            SWITCHBOARD_WORKSPACE         - Tool workspace root
            DEBUG_AGENTS                  - "true" to log observation reports
        """
        load_dotenv(override=True)

        config_data: dict[str, Any] = {}
        if config_path and os.path.exists(config_path):
            with open(config_path) as f:
                config_data = json.load(f)

        llm = config_data.get("llm", {})
        env_model = os.environ.get("SWITCHBOARD_MODEL")
        if env_model:
            llm["model"] = env_model

        env_api_base = os.environ.get("SWITCHBOARD_API_BASE")
        if env_api_base:
            llm["api_base"] = env_api_base

        env_temperature = os.environ.get("SWITCHBOARD_TEMPERATURE")
        if env_temperature:
            llm["temperature"] = float(env_temperature)

        if llm:
            config_data["llm"] = llm

        dispatch = config_data.get("dispatch", {})
        env_chain = os.environ.get("SWITCHBOARD_MAX_CHAIN_LENGTH")
        if env_chain:
            dispatch["max_chain_length"] = int(env_chain)

        env_default = os.environ.get("SWITCHBOARD_DEFAULT_AGENT")
        if env_default is not None:
            dispatch["default_agent"] = env_default.strip() or None

        if os.environ.get("DEBUG_AGENTS", "").lower() == "true":
            dispatch["debug_agents"] = True
            dispatch["observe"] = True

        if dispatch:
            config_data["dispatch"] = dispatch

        env_agents_dir = os.environ.get("SWITCHBOARD_AGENTS_DIR")
        if env_agents_dir:
            config_data["agents_dir"] = env_agents_dir

        env_workspace = os.environ.get("SWITCHBOARD_WORKSPACE")
        if env_workspace:
            config_data["workspace_dir"] = env_workspace

        return cls.model_validate(config_data)
