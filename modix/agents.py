import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .claude import claude_settings_path, update_claude_env_config
from .config import AgentConfig, ModixConfig
from .errors import ModixError, NotFoundError


@dataclass(frozen=True)
class AgentInfo:
    """Static metadata for a coding assistant modix knows how to manage."""

    name: str
    provider: str
    config_path: str
    description: str


SUPPORTED_AGENTS: Dict[str, AgentInfo] = {
    "claude-code": AgentInfo(
        name="Claude Code",
        provider="Anthropic",
        config_path="~/.claude/settings.json",
        description="Anthropic's Claude Code assistant",
    ),
    "gemini-cli": AgentInfo(
        name="Gemini CLI",
        provider="Google",
        config_path="~/.config/gemini-cli/settings.json",
        description="Google's Gemini CLI (coming soon)",
    ),
    "codex": AgentInfo(
        name="Codex",
        provider="OpenAI",
        config_path="~/.codex/config.json",
        description="OpenAI's Codex (coming soon)",
    ),
}

# Check result levels, rendered as ✓ / ⚠ / ✗ by the UI.
OK = "ok"
WARN = "warn"
FAIL = "fail"


def expand_path(path: str) -> str:
    return os.path.expanduser(path)


def get_agent_info(agent: str) -> AgentInfo:
    info = SUPPORTED_AGENTS.get(agent)
    if info is None:
        supported = ", ".join(sorted(SUPPORTED_AGENTS))
        raise ModixError(f"unsupported agent '{agent}'. Supported agents: {supported}")
    return info


def _require_configured(config: ModixConfig, agent: str) -> AgentConfig:
    agent_config = config.agents.get(agent)
    if agent_config is None:
        raise NotFoundError(f"agent '{agent}' not configured. Add it first with 'modix agent add {agent}'")
    return agent_config


def add_agent(config: ModixConfig, agent: str) -> AgentConfig:
    info = get_agent_info(agent)
    agent_config = AgentConfig(
        name=info.name,
        provider=info.provider,
        config_path=info.config_path,
        enabled=True,
        description=info.description,
    )
    config.add_agent(agent, agent_config)
    return agent_config


def switch_agent(config: ModixConfig, agent: str) -> AgentConfig:
    get_agent_info(agent)
    agent_config = _require_configured(config, agent)
    config.set_current_agent(agent)
    return agent_config


def configure_agent(config: ModixConfig, agent: str, settings_path: Optional[Path] = None) -> AgentConfig:
    """Point an agent at the current vendor/model."""
    get_agent_info(agent)
    agent_config = _require_configured(config, agent)
    if not config.current_model or not config.current_vendor:
        raise ModixError("no LLM model selected. Use 'modix model switch <model>' first")

    if agent == "claude-code":
        update_claude_env_config(config, config.current_model, config.current_vendor, settings_path)
        return agent_config
    raise ModixError(f"{SUPPORTED_AGENTS[agent].name} configuration not yet implemented")


def agent_rows(config: ModixConfig) -> List[Tuple[str, str, str, str, str]]:
    """Rows for `modix agent list`: name, provider, model, status, config file present."""
    current_model = config.current_model or "None"
    rows = []
    for agent, agent_config in sorted(config.agents.items()):
        status = "Enabled" if agent_config.enabled else "Disabled"
        config_exists = "Yes" if Path(expand_path(agent_config.config_path)).exists() else "No"
        rows.append((agent, agent_config.provider, current_model, status, config_exists))
    return rows


def check_agent(
    config: ModixConfig,
    agent: str,
    settings_path: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> List[Tuple[str, str]]:
    """Diagnose an agent; returns (level, message) pairs."""
    get_agent_info(agent)
    environ = os.environ if environ is None else environ

    agent_config = config.agents.get(agent)
    if agent_config is None:
        return [(FAIL, f"Agent '{agent}' not configured in modix")]

    results = [
        (OK, f"Agent '{agent}' configured in modix"),
        (OK, f"Provider: {agent_config.provider}, enabled: {agent_config.enabled}"),
    ]

    expanded = expand_path(agent_config.config_path)
    if Path(expanded).exists():
        results.append((OK, f"Config file exists: {expanded}"))
    else:
        results.append((FAIL, f"Config file not found: {expanded}"))

    if config.current_model:
        results.append((OK, f"Current LLM model: {config.current_model}@{config.current_vendor}"))
    else:
        results.append((FAIL, "No LLM model selected"))

    if agent == "claude-code":
        if claude_settings_path(settings_path).parent.exists():
            results.append((OK, "Claude Code installation detected"))
        else:
            results.append((WARN, "Claude Code installation not found"))

        if environ.get("ANTHROPIC_API_KEY"):
            results.append((OK, "ANTHROPIC_API_KEY environment variable set"))
        else:
            results.append((WARN, "ANTHROPIC_API_KEY environment variable not set"))
    return results
