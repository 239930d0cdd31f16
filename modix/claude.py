"""Keep Claude Code's settings.json pointed at the selected backend.

Only two keys of the settings file are managed here: the ``env`` block that
redirects Claude Code to an Anthropic-compatible endpoint, and the
``companyAnnouncements`` list seeded when the file is first created. Every
other key the user keeps in that file is preserved untouched.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .config import ModixConfig
from .defaults import API_TIMEOUT_MS, DISABLE_NONESSENTIAL_TRAFFIC, WELCOME_ANNOUNCEMENT
from .errors import ConfigIOError, InvalidConfigError, NotFoundError
from .fileio import atomic_write_json, read_json

logger = logging.getLogger(__name__)


def claude_settings_path(override: Optional[Path] = None) -> Path:
    """Return ~/.claude/settings.json unless an explicit path is given."""
    if override:
        return Path(override).expanduser()
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise ConfigIOError(f"could not determine home directory: {exc}") from exc
    return home / ".claude" / "settings.json"


def is_claude_configured(path: Optional[Path] = None) -> bool:
    return claude_settings_path(path).exists()


def load_claude_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the settings map; a missing or blank file yields an empty dict.

    Any other non-object content is an error so the file is never replaced.
    """
    settings_path = claude_settings_path(path)
    if not settings_path.exists():
        return {}
    settings = read_json(settings_path, empty={})
    if not isinstance(settings, dict):
        raise InvalidConfigError(f"{settings_path} must contain a JSON object")
    return settings


def save_claude_settings(settings: Dict[str, Any], path: Optional[Path] = None) -> None:
    atomic_write_json(claude_settings_path(path), settings, mode=0o600)


def is_claude_model(model: str, vendor: str) -> bool:
    """Anthropic backends run on Claude Code's built-in defaults."""
    return "claude" in model.lower() or "anthropic" in vendor.lower()


def build_env(endpoint: str, api_key: str, model: str) -> Dict[str, Any]:
    return {
        "ANTHROPIC_BASE_URL": endpoint,
        "ANTHROPIC_AUTH_TOKEN": api_key,
        "API_TIMEOUT_MS": API_TIMEOUT_MS,
        "CLAUDE_CODE_DISABLE_NONESSENTIAL_TRAFFIC": DISABLE_NONESSENTIAL_TRAFFIC,
        "ANTHROPIC_MODEL": model,
        "ANTHROPIC_SMALL_FAST_MODEL": model,
        "ANTHROPIC_DEFAULT_SONNET_MODEL": model,
        "ANTHROPIC_DEFAULT_OPUS_MODEL": model,
        "ANTHROPIC_DEFAULT_HAIKU_MODEL": model,
    }


def update_claude_env_config(
    config: ModixConfig,
    model: str,
    vendor: str,
    path: Optional[Path] = None,
) -> Dict[str, Any]:
    """Rewrite the settings so Claude Code talks to `model` at `vendor`.

    Anthropic models drop the ``env`` block entirely; every other vendor
    gets a full block built from its endpoint and key. Returns the written
    settings.
    """
    vendor_config = config.get_model(vendor, model)
    if vendor_config is None:
        raise NotFoundError(f"model '{model}' not found in configuration for vendor '{vendor}'")

    settings = load_claude_settings(path)
    if not settings:
        settings["companyAnnouncements"] = [WELCOME_ANNOUNCEMENT]

    if is_claude_model(model, vendor):
        settings.pop("env", None)
        logger.debug("using official Claude backend for %s@%s", model, vendor)
    else:
        settings["env"] = build_env(vendor_config.api_endpoint, vendor_config.api_key, model)
        logger.debug("pointing Claude Code at %s for %s@%s", vendor_config.api_endpoint, model, vendor)

    save_claude_settings(settings, path)
    return settings
