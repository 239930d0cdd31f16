import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import ModixConfig
from .errors import InvalidConfigError
from .fileio import atomic_write_json, read_json

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MODIX_CONFIG"


def default_config_path() -> Path:
    """Resolve the settings file: $MODIX_CONFIG, else ~/.modix/settings.json."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    try:
        home = Path.home()
    except RuntimeError:
        return Path(".") / "modix" / "settings.json"
    return home / ".modix" / "settings.json"


def _now() -> str:
    return datetime.now().astimezone().isoformat()


class ConfigManager:
    """Loads and saves the modix settings file (JSON version)."""

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = Path(config_file).expanduser() if config_file else default_config_path()

    @property
    def path(self) -> Path:
        return self.config_file

    def exists(self) -> bool:
        return self.config_file.exists()

    def load(self) -> ModixConfig:
        """Load and validate the config, creating the default one on first use."""
        if not self.config_file.exists():
            logger.debug("no config at %s, creating default", self.config_file)
            config = ModixConfig.default()
            self.save(config)
            return config

        data = read_json(self.config_file)
        try:
            config = ModixConfig.from_dict(data)
            config.validate()
        except InvalidConfigError as exc:
            raise InvalidConfigError(f"invalid configuration in {self.config_file}: {exc}") from exc
        logger.debug("loaded config from %s", self.config_file)
        return config

    def save(self, config: ModixConfig) -> None:
        """Write the full config, refreshing `updated_at` and setting `created_at` once."""
        now = _now()
        config.updated_at = now
        if not config.created_at:
            config.created_at = now
        atomic_write_json(self.config_file, config.to_dict())

    def reset(self) -> ModixConfig:
        """Overwrite the config with the vendor presets."""
        config = ModixConfig.with_presets()
        self.save(config)
        return config
