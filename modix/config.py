from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Tuple

from .defaults import CONFIG_VERSION, DEFAULT_MODEL, DEFAULT_VENDOR, PRESET_VENDORS
from .errors import AlreadyExistsError, InvalidConfigError, ModixError, NotFoundError


SELECTION_FIELDS = ("current_vendor", "current_model", "default_vendor", "default_model")


def _known_fields(cls, data, what: str) -> dict:
    """Keep the keys `cls` declares; anything but a JSON object is rejected."""
    if not isinstance(data, dict):
        raise InvalidConfigError(f"{what} must be a JSON object")
    return {key: value for key, value in data.items() if key in cls.__annotations__}


def _require_type(values: dict, key: str, expected: type, label: str) -> None:
    if key in values and not isinstance(values[key], expected):
        raise InvalidConfigError(f"'{key}' must be {label}")


@dataclass
class VendorConfig:
    """An LLM provider: endpoint, key and the models it serves."""

    company: str = ""
    api_endpoint: str = ""
    api_key: str = ""
    models: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "VendorConfig":
        values = _known_fields(cls, data, "vendor")
        for key in ("company", "api_endpoint", "api_key"):
            _require_type(values, key, str, "a string")
        models = values.pop("models", None) or []
        if not isinstance(models, list) or not all(isinstance(model, str) for model in models):
            raise InvalidConfigError("vendor models must be a list of strings")
        return cls(models=list(models), **values)

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def has_endpoint(self) -> bool:
        return bool(self.api_endpoint)


@dataclass
class AgentConfig:
    """A coding assistant tracked by modix."""

    name: str = ""
    provider: str = ""
    config_path: str = ""
    enabled: bool = True
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "AgentConfig":
        values = _known_fields(cls, data, "agent")
        for key in ("name", "provider", "config_path", "description"):
            _require_type(values, key, str, "a string")
        _require_type(values, "enabled", bool, "a boolean")
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ModelInfo:
    """Flattened view of one model and the vendor serving it."""

    vendor: str
    model: str
    company: str
    endpoint: str
    has_api_key: bool
    has_endpoint: bool


@dataclass
class ConfigStatus:
    total_vendors: int
    total_models: int
    configured_vendors: int
    current_model: str


@dataclass
class ModixConfig:
    """Vendors, models, agents and the current/default selection.

    Model names are unique across the whole configuration, not only within
    a vendor. Every mutation below keeps that invariant; :meth:`validate`
    checks it together with the current/default selection when a file is
    loaded.
    """

    current_vendor: str = DEFAULT_VENDOR
    current_model: str = DEFAULT_MODEL
    default_vendor: str = DEFAULT_VENDOR
    default_model: str = DEFAULT_MODEL
    current_agent: str = ""
    vendors: Dict[str, VendorConfig] = field(default_factory=dict)
    agents: Dict[str, AgentConfig] = field(default_factory=dict)
    config_version: str = CONFIG_VERSION
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    # -- construction -------------------------------------------------------

    @classmethod
    def default(cls) -> "ModixConfig":
        """First-run config: Anthropic serving the built-in Claude model."""
        config = cls()
        config.add_vendor(DEFAULT_VENDOR, VendorConfig(company="Anthropic", models=[DEFAULT_MODEL]))
        return config

    @classmethod
    def with_presets(cls) -> "ModixConfig":
        """Config pre-populated with every known vendor preset."""
        config = cls()
        for vendor_id, preset in PRESET_VENDORS.items():
            config.add_vendor(vendor_id, VendorConfig.from_dict(copy.deepcopy(preset)))
        return config

    @classmethod
    def from_dict(cls, data: dict) -> "ModixConfig":
        """Build a config from parsed JSON, ignoring unknown keys."""
        values = _known_fields(cls, data, "configuration root")
        for key in SELECTION_FIELDS + ("current_agent", "config_version"):
            _require_type(values, key, str, "a string")
        for key in ("created_at", "updated_at"):
            if values.get(key) is not None:
                _require_type(values, key, str, "a string")

        vendors = values.pop("vendors", None) or {}
        agents = values.pop("agents", None) or {}
        if not isinstance(vendors, dict) or not isinstance(agents, dict):
            raise InvalidConfigError("'vendors' and 'agents' must be JSON objects")
        config = cls(**values)
        for name, item in vendors.items():
            try:
                config.vendors[name] = VendorConfig.from_dict(item)
            except InvalidConfigError as exc:
                raise InvalidConfigError(f"vendor '{name}': {exc}") from exc
        for name, item in agents.items():
            try:
                config.agents[name] = AgentConfig.from_dict(item)
            except InvalidConfigError as exc:
                raise InvalidConfigError(f"agent '{name}': {exc}") from exc
        return config

    def to_dict(self) -> dict:
        return asdict(self)

    # -- vendors and models -------------------------------------------------

    def add_vendor(self, vendor: str, config: VendorConfig) -> None:
        """Insert or overwrite a vendor; repeated model names are collapsed."""
        config.models = list(dict.fromkeys(config.models))
        for model in config.models:
            owner = self.find_vendor_for_model(model)
            if owner is not None and owner != vendor:
                raise AlreadyExistsError(f"model '{model}' already exists in vendor '{owner}'")
        self.vendors[vendor] = config

    def add_model_to_vendor(self, vendor: str, model: str) -> bool:
        """Append a model to a vendor; returns False when it was already there."""
        vendor_config = self.vendors.get(vendor)
        if vendor_config is None:
            raise NotFoundError(f"vendor '{vendor}' not found")
        if model in vendor_config.models:
            return False
        owner = self.find_vendor_for_model(model)
        if owner is not None:
            raise AlreadyExistsError(f"model '{model}' already exists in vendor '{owner}'")
        vendor_config.models.append(model)
        return True

    def remove_vendor(self, vendor: str) -> None:
        self.vendors.pop(vendor, None)

    def remove_model(self, vendor: str, model: str) -> bool:
        """Remove a model from a vendor.

        When the removed model was the current selection, the current pair
        falls back to the default pair. Returns True in that case.
        """
        vendor_config = self.vendors.get(vendor)
        if vendor_config is None:
            raise NotFoundError(f"vendor '{vendor}' not found")
        if model not in vendor_config.models:
            raise NotFoundError(f"model '{model}' not found in vendor '{vendor}'")
        if vendor == self.default_vendor and model == self.default_model:
            raise ModixError(f"cannot remove default model '{model}@{vendor}'")

        vendor_config.models.remove(model)
        if vendor == self.current_vendor and model == self.current_model:
            self.current_vendor = self.default_vendor
            self.current_model = self.default_model
            return True
        return False

    def set_current_vendor_and_model(self, vendor: str, model: str) -> None:
        vendor_config = self.vendors.get(vendor)
        if vendor_config is None:
            raise NotFoundError(f"vendor '{vendor}' not found in configuration")
        if model not in vendor_config.models:
            raise NotFoundError(f"model '{model}' not found for vendor '{vendor}'")
        self.current_vendor = vendor
        self.current_model = model

    # -- queries --------------------------------------------------------------

    def get_vendor(self, vendor: str) -> Optional[VendorConfig]:
        return self.vendors.get(vendor)

    def get_model(self, vendor: str, model: str) -> Optional[VendorConfig]:
        """Return the vendor config when `model` is served by `vendor`."""
        vendor_config = self.vendors.get(vendor)
        if vendor_config is not None and model in vendor_config.models:
            return vendor_config
        return None

    def get_current_model(self) -> Optional[Tuple[str, VendorConfig]]:
        vendor_config = self.get_model(self.current_vendor, self.current_model)
        if vendor_config is None:
            return None
        return self.current_model, vendor_config

    def find_vendor_for_model(self, model: str) -> Optional[str]:
        for vendor, vendor_config in self.vendors.items():
            if model in vendor_config.models:
                return vendor
        return None

    def all_models(self) -> List[str]:
        return [model for vendor_config in self.vendors.values() for model in vendor_config.models]

    def models_by_vendor(self, vendor: str) -> List[str]:
        vendor_config = self.vendors.get(vendor)
        return list(vendor_config.models) if vendor_config else []

    def model_infos(self) -> List[ModelInfo]:
        """All models sorted by vendor, then model name."""
        infos = [
            ModelInfo(
                vendor=vendor,
                model=model,
                company=vendor_config.company,
                endpoint=vendor_config.api_endpoint,
                has_api_key=vendor_config.has_api_key,
                has_endpoint=vendor_config.has_endpoint,
            )
            for vendor, vendor_config in self.vendors.items()
            for model in vendor_config.models
        ]
        return sorted(infos, key=lambda info: (info.vendor, info.model))

    def is_vendor_configured(self, vendor: str) -> bool:
        vendor_config = self.vendors.get(vendor)
        return bool(vendor_config and vendor_config.has_endpoint and vendor_config.has_api_key)

    def status(self) -> ConfigStatus:
        return ConfigStatus(
            total_vendors=len(self.vendors),
            total_models=len(self.all_models()),
            configured_vendors=sum(1 for vendor in self.vendors if self.is_vendor_configured(vendor)),
            current_model=self.current_model,
        )

    # -- agents ---------------------------------------------------------------

    def add_agent(self, agent: str, config: AgentConfig) -> None:
        if agent in self.agents:
            raise AlreadyExistsError(f"agent '{agent}' already configured")
        self.agents[agent] = config

    def remove_agent(self, agent: str) -> None:
        if agent not in self.agents:
            raise NotFoundError(f"agent '{agent}' not found")
        del self.agents[agent]
        if self.current_agent == agent:
            self.current_agent = ""

    def set_current_agent(self, agent: str) -> None:
        if agent not in self.agents:
            raise NotFoundError(f"agent '{agent}' not configured. Add it first with 'modix agent add {agent}'")
        self.current_agent = agent

    # -- validation -----------------------------------------------------------

    def validate(self) -> None:
        """Raise InvalidConfigError when a load-time invariant is broken."""
        if not self.vendors:
            raise InvalidConfigError("no vendors configured")

        for role, vendor, model in (
            ("current", self.current_vendor, self.current_model),
            ("default", self.default_vendor, self.default_model),
        ):
            if vendor not in self.vendors:
                raise InvalidConfigError(f"{role} vendor '{vendor}' not found in configuration")
            if model not in self.vendors[vendor].models:
                raise InvalidConfigError(f"{role} model '{model}' not available for vendor '{vendor}'")

        seen: Dict[str, str] = {}
        for vendor, vendor_config in self.vendors.items():
            for model in vendor_config.models:
                if model in seen:
                    raise InvalidConfigError(
                        f"model '{model}' is listed under both '{seen[model]}' and '{vendor}'"
                    )
                seen[model] = vendor

    def health_issues(self) -> List[str]:
        """Non-fatal problems worth reporting in `modix check modix`."""
        issues = []
        if not self.vendors:
            issues.append("Missing vendors section")

        for vendor, vendor_config in self.vendors.items():
            # Claude Code ships with the Anthropic backend preconfigured.
            if vendor.lower() == "anthropic":
                continue
            if not vendor_config.api_endpoint:
                issues.append(f"Vendor '{vendor}' has empty API endpoint")
            if not vendor_config.api_key:
                issues.append(f"Vendor '{vendor}' has empty API key")

        if self.current_vendor not in self.vendors:
            issues.append("Current vendor not found in configuration")
        elif self.get_current_model() is None:
            issues.append(f"Current model '{self.current_model}' not found in vendor '{self.current_vendor}' models")
        return issues
