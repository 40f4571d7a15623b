"""Settings and access to the Claude Code Router config file.

Two files are involved:

- ``~/.ccr-model-manager/settings.yaml``: this tool's own settings
  (where CCR's config lives, how to restart CCR, log level).
- ``~/.claude-code-router/config.json``: CCR's config, holding the
  ``Providers`` catalog and the ``Router`` slot assignments.

The CCR file is read into pydantic models for typed access. Writes go
through the raw JSON document so keys this tool does not know about are
kept as they were.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ccr_model_manager.errors import (
    ConfigNotFoundError,
    ConfigReadError,
    ConfigWriteError,
)
from ccr_model_manager.routing import (
    ROUTE_SLOTS,
    Provider,
    ProviderCatalog,
    RawRoute,
    RouteFormatError,
    RouteSlot,
    parse_route,
)

logger = logging.getLogger(__name__)


# ── Tool settings ─────────────────────────────────────────────

def get_settings_dir() -> Path:
    """Directory holding this tool's settings."""
    return Path.home() / ".ccr-model-manager"


def get_settings_path() -> Path:
    return get_settings_dir() / "settings.yaml"


def default_config_path() -> Path:
    """Default location of the CCR config file."""
    return Path.home() / ".claude-code-router" / "config.json"


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Runtime settings for the tool."""
    config_path: Path = Field(default_factory=default_config_path)
    restart_command: str = "ccr restart"
    restart_timeout: float = Field(default=30.0, gt=0)
    status_command: str = "ccr --version"
    status_timeout: float = Field(default=5.0, gt=0)
    package_name: str = "ccr-model-manager"
    log_level: str = "WARNING"

    @field_validator("config_path")
    @classmethod
    def expand_user(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level


ENV_OVERRIDES = {
    "CMM_CONFIG_PATH": "config_path",
    "CMM_LOG_LEVEL": "log_level",
}


def load_settings(
    path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> Settings:
    """Load settings from YAML, then apply environment overrides.

    Missing file means defaults. Unknown keys are ignored with a warning.

    Raises:
        ConfigReadError: If the file is unreadable, is not a YAML mapping,
            or holds values of the wrong type.
    """
    path = path or get_settings_path()
    environ = os.environ if environ is None else environ

    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigReadError(f"Failed to read settings {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigReadError(
                f"Settings file {path} must contain a mapping of setting names to values")

    for key in list(data):
        if key not in Settings.model_fields:
            logger.warning("Ignoring unknown setting %r in %s", key, path)
            data.pop(key)

    for env_var, key in ENV_OVERRIDES.items():
        if environ.get(env_var):
            data[key] = environ[env_var]

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigReadError(f"Invalid settings in {path}: {e}") from e


# ── CCR config document ──────────────────────────────────────

class ProviderEntry(BaseModel):
    """One entry of the ``Providers`` list."""
    model_config = ConfigDict(extra="allow")

    name: str = ""
    api_base_url: str = ""
    api_key: str = ""
    models: list[str] | None = None
    deprecated: bool = False


_SLOT_FIELDS: dict[RouteSlot, str] = {
    RouteSlot.DEFAULT: "default",
    RouteSlot.BACKGROUND: "background",
    RouteSlot.THINK: "think",
    RouteSlot.LONG_CONTEXT: "long_context",
    RouteSlot.WEB_SEARCH: "web_search",
}


class RouterSection(BaseModel):
    """The ``Router`` object mapping slots to ``provider,model``."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    default: str | None = None
    background: str | None = None
    think: str | None = None
    long_context: str | None = Field(default=None, alias="longContext")
    web_search: str | None = Field(default=None, alias="webSearch")

    def get(self, slot: RouteSlot) -> str | None:
        return getattr(self, _SLOT_FIELDS[slot])


class RouterConfig(BaseModel):
    """Typed view of CCR's config.json."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    providers: list[ProviderEntry] = Field(default_factory=list, alias="Providers")
    router: RouterSection | None = Field(default=None, alias="Router")

    def catalog(self) -> ProviderCatalog:
        """Engine view of the provider list."""
        return ProviderCatalog(
            Provider(
                name=p.name,
                models=tuple(p.models or ()),
                deprecated=p.deprecated,
                api_base_url=p.api_base_url,
                api_key=p.api_key,
            )
            for p in self.providers
        )

    def raw_routes(self) -> tuple[RawRoute, ...]:
        """Engine view of the five route slots, in fixed order."""
        return tuple(
            RawRoute(slot, self.router.get(slot) if self.router else None)
            for slot in ROUTE_SLOTS
        )


class ConfigStore:
    """Loads and saves the CCR config file at an explicit path."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load_document(self) -> dict[str, Any]:
        """Read the raw JSON document."""
        if not self.path.exists():
            raise ConfigNotFoundError(
                f"CCR config not found at {self.path}; make sure CCR is "
                "installed and configured",
                {"path": str(self.path)},
            )
        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigReadError(f"Failed to read config file: {e}") from e

        if not isinstance(document, dict):
            raise ConfigReadError("Failed to read config file: top level is not an object")
        logger.debug("Loaded CCR config from %s", self.path)
        return document

    def load(self) -> RouterConfig:
        return self._validate(self.load_document())

    def save_document(self, document: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            raise ConfigWriteError(f"Failed to update config file: {e}") from e
        logger.debug("Wrote CCR config to %s", self.path)

    def update_routes(
        self,
        slots: Iterable[RouteSlot],
        provider_name: str,
        model_name: str,
    ) -> RouterConfig:
        """Point the given slots at ``provider,model`` and save.

        Returns:
            The updated config.
        """
        document = self.load_document()
        router = document.get("Router")
        if not isinstance(router, dict):
            router = {}
        router = dict(router)

        route_value = f"{provider_name},{model_name}"
        updated_keys = [RouteSlot(slot).value for slot in slots]
        for key in updated_keys:
            router[key] = route_value
        document["Router"] = router

        updated = self._validate(document)
        self.save_document(document)
        logger.info("Routes %s set to %s", ", ".join(updated_keys), route_value)
        return updated

    def _validate(self, document: dict[str, Any]) -> RouterConfig:
        try:
            return RouterConfig.model_validate(document)
        except ValidationError as e:
            raise ConfigReadError(f"Config file has an invalid structure: {e}") from e


# ── Structural checks ────────────────────────────────────────

@dataclass
class DocumentCheck:
    """Errors and warnings from a structural check of the config."""
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def check_document(config: RouterConfig) -> DocumentCheck:
    """Check the config for missing fields, duplicates and bad routes."""
    result = DocumentCheck()

    if "providers" not in config.model_fields_set:
        result.errors.append("Missing Providers section")
    if config.router is None:
        result.errors.append("Missing Router section")

    seen: dict[str, int] = {}
    for index, provider in enumerate(config.providers):
        prefix = f"Providers[{index}]"
        for attr in ("name", "api_base_url", "api_key"):
            if not getattr(provider, attr):
                result.errors.append(f"{prefix}: missing '{attr}'")
        if provider.models is None:
            result.errors.append(f"{prefix}: missing 'models' list")
        elif not provider.models:
            result.warnings.append(f"{prefix}: models list is empty")

        if provider.name:
            if provider.name in seen:
                result.errors.append(
                    f"{prefix}: duplicate provider name '{provider.name}' "
                    f"(first defined at Providers[{seen[provider.name]}])"
                )
            else:
                seen[provider.name] = index

    if not config.providers:
        result.warnings.append("No providers configured")
    elif all(p.deprecated for p in config.providers):
        result.warnings.append("No active providers (all providers are deprecated)")

    if config.router is not None:
        for slot in ROUTE_SLOTS:
            value = config.router.get(slot)
            if not value:
                result.warnings.append(f"Router.{slot.value}: not configured")
                continue
            try:
                parse_route(value)
            except RouteFormatError as e:
                result.errors.append(f"Router.{slot.value}: {e}")

    return result
