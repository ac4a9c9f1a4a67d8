"""Typed configuration models for ccsearch runtime settings.

Precedence, highest first: init kwargs, legacy env names (``DB_DSN`` ...),
``CCSEARCH_``-prefixed env vars with ``__`` nesting, the YAML config file,
then built-in defaults.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from .sources import LegacyEnvSettingsSource

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "ccsearch" / "ccsearch.yaml"
CONFIG_FILE_ENV = "CCSEARCH_CONFIG_FILE"


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    json_output: bool = True
    service: str = "ccsearch"
    environment: str = "dev"


class HttpSettings(BaseModel):
    """Listening address for the public HTTP API."""

    host: str = "0.0.0.0"
    port: int = Field(default=8000, gt=0, lt=65536)


class InfoSettings(BaseModel):
    """Static descriptor served from ``/cc-info``."""

    name: str = "github.com/concrnt/cc-search"
    version: str = "unknown"


class ComponentNamespaceSettings(BaseModel):
    """Namespace map for grouped component settings under ``components.<kind>``."""

    model_config = ConfigDict(extra="allow")


class ComponentsSettings(BaseModel):
    """Per-component settings grouped by kind (``service``, ``substrate``)."""

    model_config = ConfigDict(extra="forbid")

    service: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )
    substrate: ComponentNamespaceSettings = Field(
        default_factory=ComponentNamespaceSettings
    )


class CcSearchSettings(BaseSettings):
    """Root runtime settings resolved from init/env/yaml/defaults sources."""

    model_config = SettingsConfigDict(
        env_prefix="CCSEARCH_",
        env_nested_delimiter="__",
        extra="ignore",
        nested_model_default_partial_update=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    info: InfoSettings = Field(default_factory=InfoSettings)
    components: ComponentsSettings = Field(default_factory=ComponentsSettings)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Layer settings sources in descending order of precedence."""
        return (
            init_settings,
            LegacyEnvSettingsSource(settings_cls),
            env_settings,
            YamlConfigSettingsSource(settings_cls),
        )


def load_settings(
    *,
    config_path: str | Path | None = None,
    **overrides: object,
) -> CcSearchSettings:
    """Load root settings, reading YAML from ``config_path`` when it exists.

    Without an explicit path, ``CCSEARCH_CONFIG_FILE`` and then
    ``~/.config/ccsearch/ccsearch.yaml`` are consulted.
    """
    resolved = _resolve_config_path(config_path)

    class _FileBackedSettings(CcSearchSettings):
        model_config = SettingsConfigDict(
            yaml_file=resolved,
            yaml_file_encoding="utf-8",
        )

    return _FileBackedSettings(**overrides)


def _resolve_config_path(config_path: str | Path | None) -> Path:
    if config_path is not None:
        return Path(config_path).expanduser()
    from_env = os.environ.get(CONFIG_FILE_ENV, "").strip()
    if from_env:
        return Path(from_env).expanduser()
    return DEFAULT_CONFIG_PATH


TComponentSettings = TypeVar("TComponentSettings", bound=BaseModel)


def resolve_component_settings(
    *,
    settings: CcSearchSettings,
    component_id: str,
    model: type[TComponentSettings],
) -> TComponentSettings:
    """Resolve one component settings object from grouped ``components`` keys.

    ``component_id`` is ``<kind>_<name>``, for example ``substrate_redis``
    resolves ``components.substrate.redis``.
    """
    raw_components = settings.components.model_dump(mode="python")
    kind, separator, name = component_id.partition("_")
    if not separator or kind not in {"service", "substrate"}:
        raise ValueError(f"unsupported component id: {component_id!r}")

    namespace = raw_components.get(kind, {})
    namespace_path = f"components.{kind}"
    if not isinstance(namespace, dict):
        raise TypeError(f"{namespace_path} must resolve to an object mapping")
    resolved = namespace.get(name, {})
    if not isinstance(resolved, dict):
        raise TypeError(f"{namespace_path}.{name} must resolve to an object mapping")
    return model.model_validate(resolved)
