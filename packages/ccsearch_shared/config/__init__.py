"""Public API for shared ccsearch configuration utilities."""

from .models import (
    CONFIG_FILE_ENV,
    DEFAULT_CONFIG_PATH,
    CcSearchSettings,
    ComponentsSettings,
    HttpSettings,
    InfoSettings,
    LoggingSettings,
    load_settings,
    resolve_component_settings,
)
from .sources import LEGACY_ENV_MAPPING, LegacyEnvSettingsSource

__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULT_CONFIG_PATH",
    "LEGACY_ENV_MAPPING",
    "CcSearchSettings",
    "ComponentsSettings",
    "HttpSettings",
    "InfoSettings",
    "LegacyEnvSettingsSource",
    "LoggingSettings",
    "load_settings",
    "resolve_component_settings",
]
