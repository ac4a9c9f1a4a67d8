"""Settings source mapping legacy deployment env names onto config paths.

Existing deployments configure the process with bare names such as
``DB_DSN`` and ``MEILISEARCH_URL``. Those keep working alongside the
``CCSEARCH_``-prefixed nested form.
"""

from __future__ import annotations

import os
from typing import Any, Mapping

from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

LEGACY_ENV_MAPPING: dict[str, str] = {
    "DB_DSN": "components.substrate.postgres.url",
    "REDIS_URL": "components.substrate.redis.url",
    "MEILISEARCH_URL": "components.substrate.meilisearch.url",
    "MEILISEARCH_KEY": "components.substrate.meilisearch.api_key",
    "MEILISEARCH_IDX": "components.substrate.meilisearch.index_name",
    "PORT": "http.port",
}


def _set_nested_value(target: dict[str, Any], path: str, value: Any) -> None:
    """Set a dotted-path value on a nested mapping, creating containers."""
    parts = path.split(".")
    cursor = target
    for key in parts[:-1]:
        node = cursor.get(key)
        if not isinstance(node, dict):
            node = {}
            cursor[key] = node
        cursor = node
    cursor[parts[-1]] = value


class LegacyEnvSettingsSource(PydanticBaseSettingsSource):
    """Map unprefixed legacy environment variables into nested settings."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        *,
        environ: Mapping[str, str] | None = None,
        mapping: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(settings_cls)
        self._environ = environ
        self._mapping = dict(mapping or LEGACY_ENV_MAPPING)

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        # Values are produced for whole nested paths in ``__call__``.
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        env = self._environ if self._environ is not None else os.environ
        data: dict[str, Any] = {}
        for env_key, path in self._mapping.items():
            raw = env.get(env_key)
            if raw is None or raw.strip() == "":
                continue
            _set_nested_value(data, path, raw.strip())
        return data
