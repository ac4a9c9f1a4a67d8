"""Pydantic settings for the Meilisearch substrate."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.ccsearch_shared.config import CcSearchSettings, resolve_component_settings

RESOURCE_COMPONENT_ID = "substrate_meilisearch"


class MeilisearchSettings(BaseModel):
    """Meilisearch endpoint, credentials, index name and task timeouts."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = "http://localhost:7700"
    api_key: str | None = None
    index_name: str = "messages"
    primary_key: str = "id"
    timeout_seconds: int = Field(default=10, gt=0)
    task_timeout_seconds: float = Field(default=30.0, gt=0)
    task_poll_interval_ms: int = Field(default=50, gt=0)

    @field_validator("url", "index_name", "primary_key")
    @classmethod
    def _require_non_blank(cls, value: str) -> str:
        candidate = value.strip()
        if candidate == "":
            raise ValueError("substrate.meilisearch values must not be blank")
        return candidate

    @field_validator("api_key")
    @classmethod
    def _blank_key_is_none(cls, value: str | None) -> str | None:
        if value is None or value.strip() == "":
            return None
        return value.strip()


def resolve_meilisearch_settings(settings: CcSearchSettings) -> MeilisearchSettings:
    """Resolve settings from ``components.substrate.meilisearch``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=MeilisearchSettings,
    )
