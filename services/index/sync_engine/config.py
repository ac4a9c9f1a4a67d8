"""Pydantic settings for the index sync engine."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.ccsearch_shared.config import CcSearchSettings, resolve_component_settings

SERVICE_COMPONENT_ID = "service_sync"


class SyncEngineSettings(BaseModel):
    """Polling cadence, page sizing and checkpoint key for sync cycles."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = True
    interval_seconds: float = Field(default=10.0, gt=0)
    page_size: int = Field(default=512, gt=0)
    page_delay_seconds: float = Field(default=1.0, ge=0)
    checkpoint_key: str = "ccsearch:readitr"

    @field_validator("checkpoint_key", mode="before")
    @classmethod
    def _validate_checkpoint_key(cls, value: object) -> object:
        """Reject blank checkpoint keys."""
        if isinstance(value, str):
            normalized = value.strip()
            if normalized == "":
                raise ValueError("checkpoint_key must be non-empty")
            return normalized
        return value


def resolve_sync_engine_settings(settings: CcSearchSettings) -> SyncEngineSettings:
    """Resolve sync settings from ``components.service.sync``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=SyncEngineSettings,
    )
