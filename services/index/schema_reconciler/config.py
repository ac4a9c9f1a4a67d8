"""Pydantic settings for declared search index attributes."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from packages.ccsearch_shared.config import CcSearchSettings, resolve_component_settings

SERVICE_COMPONENT_ID = "service_schema"


class SchemaReconcilerSettings(BaseModel):
    """Declared filterable and sortable attribute sets for the index."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    filterable_attributes: tuple[str, ...] = Field(default=("signer", "timelines"))
    sortable_attributes: tuple[str, ...] = Field(default=("signedAt",))


def resolve_schema_reconciler_settings(
    settings: CcSearchSettings,
) -> SchemaReconcilerSettings:
    """Resolve declared attributes from ``components.service.schema``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=SchemaReconcilerSettings,
    )
