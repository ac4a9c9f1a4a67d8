"""Pydantic settings for the timeline search service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from packages.ccsearch_shared.config import CcSearchSettings, resolve_component_settings

SERVICE_COMPONENT_ID = "service_search"


class SearchServiceSettings(BaseModel):
    """Result window and ordering for timeline searches."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    result_limit: int = Field(default=10, gt=0, le=1000)
    timeline_sort: tuple[str, ...] = ("signedAt:desc",)
    timeline_attribute: str = "timelines"


def resolve_search_service_settings(
    settings: CcSearchSettings,
) -> SearchServiceSettings:
    """Resolve search settings from ``components.service.search``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=SearchServiceSettings,
    )
