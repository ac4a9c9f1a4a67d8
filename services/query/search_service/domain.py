"""Public response contracts for timeline search."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SearchHit(BaseModel):
    """One matching record reduced to its id and signer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    owner: str


class LegacySearchResult(BaseModel):
    """Response body of the unversioned search endpoint."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: Literal["ok"] = "ok"
    content: list[SearchHit] = Field(default_factory=list)


class TimelineSearchResult(LegacySearchResult):
    """Versioned response body echoing the applied result window."""

    limit: int
    offset: int
