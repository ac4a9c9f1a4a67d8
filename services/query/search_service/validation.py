"""Request validation for timeline search inputs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class SearchRequest(BaseModel):
    """Validated search inputs; the query is checked before the timeline."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    query: str
    timeline: str
    offset: int = 0

    @field_validator("query", mode="before")
    @classmethod
    def _require_query(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and value == ""):
            raise ValueError("query is empty")
        return value

    @field_validator("timeline", mode="before")
    @classmethod
    def _require_timeline(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and value == ""):
            raise ValueError("timeline is empty")
        return value

    @field_validator("offset", mode="before")
    @classmethod
    def _clamp_offset(cls, value: object) -> object:
        return parse_offset(value)


def parse_offset(raw: object) -> int:
    """Return a non-negative offset; absent or non-numeric input is 0."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        return max(raw, 0)
    try:
        return max(int(str(raw).strip()), 0)
    except ValueError:
        return 0


def timeline_filter(timeline: str, *, attribute: str = "timelines") -> str:
    """Build an exact-membership filter with the value quoted and escaped."""
    escaped = timeline.replace("\\", "\\\\").replace('"', '\\"')
    return f'{attribute} = "{escaped}"'
