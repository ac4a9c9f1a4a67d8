"""Domain contracts for document envelopes, searchable records and cycles."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


def to_epoch_ms(value: object) -> object:
    """Coerce an RFC 3339 timestamp string or integer into epoch milliseconds.

    Other values are returned unchanged so field validation reports them.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _EXCESS_FRACTION.sub(r"\1", text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"signedAt is not an RFC 3339 timestamp: {value!r}") from exc
    else:
        return value
    if parsed.tzinfo is None:
        raise ValueError("signedAt must carry a UTC offset")
    return (parsed - _EPOCH) // _ONE_MS


class DocumentEnvelope(BaseModel):
    """Generic signed-document shape read before type-specific parsing."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    type: str
    signed_at: int = Field(alias="signedAt")
    signer: str = ""
    schema_url: str = Field(default="", alias="schema")
    timelines: list[str] = Field(default_factory=list)
    body: Any = None

    @field_validator("signed_at", mode="before")
    @classmethod
    def _parse_signed_at(cls, value: object) -> object:
        return to_epoch_ms(value)

    @field_validator("signer", "schema_url", mode="before")
    @classmethod
    def _null_text_is_empty(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("timelines", mode="before")
    @classmethod
    def _null_timelines_is_empty(cls, value: object) -> object:
        return [] if value is None else value


class MessageDocument(DocumentEnvelope):
    """Message payload; an empty signer or missing timelines still indexes."""


class SearchableRecord(BaseModel):
    """Flat record written to the search index, keyed by ``id``."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    id: str
    type: str
    body: Any = None
    schema_url: str = Field(default="", alias="schema")
    signed_at: int = Field(alias="signedAt")
    signer: str = ""
    timelines: list[str] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        """Return the index document using the public camelCase field names."""
        return self.model_dump(by_alias=True, mode="json")


class CycleOutcome(str, Enum):
    """How one sync cycle ended."""

    SKIPPED = "skipped"
    IDLE = "idle"
    COMPLETED = "completed"
    FAILED = "failed"


class SyncCycleResult(BaseModel):
    """Report of one sync cycle for logs and operator tooling."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    outcome: CycleOutcome
    pages: int = 0
    entries_processed: int = 0
    entries_skipped: int = 0
    records_upserted: int = 0
    cursor_before: int | None = None
    cursor_after: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome != CycleOutcome.FAILED
