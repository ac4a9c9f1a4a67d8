"""Envelope metadata primitives shared across ccsearch services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4


class EnvelopeKind(str, Enum):
    """Envelope kinds used for intent classification in logs."""

    COMMAND = "command"
    QUERY = "query"
    RESULT = "result"


@dataclass(frozen=True)
class EnvelopeMeta:
    """Metadata attached to every envelope result."""

    envelope_id: str
    trace_id: str
    timestamp: datetime
    kind: EnvelopeKind
    source: str


def new_meta(
    *,
    kind: EnvelopeKind,
    source: str,
    trace_id: str | None = None,
) -> EnvelopeMeta:
    """Build ``EnvelopeMeta`` with fresh identifiers and a UTC timestamp."""
    return EnvelopeMeta(
        envelope_id=uuid4().hex,
        trace_id=trace_id or uuid4().hex,
        timestamp=datetime.now(UTC),
        kind=kind,
        source=source,
    )
