"""Substrate contracts for Redis-backed key/value and checkpoint access."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel, ConfigDict


class RedisHealthStatus(BaseModel):
    """Redis substrate readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str


class RedisSubstrate(Protocol):
    """Protocol for the plain string key/value operations ccsearch needs."""

    def get_value(self, *, key: str) -> str | None:
        """Get one string value by key or ``None`` when missing."""

    def set_value(self, *, key: str, value: str) -> None:
        """Set one string value without expiry."""

    def ping(self) -> bool:
        """Return substrate liveness from Redis ``PING``."""

    def health(self) -> RedisHealthStatus:
        """Check Redis substrate readiness and detail."""


class CheckpointStore(Protocol):
    """Durable high-water mark of the synchronized log position."""

    def read_cursor(self) -> int:
        """Return the stored cursor, ``0`` when missing or unreadable as int."""

    def write_cursor(self, cursor: int) -> None:
        """Persist ``cursor`` as the new high-water mark."""
