"""Unit tests for the Redis client substrate wrapper and checkpoint store."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

import resources.substrates.redis.redis_substrate as redis_substrate_module
from resources.substrates.redis.checkpoint import (
    DEFAULT_CHECKPOINT_KEY,
    RedisCheckpointStore,
)
from resources.substrates.redis.config import RedisSettings
from resources.substrates.redis.redis_substrate import RedisClientSubstrate


@dataclass
class _FakeRedisClient:
    """In-memory fake implementing Redis operations used by substrate wrapper."""

    values: dict[str, str] = field(default_factory=dict)
    ping_result: bool = True
    ping_error: Exception | None = None

    def set(self, name: str, value: str) -> bool:
        self.values[name] = value
        return True

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    def ping(self) -> bool:
        if self.ping_error is not None:
            raise self.ping_error
        return self.ping_result


def _substrate(
    monkeypatch: pytest.MonkeyPatch, fake: _FakeRedisClient
) -> RedisClientSubstrate:
    monkeypatch.setattr(
        redis_substrate_module,
        "create_redis_client",
        lambda settings, timeout_seconds=None: fake,
    )
    return RedisClientSubstrate(settings=RedisSettings())


def test_redis_substrate_wraps_key_value_operations(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Substrate should pass through set/get semantics."""
    substrate = _substrate(monkeypatch, _FakeRedisClient())

    assert substrate.get_value(key="a") is None
    substrate.set_value(key="a", value="one")

    assert substrate.get_value(key="a") == "one"


def test_redis_substrate_health_reports_check_failure(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Ping exceptions should degrade into a not-ready status."""
    substrate = _substrate(
        monkeypatch, _FakeRedisClient(ping_error=ConnectionError("refused"))
    )

    status = substrate.health()

    assert status.ready is False
    assert status.detail == "redis ping failed: ConnectionError"


def test_redis_substrate_health_reports_ready(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    substrate = _substrate(monkeypatch, _FakeRedisClient())

    assert substrate.health().ready is True


def test_checkpoint_reads_zero_when_key_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    store = RedisCheckpointStore(
        substrate=_substrate(monkeypatch, _FakeRedisClient())
    )

    assert store.key == DEFAULT_CHECKPOINT_KEY
    assert store.read_cursor() == 0


def test_checkpoint_reads_zero_for_non_numeric_value(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    fake = _FakeRedisClient(values={DEFAULT_CHECKPOINT_KEY: "garbage"})
    store = RedisCheckpointStore(substrate=_substrate(monkeypatch, fake))

    assert store.read_cursor() == 0


def test_checkpoint_round_trips_base10_string(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Cursor values are stored as decimal strings under the configured key."""
    fake = _FakeRedisClient()
    store = RedisCheckpointStore(
        substrate=_substrate(monkeypatch, fake), key="custom:cursor"
    )

    store.write_cursor(1024)

    assert fake.values == {"custom:cursor": "1024"}
    assert store.read_cursor() == 1024


def test_checkpoint_rejects_negative_cursor(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    store = RedisCheckpointStore(
        substrate=_substrate(monkeypatch, _FakeRedisClient())
    )

    with pytest.raises(ValueError):
        store.write_cursor(-1)
