"""Redis client-backed substrate implementation."""

from __future__ import annotations

from resources.substrates.redis.client import create_redis_client
from resources.substrates.redis.config import RedisSettings
from resources.substrates.redis.substrate import RedisHealthStatus, RedisSubstrate


class RedisClientSubstrate(RedisSubstrate):
    """Concrete Redis substrate using redis-py client operations."""

    def __init__(self, *, settings: RedisSettings) -> None:
        self._client = create_redis_client(settings)
        self._health_client = create_redis_client(
            settings, timeout_seconds=settings.health_timeout_seconds
        )

    def get_value(self, *, key: str) -> str | None:
        """Read one value by key."""
        value = self._client.get(name=key)
        if value is None:
            return None
        return str(value)

    def set_value(self, *, key: str, value: str) -> None:
        """Write one value by key with no TTL."""
        self._client.set(name=key, value=value)

    def ping(self) -> bool:
        """Return Redis ping status."""
        return bool(self._health_client.ping())

    def health(self) -> RedisHealthStatus:
        """Return Redis substrate readiness and concise detail."""
        try:
            ready = self.ping()
        except Exception as exc:  # noqa: BLE001
            return RedisHealthStatus(
                ready=False,
                detail=f"redis ping failed: {type(exc).__name__}",
            )
        return RedisHealthStatus(
            ready=ready,
            detail="ok" if ready else "redis ping returned false",
        )
