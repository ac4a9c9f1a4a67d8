"""Redis client construction helpers."""

from __future__ import annotations

from redis import Redis

from resources.substrates.redis.config import RedisSettings


def create_redis_client(
    settings: RedisSettings,
    *,
    timeout_seconds: float | None = None,
) -> Redis:
    """Construct a string-decoding Redis client.

    ``timeout_seconds`` overrides both connect and socket timeouts, which the
    health check uses to stay bounded.
    """
    connect_timeout = timeout_seconds or settings.connect_timeout_seconds
    socket_timeout = timeout_seconds or settings.socket_timeout_seconds
    return Redis.from_url(
        url=settings.url or "",
        socket_connect_timeout=connect_timeout,
        socket_timeout=socket_timeout,
        max_connections=settings.max_connections,
        decode_responses=True,
        encoding="utf-8",
    )
