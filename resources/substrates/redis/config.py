"""Pydantic settings for the Redis checkpoint substrate."""

from __future__ import annotations

from urllib.parse import quote_plus

from pydantic import BaseModel, ConfigDict, Field, model_validator

from packages.ccsearch_shared.config import CcSearchSettings, resolve_component_settings

RESOURCE_COMPONENT_ID = "substrate_redis"


class RedisSettings(BaseModel):
    """Redis connectivity and timeout defaults for checkpoint access."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str | None = "redis://localhost:6379/0"
    host: str = "localhost"
    port: int = Field(default=6379, gt=0)
    db: int = Field(default=0, ge=0)
    password: str = ""
    ssl: bool = False
    connect_timeout_seconds: float = Field(default=5.0, gt=0)
    socket_timeout_seconds: float = Field(default=5.0, gt=0)
    health_timeout_seconds: float = Field(default=1.0, gt=0)
    max_connections: int = Field(default=10, gt=0)

    @model_validator(mode="after")
    def _resolve_url(self) -> "RedisSettings":
        """Normalize an explicit URL or build one from split fields."""
        if self.url is not None and self.url.strip() != "":
            object.__setattr__(self, "url", normalize_redis_url(self.url))
            return self
        object.__setattr__(self, "url", _build_redis_url_from_parts(self))
        return self


def normalize_redis_url(raw: str) -> str:
    """Return a redis-py URL, accepting a bare ``host:port`` address.

    Deployments that configure only an address (no scheme) get database 0.
    """
    value = raw.strip()
    if "://" in value:
        return value
    if value == "":
        raise ValueError("substrate.redis.url must not be blank")
    return f"redis://{value}/0"


def _build_redis_url_from_parts(redis: RedisSettings) -> str:
    host = redis.host.strip()
    if host == "":
        raise ValueError("substrate.redis.host is required when url is unset")
    auth = f":{quote_plus(redis.password.strip())}@" if redis.password.strip() else ""
    scheme = "rediss" if redis.ssl else "redis"
    return f"{scheme}://{auth}{host}:{redis.port}/{redis.db}"


def resolve_redis_settings(settings: CcSearchSettings) -> RedisSettings:
    """Resolve Redis substrate settings from ``components.substrate.redis``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=RedisSettings,
    )
