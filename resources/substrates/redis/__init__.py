"""Redis substrate modules for checkpoint persistence."""

from resources.substrates.redis.checkpoint import (
    DEFAULT_CHECKPOINT_KEY,
    RedisCheckpointStore,
)
from resources.substrates.redis.config import (
    RESOURCE_COMPONENT_ID,
    RedisSettings,
    normalize_redis_url,
    resolve_redis_settings,
)
from resources.substrates.redis.redis_substrate import RedisClientSubstrate
from resources.substrates.redis.substrate import (
    CheckpointStore,
    RedisHealthStatus,
    RedisSubstrate,
)

__all__ = [
    "DEFAULT_CHECKPOINT_KEY",
    "RESOURCE_COMPONENT_ID",
    "CheckpointStore",
    "RedisCheckpointStore",
    "RedisClientSubstrate",
    "RedisHealthStatus",
    "RedisSettings",
    "RedisSubstrate",
    "normalize_redis_url",
    "resolve_redis_settings",
]
