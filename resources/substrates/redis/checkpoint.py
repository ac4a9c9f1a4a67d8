"""Integer cursor persisted as a base-10 string under one Redis key."""

from __future__ import annotations

from packages.ccsearch_shared.logging import get_logger
from resources.substrates.redis.substrate import CheckpointStore, RedisSubstrate

DEFAULT_CHECKPOINT_KEY = "ccsearch:readitr"

_LOGGER = get_logger(__name__)


class RedisCheckpointStore(CheckpointStore):
    """Checkpoint store reading and writing one cursor key.

    Read failures propagate; a missing or non-numeric stored value reads as 0.
    """

    def __init__(
        self, *, substrate: RedisSubstrate, key: str = DEFAULT_CHECKPOINT_KEY
    ) -> None:
        self._substrate = substrate
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def read_cursor(self) -> int:
        raw = self._substrate.get_value(key=self._key)
        if raw is None:
            return 0
        try:
            cursor = int(raw.strip())
        except ValueError:
            _LOGGER.warning(
                "non-numeric checkpoint value, starting from zero",
                extra={"key": self._key, "value": raw},
            )
            return 0
        return max(cursor, 0)

    def write_cursor(self, cursor: int) -> None:
        if cursor < 0:
            raise ValueError("cursor must be >= 0")
        self._substrate.set_value(key=self._key, value=str(cursor))
