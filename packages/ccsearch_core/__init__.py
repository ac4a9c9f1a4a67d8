"""Public API for ccsearch process runtime and background scheduling."""

from packages.ccsearch_core.health import (
    ComponentHealthResult,
    HealthResult,
    evaluate_health,
)
from packages.ccsearch_core.runtime import Runtime, build_runtime
from packages.ccsearch_core.scheduler import SyncScheduler

__all__ = [
    "ComponentHealthResult",
    "HealthResult",
    "Runtime",
    "SyncScheduler",
    "build_runtime",
    "evaluate_health",
]
