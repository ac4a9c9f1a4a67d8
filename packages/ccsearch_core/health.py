"""Aggregate readiness evaluation over substrate health checks."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HEALTH_TIMEOUT_SECONDS = 5.0


class ComponentHealthResult(BaseModel):
    """One component-level readiness result."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str = ""


class HealthResult(BaseModel):
    """Aggregate readiness across the shared substrates."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    resources: dict[str, ComponentHealthResult] = Field(default_factory=dict)


def evaluate_health(
    checks: Mapping[str, Callable[[], object]],
    *,
    timeout_seconds: float = DEFAULT_HEALTH_TIMEOUT_SECONDS,
) -> HealthResult:
    """Run every check with a per-check timeout and aggregate the results."""
    resources = {
        name: _evaluate_check(check, timeout_seconds=timeout_seconds)
        for name, check in checks.items()
    }
    return HealthResult(
        ready=all(item.ready for item in resources.values()),
        resources=resources,
    )


def _evaluate_check(
    check: Callable[[], object], *, timeout_seconds: float
) -> ComponentHealthResult:
    executor = ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(check)
        try:
            result = future.result(timeout=timeout_seconds)
        except FutureTimeoutError:
            return ComponentHealthResult(
                ready=False,
                detail=f"health() exceeded timeout ({timeout_seconds:.3f}s)",
            )
        except Exception as exc:  # noqa: BLE001
            return ComponentHealthResult(
                ready=False,
                detail=f"health() raised {type(exc).__name__}",
            )
    finally:
        # A hung check must not hold the request open past the timeout.
        executor.shutdown(wait=False)

    ready, detail = _coerce_health_result(result)
    return ComponentHealthResult(ready=ready, detail=detail or "ok")


def _coerce_health_result(result: object) -> tuple[bool, str]:
    """Normalize bool, mapping, and pydantic health shapes into ready/detail."""
    if isinstance(result, bool):
        return result, "ok" if result else "not ready"

    if hasattr(result, "model_dump"):
        values = result.model_dump(mode="python")
    elif isinstance(result, dict):
        values = result
    else:
        return False, "health() returned unsupported result"

    ready_value = values.get("ready")
    if not isinstance(ready_value, bool):
        return False, "health() result missing readiness field"
    detail_value = values.get("detail")
    return ready_value, detail_value if isinstance(detail_value, str) else ""
