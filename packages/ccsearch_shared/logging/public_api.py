"""Composable instrumentation helpers for public service methods.

One decorator, ``public_api_instrumented``, fans each invocation out to a set
of concerns: structured logging, OpenTelemetry tracing and OpenTelemetry
metrics. Concern failures are isolated from the wrapped call.
"""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from functools import lru_cache, wraps
from time import perf_counter
from typing import Any, Callable, Mapping, Protocol, Sequence

from opentelemetry import metrics as otel_metrics
from opentelemetry import trace as otel_trace
from opentelemetry.trace.status import Status, StatusCode

from . import fields
from .context import log_context

METER_NAME = "ccsearch.public_api"
TRACER_NAME = "ccsearch.public_api"
METRIC_PUBLIC_API_CALLS_TOTAL = "ccsearch_public_api_calls_total"
METRIC_PUBLIC_API_DURATION_MS = "ccsearch_public_api_duration_ms"
METRIC_PUBLIC_API_ERRORS_TOTAL = "ccsearch_public_api_errors_total"
METRIC_INSTRUMENTATION_FAILURES_TOTAL = (
    "ccsearch_public_api_instrumentation_failures_total"
)
METRIC_SYNC_CYCLES_TOTAL = "ccsearch_sync_cycles_total"
METRIC_SYNC_RECORDS_UPSERTED_TOTAL = "ccsearch_sync_records_upserted_total"


@dataclass(frozen=True)
class InvocationContext:
    """Structured metadata describing one public API invocation."""

    component_id: str
    api_name: str
    trace_id: str | None
    envelope_id: str | None
    references: Mapping[str, str]


@dataclass(frozen=True)
class CompletionContext:
    """Structured metadata describing one completed public API invocation.

    ``report`` carries cycle-report fields (``outcome``, ``records_upserted``)
    when the wrapped method returned a sync cycle report.
    """

    invocation: InvocationContext
    success: bool
    duration_ms: float
    errors: list[str]
    error_categories: list[str]
    report: Mapping[str, object] = field(default_factory=dict)


class PublicApiInstrumentationConcern(Protocol):
    """Hook contract for one public API instrumentation concern."""

    def on_invocation(self, context: InvocationContext) -> None:
        """Handle invocation-start event for one method call."""

    def on_completion(self, context: CompletionContext) -> None:
        """Handle completion event for one method call."""


class PublicApiLoggingConcern:
    """Logging concern implementation for invocation/completion events."""

    def __init__(self, *, logger: Any) -> None:
        self._logger = logger

    def on_invocation(self, context: InvocationContext) -> None:
        with log_context(_invocation_log_context(context)):
            self._logger.info("Public API invocation")

    def on_completion(self, context: CompletionContext) -> None:
        payload = _invocation_log_context(context.invocation)
        payload.update(
            {
                fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
                fields.SUCCESS: context.success,
                fields.DURATION_MS: context.duration_ms,
                fields.ERRORS: context.errors,
                **context.report,
            }
        )
        with log_context(payload):
            if context.success:
                self._logger.info("Public API completion")
            else:
                self._logger.warning("Public API completion")


class _CounterLike(Protocol):
    def add(self, amount: int | float, attributes: Mapping[str, str]) -> None: ...


class _HistogramLike(Protocol):
    def record(self, amount: float, attributes: Mapping[str, str]) -> None: ...


class _SpanLike(Protocol):
    def set_attribute(self, key: str, value: object) -> None: ...

    def record_exception(self, exception: Exception) -> None: ...

    def set_status(self, status: object) -> None: ...


class _SpanContextManagerLike(Protocol):
    def __enter__(self) -> _SpanLike: ...

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None: ...


class _TracerLike(Protocol):
    def start_as_current_span(self, name: str) -> _SpanContextManagerLike: ...


@dataclass(frozen=True)
class _TraceScope:
    """One in-flight trace scope for a decorated API invocation."""

    manager: _SpanContextManagerLike
    span: _SpanLike


class PublicApiTracingConcern:
    """Tracing concern opening one span per invocation."""

    def __init__(self, *, tracer: _TracerLike) -> None:
        self._tracer = tracer
        self._active_scopes: ContextVar[list[_TraceScope]] = ContextVar(
            "public_api_tracing_scopes", default=[]
        )

    def on_invocation(self, context: InvocationContext) -> None:
        manager = self._tracer.start_as_current_span(
            f"public_api.{context.component_id}.{context.api_name}"
        )
        span = manager.__enter__()
        span.set_attribute(fields.COMPONENT_ID, context.component_id)
        span.set_attribute(fields.API_NAME, context.api_name)
        if context.trace_id is not None:
            span.set_attribute(fields.TRACE_ID, context.trace_id)
        if context.envelope_id is not None:
            span.set_attribute(fields.ENVELOPE_ID, context.envelope_id)
        for key, value in context.references.items():
            span.set_attribute(f"reference.{key}", value)

        current = self._active_scopes.get()
        self._active_scopes.set([*current, _TraceScope(manager=manager, span=span)])

    def on_completion(self, context: CompletionContext) -> None:
        current = self._active_scopes.get()
        if len(current) == 0:
            return
        scope = current[-1]
        self._active_scopes.set(current[:-1])

        scope.span.set_attribute(fields.SUCCESS, context.success)
        scope.span.set_attribute(fields.DURATION_MS, context.duration_ms)
        scope.span.set_attribute(
            fields.OUTCOME, "success" if context.success else "failure"
        )
        scope.span.set_attribute("errors.count", len(context.errors))
        for key, value in context.report.items():
            scope.span.set_attribute(f"report.{key}", value)

        if not context.success:
            scope.span.set_status(Status(StatusCode.ERROR))
            if len(context.errors) > 0:
                scope.span.record_exception(RuntimeError("; ".join(context.errors[:3])))
        scope.manager.__exit__(None, None, None)


class PublicApiMetricsConcern:
    """Metrics concern emitting call, latency, error and sync-cycle instruments."""

    def __init__(
        self,
        *,
        public_api_calls_total: _CounterLike,
        public_api_duration_ms: _HistogramLike,
        public_api_errors_total: _CounterLike,
        sync_cycles_total: _CounterLike,
        sync_records_upserted_total: _CounterLike,
    ) -> None:
        self._public_api_calls_total = public_api_calls_total
        self._public_api_duration_ms = public_api_duration_ms
        self._public_api_errors_total = public_api_errors_total
        self._sync_cycles_total = sync_cycles_total
        self._sync_records_upserted_total = sync_records_upserted_total

    def on_invocation(self, context: InvocationContext) -> None:
        """No-op at invocation; metrics are emitted on completion."""
        del context

    def on_completion(self, context: CompletionContext) -> None:
        outcome = "success" if context.success else "failure"
        attrs = {
            fields.COMPONENT_ID: context.invocation.component_id,
            fields.API_NAME: context.invocation.api_name,
            fields.OUTCOME: outcome,
        }
        self._public_api_calls_total.add(1, attributes=attrs)
        self._public_api_duration_ms.record(context.duration_ms, attributes=attrs)

        cycle_outcome = context.report.get("outcome")
        if cycle_outcome is not None:
            self._sync_cycles_total.add(
                1, attributes={fields.OUTCOME: str(cycle_outcome)}
            )
            upserted = context.report.get("records_upserted")
            if isinstance(upserted, int) and upserted > 0:
                self._sync_records_upserted_total.add(upserted, attributes={})

        if context.success:
            return

        categories = context.error_categories or ["unknown"]
        for category in categories:
            self._public_api_errors_total.add(
                1,
                attributes={
                    fields.COMPONENT_ID: context.invocation.component_id,
                    fields.API_NAME: context.invocation.api_name,
                    fields.ERROR_CATEGORY: category,
                },
            )


def public_api_instrumented(
    *,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
    concerns: Sequence[PublicApiInstrumentationConcern] | None = None,
    logger: Any | None = None,
    telemetry: bool = True,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate one public API method with composable instrumentation concerns.

    ``telemetry=False`` skips the default OpenTelemetry tracing and metrics
    concerns and keeps only ``concerns`` plus the logging concern.
    """
    resolved_concerns: tuple[PublicApiInstrumentationConcern, ...] = tuple(
        concerns or ()
    )
    if telemetry:
        resolved_concerns = (
            *resolved_concerns,
            _default_public_api_tracing_concern(),
            _default_public_api_metrics_concern(),
        )
    if logger is not None:
        resolved_concerns = (PublicApiLoggingConcern(logger=logger), *resolved_concerns)
    if len(resolved_concerns) == 0:
        raise ValueError("public_api_instrumented requires at least one concern")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            meta = kwargs.get("meta")
            references = {
                name: str(kwargs[name])
                for name in id_fields
                if kwargs.get(name) not in (None, "")
            }
            invocation = InvocationContext(
                component_id=component_id,
                api_name=method_name,
                trace_id=_attr_or_none(meta, "trace_id"),
                envelope_id=_attr_or_none(meta, "envelope_id"),
                references=references,
            )
            _emit_invocation(
                concerns=resolved_concerns, context=invocation, logger=logger
            )

            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:  # noqa: BLE001
                completion = CompletionContext(
                    invocation=invocation,
                    success=False,
                    duration_ms=round((perf_counter() - started) * 1000.0, 3),
                    errors=[f"{type(exc).__name__}: {exc}"],
                    error_categories=["internal"],
                )
                _emit_completion(
                    concerns=resolved_concerns, context=completion, logger=logger
                )
                raise

            success, errors = _result_summary(result)
            completion = CompletionContext(
                invocation=invocation,
                success=success,
                duration_ms=round((perf_counter() - started) * 1000.0, 3),
                errors=errors,
                error_categories=_result_error_categories(result),
                report=_result_report(result),
            )
            _emit_completion(
                concerns=resolved_concerns, context=completion, logger=logger
            )
            return result

        return wrapper

    return decorator


def _attr_or_none(obj: object | None, name: str) -> str | None:
    if obj is None:
        return None
    value = getattr(obj, name, None)
    if value in (None, ""):
        return None
    return str(value)


def _result_summary(result: object) -> tuple[bool, list[str]]:
    """Infer success and sanitized error summaries from a result value."""
    errors = _sanitize_errors(getattr(result, "errors", []))
    error = getattr(result, "error", None)
    if isinstance(error, str) and error != "":
        errors.append(error)
    ok_value = getattr(result, "ok", None)
    if isinstance(ok_value, bool):
        return ok_value, errors
    return len(errors) == 0, errors


def _result_error_categories(result: object) -> list[str]:
    errors_obj = getattr(result, "errors", [])
    if not isinstance(errors_obj, list):
        return []
    categories: list[str] = []
    for item in errors_obj:
        raw = getattr(item, "category", None)
        category = getattr(raw, "value", raw)
        if category in (None, ""):
            continue
        categories.append(str(category))
    return categories


def _result_report(result: object) -> dict[str, object]:
    """Extract sync-cycle report fields from a cycle result."""
    outcome = getattr(result, "outcome", None)
    if outcome is None:
        return {}
    report: dict[str, object] = {
        "outcome": str(getattr(outcome, "value", outcome)),
        "records_upserted": getattr(result, "records_upserted", 0),
    }
    cursor = getattr(result, "cursor_after", None)
    if cursor is not None:
        report[fields.CURSOR] = cursor
    return report


def _sanitize_errors(errors: object) -> list[str]:
    """Return safe one-line error summaries for logs."""
    if not isinstance(errors, list):
        return []
    summaries: list[str] = []
    for item in errors:
        code = getattr(item, "code", None)
        message = getattr(item, "message", None)
        if message in (None, ""):
            continue
        if code in (None, ""):
            summaries.append(str(message))
        else:
            summaries.append(f"{code}: {message}")
    return summaries


def _invocation_log_context(context: InvocationContext) -> dict[str, object]:
    return {
        fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
        fields.COMPONENT_ID: context.component_id,
        fields.API_NAME: context.api_name,
        fields.TRACE_ID: context.trace_id,
        fields.ENVELOPE_ID: context.envelope_id,
        **context.references,
    }


def _emit_invocation(
    *,
    concerns: Sequence[PublicApiInstrumentationConcern],
    context: InvocationContext,
    logger: Any | None,
) -> None:
    for concern in concerns:
        try:
            concern.on_invocation(context)
        except Exception as exc:  # noqa: BLE001
            _log_concern_failure(
                logger=logger,
                stage="invocation",
                concern=type(concern).__name__,
                exc=exc,
                invocation=context,
            )


def _emit_completion(
    *,
    concerns: Sequence[PublicApiInstrumentationConcern],
    context: CompletionContext,
    logger: Any | None,
) -> None:
    for concern in concerns:
        try:
            concern.on_completion(context)
        except Exception as exc:  # noqa: BLE001
            _log_concern_failure(
                logger=logger,
                stage="completion",
                concern=type(concern).__name__,
                exc=exc,
                invocation=context.invocation,
            )


def _log_concern_failure(
    *,
    logger: Any | None,
    stage: str,
    concern: str,
    exc: Exception,
    invocation: InvocationContext,
) -> None:
    """Best-effort warning log for instrumentation concern hook failures."""
    if logger is not None:
        with log_context(
            {
                fields.EVENT: fields.PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT,
                fields.COMPONENT_ID: invocation.component_id,
                fields.API_NAME: invocation.api_name,
                fields.STAGE: stage,
                fields.CONCERN: concern,
                fields.ERRORS: [f"{type(exc).__name__}: {exc}"],
            }
        ):
            logger.warning("Public API instrumentation concern failed")
    _default_otel_instruments().instrumentation_failures_total.add(
        1,
        attributes={
            fields.COMPONENT_ID: invocation.component_id,
            fields.API_NAME: invocation.api_name,
            fields.STAGE: stage,
            fields.CONCERN: concern,
        },
    )


@dataclass(frozen=True)
class _OtelInstruments:
    """Resolved OTel instruments shared by every decorated method."""

    public_api_calls_total: _CounterLike
    public_api_duration_ms: _HistogramLike
    public_api_errors_total: _CounterLike
    instrumentation_failures_total: _CounterLike
    sync_cycles_total: _CounterLike
    sync_records_upserted_total: _CounterLike


@lru_cache(maxsize=1)
def _default_otel_instruments() -> _OtelInstruments:
    """Create OTel metric instruments on the globally configured meter provider."""
    meter = otel_metrics.get_meter(METER_NAME)
    return _OtelInstruments(
        public_api_calls_total=meter.create_counter(
            name=METRIC_PUBLIC_API_CALLS_TOTAL,
            description="Count of public API invocations by component/method/outcome.",
            unit="1",
        ),
        public_api_duration_ms=meter.create_histogram(
            name=METRIC_PUBLIC_API_DURATION_MS,
            description="Public API invocation latency in milliseconds.",
            unit="ms",
        ),
        public_api_errors_total=meter.create_counter(
            name=METRIC_PUBLIC_API_ERRORS_TOTAL,
            description="Count of public API failures by error category.",
            unit="1",
        ),
        instrumentation_failures_total=meter.create_counter(
            name=METRIC_INSTRUMENTATION_FAILURES_TOTAL,
            description="Count of instrumentation concern failures.",
            unit="1",
        ),
        sync_cycles_total=meter.create_counter(
            name=METRIC_SYNC_CYCLES_TOTAL,
            description="Count of sync cycles by outcome.",
            unit="1",
        ),
        sync_records_upserted_total=meter.create_counter(
            name=METRIC_SYNC_RECORDS_UPSERTED_TOTAL,
            description="Count of searchable records upserted by sync cycles.",
            unit="1",
        ),
    )


@lru_cache(maxsize=1)
def _default_public_api_tracing_concern() -> PublicApiTracingConcern:
    return PublicApiTracingConcern(tracer=otel_trace.get_tracer(TRACER_NAME))


@lru_cache(maxsize=1)
def _default_public_api_metrics_concern() -> PublicApiMetricsConcern:
    instruments = _default_otel_instruments()
    return PublicApiMetricsConcern(
        public_api_calls_total=instruments.public_api_calls_total,
        public_api_duration_ms=instruments.public_api_duration_ms,
        public_api_errors_total=instruments.public_api_errors_total,
        sync_cycles_total=instruments.sync_cycles_total,
        sync_records_upserted_total=instruments.sync_records_upserted_total,
    )
