"""Process entrypoint: reconcile the index, start syncing, serve HTTP."""

from __future__ import annotations

from fastapi import APIRouter, FastAPI

from packages.ccsearch_core.info_api import register_routes as register_info_routes
from packages.ccsearch_core.runtime import Runtime, build_runtime
from packages.ccsearch_core.scheduler import SyncScheduler
from packages.ccsearch_shared.config import CcSearchSettings, load_settings
from packages.ccsearch_shared.http import create_app, run_app
from packages.ccsearch_shared.logging import configure_logging, get_logger
from services.index.schema_reconciler import SchemaReconcileError
from services.query.search_service.api import register_routes as register_search_routes

_LOGGER = get_logger(__name__)
STARTUP_FAILURE_EXIT_CODE = 1


def configure_process_logging(settings: CcSearchSettings) -> None:
    """Apply the ``logging`` settings section to the root logger."""
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )


def create_http_app(runtime: Runtime) -> FastAPI:
    """Build the public FastAPI app with info, health, and search routes."""
    info = runtime.settings.info
    app = create_app(title="ccsearch", version=info.version)
    router = APIRouter()
    register_info_routes(router=router, info=info, checks=runtime.health_checks())
    register_search_routes(router=router, service=runtime.search)
    app.include_router(router)
    return app


def reconcile_or_exit(runtime: Runtime) -> None:
    """Reconcile the index schema; a failure terminates the process."""
    try:
        runtime.reconciler.reconcile()
    except SchemaReconcileError as exc:
        _LOGGER.error("startup reconciliation failed: %s", exc)
        raise SystemExit(STARTUP_FAILURE_EXIT_CODE) from exc


def serve(settings: CcSearchSettings) -> None:
    """Run the long-lived process until the HTTP server exits."""
    configure_process_logging(settings)
    runtime = build_runtime(settings)
    reconcile_or_exit(runtime)

    scheduler: SyncScheduler | None = None
    if runtime.sync_settings.enabled:
        scheduler = SyncScheduler(
            run_cycle=runtime.sync_engine.run_cycle,
            interval_seconds=runtime.sync_settings.interval_seconds,
        )
        scheduler.start()
    else:
        _LOGGER.info("background sync disabled")

    app = create_http_app(runtime)
    _LOGGER.info(
        "ccsearch startup completed",
        extra={"host": settings.http.host, "port": settings.http.port},
    )
    try:
        run_app(
            app,
            host=settings.http.host,
            port=settings.http.port,
            log_level=settings.logging.level.lower(),
        )
    finally:
        if scheduler is not None:
            scheduler.stop()
        runtime.close()


def main() -> None:
    """Load settings from file and environment, then serve."""
    serve(load_settings())


if __name__ == "__main__":
    main()
