"""Operator CLI for ccsearch implemented with Typer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable

import typer

from packages.ccsearch_core.main import serve
from packages.ccsearch_core.runtime import Runtime, build_runtime
from packages.ccsearch_shared.config import CONFIG_FILE_ENV, CcSearchSettings, load_settings
from services.index.schema_reconciler import SchemaReconcileError
from services.index.sync_engine import CycleOutcome

SUCCESS_EXIT_CODE = 0
OPERATION_FAILED_EXIT_CODE = 3
DEPENDENCY_ERROR_EXIT_CODE = 4


class OperationFailed(Exception):
    """Raised by a command body when the operation ran but did not succeed."""


@dataclass(frozen=True)
class CliConfig:
    """Global CLI options shared by every command."""

    config_path: Path | None
    as_json: bool


def _serialize(value: Any) -> Any:
    """Convert result objects to JSON-serializable structures."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(key): _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialize(item) for item in value]
    if hasattr(value, "model_dump"):
        return _serialize(value.model_dump(mode="json"))
    return str(value)


def _emit_output(result: Any, as_json: bool) -> None:
    data = _serialize(result)
    if as_json:
        typer.echo(json.dumps(data, sort_keys=True, separators=(",", ":")))
        return
    typer.echo(json.dumps(data, indent=2, sort_keys=True))


def _emit_error(exc: Exception, as_json: bool) -> None:
    """Render one failure to stderr."""
    if as_json:
        typer.echo(json.dumps({"error": str(exc)}), err=True)
        return
    typer.echo(f"error: {exc}", err=True)


def _load(cfg: CliConfig) -> CcSearchSettings:
    return load_settings(config_path=cfg.config_path)


def _run_command(cfg: CliConfig, invoke: Callable[[Runtime], Any]) -> None:
    """Build a runtime, run one operation, and map the outcome to an exit code."""
    runtime = build_runtime(_load(cfg))
    try:
        result = invoke(runtime)
    except (OperationFailed, SchemaReconcileError) as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=OPERATION_FAILED_EXIT_CODE) from exc
    except Exception as exc:  # noqa: BLE001
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=DEPENDENCY_ERROR_EXIT_CODE) from exc
    finally:
        runtime.close()

    _emit_output(result, cfg.as_json)
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


def _require_config(ctx: typer.Context) -> CliConfig:
    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


app = typer.Typer(no_args_is_help=True, help="ccsearch search indexer")
cursor_app = typer.Typer(help="Inspect or rewrite the sync checkpoint")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        envvar=CONFIG_FILE_ENV,
        help="YAML settings file",
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit compact JSON output"),
) -> None:
    """Store global options for all commands."""
    ctx.obj = CliConfig(config_path=config, as_json=as_json)


@app.command("serve")
def serve_command(ctx: typer.Context) -> None:
    """Reconcile the index, start background sync, and serve HTTP."""
    cfg = _require_config(ctx)
    serve(_load(cfg))


@app.command("sync-once")
def sync_once_command(ctx: typer.Context) -> None:
    """Run one sync cycle and print its report."""
    cfg = _require_config(ctx)

    def _invoke(runtime: Runtime) -> Any:
        result = runtime.sync_engine.run_cycle()
        if result.outcome == CycleOutcome.FAILED:
            _emit_output(result, cfg.as_json)
            raise OperationFailed(result.error or "sync cycle failed")
        return result

    _run_command(cfg, _invoke)


@app.command("reconcile")
def reconcile_command(ctx: typer.Context) -> None:
    """Run index schema reconciliation and print what changed."""
    cfg = _require_config(ctx)
    _run_command(cfg, lambda runtime: runtime.reconciler.reconcile())


@cursor_app.command("show")
def cursor_show_command(ctx: typer.Context) -> None:
    """Print the committed cursor."""
    cfg = _require_config(ctx)
    _run_command(
        cfg,
        lambda runtime: {
            "key": runtime.sync_settings.checkpoint_key,
            "cursor": runtime.sync_engine.read_cursor(),
        },
    )


@cursor_app.command("reset")
def cursor_reset_command(
    ctx: typer.Context,
    value: int = typer.Option(0, min=0, help="New cursor value"),
) -> None:
    """Overwrite the committed cursor so the next cycle resumes after it."""
    cfg = _require_config(ctx)

    def _invoke(runtime: Runtime) -> Any:
        if not runtime.sync_engine.reset_cursor(value):
            raise OperationFailed("a sync cycle is in progress; cursor not reset")
        return {"key": runtime.sync_settings.checkpoint_key, "cursor": value}

    _run_command(cfg, _invoke)


app.add_typer(cursor_app, name="cursor")


if __name__ == "__main__":
    app()
