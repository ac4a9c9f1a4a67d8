"""CLI tests for the ccsearch Typer commands."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from packages.ccsearch_core import cli
from packages.ccsearch_shared.config import CcSearchSettings
from services.index.sync_engine import CycleOutcome, SyncCycleResult

runner = CliRunner()


@pytest.fixture
def install_runtime(monkeypatch: pytest.MonkeyPatch, runtime_factory):
    """Route CLI runtime construction to in-memory doubles."""
    monkeypatch.setattr(cli, "load_settings", lambda config_path=None: CcSearchSettings())

    def _install(**kwargs: object):
        runtime = runtime_factory(**kwargs)
        monkeypatch.setattr(cli, "build_runtime", lambda settings: runtime)
        return runtime

    return _install


def test_sync_once_prints_cycle_report(install_runtime) -> None:
    install_runtime()

    result = runner.invoke(cli.app, ["--json", "sync-once"])

    assert result.exit_code == cli.SUCCESS_EXIT_CODE
    report = json.loads(result.stdout)
    assert report["outcome"] == "completed"
    assert report["cursor_after"] == 3


def test_sync_once_failure_exits_non_zero(install_runtime) -> None:
    install_runtime(
        cycle_result=SyncCycleResult(
            outcome=CycleOutcome.FAILED,
            cursor_before=4,
            cursor_after=4,
            error="meilisearch unreachable",
        )
    )

    result = runner.invoke(cli.app, ["--json", "sync-once"])

    assert result.exit_code == cli.OPERATION_FAILED_EXIT_CODE
    assert json.loads(result.stdout.splitlines()[0])["outcome"] == "failed"


def test_reconcile_prints_changes(install_runtime) -> None:
    install_runtime()

    result = runner.invoke(cli.app, ["--json", "reconcile"])

    assert result.exit_code == cli.SUCCESS_EXIT_CODE
    assert json.loads(result.stdout) == {
        "filterable_updated": False,
        "index": "messages",
        "index_created": True,
        "sortable_updated": False,
    }


def test_reconcile_failure_exits_non_zero(install_runtime) -> None:
    install_runtime(reconcile_fails=True)

    result = runner.invoke(cli.app, ["reconcile"])

    assert result.exit_code == cli.OPERATION_FAILED_EXIT_CODE


def test_cursor_show(install_runtime) -> None:
    install_runtime(cursor=1024)

    result = runner.invoke(cli.app, ["--json", "cursor", "show"])

    assert result.exit_code == cli.SUCCESS_EXIT_CODE
    assert json.loads(result.stdout) == {"cursor": 1024, "key": "ccsearch:readitr"}


def test_cursor_show_dependency_failure(install_runtime) -> None:
    install_runtime(cursor_error=ConnectionError("redis down"))

    result = runner.invoke(cli.app, ["--json", "cursor", "show"])

    assert result.exit_code == cli.DEPENDENCY_ERROR_EXIT_CODE


def test_cursor_reset_writes_value(install_runtime) -> None:
    runtime = install_runtime()

    result = runner.invoke(cli.app, ["--json", "cursor", "reset", "--value", "42"])

    assert result.exit_code == cli.SUCCESS_EXIT_CODE
    assert runtime.sync_engine.resets == [42]
    assert json.loads(result.stdout)["cursor"] == 42


def test_cursor_reset_refused_while_cycle_runs(install_runtime) -> None:
    runtime = install_runtime(reset_allowed=False)

    result = runner.invoke(cli.app, ["cursor", "reset"])

    assert result.exit_code == cli.OPERATION_FAILED_EXIT_CODE
    assert runtime.sync_engine.resets == []


def test_cursor_reset_rejects_negative_value(install_runtime) -> None:
    install_runtime()

    result = runner.invoke(cli.app, ["cursor", "reset", "--value", "-1"])

    assert result.exit_code != cli.SUCCESS_EXIT_CODE
