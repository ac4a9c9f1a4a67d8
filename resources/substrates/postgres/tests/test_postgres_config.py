"""Tests for Postgres settings normalization and engine wiring."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

import resources.substrates.postgres.engine as engine_module
from resources.substrates.postgres.config import PostgresSettings, normalize_postgres_url
from resources.substrates.postgres.engine import create_postgres_engine


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (
            "postgres://cc:pw@db:5432/concrnt",
            "postgresql+psycopg://cc:pw@db:5432/concrnt",
        ),
        (
            "postgresql://cc:pw@db/concrnt?sslmode=disable",
            "postgresql+psycopg://cc:pw@db/concrnt?sslmode=disable",
        ),
        (
            "postgresql+psycopg://cc@db/concrnt",
            "postgresql+psycopg://cc@db/concrnt",
        ),
    ],
)
def test_url_forms_are_normalized_onto_psycopg(raw: str, expected: str) -> None:
    assert normalize_postgres_url(raw) == expected


def test_keyword_dsn_is_converted_to_url() -> None:
    """libpq keyword DSNs should map onto URL parts and query params."""
    url = normalize_postgres_url(
        "host=db port=5432 user=cc password=pw dbname=concrnt sslmode=disable"
    )

    assert url == "postgresql+psycopg://cc:pw@db:5432/concrnt?sslmode=disable"


def test_keyword_dsn_rejects_tokens_without_equals() -> None:
    with pytest.raises(ValueError, match="invalid DSN token"):
        normalize_postgres_url("host=db nonsense")


def test_settings_reject_unknown_sslmode() -> None:
    with pytest.raises(ValidationError, match="sslmode"):
        PostgresSettings(sslmode="sometimes")


def test_settings_reject_blank_table_name() -> None:
    with pytest.raises(ValidationError, match="log_table"):
        PostgresSettings(log_table="  ")


def test_engine_uses_configured_pool_settings(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Engine builder should pass pool and connect settings through."""
    captured: dict[str, object] = {}

    def fake_create_engine(url: str, **kwargs: object) -> object:
        captured["url"] = url
        captured.update(kwargs)
        return object()

    monkeypatch.setattr(engine_module, "create_engine", fake_create_engine)

    create_postgres_engine(
        PostgresSettings(
            url="postgres://cc:pw@db:5432/concrnt",
            pool_size=3,
            pool_pre_ping=False,
            sslmode="require",
        )
    )

    assert captured["url"] == "postgresql+psycopg://cc:pw@db:5432/concrnt"
    assert captured["pool_size"] == 3
    assert captured["pool_pre_ping"] is False
    assert captured["connect_args"] == {"connect_timeout": 10, "sslmode": "require"}
