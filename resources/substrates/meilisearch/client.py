"""Meilisearch client construction helpers."""

from __future__ import annotations

from meilisearch_python_sdk import Client

from resources.substrates.meilisearch.config import MeilisearchSettings


def create_meilisearch_client(settings: MeilisearchSettings) -> Client:
    """Construct a synchronous Meilisearch client."""
    return Client(
        url=settings.url,
        api_key=settings.api_key,
        timeout=settings.timeout_seconds,
    )
