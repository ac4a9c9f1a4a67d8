"""Index schema reconciler: ensure the index and its attribute sets exist."""

from __future__ import annotations

from collections.abc import Callable, Collection

from packages.ccsearch_shared.config import CcSearchSettings
from packages.ccsearch_shared.logging import get_logger, public_api_instrumented
from resources.substrates.meilisearch import MeilisearchSubstrate
from services.index.schema_reconciler.config import (
    SERVICE_COMPONENT_ID,
    SchemaReconcilerSettings,
)
from services.index.schema_reconciler.domain import (
    ReconcileResult,
    SchemaReconcileError,
)

_LOGGER = get_logger(__name__)


class SchemaReconciler:
    """Idempotently converge the configured index on declared attributes.

    Attribute sets are compared by size and membership; order is ignored.
    """

    def __init__(
        self,
        *,
        settings: SchemaReconcilerSettings,
        index: MeilisearchSubstrate,
        index_name: str,
    ) -> None:
        self._settings = settings
        self._index = index
        self._index_name = index_name

    @public_api_instrumented(
        logger=_LOGGER, component_id=str(SERVICE_COMPONENT_ID)
    )
    def reconcile(self) -> ReconcileResult:
        """Create the index if missing and replace drifted attribute sets.

        Any failure is raised as ``SchemaReconcileError``.
        """
        try:
            created = self._ensure_index()
            filterable = self._converge(
                "filterable",
                self._settings.filterable_attributes,
                self._index.get_filterable_attributes,
                self._index.update_filterable_attributes,
            )
            sortable = self._converge(
                "sortable",
                self._settings.sortable_attributes,
                self._index.get_sortable_attributes,
                self._index.update_sortable_attributes,
            )
        except SchemaReconcileError:
            raise
        except Exception as exc:
            raise SchemaReconcileError(
                f"index schema reconciliation failed for {self._index_name!r}: {exc}"
            ) from exc

        result = ReconcileResult(
            index=self._index_name,
            index_created=created,
            filterable_updated=filterable,
            sortable_updated=sortable,
        )
        _LOGGER.info(
            "index schema reconciled",
            extra=result.model_dump(),
        )
        return result

    def _ensure_index(self) -> bool:
        if self._index.index_exists():
            return False
        self._index.create_index()
        return True

    def _converge(
        self,
        label: str,
        declared: Collection[str],
        read: Callable[[], list[str]],
        replace: Callable[[list[str]], None],
    ) -> bool:
        current = read()
        if _same_set(current, declared):
            return False
        _LOGGER.info(
            "replacing %s attributes %s -> %s", label, sorted(current), list(declared)
        )
        replace(list(declared))
        return True


def _same_set(current: Collection[str], declared: Collection[str]) -> bool:
    return len(current) == len(declared) and all(item in current for item in declared)


def build_schema_reconciler(
    *,
    settings: CcSearchSettings,
    index: MeilisearchSubstrate | None = None,
) -> SchemaReconciler:
    """Build a reconciler for the configured index."""
    from resources.substrates.meilisearch import (
        MeilisearchClientSubstrate,
        resolve_meilisearch_settings,
    )
    from services.index.schema_reconciler.config import (
        resolve_schema_reconciler_settings,
    )

    meili_settings = resolve_meilisearch_settings(settings)
    return SchemaReconciler(
        settings=resolve_schema_reconciler_settings(settings),
        index=index or MeilisearchClientSubstrate(settings=meili_settings),
        index_name=meili_settings.index_name,
    )
