"""Index schema reconciler package exports."""

from services.index.schema_reconciler.config import SchemaReconcilerSettings
from services.index.schema_reconciler.domain import (
    ReconcileResult,
    SchemaReconcileError,
)
from services.index.schema_reconciler.service import (
    SchemaReconciler,
    build_schema_reconciler,
)

__all__ = [
    "ReconcileResult",
    "SchemaReconcileError",
    "SchemaReconciler",
    "SchemaReconcilerSettings",
    "build_schema_reconciler",
]
