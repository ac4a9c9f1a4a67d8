"""Domain contracts for index schema reconciliation."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SchemaReconcileError(RuntimeError):
    """Raised when the index cannot be brought to the declared schema."""


class ReconcileResult(BaseModel):
    """What reconciliation changed on the index."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    index: str
    index_created: bool = False
    filterable_updated: bool = False
    sortable_updated: bool = False

    @property
    def changed(self) -> bool:
        return self.index_created or self.filterable_updated or self.sortable_updated
