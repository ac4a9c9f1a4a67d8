"""Index sync engine package exports."""

from services.index.sync_engine.config import SyncEngineSettings
from services.index.sync_engine.domain import (
    CycleOutcome,
    DocumentEnvelope,
    MessageDocument,
    SearchableRecord,
    SyncCycleResult,
)
from services.index.sync_engine.implementation import DefaultSyncEngine
from services.index.sync_engine.service import SyncEngine, build_sync_engine
from services.index.sync_engine.transformer import (
    MalformedDocumentError,
    TransformerRegistry,
    parse_envelope,
    transform_entry,
)

__all__ = [
    "CycleOutcome",
    "DefaultSyncEngine",
    "DocumentEnvelope",
    "MalformedDocumentError",
    "MessageDocument",
    "SearchableRecord",
    "SyncCycleResult",
    "SyncEngine",
    "SyncEngineSettings",
    "TransformerRegistry",
    "build_sync_engine",
    "parse_envelope",
    "transform_entry",
]
