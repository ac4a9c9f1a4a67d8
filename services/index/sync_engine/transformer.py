"""Record transformer mapping raw log entries onto searchable records.

Dispatch is keyed by the envelope ``type`` discriminator. Each registered
transform receives the raw payload, its parsed envelope and the content
identifier already derived from the raw bytes, so adding a type never changes
how identifiers are computed for the others.
"""

from __future__ import annotations

from collections.abc import Callable

from pydantic import ValidationError

from packages.ccsearch_shared.ids import derive_content_id
from packages.ccsearch_shared.logging import get_logger
from resources.substrates.postgres import LogEntry
from services.index.sync_engine.domain import (
    DocumentEnvelope,
    MessageDocument,
    SearchableRecord,
)

_LOGGER = get_logger(__name__)

MESSAGE_TYPE = "message"
MESSAGE_ID_PREFIX = "m"

TransformFn = Callable[[str, DocumentEnvelope, str], SearchableRecord | None]


class MalformedDocumentError(ValueError):
    """Raised when a log payload cannot be parsed as a document envelope."""


class TransformerRegistry:
    """Mapping of document type discriminator to transform function."""

    def __init__(self) -> None:
        self._transforms: dict[str, TransformFn] = {}

    def register(self, type_name: str, transform: TransformFn) -> None:
        if type_name in self._transforms:
            raise ValueError(f"transform already registered for type {type_name!r}")
        self._transforms[type_name] = transform

    def get(self, type_name: str) -> TransformFn | None:
        return self._transforms.get(type_name)

    @property
    def types(self) -> tuple[str, ...]:
        return tuple(sorted(self._transforms))


def parse_envelope(raw: str) -> DocumentEnvelope:
    """Parse the generic envelope or raise ``MalformedDocumentError``."""
    try:
        return DocumentEnvelope.model_validate_json(raw)
    except ValidationError as exc:
        raise MalformedDocumentError(str(exc)) from exc


def transform_message(
    raw: str, envelope: DocumentEnvelope, content_id: str
) -> SearchableRecord | None:
    """Re-parse a message payload and build its record, or skip it."""
    try:
        message = MessageDocument.model_validate_json(raw)
    except ValidationError as exc:
        _LOGGER.warning(
            "skipping message that failed message parse",
            extra={"content_id": content_id, "errors": exc.error_count()},
        )
        return None
    return SearchableRecord(
        id=MESSAGE_ID_PREFIX + content_id,
        type=MESSAGE_TYPE,
        body=message.body,
        schema_url=message.schema_url,
        signed_at=message.signed_at,
        signer=message.signer,
        timelines=list(message.timelines),
    )


def default_registry() -> TransformerRegistry:
    """Return a registry with every built-in document type."""
    registry = TransformerRegistry()
    registry.register(MESSAGE_TYPE, transform_message)
    return registry


def transform_entry(
    entry: LogEntry, *, registry: TransformerRegistry | None = None
) -> SearchableRecord | None:
    """Map one log entry onto zero or one searchable record.

    Raises ``MalformedDocumentError`` when the envelope cannot be parsed.
    Unrecognized types yield ``None``.
    """
    envelope = parse_envelope(entry.document)
    transform = (registry or _DEFAULT_REGISTRY).get(envelope.type)
    if transform is None:
        return None
    content_id = derive_content_id(entry.document, envelope.signed_at)
    return transform(entry.document, envelope, content_id)


_DEFAULT_REGISTRY = default_registry()
