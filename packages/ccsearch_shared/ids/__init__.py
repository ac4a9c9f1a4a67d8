"""Public API for content-derived identifiers."""

from .cdid import (
    CDID_ALPHABET,
    CDID_LENGTH,
    HASH_PREFIX_BYTES,
    cdid_bytes,
    cdid_str,
    content_hash,
    derive_content_id,
)

__all__ = [
    "CDID_ALPHABET",
    "CDID_LENGTH",
    "HASH_PREFIX_BYTES",
    "cdid_bytes",
    "cdid_str",
    "content_hash",
    "derive_content_id",
]
