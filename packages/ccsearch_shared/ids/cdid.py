"""Content-derived identifier (CDID) helpers.

A CDID is 16 bytes: the first 10 bytes of a keccak-256 digest followed by a
48-bit big-endian millisecond timestamp. The string form is RFC 4648 base32
bit grouping over a lowercase Crockford-style alphabet, unpadded, giving
exactly 26 characters.
"""

from __future__ import annotations

import base64

from Crypto.Hash import keccak

CDID_ALPHABET = "0123456789abcdefghjkmnpqrstvwxyz"
CDID_LENGTH = 26
HASH_PREFIX_BYTES = 10

_RFC4648_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_TRANSLATION = str.maketrans(_RFC4648_ALPHABET, CDID_ALPHABET)
_TIMESTAMP_MASK = (1 << 48) - 1


def content_hash(payload: bytes | str) -> bytes:
    """Return the full 32-byte keccak-256 digest of ``payload``.

    String input is hashed as its UTF-8 bytes.
    """
    data = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
    digest = keccak.new(digest_bits=256)
    digest.update(data)
    return digest.digest()


def cdid_bytes(hash_prefix: bytes, timestamp_ms: int) -> bytes:
    """Pack a 10-byte hash prefix and a millisecond timestamp into 16 bytes.

    Only the low 48 bits of the timestamp are kept.
    """
    if len(hash_prefix) != HASH_PREFIX_BYTES:
        raise ValueError(f"hash prefix must be exactly {HASH_PREFIX_BYTES} bytes")
    stamp = int(timestamp_ms) & _TIMESTAMP_MASK
    return bytes(hash_prefix) + stamp.to_bytes(6, byteorder="big", signed=False)


def cdid_str(value: bytes) -> str:
    """Encode 16 CDID bytes into the canonical 26-character string."""
    if len(value) != 16:
        raise ValueError("CDID bytes must be exactly 16 bytes")
    encoded = base64.b32encode(value).decode("ascii").rstrip("=")
    return encoded.translate(_TRANSLATION)


def derive_content_id(payload: bytes | str, timestamp_ms: int) -> str:
    """Derive the CDID string for one payload and its signing time."""
    prefix = content_hash(payload)[:HASH_PREFIX_BYTES]
    return cdid_str(cdid_bytes(prefix, timestamp_ms))
