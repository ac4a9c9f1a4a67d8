"""Typed response envelopes for in-process service calls."""

from .envelope import Envelope, failure, success
from .meta import EnvelopeKind, EnvelopeMeta, new_meta

__all__ = [
    "Envelope",
    "EnvelopeKind",
    "EnvelopeMeta",
    "failure",
    "new_meta",
    "success",
]
