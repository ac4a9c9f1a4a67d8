"""Exception normalization for substrate and service failures."""

from __future__ import annotations

from . import codes
from .factories import dependency_error, internal_error, validation_error
from .types import ErrorDetail

# Exception type names raised by the client libraries behind each substrate.
# Matched by name so this module does not import every client library.
_DEPENDENCY_EXCEPTION_NAMES = frozenset(
    {
        "MeilisearchApiError",
        "MeilisearchCommunicationError",
        "MeilisearchTimeoutError",
        "MeilisearchTaskFailedError",
        "RedisError",
        "OperationalError",
        "InterfaceError",
        "HTTPError",
        "RequestError",
    }
)


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Normalize a Python exception into a shared ``ErrorDetail``."""
    metadata = {"exception_type": type(exc).__name__}

    if isinstance(exc, TimeoutError):
        return dependency_error(
            str(exc) or "dependency timeout",
            code=codes.DEPENDENCY_TIMEOUT,
            metadata=metadata,
        )

    if isinstance(exc, ConnectionError) or _is_dependency_exception(exc):
        return dependency_error(
            str(exc) or "dependency unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            metadata=metadata,
        )

    if isinstance(exc, ValueError):
        return validation_error(
            str(exc), code=codes.INVALID_ARGUMENT, metadata=metadata
        )

    return internal_error(
        str(exc) or "unexpected exception",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )


def _is_dependency_exception(exc: Exception) -> bool:
    """Return True when any class in the exception MRO is a known client error."""
    return any(
        klass.__name__ in _DEPENDENCY_EXCEPTION_NAMES for klass in type(exc).__mro__
    )
