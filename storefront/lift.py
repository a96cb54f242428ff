"""
Lift — turn raising coroutines into Result-returning computations.

Service code raises domain errors inside database transactions so SQLAlchemy
rolls back; ``guarded`` catches them on the way out and hands the caller a
``Result`` instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Awaitable

from kungfu import LazyCoroResult, Result, Ok, Error

from combinators.lift import catching_async

from storefront.errors import StorefrontError, StorageError

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Error Mapping
# ═══════════════════════════════════════════════════════════════════════════════

def as_storefront_error(exc: Exception) -> StorefrontError:
    """Domain errors pass through; anything else becomes a StorageError."""
    if isinstance(exc, StorefrontError):
        return exc
    logger.error("Storage operation failed: %s", exc, exc_info=exc)
    return StorageError("Internal storage error", exc)


# ═══════════════════════════════════════════════════════════════════════════════
# Lifting
# ═══════════════════════════════════════════════════════════════════════════════

def guarded[T](action: Callable[[], Awaitable[T]]) -> LazyCoroResult[T, StorefrontError]:
    """
    Run ``action`` and capture any exception as ``Error(StorefrontError)``.

    Example:
        result = await guarded(lambda: self._insert(new_store))
        match result:
            case Ok(store): ...
            case Error(e): ...
    """
    return catching_async(action, on_error=as_storefront_error)


def unwrap[T, E: Exception](result: Result[T, E]) -> T:
    """Return the Ok value or raise the Error payload. For use inside transactions."""
    match result:
        case Ok(value):
            return value
        case Error(e):
            raise e


__all__ = (
    "as_storefront_error",
    "guarded",
    "unwrap",
)
