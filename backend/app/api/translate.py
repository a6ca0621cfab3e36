"""Result Translation: turns store Results into values or HTTP-mapped TodoErrors.

Invariants:
    - Every FailureKind has exactly one error class, hence one HTTP status
    - NOT_FOUND → 404, UNAVAILABLE → 503, QUERY → 503
"""

from typing import TypeVar

from app.core.errors import DatabaseError, ItemNotFoundError, TodoError
from app.core.result import Err, FailureKind, Ok, Result, StoreFailure

T = TypeVar("T")


def _not_found(failure: StoreFailure) -> TodoError:
    return ItemNotFoundError(failure.item_id or "")


def _unavailable(failure: StoreFailure) -> TodoError:
    return DatabaseError("Connection or operational error", failure.operation)


def _query(failure: StoreFailure) -> TodoError:
    return DatabaseError("Database operation failed", failure.operation)


_ERROR_FOR_KIND = {
    FailureKind.NOT_FOUND: _not_found,
    FailureKind.UNAVAILABLE: _unavailable,
    FailureKind.QUERY: _query,
}


def to_http_error(failure: StoreFailure) -> TodoError:
    return _ERROR_FOR_KIND[failure.kind](failure)


def unwrap(result: Result[T]) -> T:
    """Return the Ok value or raise the TodoError its failure maps to."""
    if isinstance(result, Ok):
        return result.value
    if isinstance(result, Err):
        raise to_http_error(result.failure)
    raise TypeError(f"Expected Ok or Err, got {type(result).__name__}")
