"""Result Type: explicit success/failure values returned by persistence operations.

Invariants:
    - A store call returns exactly one of Ok(value) or Err(StoreFailure)
    - FailureKind is the only vocabulary the API layer translates to HTTP statuses
    - Nothing in this module raises; unwrapping happens at the API boundary

Design Decisions:
    - Frozen dataclasses over a third-party Either: pattern matching and isinstance both work
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class FailureKind(str, Enum):
    """Why a store operation did not produce a value."""
    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"
    QUERY = "query"


@dataclass(frozen=True)
class StoreFailure:
    kind: FailureKind
    operation: str
    detail: str = ""
    item_id: str | None = None


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    failure: StoreFailure


Result = Union[Ok[T], Err]


def not_found(operation: str, item_id: str) -> Err:
    """Shorthand for the one failure callers branch on."""
    return Err(StoreFailure(
        FailureKind.NOT_FOUND, operation,
        detail=f"no item with id {item_id}", item_id=item_id,
    ))
