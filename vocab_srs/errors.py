"""
Error taxonomy and Result type for the scheduling core.

Every public entry point returns a Result instead of raising. Errors are still
Exception subclasses so callers can opt into raising with Result.unwrap().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


class SrsError(Exception):
    """Base class for all scheduling-core errors."""
    code = "srs_error"


# ---- Scheduler errors (caller bugs) ----

class SchedulerError(SrsError):
    """Malformed input to the pure scheduling functions."""
    code = "scheduler_error"


class InvalidGrade(SchedulerError):
    code = "invalid_grade"

    def __init__(self, grade):
        super().__init__(f"Invalid grade: {grade!r} (expected Fail, Hard, Good or Easy)")
        self.grade = grade


class MismatchedOutcome(SchedulerError):
    code = "mismatched_outcome"

    def __init__(self, item_key: tuple[str, str], outcome_key: tuple[str, str]):
        super().__init__(
            f"Outcome for {outcome_key} does not belong to review item {item_key}"
        )
        self.item_key = item_key
        self.outcome_key = outcome_key


# ---- Coordinator / store errors (recoverable by the caller) ----

class CoordinatorError(SrsError):
    """Failure while grading through the session coordinator."""
    code = "coordinator_error"


class DuplicateGrading(CoordinatorError):
    code = "duplicate_grading"

    def __init__(self, owner_id: str, item_id: str):
        super().__init__(f"Item {item_id!r} for owner {owner_id!r} is already being graded")
        self.owner_id = owner_id
        self.item_id = item_id


class StoreError(CoordinatorError):
    """Raised by store implementations and surfaced verbatim by the coordinator."""
    code = "store_error"


class NotFound(StoreError):
    code = "not_found"

    def __init__(self, owner_id: str, item_id: str):
        super().__init__(f"No review item {item_id!r} for owner {owner_id!r}")
        self.owner_id = owner_id
        self.item_id = item_id


class StoreConflict(StoreError):
    code = "store_conflict"

    def __init__(self, owner_id: str, item_id: str, expected_last_reviewed_at=None):
        super().__init__(
            f"Review item {item_id!r} for owner {owner_id!r} changed since it was read "
            f"(expected last_reviewed_at={expected_last_reviewed_at})"
        )
        self.owner_id = owner_id
        self.item_id = item_id
        self.expected_last_reviewed_at = expected_last_reviewed_at


class AlreadyExists(StoreError):
    code = "already_exists"

    def __init__(self, owner_id: str, item_id: str):
        super().__init__(f"Review item {item_id!r} for owner {owner_id!r} already exists")
        self.owner_id = owner_id
        self.item_id = item_id


# ---- Result ----

@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a core operation: either a value or a typed error.
    """
    value: Optional[T] = None
    error: Optional[SrsError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: SrsError) -> "Result[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
