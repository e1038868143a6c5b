"""
Review Item - per-learner scheduling state

Defines the scheduling state of one (owner, vocabulary item) pair, the
ephemeral outcome that drives an update, and the event recorded for it.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from vocab_srs.clock import ensure_utc, to_stored_time
from vocab_srs.sm2.constants import Grade, INITIAL_EASE, ReviewState


@dataclass(frozen=True)
class ReviewItem:
    """
    Scheduling state for a single vocabulary item of a single learner.

    Instances are immutable; the scheduler returns updated copies.
    """
    item_id: str
    owner_id: str

    ease_factor: float  # Interval growth multiplier, >= 1.3
    interval_days: int  # Days until next review, 0 = never reviewed
    repetitions: int    # Consecutive successes since the last lapse
    due_at: datetime    # When the item becomes eligible for review
    lapses: int         # Failed reviews, ever
    state: ReviewState
    last_reviewed_at: Optional[datetime] = None

    def __post_init__(self):
        # Naive timestamps are UTC; all backends keep milliseconds
        object.__setattr__(self, "due_at", to_stored_time(self.due_at))
        object.__setattr__(self, "last_reviewed_at", to_stored_time(self.last_reviewed_at))

    @property
    def key(self) -> tuple[str, str]:
        return (self.owner_id, self.item_id)

    @property
    def is_new(self) -> bool:
        return self.state == ReviewState.NEW

    def is_due(self, now: datetime) -> bool:
        return self.due_at <= ensure_utc(now)

    @classmethod
    def new(cls, owner_id: str, item_id: str, created_at: datetime) -> "ReviewItem":
        """Create a never-reviewed item that is due immediately."""
        return cls(
            item_id=item_id,
            owner_id=owner_id,
            ease_factor=INITIAL_EASE,
            interval_days=0,
            repetitions=0,
            due_at=created_at,
            lapses=0,
            state=ReviewState.NEW,
            last_reviewed_at=None,
        )


@dataclass(frozen=True)
class ReviewOutcome:
    """One graded answer. Not persisted."""
    item_id: str
    owner_id: str
    grade: Grade
    answered_at: datetime

    def __post_init__(self):
        object.__setattr__(self, "answered_at", to_stored_time(self.answered_at))

    @property
    def key(self) -> tuple[str, str]:
        return (self.owner_id, self.item_id)


@dataclass(frozen=True)
class ReviewEvent:
    """
    Log entry for a single applied grading.

    Captures the scheduling state before and after the review.
    """
    owner_id: str
    item_id: str
    grade: Grade
    answered_at: datetime

    state_before: ReviewState
    state_after: ReviewState
    ease_before: float
    ease_after: float
    interval_before: int
    interval_after: int

    latency_ms: Optional[int] = None
    session_id: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "answered_at", to_stored_time(self.answered_at))

    @classmethod
    def from_transition(
        cls,
        before: ReviewItem,
        after: ReviewItem,
        grade: Grade,
        latency_ms: Optional[int] = None,
        session_id: Optional[str] = None
    ) -> "ReviewEvent":
        return cls(
            owner_id=after.owner_id,
            item_id=after.item_id,
            grade=grade,
            answered_at=after.last_reviewed_at,
            state_before=before.state,
            state_after=after.state,
            ease_before=before.ease_factor,
            ease_after=after.ease_factor,
            interval_before=before.interval_days,
            interval_after=after.interval_days,
            latency_ms=latency_ms,
            session_id=session_id,
        )
