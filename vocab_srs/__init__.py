"""
vocab_srs - spaced-repetition core for vocabulary learning

Entry points:
    schedule_outcome(item, outcome)      pure SM-2 update -> Result[ReviewItem]
    build_queue(items, now, config)      ordered due queue -> list[ReviewItem]
    SessionCoordinator(store, clock).grade_item(owner_id, item_id, grade, answered_at)
                                         CAS-guarded grading -> Result[ReviewItem]
"""

from vocab_srs.clock import FixedClock, SystemClock
from vocab_srs.config import QueueConfig, load_queue_config
from vocab_srs.errors import (
    AlreadyExists,
    CoordinatorError,
    DuplicateGrading,
    InvalidGrade,
    MismatchedOutcome,
    NotFound,
    Result,
    SchedulerError,
    SrsError,
    StoreConflict,
    StoreError,
)
from vocab_srs.session_builders import QueuePools, build_queue, build_queue_pools
from vocab_srs.session_coordinator import SessionCoordinator
from vocab_srs.sm2 import (
    Grade,
    ReviewEvent,
    ReviewItem,
    ReviewOutcome,
    ReviewState,
    schedule_outcome,
)
from vocab_srs.stores import MemoryReviewStore, ReviewItemStore

__all__ = [
    "schedule_outcome",
    "build_queue",
    "build_queue_pools",
    "SessionCoordinator",
    "QueueConfig",
    "QueuePools",
    "load_queue_config",
    "SystemClock",
    "FixedClock",
    "MemoryReviewStore",
    "ReviewItemStore",
    "ReviewItem",
    "ReviewOutcome",
    "ReviewEvent",
    "Grade",
    "ReviewState",
    "Result",
    "SrsError",
    "SchedulerError",
    "CoordinatorError",
    "StoreError",
    "InvalidGrade",
    "MismatchedOutcome",
    "DuplicateGrading",
    "StoreConflict",
    "NotFound",
    "AlreadyExists",
]
