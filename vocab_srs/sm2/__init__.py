"""
SM-2 - spaced repetition scheduling

Pure scheduling core for vocabulary review items:
- Ease factor controls interval growth (floored at 1.3)
- Repetitions count consecutive successes since the last lapse
- State machine: New -> Learning -> Review <-> Lapsed

Quick start:
    from vocab_srs import sm2

    item = sm2.ReviewItem.new("learner-1", "word-42", now)
    outcome = sm2.ReviewOutcome("word-42", "learner-1", sm2.Grade.GOOD, now)
    result = sm2.schedule_outcome(item, outcome)
    if result.ok:
        item = result.value
"""

from vocab_srs.sm2.constants import (
    Grade,
    ReviewState,
    INITIAL_EASE,
    MIN_EASE,
    MIN_INTERVAL_DAYS,
    MAX_INTERVAL_DAYS,
    MAX_NEW_PER_SESSION,
    MAX_REVIEW_PER_SESSION,
)
from vocab_srs.sm2.review_item import ReviewEvent, ReviewItem, ReviewOutcome
from vocab_srs.sm2.scheduler import (
    clamp_interval,
    next_state,
    parse_grade,
    schedule_outcome,
)


__all__ = [
    # Core algorithm
    "schedule_outcome",
    "parse_grade",
    "next_state",
    "clamp_interval",

    # Data
    "ReviewItem",
    "ReviewOutcome",
    "ReviewEvent",

    # Enums
    "Grade",
    "ReviewState",

    # Parameters
    "INITIAL_EASE",
    "MIN_EASE",
    "MIN_INTERVAL_DAYS",
    "MAX_INTERVAL_DAYS",
    "MAX_NEW_PER_SESSION",
    "MAX_REVIEW_PER_SESSION",
]
