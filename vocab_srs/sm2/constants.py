"""
SM-2 Constants and Parameters

All tunable parameters of the scheduler in one place.
"""

from enum import Enum, IntEnum


# ---- Grades ----

class Grade(IntEnum):
    """Learner's self-assessed (or derived) recall quality."""
    FAIL = 1   # Retrieval failed
    HARD = 2   # Retrieved with high effort
    GOOD = 3   # Retrieved normally
    EASY = 4   # Retrieved fluently


# ---- Item States ----

class ReviewState(str, Enum):
    """Lifecycle state of a review item."""
    NEW = "New"
    LEARNING = "Learning"
    REVIEW = "Review"
    LAPSED = "Lapsed"


# ---- Ease Factor ----

INITIAL_EASE = 2.5
MIN_EASE = 1.3

EASE_DELTA = {
    Grade.FAIL: -0.20,
    Grade.HARD: -0.15,
    Grade.GOOD: 0.0,
    Grade.EASY: +0.15,
}


# ---- Intervals (days) ----

MIN_INTERVAL_DAYS = 1
MAX_INTERVAL_DAYS = 36500  # ~100 years

FIRST_INTERVAL_DAYS = 1    # After the first successful review
SECOND_INTERVAL_DAYS = 6   # After the second consecutive success

HARD_INTERVAL_MULTIPLIER = 1.2
EASY_BONUS = 1.3

# Consecutive successes needed before an item graduates to Review
GRADUATING_REPETITIONS = 2


# ---- Queue Defaults ----

MAX_NEW_PER_SESSION = 10
MAX_REVIEW_PER_SESSION = 100
