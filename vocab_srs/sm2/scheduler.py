"""
Scheduler - SM-2 Algorithm Logic

Pure scheduling and state updates (no database calls, no clock reads).

Main workflow:
1. Validate the outcome against the item (caller passes both)
2. Update ease factor and repetition count for the grade
3. Compute the next interval and clamp it
4. Derive the next state from the state machine
5. Return an updated copy of the item

Persistence is handled by the stores; orchestration by the session coordinator.
"""

from __future__ import annotations
import math
from dataclasses import replace
from datetime import timedelta

from vocab_srs.errors import InvalidGrade, MismatchedOutcome, Result
from vocab_srs.sm2.constants import (
    EASE_DELTA,
    EASY_BONUS,
    FIRST_INTERVAL_DAYS,
    GRADUATING_REPETITIONS,
    HARD_INTERVAL_MULTIPLIER,
    MAX_INTERVAL_DAYS,
    MIN_EASE,
    MIN_INTERVAL_DAYS,
    SECOND_INTERVAL_DAYS,
    Grade,
    ReviewState,
)
from vocab_srs.sm2.review_item import ReviewItem, ReviewOutcome


def parse_grade(value) -> Result[Grade]:
    """
    Coerce a Grade, its integer value or its name ("good", "Easy") to a Grade.

    Anything else yields InvalidGrade; there is no default grade.
    """
    if isinstance(value, Grade):
        return Result.success(value)
    if isinstance(value, bool):
        return Result.failure(InvalidGrade(value))
    if isinstance(value, int):
        try:
            return Result.success(Grade(value))
        except ValueError:
            return Result.failure(InvalidGrade(value))
    if isinstance(value, str):
        member = Grade.__members__.get(value.strip().upper())
        if member is not None:
            return Result.success(member)
    return Result.failure(InvalidGrade(value))


def schedule_outcome(item: ReviewItem, outcome: ReviewOutcome) -> Result[ReviewItem]:
    """
    Apply one graded outcome to a review item.

    Deterministic: identical inputs always yield identical outputs.

    Args:
        item: Current scheduling state
        outcome: Graded answer for the same (owner_id, item_id)

    Returns:
        Result carrying the updated ReviewItem, or InvalidGrade /
        MismatchedOutcome for malformed input
    """
    if outcome.item_id != item.item_id or outcome.owner_id != item.owner_id:
        return Result.failure(MismatchedOutcome(item.key, outcome.key))

    parsed = parse_grade(outcome.grade)
    if not parsed.ok:
        return parsed
    grade = parsed.value

    repetitions, ease, interval = _UPDATES[grade](item)
    interval = clamp_interval(interval)
    ease = round(max(MIN_EASE, ease), 4)

    answered_at = outcome.answered_at
    updated = replace(
        item,
        ease_factor=ease,
        interval_days=interval,
        repetitions=repetitions,
        lapses=item.lapses + 1 if grade == Grade.FAIL else item.lapses,
        state=next_state(item.state, grade, repetitions),
        due_at=answered_at + timedelta(days=interval),
        last_reviewed_at=answered_at,
    )
    return Result.success(updated)


def next_state(current: ReviewState, grade: Grade, repetitions: int) -> ReviewState:
    """
    State machine: New -> Learning -> Review <-> Lapsed.

    Args:
        current: State before the review
        grade: Validated grade
        repetitions: Repetition count after the review
    """
    if grade == Grade.FAIL:
        return ReviewState.LAPSED
    if current == ReviewState.LAPSED:
        return ReviewState.LEARNING
    if grade == Grade.EASY:
        return ReviewState.REVIEW
    if repetitions >= GRADUATING_REPETITIONS:
        return ReviewState.REVIEW
    return ReviewState.LEARNING


def clamp_interval(days: int) -> int:
    return max(MIN_INTERVAL_DAYS, min(MAX_INTERVAL_DAYS, days))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero (positive inputs only)."""
    if value >= MAX_INTERVAL_DAYS:
        return MAX_INTERVAL_DAYS
    return int(math.floor(value + 0.5))


# ---- Per-grade updates: item -> (repetitions, ease, interval) ----

def _on_fail(item: ReviewItem) -> tuple[int, float, int]:
    return 0, item.ease_factor + EASE_DELTA[Grade.FAIL], 1


def _on_hard(item: ReviewItem) -> tuple[int, float, int]:
    interval = max(1, round_half_up(item.interval_days * HARD_INTERVAL_MULTIPLIER))
    return item.repetitions + 1, item.ease_factor + EASE_DELTA[Grade.HARD], interval


def _on_good(item: ReviewItem) -> tuple[int, float, int]:
    repetitions = item.repetitions + 1
    ease = item.ease_factor
    if repetitions <= 1:
        interval = FIRST_INTERVAL_DAYS
    elif repetitions == 2:
        interval = SECOND_INTERVAL_DAYS
    else:
        interval = round_half_up(item.interval_days * ease)
    return repetitions, ease, interval


def _on_easy(item: ReviewItem) -> tuple[int, float, int]:
    repetitions = item.repetitions + 1
    ease = item.ease_factor + EASE_DELTA[Grade.EASY]
    base = FIRST_INTERVAL_DAYS if repetitions <= 1 else item.interval_days
    return repetitions, ease, round_half_up(base * ease * EASY_BONUS)


_UPDATES = {
    Grade.FAIL: _on_fail,
    Grade.HARD: _on_hard,
    Grade.GOOD: _on_good,
    Grade.EASY: _on_easy,
}
