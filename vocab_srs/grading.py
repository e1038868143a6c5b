"""
Answer grading helpers.

Turn a quiz answer into one of the four scheduler grades. A plain
correct/incorrect answer maps to GOOD/FAIL; latency thresholds, when given,
refine a correct answer into EASY or HARD.
"""

from __future__ import annotations

from typing import Optional

from vocab_srs.sm2.constants import Grade
from vocab_srs.sm2.scheduler import parse_grade

__all__ = [
    "normalize_answer",
    "is_correct_answer",
    "grade_from_answer",
    "grade_typed_answer",
    "parse_grade",
]


def normalize_answer(text: Optional[str]) -> str:
    """Trim, collapse inner whitespace and lowercase."""
    if not text:
        return ""
    return " ".join(text.split()).lower()


def is_correct_answer(expected: str, answer: Optional[str]) -> bool:
    expected = normalize_answer(expected)
    return bool(expected) and normalize_answer(answer) == expected


def grade_from_answer(
    correct: bool,
    latency_ms: Optional[int] = None,
    *,
    easy_under_ms: Optional[int] = None,
    hard_over_ms: Optional[int] = None
) -> Grade:
    """
    Map an answer to a grade.

    Args:
        correct: Whether the answer was right
        latency_ms: Time taken to answer
        easy_under_ms: Correct answers faster than this are EASY
        hard_over_ms: Correct answers slower than this are HARD
    """
    if not correct:
        return Grade.FAIL
    if latency_ms is not None:
        if easy_under_ms is not None and latency_ms < easy_under_ms:
            return Grade.EASY
        if hard_over_ms is not None and latency_ms > hard_over_ms:
            return Grade.HARD
    return Grade.GOOD


def grade_typed_answer(
    expected: str,
    answer: Optional[str],
    latency_ms: Optional[int] = None,
    *,
    easy_under_ms: Optional[int] = None,
    hard_over_ms: Optional[int] = None
) -> Grade:
    """Grade a typed answer against the expected term."""
    return grade_from_answer(
        is_correct_answer(expected, answer),
        latency_ms,
        easy_under_ms=easy_under_ms,
        hard_over_ms=hard_over_ms,
    )
