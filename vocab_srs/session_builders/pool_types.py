"""
Typed pool models shared by the queue builder and analytics.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal

from vocab_srs.sm2.review_item import ReviewItem


PoolName = Literal["review", "new", "upcoming"]


@dataclass
class QueuePools:
    """
    Snapshot partition of an owner's items at one instant.

    review: due Learning/Review/Lapsed items
    new: due New items
    upcoming: items not yet due
    """
    review: list[ReviewItem] = field(default_factory=list)
    new: list[ReviewItem] = field(default_factory=list)
    upcoming: list[ReviewItem] = field(default_factory=list)

    def counts(self) -> dict[PoolName, int]:
        return {
            "review": len(self.review),
            "new": len(self.new),
            "upcoming": len(self.upcoming),
        }

    @property
    def due_count(self) -> int:
        return len(self.review) + len(self.new)
