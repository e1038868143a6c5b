"""
Store contract consumed by the session coordinator.

Implementations raise StoreError subclasses (NotFound, StoreConflict,
AlreadyExists); the coordinator converts them into Result failures without
retrying or masking them.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional, Protocol

from vocab_srs.sm2.review_item import ReviewEvent, ReviewItem


class ReviewItemStore(Protocol):

    def get(self, owner_id: str, item_id: str) -> Optional[ReviewItem]:
        """Return the item, or None when the owner has no such item."""
        ...

    def list_due(self, owner_id: str, before: datetime) -> list[ReviewItem]:
        """Items of the owner with due_at <= before."""
        ...

    def compare_and_swap(
        self,
        item: ReviewItem,
        expected_last_reviewed_at: Optional[datetime],
        event: Optional[ReviewEvent] = None
    ) -> None:
        """
        Replace the stored item if its last_reviewed_at still equals the
        expected value; persist the event with the same write.

        Raises:
            NotFound: no stored item for (owner_id, item_id)
            StoreConflict: the stored item changed since it was read
        """
        ...

    def create(self, item: ReviewItem) -> None:
        """
        Raises:
            AlreadyExists: an item for (owner_id, item_id) is already stored
        """
        ...

    def list_items(self, owner_id: str) -> list[ReviewItem]:
        ...

    def list_events(self, owner_id: str) -> list[ReviewEvent]:
        ...
