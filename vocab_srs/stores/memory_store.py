"""
In-process review item store.

Thread-safe; suitable for tests and single-process deployments.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Optional

from vocab_srs.clock import ensure_utc
from vocab_srs.errors import AlreadyExists, NotFound, StoreConflict
from vocab_srs.sm2.review_item import ReviewEvent, ReviewItem


class MemoryReviewStore:

    def __init__(self, items: Optional[list[ReviewItem]] = None):
        self._items: dict[tuple[str, str], ReviewItem] = {}
        self._events: list[ReviewEvent] = []
        self._lock = threading.Lock()
        for item in items or []:
            self.create(item)

    def get(self, owner_id: str, item_id: str) -> Optional[ReviewItem]:
        with self._lock:
            return self._items.get((owner_id, item_id))

    def list_due(self, owner_id: str, before: datetime) -> list[ReviewItem]:
        before = ensure_utc(before)
        with self._lock:
            due = [
                item for (owner, _), item in self._items.items()
                if owner == owner_id and item.due_at <= before
            ]
        due.sort(key=lambda i: (i.due_at, i.item_id))
        return due

    def list_items(self, owner_id: str) -> list[ReviewItem]:
        with self._lock:
            items = [item for (owner, _), item in self._items.items() if owner == owner_id]
        items.sort(key=lambda i: i.item_id)
        return items

    def list_events(self, owner_id: str) -> list[ReviewEvent]:
        with self._lock:
            return [e for e in self._events if e.owner_id == owner_id]

    def create(self, item: ReviewItem) -> None:
        with self._lock:
            if item.key in self._items:
                raise AlreadyExists(item.owner_id, item.item_id)
            self._items[item.key] = item

    def compare_and_swap(
        self,
        item: ReviewItem,
        expected_last_reviewed_at: Optional[datetime],
        event: Optional[ReviewEvent] = None
    ) -> None:
        with self._lock:
            current = self._items.get(item.key)
            if current is None:
                raise NotFound(item.owner_id, item.item_id)
            if current.last_reviewed_at != ensure_utc(expected_last_reviewed_at):
                raise StoreConflict(item.owner_id, item.item_id, expected_last_reviewed_at)
            self._items[item.key] = item
            if event is not None:
                self._events.append(event)
