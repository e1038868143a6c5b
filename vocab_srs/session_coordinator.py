"""
Session lifecycle for review sessions.

Draws the owner's queue from the store, applies graded answers through the
scheduler and writes them back with compare-and-swap. At most one grading per
(owner_id, item_id) may be in flight on a coordinator; concurrent writers in
other processes are caught by the store's CAS.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime
from typing import Iterable, Optional

from vocab_srs.clock import Clock, SystemClock, ensure_utc
from vocab_srs.config import QueueConfig
from vocab_srs.errors import DuplicateGrading, NotFound, Result, StoreError
from vocab_srs.session_builders.queue_builder import build_queue
from vocab_srs.sm2.review_item import ReviewEvent, ReviewItem, ReviewOutcome
from vocab_srs.sm2.scheduler import parse_grade, schedule_outcome
from vocab_srs.stores.base import ReviewItemStore

logger = logging.getLogger(__name__)


class SessionCoordinator:
    """
    Glue between the queue builder, the scheduler and a review item store.

    Store failures are returned verbatim as Result errors and never retried.
    """

    def __init__(
        self,
        store: ReviewItemStore,
        clock: Optional[Clock] = None,
        config: Optional[QueueConfig] = None
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.config = config or QueueConfig()

        self._lock = threading.Lock()
        self._in_flight: set[tuple[str, str]] = set()
        self._queues: dict[str, list[ReviewItem]] = {}
        self._session_ids: dict[str, str] = {}

    # ---- Enrollment ----

    def enroll(self, owner_id: str, item_id: str) -> Result[ReviewItem]:
        """
        Create a New review item, due immediately.

        Returns AlreadyExists when the owner already has the item.
        """
        item = ReviewItem.new(owner_id, item_id, self.clock.now())
        try:
            self.store.create(item)
        except StoreError as exc:
            return Result.failure(exc)
        logger.debug("Enrolled %s for %s", item_id, owner_id)
        return Result.success(item)

    def enroll_many(self, owner_id: str, item_ids: Iterable[str]) -> dict[str, Result[ReviewItem]]:
        """Enroll several items; one result per item_id."""
        return {item_id: self.enroll(owner_id, item_id) for item_id in item_ids}

    # ---- Queue ----

    def start_session(self, owner_id: str) -> Result[list[ReviewItem]]:
        """
        Build the owner's queue from the store and keep it as the queue view.

        Returns:
            Result carrying a copy of the queue (may be empty)
        """
        now = self.clock.now()
        try:
            due = self.store.list_due(owner_id, now)
        except StoreError as exc:
            return Result.failure(exc)

        queue = build_queue(due, now, self.config)
        with self._lock:
            self._queues[owner_id] = queue
            self._session_ids[owner_id] = str(uuid.uuid4())
        logger.info("Session for %s: %d items due (%d queued)", owner_id, len(due), len(queue))
        return Result.success(list(queue))

    def queue_view(self, owner_id: str) -> list[ReviewItem]:
        with self._lock:
            return list(self._queues.get(owner_id, []))

    def next_item(self, owner_id: str) -> Optional[ReviewItem]:
        with self._lock:
            queue = self._queues.get(owner_id)
            return queue[0] if queue else None

    def session_id(self, owner_id: str) -> Optional[str]:
        with self._lock:
            return self._session_ids.get(owner_id)

    # ---- Grading ----

    def grade_item(
        self,
        owner_id: str,
        item_id: str,
        grade,
        answered_at: Optional[datetime] = None,
        latency_ms: Optional[int] = None
    ) -> Result[ReviewItem]:
        """
        Grade one item and write the new schedule back to the store.

        Args:
            owner_id: Learner
            item_id: Vocabulary item
            grade: Grade, grade value or grade name
            answered_at: When the answer was given (default: clock.now())
            latency_ms: Optional answer latency, kept in the review event

        Returns:
            Result carrying the updated ReviewItem, or one of InvalidGrade,
            DuplicateGrading, NotFound, StoreConflict
        """
        parsed = parse_grade(grade)
        if not parsed.ok:
            return Result.failure(parsed.error)

        key = (owner_id, item_id)
        if not self._claim(key):
            logger.warning("Duplicate grading rejected for %s/%s", owner_id, item_id)
            return Result.failure(DuplicateGrading(owner_id, item_id))

        try:
            return self._grade_claimed(
                owner_id,
                item_id,
                parsed.value,
                ensure_utc(answered_at) if answered_at else self.clock.now(),
                latency_ms,
            )
        finally:
            self._release(key)

    def _grade_claimed(self, owner_id, item_id, grade, answered_at, latency_ms) -> Result[ReviewItem]:
        try:
            current = self.store.get(owner_id, item_id)
        except StoreError as exc:
            return Result.failure(exc)
        if current is None:
            return Result.failure(NotFound(owner_id, item_id))

        scheduled = schedule_outcome(current, ReviewOutcome(item_id, owner_id, grade, answered_at))
        if not scheduled.ok:
            return scheduled
        updated = scheduled.value

        event = ReviewEvent.from_transition(
            current,
            updated,
            grade,
            latency_ms=latency_ms,
            session_id=self.session_id(owner_id),
        )
        try:
            # Once issued, this write must be allowed to finish before a retry
            self.store.compare_and_swap(updated, current.last_reviewed_at, event)
        except StoreError as exc:
            logger.warning("Grading %s/%s failed: %s", owner_id, item_id, exc)
            return Result.failure(exc)

        self._remove_from_queue(owner_id, item_id)
        logger.debug(
            "Graded %s/%s %s: %s -> %s, next in %d days",
            owner_id, item_id, grade.name, current.state.value, updated.state.value,
            updated.interval_days,
        )
        return Result.success(updated)

    def _claim(self, key: tuple[str, str]) -> bool:
        with self._lock:
            if key in self._in_flight:
                return False
            self._in_flight.add(key)
            return True

    def _release(self, key: tuple[str, str]) -> None:
        with self._lock:
            self._in_flight.discard(key)

    def _remove_from_queue(self, owner_id: str, item_id: str) -> None:
        with self._lock:
            queue = self._queues.get(owner_id)
            if queue is not None:
                self._queues[owner_id] = [i for i in queue if i.item_id != item_id]
