"""
MongoDB repository for review items.

One document per (owner_id, item_id) in the review_items collection, with a
unique compound index; review events go to a separate append-only collection.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from vocab_srs.clock import ensure_utc, to_stored_time
from vocab_srs.config import MONGO_DB_NAME, get_mongo_uri
from vocab_srs.errors import AlreadyExists, NotFound, StoreConflict
from vocab_srs.sm2.constants import Grade, ReviewState
from vocab_srs.sm2.review_item import ReviewEvent, ReviewItem

# Configuration
ITEMS_COLLECTION = "review_items"
EVENTS_COLLECTION = "review_events"


# ---- Connection Management ----

def get_database(mongo_uri: Optional[str] = None, db_name: str = MONGO_DB_NAME) -> Database:
    """
    Connect to the review database.

    Returns:
        MongoDB database object
    """
    client = MongoClient(
        mongo_uri or get_mongo_uri(),
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    return client[db_name]


# ---- Document mapping ----

def _to_bson_time(value: Optional[datetime]) -> Optional[datetime]:
    """Naive UTC at millisecond precision, as BSON dates are stored."""
    value = to_stored_time(value)
    if value is None:
        return None
    return value.replace(tzinfo=None)


def _item_to_doc(item: ReviewItem) -> dict:
    return {
        "owner_id": item.owner_id,
        "item_id": item.item_id,
        "ease_factor": item.ease_factor,
        "interval_days": item.interval_days,
        "repetitions": item.repetitions,
        "lapses": item.lapses,
        "state": item.state.value,
        "due_at": _to_bson_time(item.due_at),
        "last_reviewed_at": _to_bson_time(item.last_reviewed_at),
    }


def _item_from_doc(doc: dict) -> ReviewItem:
    return ReviewItem(
        item_id=doc["item_id"],
        owner_id=doc["owner_id"],
        ease_factor=doc["ease_factor"],
        interval_days=doc["interval_days"],
        repetitions=doc["repetitions"],
        due_at=ensure_utc(doc["due_at"]),
        lapses=doc["lapses"],
        state=ReviewState(doc["state"]),
        last_reviewed_at=ensure_utc(doc.get("last_reviewed_at")),
    )


def _event_to_doc(event: ReviewEvent) -> dict:
    return {
        "owner_id": event.owner_id,
        "item_id": event.item_id,
        "grade": int(event.grade),
        "answered_at": _to_bson_time(event.answered_at),
        "state_before": event.state_before.value,
        "state_after": event.state_after.value,
        "ease_before": event.ease_before,
        "ease_after": event.ease_after,
        "interval_before": event.interval_before,
        "interval_after": event.interval_after,
        "latency_ms": event.latency_ms,
        "session_id": event.session_id,
    }


def _event_from_doc(doc: dict) -> ReviewEvent:
    return ReviewEvent(
        owner_id=doc["owner_id"],
        item_id=doc["item_id"],
        grade=Grade(doc["grade"]),
        answered_at=ensure_utc(doc["answered_at"]),
        state_before=ReviewState(doc["state_before"]),
        state_after=ReviewState(doc["state_after"]),
        ease_before=doc["ease_before"],
        ease_after=doc["ease_after"],
        interval_before=doc["interval_before"],
        interval_after=doc["interval_after"],
        latency_ms=doc.get("latency_ms"),
        session_id=doc.get("session_id"),
    )


class MongoReviewStore:
    """
    Review item store backed by MongoDB.

    compare_and_swap filters update_one on the expected last_reviewed_at.
    The event insert follows the update; a failed insert leaves the item
    updated and raises the driver error.
    """

    def __init__(self, database: Database):
        self.items: Collection = database[ITEMS_COLLECTION]
        self.events: Collection = database[EVENTS_COLLECTION]
        self.ensure_indexes()

    def ensure_indexes(self) -> None:
        self.items.create_index(
            [("owner_id", ASCENDING), ("item_id", ASCENDING)],
            unique=True,
            name="uniq_owner_item",
        )
        self.items.create_index([("owner_id", ASCENDING), ("due_at", ASCENDING)])
        self.events.create_index([("owner_id", ASCENDING), ("answered_at", ASCENDING)])

    def get(self, owner_id: str, item_id: str) -> Optional[ReviewItem]:
        doc = self.items.find_one({"owner_id": owner_id, "item_id": item_id})
        return _item_from_doc(doc) if doc else None

    def list_due(self, owner_id: str, before: datetime) -> list[ReviewItem]:
        cursor = self.items.find(
            {"owner_id": owner_id, "due_at": {"$lte": _to_bson_time(before)}}
        ).sort([("due_at", ASCENDING), ("item_id", ASCENDING)])
        return [_item_from_doc(doc) for doc in cursor]

    def list_items(self, owner_id: str) -> list[ReviewItem]:
        cursor = self.items.find({"owner_id": owner_id}).sort("item_id", ASCENDING)
        return [_item_from_doc(doc) for doc in cursor]

    def list_events(self, owner_id: str) -> list[ReviewEvent]:
        cursor = self.events.find({"owner_id": owner_id}).sort("answered_at", ASCENDING)
        return [_event_from_doc(doc) for doc in cursor]

    def create(self, item: ReviewItem) -> None:
        try:
            self.items.insert_one(_item_to_doc(item))
        except DuplicateKeyError as exc:
            raise AlreadyExists(item.owner_id, item.item_id) from exc

    def compare_and_swap(
        self,
        item: ReviewItem,
        expected_last_reviewed_at: Optional[datetime],
        event: Optional[ReviewEvent] = None
    ) -> None:
        doc = _item_to_doc(item)
        result = self.items.update_one(
            {
                "owner_id": item.owner_id,
                "item_id": item.item_id,
                "last_reviewed_at": _to_bson_time(expected_last_reviewed_at),
            },
            {"$set": doc},
        )
        if result.matched_count == 0:
            if self.items.find_one({"owner_id": item.owner_id, "item_id": item.item_id}) is None:
                raise NotFound(item.owner_id, item.item_id)
            raise StoreConflict(item.owner_id, item.item_id, expected_last_reviewed_at)

        if event is not None:
            self.events.insert_one(_event_to_doc(event))
