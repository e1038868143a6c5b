"""
Database - SQL review item store

Handles all database operations for review items and review events.
Uses SQLAlchemy ORM (Postgres in production, SQLite in tests).

This module handles ONLY database I/O.
Algorithm logic is handled by the sm2 package.
"""

from __future__ import annotations
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from vocab_srs.clock import ensure_utc, to_stored_time
from vocab_srs.config import get_database_url
from vocab_srs.errors import AlreadyExists, NotFound, StoreConflict
from vocab_srs.sm2.constants import Grade, ReviewState
from vocab_srs.sm2.review_item import ReviewEvent, ReviewItem
from vocab_srs.stores.models import Base, ReviewEventRecord, ReviewItemRecord

logger = logging.getLogger(__name__)


def create_store_engine(url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create an SQLAlchemy engine for the review database.

    Server databases get a connection pool; SQLite uses its default pool.

    Args:
        url: Connection string (default: DATABASE_URL)
    """
    url = url or get_database_url()
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo)
    return create_engine(
        url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=echo
    )


def init_db(engine: Engine) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times - only creates missing tables.
    """
    existing_tables = set(inspect(engine).get_table_names())
    missing = {"review_items", "review_events"} - existing_tables
    if missing:
        Base.metadata.create_all(engine)
        logger.info("Created review tables: %s", ", ".join(sorted(missing)))


def reset_db(engine: Engine) -> None:
    """
    DANGEROUS: Delete all data and recreate tables.

    All review history will be lost!
    """
    Base.metadata.drop_all(engine)
    logger.warning("All review tables dropped")
    init_db(engine)


# ---- Row mapping ----

def _to_db_time(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops the offset, so everything is written as UTC
    return to_stored_time(value)


def _item_from_record(record: ReviewItemRecord) -> ReviewItem:
    return ReviewItem(
        item_id=record.item_id,
        owner_id=record.owner_id,
        ease_factor=record.ease_factor,
        interval_days=record.interval_days,
        repetitions=record.repetitions,
        due_at=ensure_utc(record.due_at),
        lapses=record.lapses,
        state=ReviewState(record.state),
        last_reviewed_at=ensure_utc(record.last_reviewed_at),
    )


def _item_values(item: ReviewItem) -> dict:
    return {
        "ease_factor": item.ease_factor,
        "interval_days": item.interval_days,
        "repetitions": item.repetitions,
        "lapses": item.lapses,
        "state": item.state.value,
        "due_at": _to_db_time(item.due_at),
        "last_reviewed_at": _to_db_time(item.last_reviewed_at),
    }


def _event_record(event: ReviewEvent) -> ReviewEventRecord:
    return ReviewEventRecord(
        owner_id=event.owner_id,
        item_id=event.item_id,
        answered_at=_to_db_time(event.answered_at),
        grade=int(event.grade),
        latency_ms=event.latency_ms,
        state_before=event.state_before.value,
        state_after=event.state_after.value,
        ease_before=event.ease_before,
        ease_after=event.ease_after,
        interval_before=event.interval_before,
        interval_after=event.interval_after,
        session_id=event.session_id,
    )


def _event_from_record(record: ReviewEventRecord) -> ReviewEvent:
    return ReviewEvent(
        owner_id=record.owner_id,
        item_id=record.item_id,
        grade=Grade(record.grade),
        answered_at=ensure_utc(record.answered_at),
        state_before=ReviewState(record.state_before),
        state_after=ReviewState(record.state_after),
        ease_before=record.ease_before,
        ease_after=record.ease_after,
        interval_before=record.interval_before,
        interval_after=record.interval_after,
        latency_ms=record.latency_ms,
        session_id=record.session_id,
    )


class SqlReviewStore:
    """
    Review item store backed by an SQL database.

    compare_and_swap is a conditional UPDATE on last_reviewed_at; the affected
    row count decides between success and conflict.
    """

    def __init__(self, engine: Engine, create_tables: bool = True):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        if create_tables:
            init_db(engine)

    def _session(self) -> Session:
        return self._session_factory()

    def get(self, owner_id: str, item_id: str) -> Optional[ReviewItem]:
        session = self._session()
        try:
            record = session.get(ReviewItemRecord, (owner_id, item_id))
            return _item_from_record(record) if record is not None else None
        finally:
            session.close()

    def list_due(self, owner_id: str, before: datetime) -> list[ReviewItem]:
        session = self._session()
        try:
            records = session.query(ReviewItemRecord).filter(
                ReviewItemRecord.owner_id == owner_id,
                ReviewItemRecord.due_at <= _to_db_time(before)
            ).order_by(
                ReviewItemRecord.due_at,
                ReviewItemRecord.item_id
            ).all()
            return [_item_from_record(r) for r in records]
        finally:
            session.close()

    def list_items(self, owner_id: str) -> list[ReviewItem]:
        session = self._session()
        try:
            records = session.query(ReviewItemRecord).filter(
                ReviewItemRecord.owner_id == owner_id
            ).order_by(ReviewItemRecord.item_id).all()
            return [_item_from_record(r) for r in records]
        finally:
            session.close()

    def list_events(self, owner_id: str) -> list[ReviewEvent]:
        session = self._session()
        try:
            records = session.query(ReviewEventRecord).filter(
                ReviewEventRecord.owner_id == owner_id
            ).order_by(ReviewEventRecord.answered_at, ReviewEventRecord.id).all()
            return [_event_from_record(r) for r in records]
        finally:
            session.close()

    def create(self, item: ReviewItem) -> None:
        session = self._session()
        try:
            if session.get(ReviewItemRecord, (item.owner_id, item.item_id)) is not None:
                raise AlreadyExists(item.owner_id, item.item_id)
            session.add(ReviewItemRecord(
                owner_id=item.owner_id,
                item_id=item.item_id,
                **_item_values(item)
            ))
            try:
                session.commit()
            except IntegrityError as exc:
                # Lost a race with a concurrent create
                session.rollback()
                raise AlreadyExists(item.owner_id, item.item_id) from exc
        finally:
            session.close()

    def compare_and_swap(
        self,
        item: ReviewItem,
        expected_last_reviewed_at: Optional[datetime],
        event: Optional[ReviewEvent] = None
    ) -> None:
        session = self._session()
        try:
            query = session.query(ReviewItemRecord).filter(
                ReviewItemRecord.owner_id == item.owner_id,
                ReviewItemRecord.item_id == item.item_id,
            )
            if expected_last_reviewed_at is None:
                query = query.filter(ReviewItemRecord.last_reviewed_at.is_(None))
            else:
                query = query.filter(
                    ReviewItemRecord.last_reviewed_at == _to_db_time(expected_last_reviewed_at)
                )

            updated = query.update(_item_values(item), synchronize_session=False)
            if updated == 0:
                session.rollback()
                if session.get(ReviewItemRecord, (item.owner_id, item.item_id)) is None:
                    raise NotFound(item.owner_id, item.item_id)
                raise StoreConflict(item.owner_id, item.item_id, expected_last_reviewed_at)

            if event is not None:
                session.add(_event_record(event))
            session.commit()
        finally:
            session.close()
