"""
SQLAlchemy ORM Models for the review database

Defines ReviewItemRecord and ReviewEventRecord tables.
"""

from sqlalchemy import Column, DateTime, Float, Index, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class ReviewItemRecord(Base):
    """
    Persistent scheduling state for one (owner_id, item_id) pair.

    The composite primary key is the store's uniqueness constraint.
    """
    __tablename__ = 'review_items'

    owner_id = Column(String(255), primary_key=True, nullable=False)
    item_id = Column(String(255), primary_key=True, nullable=False)

    # SM-2 parameters
    ease_factor = Column(Float, nullable=False)
    interval_days = Column(Integer, nullable=False, default=0)
    repetitions = Column(Integer, nullable=False, default=0)
    lapses = Column(Integer, nullable=False, default=0)
    state = Column(String(20), nullable=False)  # New, Learning, Review, Lapsed

    # Scheduling timestamps (UTC)
    due_at = Column(DateTime(timezone=True), nullable=False)
    last_reviewed_at = Column(DateTime(timezone=True), nullable=True)  # CAS token

    __table_args__ = (
        Index('idx_review_items_owner_due', 'owner_id', 'due_at'),
    )

    def __repr__(self):
        return f"<ReviewItemRecord({self.owner_id}, {self.item_id}, {self.state})>"


class ReviewEventRecord(Base):
    """
    Log entry for a single applied grading.
    """
    __tablename__ = 'review_events'

    id = Column(Integer, primary_key=True, autoincrement=True)

    owner_id = Column(String(255), nullable=False)
    item_id = Column(String(255), nullable=False)

    # Timing and feedback
    answered_at = Column(DateTime(timezone=True), nullable=False)
    grade = Column(Integer, nullable=False)  # 1=FAIL, 2=HARD, 3=GOOD, 4=EASY
    latency_ms = Column(Integer, nullable=True)

    # State before/after review
    state_before = Column(String(20), nullable=False)
    state_after = Column(String(20), nullable=False)
    ease_before = Column(Float, nullable=False)
    ease_after = Column(Float, nullable=False)
    interval_before = Column(Integer, nullable=False)
    interval_after = Column(Integer, nullable=False)

    # Session context (optional, for analytics)
    session_id = Column(String(255), nullable=True)

    __table_args__ = (
        Index('idx_review_events_owner_time', 'owner_id', 'answered_at'),
    )

    def __repr__(self):
        return f"<ReviewEventRecord(id={self.id}, {self.owner_id}/{self.item_id}, grade={self.grade})>"
