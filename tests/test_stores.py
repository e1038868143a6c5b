"""
Contract tests run against every store implementation.
"""

from datetime import timedelta

import pytest
from sqlalchemy import inspect

from vocab_srs.clock import FixedClock
from vocab_srs.errors import AlreadyExists, NotFound, StoreConflict
from vocab_srs.session_coordinator import SessionCoordinator
from vocab_srs.sm2 import Grade, ReviewEvent, ReviewOutcome, ReviewState, schedule_outcome
from vocab_srs.stores.database import create_store_engine, init_db, reset_db

from factories import OWNER, T0, make_item, reviewed_item


@pytest.fixture(params=["memory_store", "sql_store", "mongo_store"])
def store(request):
    return request.getfixturevalue(request.param)


def graded(item, grade=Grade.GOOD, at=T0):
    return schedule_outcome(item, ReviewOutcome(item.item_id, item.owner_id, grade, at)).unwrap()


class TestCreateAndGet:

    def test_round_trip(self, store):
        item = reviewed_item("w1", state=ReviewState.REVIEW, repetitions=4, lapses=2, ease_factor=1.9)
        store.create(item)

        loaded = store.get(OWNER, "w1")
        assert loaded.item_id == "w1"
        assert loaded.state == ReviewState.REVIEW
        assert loaded.repetitions == 4
        assert loaded.lapses == 2
        assert loaded.ease_factor == pytest.approx(1.9)
        assert loaded.due_at == item.due_at
        assert loaded.last_reviewed_at == item.last_reviewed_at
        assert loaded.due_at.tzinfo is not None

    def test_missing_is_none(self, store):
        assert store.get(OWNER, "nope") is None

    def test_unique_per_owner_and_item(self, store):
        store.create(make_item("w1"))
        with pytest.raises(AlreadyExists):
            store.create(make_item("w1"))
        # Same item for a different owner is fine
        store.create(make_item("w1", owner_id="other"))


class TestListing:

    def test_list_due(self, store):
        store.create(reviewed_item("late", days_ago=1, interval_days=10))
        store.create(reviewed_item("b", days_ago=3))
        store.create(reviewed_item("a", days_ago=3))
        store.create(make_item("new"))
        store.create(make_item("foreign", owner_id="other"))

        due = store.list_due(OWNER, T0)
        assert [i.item_id for i in due] == ["a", "b", "new"]

    def test_list_items_and_events(self, store):
        item = make_item("w1")
        store.create(item)
        updated = graded(item)
        store.compare_and_swap(updated, None, ReviewEvent.from_transition(item, updated, Grade.GOOD))

        assert [i.item_id for i in store.list_items(OWNER)] == ["w1"]
        [event] = store.list_events(OWNER)
        assert event.grade == Grade.GOOD
        assert event.state_after == ReviewState.LEARNING
        assert store.list_events("other") == []


class TestCompareAndSwap:

    def test_first_review_from_new(self, store):
        item = make_item("w1")
        store.create(item)
        updated = graded(item)

        store.compare_and_swap(updated, None)
        assert store.get(OWNER, "w1").repetitions == 1

    def test_stale_expectation_conflicts(self, store):
        item = make_item("w1")
        store.create(item)
        first = graded(item)
        store.compare_and_swap(first, None)

        second = graded(item, Grade.EASY, at=T0 + timedelta(minutes=1))
        with pytest.raises(StoreConflict):
            store.compare_and_swap(second, None)
        assert store.get(OWNER, "w1").state == ReviewState.LEARNING

    def test_chain_of_swaps(self, store):
        item = make_item("w1")
        store.create(item)
        at = T0
        for _ in range(3):
            current = store.get(OWNER, "w1")
            at = at + timedelta(days=1, milliseconds=1)
            store.compare_and_swap(graded(current, at=at), current.last_reviewed_at)
        assert store.get(OWNER, "w1").repetitions == 3

    def test_missing_item(self, store):
        with pytest.raises(NotFound):
            store.compare_and_swap(graded(make_item("ghost")), None)

    def test_conflict_writes_no_event(self, store):
        item = reviewed_item("w1")
        store.create(item)
        updated = graded(item)
        event = ReviewEvent.from_transition(item, updated, Grade.GOOD)

        with pytest.raises(StoreConflict):
            store.compare_and_swap(updated, item.last_reviewed_at - timedelta(days=1), event)
        assert store.list_events(OWNER) == []


class TestWithCoordinator:

    def test_full_session(self, store):
        clock = FixedClock(T0)
        coordinator = SessionCoordinator(store, clock)
        coordinator.enroll_many(OWNER, ["w1", "w2"])
        queue = coordinator.start_session(OWNER).value

        for item in queue:
            clock.advance(minutes=1)
            assert coordinator.grade_item(OWNER, item.item_id, Grade.GOOD).ok

        assert coordinator.queue_view(OWNER) == []
        clock.advance(days=1)
        assert len(coordinator.start_session(OWNER).value) == 2
        assert len(store.list_events(OWNER)) == 2

    def test_returned_item_matches_stored(self, store):
        clock = FixedClock(T0 + timedelta(microseconds=123456))
        coordinator = SessionCoordinator(store, clock)
        coordinator.enroll(OWNER, "w1")
        clock.advance(minutes=5, microseconds=789)

        result = coordinator.grade_item(OWNER, "w1", Grade.GOOD)

        assert result.value == store.get(OWNER, "w1")
        [event] = store.list_events(OWNER)
        assert event.answered_at == result.value.last_reviewed_at

    def test_naive_expected_timestamp(self, store):
        item = reviewed_item("w1")
        store.create(item)
        expected = item.last_reviewed_at.replace(tzinfo=None)
        store.compare_and_swap(graded(item), expected)
        assert store.get(OWNER, "w1").repetitions == 2

    def test_replace_preserves_other_owner(self, store):
        store.create(make_item("w1"))
        store.create(make_item("w1", owner_id="other"))
        updated = graded(store.get(OWNER, "w1"))
        store.compare_and_swap(updated, None)

        assert store.get("other", "w1") == make_item("w1", owner_id="other")


class TestSqlSchema:

    def test_engine_from_url(self, tmp_path):
        engine = create_store_engine(f"sqlite:///{tmp_path / 'srs.db'}")
        try:
            init_db(engine)
            init_db(engine)
            assert {"review_items", "review_events"} <= set(inspect(engine).get_table_names())
        finally:
            engine.dispose()

    def test_reset_clears_data(self, sql_engine, sql_store):
        sql_store.create(make_item("w1"))
        reset_db(sql_engine)
        assert sql_store.get(OWNER, "w1") is None
