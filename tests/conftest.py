import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from vocab_srs.clock import FixedClock
from vocab_srs.config import QueueConfig
from vocab_srs.session_coordinator import SessionCoordinator
from vocab_srs.stores import MemoryReviewStore
from vocab_srs.stores.database import SqlReviewStore

from factories import T0


@pytest.fixture
def t0():
    return T0


@pytest.fixture
def clock():
    return FixedClock(T0)


@pytest.fixture
def memory_store():
    return MemoryReviewStore()


@pytest.fixture
def coordinator(memory_store, clock):
    return SessionCoordinator(memory_store, clock=clock, config=QueueConfig())


@pytest.fixture
def sql_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sql_engine):
    return SqlReviewStore(sql_engine)


@pytest.fixture
def mongo_store():
    mongomock = pytest.importorskip("mongomock")
    from vocab_srs.stores.mongo_store import MongoReviewStore

    client = mongomock.MongoClient()
    return MongoReviewStore(client["vocab_srs_test"])
