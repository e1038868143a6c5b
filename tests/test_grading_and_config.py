import logging
from datetime import datetime, timedelta, timezone

import pytest

from vocab_srs.clock import FixedClock, SystemClock, ensure_utc, to_stored_time
from vocab_srs.config import (
    QueueConfig,
    get_database_url,
    get_default_owner_id,
    get_mongo_uri,
    load_queue_config,
)
from vocab_srs.errors import InvalidGrade, NotFound, Result
from vocab_srs.grading import (
    grade_from_answer,
    grade_typed_answer,
    is_correct_answer,
    normalize_answer,
)
from vocab_srs.logging_config import LOGGER_NAME, setup_logging
from vocab_srs.sm2 import Grade


class TestAnswerGrading:

    def test_normalize(self):
        assert normalize_answer("  Hello   World ") == "hello world"
        assert normalize_answer(None) == ""

    @pytest.mark.parametrize("expected,answer,correct", [
        ("apple", "Apple", True),
        ("apple", " apple ", True),
        ("ice cream", "ice  cream", True),
        ("apple", "apples", False),
        ("apple", "", False),
        ("", "", False),
    ])
    def test_is_correct(self, expected, answer, correct):
        assert is_correct_answer(expected, answer) is correct

    def test_pass_fail(self):
        assert grade_from_answer(True) == Grade.GOOD
        assert grade_from_answer(False) == Grade.FAIL

    def test_latency_thresholds(self):
        thresholds = dict(easy_under_ms=2000, hard_over_ms=8000)
        assert grade_from_answer(True, 1500, **thresholds) == Grade.EASY
        assert grade_from_answer(True, 5000, **thresholds) == Grade.GOOD
        assert grade_from_answer(True, 9000, **thresholds) == Grade.HARD
        assert grade_from_answer(False, 500, **thresholds) == Grade.FAIL

    def test_latency_ignored_without_thresholds(self):
        assert grade_from_answer(True, 100) == Grade.GOOD

    def test_typed_answer(self):
        assert grade_typed_answer("house", "House") == Grade.GOOD
        assert grade_typed_answer("house", "horse") == Grade.FAIL

    def test_typed_answer_latency_thresholds(self):
        assert grade_typed_answer("house", "house", 900, easy_under_ms=1000) == Grade.EASY
        assert grade_typed_answer("house", "house", 9000, hard_over_ms=8000) == Grade.HARD
        with pytest.raises(TypeError):
            grade_typed_answer("house", "house", 900, 1000)


class TestQueueConfigFromEnv:

    def test_defaults(self, monkeypatch):
        for name in ["SRS_MAX_NEW_PER_SESSION", "SRS_MAX_REVIEW_PER_SESSION", "SRS_SESSION_SIZE"]:
            monkeypatch.delenv(name, raising=False)
        assert load_queue_config() == QueueConfig()
        assert QueueConfig().max_new_per_session == 10
        assert QueueConfig().max_review_per_session == 100

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("SRS_MAX_NEW_PER_SESSION", "3")
        monkeypatch.setenv("SRS_MAX_REVIEW_PER_SESSION", "40")
        monkeypatch.setenv("SRS_SESSION_SIZE", "25")
        config = load_queue_config()

        assert config.max_new_per_session == 3
        assert config.max_review_per_session == 40
        assert config.session_size == 25

    def test_bad_integer(self, monkeypatch):
        monkeypatch.setenv("SRS_MAX_NEW_PER_SESSION", "many")
        with pytest.raises(ValueError):
            load_queue_config()


class TestConnectionSettings:

    def test_database_url_required(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ValueError):
            get_database_url()

    def test_test_mode_swaps_database(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/srs_db")
        monkeypatch.setenv("TEST_MODE", "true")
        assert get_database_url().endswith("/test_srs_db")

        monkeypatch.setenv("TEST_MODE", "false")
        assert get_database_url().endswith("/srs_db")

    def test_mongo_uri_required(self, monkeypatch):
        monkeypatch.delenv("MONGO_URI", raising=False)
        with pytest.raises(ValueError):
            get_mongo_uri()

    def test_default_owner(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_OWNER_ID", "ben")
        assert get_default_owner_id() == "ben"


class TestClock:

    def test_fixed_clock(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        clock = FixedClock(start)
        assert clock.now() == start
        assert clock.advance(days=2) == start + timedelta(days=2)
        clock.set(start)
        assert clock.now() == start

    def test_system_clock_is_utc(self):
        assert SystemClock().now().tzinfo == timezone.utc

    def test_ensure_utc(self):
        naive = datetime(2026, 1, 1, 12, 0)
        assert ensure_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert ensure_utc(None) is None
        cet = timezone(timedelta(hours=1))
        assert ensure_utc(datetime(2026, 1, 1, 13, 0, tzinfo=cet)).hour == 12

    def test_stored_time_is_utc_milliseconds(self):
        value = to_stored_time(datetime(2026, 1, 1, 12, 0, 0, 123456))
        assert value == datetime(2026, 1, 1, 12, 0, 0, 123000, tzinfo=timezone.utc)
        assert to_stored_time(None) is None


class TestResult:

    def test_success(self):
        result = Result.success(5)
        assert result.ok
        assert result.unwrap() == 5

    def test_failure(self):
        error = InvalidGrade("x")
        result = Result.failure(error)
        assert not result.ok
        assert result.error.code == "invalid_grade"
        with pytest.raises(InvalidGrade):
            result.unwrap()

    def test_error_messages_name_the_item(self):
        assert "word-3" in str(NotFound("learner", "word-3"))


def test_setup_logging_is_idempotent():
    logger = setup_logging("debug")
    setup_logging("debug")
    try:
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
    finally:
        logger.handlers.clear()
        logger.propagate = True
