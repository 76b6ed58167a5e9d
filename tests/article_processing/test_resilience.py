from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from src.functions.article_processing.core.contracts import ArticleStatus, BreakerSettings, CircuitBreakerState
from src.functions.article_processing.core.db.breaker_state import CircuitBreakerStore
from src.functions.article_processing.core.resilience.circuit_breaker import CircuitBreaker
from src.functions.article_processing.core.resilience.retry_scheduler import (
    retry_delay_minutes,
    schedule_retry,
    stuck_cutoff,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "retry_count, expected",
    [(0, 1), (1, 2), (2, 4), (3, 8), (4, 16), (5, 32), (6, 60), (7, 60), (10, 60), (-1, 1)],
)
def test_retry_delay_doubles_up_to_one_hour(retry_count, expected):
    assert retry_delay_minutes(retry_count) == expected


def test_retry_delay_never_exceeds_ceiling():
    assert all(retry_delay_minutes(n) <= 60 for n in range(0, 50))


def test_first_failure_retries_after_two_minutes():
    decision = schedule_retry(0, NOW)

    assert decision.status is ArticleStatus.PENDING
    assert decision.retry_count == 1
    assert decision.retry_after == NOW + timedelta(minutes=2)
    assert not decision.exhausted


def test_fourth_failure_waits_sixteen_minutes():
    decision = schedule_retry(3, NOW)

    assert decision.retry_count == 4
    assert decision.retry_after == NOW + timedelta(minutes=16)


def test_reaching_max_retries_fails_permanently():
    decision = schedule_retry(4, NOW, max_retries=5)

    assert decision.status is ArticleStatus.FAILED
    assert decision.retry_count == 5
    assert decision.retry_after is None
    assert decision.exhausted


def test_stuck_cutoff_subtracts_threshold():
    assert stuck_cutoff(NOW, 5) == NOW - timedelta(minutes=5)


class TestCircuitBreaker:
    def setup_method(self):
        self.breaker = CircuitBreaker(BreakerSettings(failure_threshold=3, cooldown_minutes=30))

    def test_closed_state_can_proceed(self):
        decision = self.breaker.check(CircuitBreakerState(), NOW)

        assert decision.can_proceed
        assert not decision.just_reset

    def test_failures_below_threshold_keep_breaker_closed(self):
        state = self.breaker.record_failure(CircuitBreakerState(), NOW)
        state = self.breaker.record_failure(state, NOW)

        assert state.failure_count == 2
        assert state.is_open is False
        assert state.cooldown_until is None

    def test_third_failure_opens_with_cooldown(self):
        state = CircuitBreakerState(failure_count=2)

        opened = self.breaker.record_failure(state, NOW)

        assert opened.is_open is True
        assert opened.failure_count == 3
        assert opened.cooldown_until == NOW + timedelta(minutes=30)

    def test_open_during_cooldown_blocks(self):
        state = CircuitBreakerState(is_open=True, failure_count=3, cooldown_until=NOW + timedelta(seconds=1))

        decision = self.breaker.check(state, NOW)

        assert not decision.can_proceed
        assert decision.state is state

    def test_open_after_cooldown_resets(self):
        state = CircuitBreakerState(is_open=True, failure_count=3, cooldown_until=NOW)

        decision = self.breaker.check(state, NOW)

        assert decision.can_proceed
        assert decision.just_reset
        assert decision.state == CircuitBreakerState()

    def test_open_without_cooldown_resets(self):
        decision = self.breaker.check(CircuitBreakerState(is_open=True, failure_count=3), NOW)

        assert decision.just_reset

    def test_success_clears_streak(self):
        assert self.breaker.record_success(CircuitBreakerState(failure_count=2)) == CircuitBreakerState()


class _BrokenQuery:
    def __getattr__(self, name):
        def method(*args, **kwargs):
            raise RuntimeError("connection refused")

        return method


class _StateTable:
    def __init__(self, rows):
        self.rows = rows
        self.upserts = []

    def select(self, *args, **kwargs):
        return self

    def eq(self, *args, **kwargs):
        return self

    def limit(self, *args, **kwargs):
        return self

    def upsert(self, payload, on_conflict=None):
        self.upserts.append((payload, on_conflict))
        return self

    def execute(self):
        return SimpleNamespace(data=self.rows)


class _StateClient:
    def __init__(self, table):
        self._table = table
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return self._table


def test_breaker_store_loads_persisted_state():
    table = _StateTable([{"is_open": True, "failure_count": 3, "cooldown_until": "2026-01-15T12:30:00+00:00"}])
    store = CircuitBreakerStore(client=_StateClient(table))

    state = store.load()

    assert state.is_open is True
    assert state.failure_count == 3
    assert state.cooldown_until == NOW + timedelta(minutes=30)


def test_breaker_store_defaults_to_closed_without_row():
    store = CircuitBreakerStore(client=_StateClient(_StateTable([])))

    assert store.load() == CircuitBreakerState()


def test_breaker_store_fails_open_on_read_error():
    store = CircuitBreakerStore(client=_StateClient(_BrokenQuery()))

    assert store.load() == CircuitBreakerState()


def test_breaker_store_upserts_by_key():
    table = _StateTable([])
    client = _StateClient(table)
    store = CircuitBreakerStore(client=client)

    assert store.save(CircuitBreakerState(failure_count=1)) is True

    payload, on_conflict = table.upserts[0]
    assert client.tables == ["pipeline_state"]
    assert on_conflict == "key"
    assert payload["key"] == "process_articles_circuit_breaker"
    assert payload["failure_count"] == 1
    assert payload["cooldown_until"] is None


def test_breaker_store_save_failure_is_reported_not_raised():
    store = CircuitBreakerStore(client=_StateClient(_BrokenQuery()))

    assert store.save(CircuitBreakerState()) is False
