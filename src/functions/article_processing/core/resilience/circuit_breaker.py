"""Circuit breaker over the enrichment batch.

The breaker is a plain state object: the orchestrator loads it once at the
start of a batch, asks ``check`` whether it may proceed, and saves the
state returned by ``record_success``/``record_failure`` at the end.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..contracts.breaker import CircuitBreakerState
from ..contracts.config import BreakerSettings

logger = logging.getLogger(__name__)

CLOSED = "closed"
OPEN = "open"
JUST_RESET = "just_reset"


@dataclass(slots=True)
class BreakerDecision:
    status: str
    state: CircuitBreakerState

    @property
    def can_proceed(self) -> bool:
        return self.status != OPEN

    @property
    def just_reset(self) -> bool:
        return self.status == JUST_RESET


class CircuitBreaker:
    def __init__(self, settings: BreakerSettings | None = None) -> None:
        self.settings = settings or BreakerSettings()

    def check(self, state: CircuitBreakerState, now: datetime) -> BreakerDecision:
        if not state.is_open:
            return BreakerDecision(CLOSED, state)
        if state.cooldown_until is not None and now < state.cooldown_until:
            return BreakerDecision(OPEN, state)
        logger.info("Circuit breaker cooldown elapsed after %d failures, closing", state.failure_count)
        return BreakerDecision(JUST_RESET, CircuitBreakerState())

    def record_success(self, state: CircuitBreakerState) -> CircuitBreakerState:
        if state.failure_count:
            logger.info("Batch succeeded, clearing failure streak of %d", state.failure_count)
        return CircuitBreakerState()

    def record_failure(self, state: CircuitBreakerState, now: datetime) -> CircuitBreakerState:
        failures = state.failure_count + 1
        if failures >= self.settings.failure_threshold:
            cooldown_until = now + timedelta(minutes=self.settings.cooldown_minutes)
            logger.warning(
                "Circuit breaker opened after %d consecutive failed batches; cooling down until %s",
                failures,
                cooldown_until.isoformat(),
            )
            return CircuitBreakerState(is_open=True, failure_count=failures, cooldown_until=cooldown_until)
        logger.warning("Batch failed (%d/%d before opening)", failures, self.settings.failure_threshold)
        return CircuitBreakerState(is_open=False, failure_count=failures, cooldown_until=None)
