"""Batch orchestration for raw article enrichment."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from ..contracts.breaker import CircuitBreakerState
from ..contracts.config import PipelineConfig
from ..contracts.result import BatchResult
from ..db.breaker_state import CircuitBreakerStore
from ..db.raw_articles import RawArticleStore
from ..errors import CircuitOpen
from ..monitoring.metrics_collector import MetricsCollector
from ..resilience.circuit_breaker import CircuitBreaker
from ..resilience.retry_scheduler import stuck_cutoff
from .item_processor import ArticleProcessor

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ArticleProcessingPipeline:
    """Run one bounded batch of raw articles through enrichment.

    Order of a run:
        1. reclaim rows stuck in ``processing`` (always, even when the breaker is open)
        2. load and check the circuit breaker; raise ``CircuitOpen`` if cooling down
        3. select eligible pending rows, oldest first
        4. process them one at a time with a fixed pause between items
        5. record success or failure on the breaker and persist it
    """

    def __init__(
        self,
        *,
        config: PipelineConfig,
        raw_articles: RawArticleStore,
        breaker_store: CircuitBreakerStore,
        processor: ArticleProcessor,
        breaker: Optional[CircuitBreaker] = None,
        metrics: Optional[MetricsCollector] = None,
        clock: Callable[[], datetime] = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self.raw_articles = raw_articles
        self.breaker_store = breaker_store
        self.processor = processor
        self.breaker = breaker or CircuitBreaker()
        self.metrics = metrics or processor.metrics
        self.clock = clock
        self.sleep = sleep

    async def run(self, limit: Optional[int] = None) -> BatchResult:
        started = self.clock()
        reclaimed = self._reclaim_stuck(started)

        decision = self.breaker.check(self.breaker_store.load(), started)
        if not decision.can_proceed:
            logger.warning(
                "Circuit breaker open until %s (%d failures), skipping batch",
                decision.state.cooldown_until,
                decision.state.failure_count,
            )
            raise CircuitOpen(decision.state)
        state = decision.state

        try:
            result = await self._process_batch(self.config.clamp_limit(limit))
        except Exception:
            logger.error("Batch aborted by unhandled error", exc_info=True)
            self.breaker_store.save(self.breaker.record_failure(state, self.clock()))
            raise

        result.summary.reclaimed_stuck = reclaimed
        self.breaker_store.save(self._next_breaker_state(state, result))
        self.metrics.log_summary(logger)
        logger.info(
            "Batch complete: %d processed, %d published, %d linked, %d rejected, %d failed, $%.4f",
            result.summary.total_processed,
            result.summary.successful,
            result.summary.skipped_duplicates,
            result.summary.rejected,
            result.summary.failed,
            result.summary.total_cost_usd,
        )
        return result

    async def _process_batch(self, limit: int) -> BatchResult:
        with self.metrics.stage("select"):
            articles = self.raw_articles.fetch_eligible(limit, self.clock(), max_retries=self.config.max_retries)
        logger.info("Selected %d eligible raw articles (limit %d)", len(articles), limit)

        result = BatchResult()
        for index, article in enumerate(articles):
            if index and self.config.item_delay_seconds:
                await self.sleep(self.config.item_delay_seconds)
            outcome = await self.processor.process(article)
            if outcome is not None:
                result.add(outcome)

        result.summary.total_cost_usd = self.metrics.total_cost_usd
        result.summary.cost_by_model = self.metrics.cost_by_model()
        return result

    def _reclaim_stuck(self, now: datetime) -> int:
        try:
            return self.raw_articles.reclaim_stuck(stuck_cutoff(now, self.config.stuck_after_minutes), now)
        except Exception as exc:  # noqa: BLE001
            logger.error("Stuck article reclamation failed: %s", exc)
            return 0

    def _next_breaker_state(self, state: CircuitBreakerState, result: BatchResult) -> CircuitBreakerState:
        if not result.results:
            return state
        if result.all_failed:
            return self.breaker.record_failure(state, self.clock())
        return self.breaker.record_success(state)
