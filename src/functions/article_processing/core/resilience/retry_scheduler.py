"""Exponential backoff for failed raw articles."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..contracts.raw_article import ArticleStatus

MAX_DELAY_MINUTES = 60
DEFAULT_MAX_RETRIES = 5


def retry_delay_minutes(retry_count: int) -> int:
    """``min(2^retry_count, 60)`` minutes."""

    return min(2 ** max(retry_count, 0), MAX_DELAY_MINUTES)


@dataclass(slots=True)
class RetryDecision:
    status: ArticleStatus
    retry_count: int
    retry_after: Optional[datetime]

    @property
    def exhausted(self) -> bool:
        return self.status is ArticleStatus.FAILED


def schedule_retry(retry_count: int, now: datetime, *, max_retries: int = DEFAULT_MAX_RETRIES) -> RetryDecision:
    """Decide the next state of an item that just failed.

    The attempt that brings ``retry_count`` up to ``max_retries`` is final:
    the item is failed permanently and gets no ``retry_after``.
    """

    attempts = retry_count + 1
    if attempts >= max_retries:
        return RetryDecision(ArticleStatus.FAILED, attempts, None)
    return RetryDecision(
        ArticleStatus.PENDING,
        attempts,
        now + timedelta(minutes=retry_delay_minutes(attempts)),
    )


def stuck_cutoff(now: datetime, stuck_after_minutes: int) -> datetime:
    """Rows still ``processing`` with ``updated_at`` before this are stuck."""

    return now - timedelta(minutes=stuck_after_minutes)
