"""Enrichment of a single raw article."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Protocol

from src.shared.utils.logging import ItemLogger
from src.functions.content_extraction.core.contracts.extraction import METHOD_TIMEOUT, ExtractionResult
from ..contracts.config import PipelineConfig
from ..contracts.raw_article import ArticleStatus, RawArticle
from ..contracts.result import (
    OUTCOME_FAILED,
    OUTCOME_LINKED,
    OUTCOME_PUBLISHED,
    OUTCOME_REJECTED,
    OUTCOME_RETRY,
    ItemOutcome,
)
from ..contracts.story import StoryDraft
from ..contracts.summary import SummaryResult
from ..errors import ContentRejected, ContentUnavailable
from ..monitoring.metrics_collector import MetricsCollector
from ..publishing.story_publisher import StoryPublisher
from ..resilience.retry_scheduler import schedule_retry
from ..resolution.source_resolver import SourceResolver
from ..resolution.topic_resolver import TopicResolver
from ..db.raw_articles import RawArticleStore

logger = logging.getLogger(__name__)


class Summarizer(Protocol):
    async def summarize(
        self,
        *,
        title: str,
        content: str,
        language: str,
        reliability_score: float,
        source_name: str = "",
    ) -> SummaryResult:
        ...


class Extractor(Protocol):
    async def extract(self, url: str) -> ExtractionResult:
        ...


class ArticleProcessor:
    """Run one raw article through content, summary, resolution and publishing.

    ``process`` never raises for item-level problems: every outcome is
    written back to the raw row and returned as an ``ItemOutcome``.
    """

    def __init__(
        self,
        *,
        config: PipelineConfig,
        raw_articles: RawArticleStore,
        summarizer: Summarizer,
        source_resolver: SourceResolver,
        topic_resolver: TopicResolver,
        publisher: StoryPublisher,
        extractor: Optional[Extractor] = None,
        metrics: Optional[MetricsCollector] = None,
        clock: Callable[[], datetime],
    ) -> None:
        self.config = config
        self.raw_articles = raw_articles
        self.summarizer = summarizer
        self.source_resolver = source_resolver
        self.topic_resolver = topic_resolver
        self.publisher = publisher
        self.extractor = extractor
        self.metrics = metrics or MetricsCollector()
        self.clock = clock

    async def process(self, article: RawArticle) -> Optional[ItemOutcome]:
        """Return the item's outcome, or None if another run claimed it first."""

        log = ItemLogger(logger, article.id)
        try:
            claimed = self.raw_articles.transition(article, ArticleStatus.PROCESSING, self.clock())
        except Exception as exc:  # noqa: BLE001
            # Row is still pending, or reclaimed later if the write landed
            log.error("Could not claim article, skipping: %s", exc)
            return None
        if not claimed:
            log.info("Already claimed by another run, skipping")
            return None

        summary: Optional[SummaryResult] = None
        try:
            content, content_quality = await self._resolve_content(article, log)
            if len(content) < self.config.min_content_chars:
                raise ContentRejected(f"Content too short ({len(content)} chars)")

            with self.metrics.stage("summarize"):
                summary = await self.summarizer.summarize(
                    title=article.original_title,
                    content=content,
                    language=article.language,
                    reliability_score=article.reliability_score,
                    source_name=article.feed.name if article.feed else "",
                )
            self.metrics.record_summary(summary)

            score = summary.summary.quality_score
            if score < self.config.quality_threshold:
                raise ContentRejected(f"Quality score too low: {score:.2f}")

            with self.metrics.stage("resolve"):
                source_id = self.source_resolver.resolve(article)
                topic_ids = self.topic_resolver.resolve(summary.summary.topics, article.topic_ids)

            draft = StoryDraft(
                source_id=source_id,
                original_url=article.original_url,
                title=article.original_title,
                language=article.language,
                summary_ar=summary.summary.summary_ar,
                summary_en=summary.summary.summary_en,
                why_it_matters_ar=summary.summary.why_it_matters_ar,
                why_it_matters_en=summary.summary.why_it_matters_en,
                ai_quality_score=score,
                topic_ids=topic_ids,
                full_content=content,
                content_quality=content_quality,
                image_url=article.image_url,
                published_at=article.published_at,
                is_approved=self.config.auto_approve,
            )
            with self.metrics.stage("publish"):
                published = self.publisher.publish(article, draft, self.clock())
        except ContentRejected as exc:
            log.info("Rejected: %s", exc)
            self._record(article, ArticleStatus.REJECTED, log, error_message=str(exc))
            return self._outcome(article, OUTCOME_REJECTED, summary, error=str(exc))
        except Exception as exc:  # noqa: BLE001
            return self._fail(article, exc, summary, log)

        outcome = OUTCOME_LINKED if published.linked_existing else OUTCOME_PUBLISHED
        log.info("%s story %s", "Linked existing" if published.linked_existing else "Published", published.story_id)
        return self._outcome(article, outcome, summary, story_id=published.story_id)

    async def _resolve_content(self, article: RawArticle, log: ItemLogger) -> tuple[str, Optional[float]]:
        """Cached text first, then a fresh extraction, then feed-supplied text."""

        cached = (article.full_content or "").strip()
        if len(cached) >= self.config.min_content_chars:
            return cached, article.content_quality

        if self.extractor is not None and article.original_url:
            with self.metrics.stage("extract"):
                result = await self.extractor.extract(article.original_url)
            if result.content:
                self.raw_articles.cache_content(article.id, result.content, result.quality)
                article.full_content, article.content_quality = result.content, result.quality
                return result.content, result.quality
            if result.method == METHOD_TIMEOUT:
                raise ContentUnavailable("Content fetch timed out")
            log.info("Extraction found no content (%s), using feed text", result.method)

        return article.fallback_content(), None

    def _fail(
        self,
        article: RawArticle,
        exc: BaseException,
        summary: Optional[SummaryResult],
        log: ItemLogger,
    ) -> ItemOutcome:
        message = f"{type(exc).__name__}: {exc}"
        decision = schedule_retry(article.retry_count, self.clock(), max_retries=self.config.max_retries)
        if decision.exhausted:
            log.warning("Failed permanently after %d attempts: %s", decision.retry_count, message)
        else:
            log.warning(
                "Attempt %d failed, retrying after %s: %s",
                decision.retry_count,
                decision.retry_after.isoformat() if decision.retry_after else "-",
                message,
            )
        self._record(
            article,
            decision.status,
            log,
            retry_count=decision.retry_count,
            retry_after=decision.retry_after,
            error_message=message[:1000],
        )
        return self._outcome(
            article,
            OUTCOME_FAILED if decision.exhausted else OUTCOME_RETRY,
            summary,
            error=message,
            retry_count=decision.retry_count,
            retry_after=decision.retry_after,
        )

    def _record(self, article: RawArticle, target: ArticleStatus, log: ItemLogger, **fields: object) -> None:
        # A row left in processing is picked up by stuck reclamation on a later run
        try:
            self.raw_articles.transition(article, target, self.clock(), **fields)
        except Exception as exc:  # noqa: BLE001
            log.error("Could not record %s status: %s", target.value, exc)

    @staticmethod
    def _outcome(
        article: RawArticle,
        outcome: str,
        summary: Optional[SummaryResult],
        **fields: object,
    ) -> ItemOutcome:
        return ItemOutcome(
            article_id=article.id,
            title=article.original_title[:50],
            outcome=outcome,
            model=summary.model if summary else None,
            cost_usd=summary.cost_usd if summary else None,
            **fields,
        )
