"""In-memory stand-ins for the Supabase stores and external services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from postgrest.exceptions import APIError

from src.functions.article_processing.core.contracts import (
    AISummary,
    ArticleStatus,
    CircuitBreakerState,
    FeedSource,
    PipelineConfig,
    RawArticle,
    SummaryResult,
    TokenUsage,
    ensure_transition,
)
from src.functions.article_processing.core.errors import InvalidStatusTransition
from src.functions.article_processing.core.monitoring.metrics_collector import MetricsCollector
from src.functions.article_processing.core.orchestration.item_processor import ArticleProcessor
from src.functions.article_processing.core.orchestration.pipeline import ArticleProcessingPipeline
from src.functions.article_processing.core.publishing.story_publisher import StoryPublisher
from src.functions.article_processing.core.resilience.circuit_breaker import CircuitBreaker
from src.functions.article_processing.core.resolution.source_resolver import SourceResolver
from src.functions.article_processing.core.resolution.topic_resolver import TopicResolver
from src.functions.content_extraction.core.contracts import ExtractionResult

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

TOPICS = {
    "general": "topic-general",
    "politics": "topic-politics",
    "economy": "topic-economy",
    "sports": "topic-sports",
}

VALID_CONTENT = (
    "The Ministry of Economy announced a package of measures on Tuesday aimed at supporting "
    "small and medium enterprises across the Kingdom. "
) * 5


def unique_violation() -> APIError:
    return APIError({"code": "23505", "message": "duplicate key value violates unique constraint"})


def make_article(article_id: str = "raw-1", **overrides) -> RawArticle:
    feed = overrides.pop(
        "feed",
        FeedSource(
            id="feed-1",
            name="Saudi Gazette",
            language="en",
            reliability_score=0.8,
            website_url="https://saudigazette.com.sa/rss",
        ),
    )
    fields = {
        "id": article_id,
        "original_url": f"https://saudigazette.com.sa/article/{article_id}",
        "original_title": "Ministry unveils support package for small businesses",
        "full_content": VALID_CONTENT,
        "content_quality": 0.8,
        "published_at": NOW,
        "feed": feed,
    }
    fields.update(overrides)
    return RawArticle(**fields)


def make_summary(quality_score: float = 0.6, topics: Optional[List[str]] = None, **overrides) -> AISummary:
    payload = {
        "summary_ar": "أعلنت الوزارة حزمة دعم للمنشآت الصغيرة.",
        "summary_en": "The ministry announced a support package for small businesses.",
        "why_it_matters_ar": "تساعد الحزمة على استقرار سوق العمل.",
        "why_it_matters_en": "The package helps stabilise employment.",
        "quality_score": quality_score,
        "topics": topics if topics is not None else ["politics", "economy"],
    }
    payload.update(overrides)
    return AISummary(**payload)


class FakeRawArticleStore:
    def __init__(self, articles=()):
        self.articles: Dict[str, RawArticle] = {article.id: article for article in articles}
        self.transitions: List[tuple] = []
        self.cached: Dict[str, str] = {}
        self.fetch_limits: List[int] = []
        self.reclaim_calls = 0
        self.fetch_error: Optional[Exception] = None
        self.claim_errors: Dict[str, Exception] = {}

    def reclaim_stuck(self, cutoff, now):
        self.reclaim_calls += 1
        count = 0
        for article in self.articles.values():
            if article.status is ArticleStatus.PROCESSING and article.updated_at and article.updated_at < cutoff:
                article.status = ArticleStatus.PENDING
                article.retry_after = None
                article.updated_at = now
                count += 1
        return count

    def fetch_eligible(self, limit, now, *, max_retries):
        self.fetch_limits.append(limit)
        if self.fetch_error is not None:
            raise self.fetch_error
        eligible = [
            article
            for article in self.articles.values()
            if article.status is ArticleStatus.PENDING
            and article.retry_count < max_retries
            and (article.retry_after is None or article.retry_after <= now)
        ]
        return eligible[:limit]

    def transition(self, article, target, now, **fields):
        if target is ArticleStatus.PROCESSING and article.id in self.claim_errors:
            raise self.claim_errors[article.id]
        ensure_transition(article.status, target)
        if target is ArticleStatus.PROCESSED and not fields.get("story_id"):
            raise InvalidStatusTransition("processed without story")
        self.transitions.append((article.id, article.status, target, dict(fields)))
        article.status = target
        article.updated_at = now
        for key, value in fields.items():
            if hasattr(article, key):
                setattr(article, key, value)
        return True

    def cache_content(self, article_id, content, quality):
        self.cached[article_id] = content


class FakeBreakerStore:
    def __init__(self, state: Optional[CircuitBreakerState] = None):
        self.state = state or CircuitBreakerState()
        self.saved: List[CircuitBreakerState] = []

    def load(self):
        return self.state

    def save(self, state):
        self.saved.append(state)
        self.state = state
        return True


class FakeSourceStore:
    def __init__(self, sources: Optional[Dict[str, tuple]] = None, *, race_on_insert: bool = False):
        # name -> (id, url)
        self.sources = dict(sources or {})
        self.inserted: List = []
        self.race_on_insert = race_on_insert

    def find_by_name(self, name):
        entry = self.sources.get(name)
        return entry[0] if entry else None

    def find_by_url(self, url):
        for source_id, source_url in self.sources.values():
            if source_url == url:
                return source_id
        return None

    def insert(self, candidate):
        if self.race_on_insert:
            self.race_on_insert = False
            self.sources[candidate.name] = ("source-winner", candidate.url)
            raise unique_violation()
        source_id = f"source-{len(self.inserted) + 1}"
        self.inserted.append(candidate)
        self.sources[candidate.name] = (source_id, candidate.url)
        return source_id


class FakeTopicStore:
    def __init__(self, topics: Optional[Dict[str, str]] = None):
        self.topics = dict(TOPICS if topics is None else topics)
        self.calls = 0

    def fetch_active(self):
        self.calls += 1
        return dict(self.topics)


class FakeStoryStore:
    def __init__(self):
        self.rows: Dict[str, dict] = {}
        self.race_winner: Optional[str] = None

    def find_existing(self, source_id, original_url):
        for story_id, row in self.rows.items():
            if row["source_id"] == source_id and row["original_url"] == original_url:
                return story_id
        return None

    def insert(self, draft):
        if self.race_winner:
            self.rows[self.race_winner] = draft.to_row()
            self.race_winner = None
            raise unique_violation()
        story_id = f"story-{len(self.rows) + 1}"
        self.rows[story_id] = draft.to_row()
        return story_id


class FakeSummarizer:
    """Returns a fixed summary, or per-title responses/exceptions."""

    def __init__(self, default=None, by_title: Optional[Dict[str, object]] = None):
        self.default = default if default is not None else make_summary()
        self.by_title = by_title or {}
        self.calls: List[dict] = []

    async def summarize(self, *, title, content, language, reliability_score, source_name=""):
        self.calls.append(
            {"title": title, "content": content, "language": language, "reliability_score": reliability_score}
        )
        response = self.by_title.get(title, self.default)
        if isinstance(response, Exception):
            raise response
        return SummaryResult(
            summary=response,
            model="gpt-4.1" if reliability_score > 0.7 else "gpt-4.1-mini",
            tier="premium" if reliability_score > 0.7 else "standard",
            usage=TokenUsage(input_tokens=900, output_tokens=300),
            cost_usd=0.0042,
        )


class FakeExtractor:
    def __init__(self, result=None):
        self.result = result
        self.urls: List[str] = []

    async def extract(self, url):
        self.urls.append(url)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result or ExtractionResult.empty("not_found")


class PipelineHarness:
    """A pipeline wired entirely to fakes, with direct access to each one."""

    def __init__(
        self,
        articles=(),
        *,
        summarizer: Optional[FakeSummarizer] = None,
        extractor: Optional[FakeExtractor] = None,
        breaker_state: Optional[CircuitBreakerState] = None,
        config: Optional[PipelineConfig] = None,
        clock: Callable[[], datetime] = lambda: NOW,
    ):
        self.config = config or PipelineConfig(item_delay_seconds=0.0)
        self.raw_articles = FakeRawArticleStore(articles)
        self.breaker_store = FakeBreakerStore(breaker_state)
        self.sources = FakeSourceStore()
        self.topics = FakeTopicStore()
        self.stories = FakeStoryStore()
        self.summarizer = summarizer or FakeSummarizer()
        self.extractor = extractor
        self.metrics = MetricsCollector()
        self.processor = ArticleProcessor(
            config=self.config,
            raw_articles=self.raw_articles,
            summarizer=self.summarizer,
            source_resolver=SourceResolver(self.sources),
            topic_resolver=TopicResolver(self.topics),
            publisher=StoryPublisher(self.stories, self.raw_articles),
            extractor=self.extractor,
            metrics=self.metrics,
            clock=clock,
        )
        self.pipeline = ArticleProcessingPipeline(
            config=self.config,
            raw_articles=self.raw_articles,
            breaker_store=self.breaker_store,
            processor=self.processor,
            breaker=CircuitBreaker(),
            metrics=self.metrics,
            clock=clock,
        )
