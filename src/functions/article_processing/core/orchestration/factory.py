"""Wire the article processing pipeline from environment configuration."""

from __future__ import annotations

from typing import Dict, Optional

from src.shared.db.connection import get_supabase_client
from src.shared.utils.config_validator import validate_float_env
from src.functions.content_extraction.core.content_extractor import ContentExtractor
from ..db.breaker_state import CircuitBreakerStore
from ..db.catalog import SourceStore, StoryStore, TopicStore
from ..db.raw_articles import RawArticleStore
from ..llm.openai_client import OpenAISummarizationClient
from ..monitoring.metrics_collector import MetricsCollector
from ..publishing.story_publisher import StoryPublisher
from ..resilience.circuit_breaker import CircuitBreaker
from ..resolution.source_resolver import SourceResolver
from ..resolution.topic_resolver import TopicResolver
from .config_loader import build_breaker_settings, build_llm_settings, build_pipeline_config
from .item_processor import ArticleProcessor
from .pipeline import ArticleProcessingPipeline, utcnow


def build_pipeline(overrides: Optional[Dict[str, object]] = None) -> ArticleProcessingPipeline:
    """Create a pipeline backed by Supabase, OpenAI and the content extractor.

    Raises:
        ConfigurationError: When credentials or settings are missing or invalid.
    """

    overrides = overrides or {}
    config = build_pipeline_config(overrides)
    llm_settings = build_llm_settings(overrides)
    client = get_supabase_client()

    raw_articles = RawArticleStore(client)
    metrics = MetricsCollector()
    extractor = ContentExtractor(
        options={"timeout_seconds": validate_float_env("EXTRACTION_TIMEOUT_SECONDS", 25.0, min_value=1.0)}
    )
    processor = ArticleProcessor(
        config=config,
        raw_articles=raw_articles,
        summarizer=OpenAISummarizationClient(settings=llm_settings),
        source_resolver=SourceResolver(SourceStore(client)),
        topic_resolver=TopicResolver(TopicStore(client), default_slug=config.default_topic_slug),
        publisher=StoryPublisher(StoryStore(client), raw_articles),
        extractor=extractor,
        metrics=metrics,
        clock=utcnow,
    )
    return ArticleProcessingPipeline(
        config=config,
        raw_articles=raw_articles,
        breaker_store=CircuitBreakerStore(client),
        processor=processor,
        breaker=CircuitBreaker(build_breaker_settings(overrides)),
        metrics=metrics,
    )
