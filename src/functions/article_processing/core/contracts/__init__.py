"""Contracts for the article processing pipeline."""

from .breaker import CircuitBreakerState
from .config import MAX_BATCH_SIZE, BreakerSettings, LLMSettings, PipelineConfig
from .raw_article import ALLOWED_TRANSITIONS, ArticleStatus, FeedSource, RawArticle, ensure_transition
from .result import (
    OUTCOME_FAILED,
    OUTCOME_LINKED,
    OUTCOME_PUBLISHED,
    OUTCOME_REJECTED,
    OUTCOME_RETRY,
    BatchResult,
    BatchSummary,
    ItemOutcome,
)
from .story import PublishOutcome, SourceCandidate, StoryDraft, site_root
from .summary import AISummary, SummaryResult, TokenUsage

__all__ = [
    "ALLOWED_TRANSITIONS",
    "AISummary",
    "ArticleStatus",
    "BatchResult",
    "BatchSummary",
    "BreakerSettings",
    "CircuitBreakerState",
    "FeedSource",
    "ItemOutcome",
    "LLMSettings",
    "MAX_BATCH_SIZE",
    "OUTCOME_FAILED",
    "OUTCOME_LINKED",
    "OUTCOME_PUBLISHED",
    "OUTCOME_REJECTED",
    "OUTCOME_RETRY",
    "PipelineConfig",
    "PublishOutcome",
    "RawArticle",
    "SourceCandidate",
    "StoryDraft",
    "SummaryResult",
    "TokenUsage",
    "ensure_transition",
    "site_root",
]
