"""Raw article records and their processing lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from ..errors import InvalidStatusTransition


class ArticleStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PROCESSED = "processed"
    REJECTED = "rejected"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: Dict[ArticleStatus, frozenset[ArticleStatus]] = {
    ArticleStatus.PENDING: frozenset({ArticleStatus.PROCESSING}),
    ArticleStatus.PROCESSING: frozenset(
        {
            ArticleStatus.PROCESSED,
            ArticleStatus.REJECTED,
            ArticleStatus.PENDING,
            ArticleStatus.FAILED,
        }
    ),
    ArticleStatus.PROCESSED: frozenset(),
    ArticleStatus.REJECTED: frozenset(),
    ArticleStatus.FAILED: frozenset(),
}


def ensure_transition(current: ArticleStatus, target: ArticleStatus) -> None:
    """Raise ``InvalidStatusTransition`` unless ``current -> target`` is allowed."""

    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransition(f"Illegal status change {current.value} -> {target.value}")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse ISO timestamps as returned by PostgREST."""

    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


@dataclass(slots=True)
class FeedSource:
    """The RSS feed a raw article was fetched from."""

    id: Optional[str]
    name: str
    language: str = "en"
    reliability_score: float = 0.5
    website_url: Optional[str] = None
    logo_url: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "FeedSource":
        reliability = row.get("reliability_score")
        return cls(
            id=row.get("id"),
            name=(row.get("name") or "").strip(),
            language=row.get("language") or "en",
            reliability_score=float(reliability) if reliability is not None else 0.5,
            website_url=row.get("website_url"),
            logo_url=row.get("logo_url"),
        )


@dataclass(slots=True)
class RawArticle:
    """One fetched feed entry awaiting enrichment."""

    id: str
    original_url: str
    original_title: str
    status: ArticleStatus = ArticleStatus.PENDING
    retry_count: int = 0
    retry_after: Optional[datetime] = None
    original_content: Optional[str] = None
    original_description: Optional[str] = None
    full_content: Optional[str] = None
    content_quality: Optional[float] = None
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    topic_ids: List[str] = field(default_factory=list)
    feed: Optional[FeedSource] = None
    story_id: Optional[str] = None
    error_message: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "RawArticle":
        feed_row = row.get("rss_source") or row.get("rss_sources")
        quality = row.get("content_quality")
        return cls(
            id=str(row["id"]),
            original_url=row.get("original_url") or "",
            original_title=(row.get("original_title") or "").strip(),
            status=ArticleStatus(row.get("status") or ArticleStatus.PENDING.value),
            retry_count=int(row.get("retry_count") or 0),
            retry_after=parse_timestamp(row.get("retry_after")),
            original_content=row.get("original_content"),
            original_description=row.get("original_description"),
            full_content=row.get("full_content"),
            content_quality=float(quality) if quality is not None else None,
            image_url=row.get("image_url"),
            published_at=parse_timestamp(row.get("published_at")),
            topic_ids=[str(topic) for topic in (row.get("topic_ids") or []) if topic],
            feed=FeedSource.from_row(feed_row) if isinstance(feed_row, Mapping) else None,
            story_id=row.get("story_id"),
            error_message=row.get("error_message"),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

    @property
    def language(self) -> str:
        return self.feed.language if self.feed else "en"

    @property
    def reliability_score(self) -> float:
        return self.feed.reliability_score if self.feed else 0.5

    def fallback_content(self) -> str:
        """Best text already stored on the row, without fetching."""

        for candidate in (self.full_content, self.original_content, self.original_description):
            if candidate and candidate.strip():
                return candidate.strip()
        return ""
