"""Canonical sources and the stories published from raw articles."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit


def site_root(url: Optional[str]) -> Optional[str]:
    """Return ``scheme://host`` for a URL, or None when it has no host."""

    if not url:
        return None
    parts = urlsplit(url.strip())
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme}://{parts.netloc.lower()}"


@dataclass(slots=True)
class SourceCandidate:
    """Publisher metadata used to find or create a canonical source."""

    name: str
    url: Optional[str]
    language: str = "en"
    reliability_score: float = 0.5
    logo_url: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "logo_url": self.logo_url,
            "language": self.language,
            "reliability_score": self.reliability_score,
            "is_active": True,
        }


@dataclass(slots=True)
class StoryDraft:
    """Everything needed to insert one ``stories`` row."""

    source_id: str
    original_url: str
    title: str
    language: str
    summary_ar: str
    summary_en: str
    why_it_matters_ar: str
    why_it_matters_en: str
    ai_quality_score: float
    topic_ids: List[str] = field(default_factory=list)
    full_content: Optional[str] = None
    content_quality: Optional[float] = None
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    is_approved: bool = True

    def to_row(self) -> Dict[str, Any]:
        is_arabic = self.language == "ar"
        return {
            "source_id": self.source_id,
            "original_url": self.original_url,
            "title_ar": self.title if is_arabic else None,
            "title_en": None if is_arabic else self.title,
            "summary_ar": self.summary_ar,
            "summary_en": self.summary_en,
            "why_it_matters_ar": self.why_it_matters_ar,
            "why_it_matters_en": self.why_it_matters_en,
            "full_content": self.full_content,
            "content_quality": self.content_quality,
            "ai_quality_score": self.ai_quality_score,
            "image_url": self.image_url,
            "topic_ids": list(self.topic_ids),
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "is_approved": self.is_approved,
        }


@dataclass(slots=True)
class PublishOutcome:
    story_id: str
    linked_existing: bool = False
