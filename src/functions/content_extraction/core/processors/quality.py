"""Quality scoring for extracted article text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(slots=True)
class ContentQuality:
    """Shape metrics of a paragraph list."""

    paragraph_count: int
    avg_paragraph_length: float
    total_length: int
    has_proper_structure: bool

    @classmethod
    def measure(cls, paragraphs: Sequence[str], *, has_proper_structure: bool) -> "ContentQuality":
        joined = "\n\n".join(paragraphs)
        count = len(paragraphs)
        return cls(
            paragraph_count=count,
            avg_paragraph_length=len(joined) / count if count else 0.0,
            total_length=len(joined),
            has_proper_structure=has_proper_structure,
        )


def _tier(value: float, tiers: Sequence[tuple[float, float]]) -> float:
    for threshold, weight in tiers:
        if value >= threshold:
            return weight
    return 0.0


def score_content(quality: ContentQuality) -> float:
    """Weighted score used by the DOM heuristic path, capped at 1.0."""

    score = _tier(quality.paragraph_count, ((5, 0.3), (3, 0.2), (2, 0.1)))
    score += _tier(quality.avg_paragraph_length, ((100, 0.3), (60, 0.2), (40, 0.1)))
    score += _tier(quality.total_length, ((1500, 0.2), (800, 0.15), (400, 0.1)))
    if quality.has_proper_structure:
        score += 0.2
    return min(round(score, 4), 1.0)


def score_readability(
    text: str,
    *,
    paragraph_count: int,
    excerpt: Optional[str] = None,
    byline: Optional[str] = None,
    site_name: Optional[str] = None,
) -> float:
    """Score a readability result from its length and page metadata."""

    score = 0.5
    score += _tier(len(text), ((2000, 0.25), (1000, 0.2), (500, 0.15), (300, 0.1)))
    if excerpt and len(excerpt) > 50:
        score += 0.1
    if byline:
        score += 0.05
    if site_name:
        score += 0.05
    if paragraph_count >= 3:
        score += 0.05
    return min(round(score, 4), 1.0)
