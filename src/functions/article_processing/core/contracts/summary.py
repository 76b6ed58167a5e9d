"""Schema of the bilingual summary returned by the language model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AISummary(BaseModel):
    """Validated model output. Every field is required."""

    summary_ar: str = Field(..., min_length=1)
    summary_en: str = Field(..., min_length=1)
    why_it_matters_ar: str = Field(..., min_length=1)
    why_it_matters_en: str = Field(..., min_length=1)
    quality_score: float = Field(..., ge=0.0, le=1.0)
    topics: List[str]

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @field_validator("topics", mode="before")
    @classmethod
    def _normalise_topics(cls, value: object) -> List[str]:
        if not isinstance(value, list):
            msg = "topics must be a list of slugs"
            raise ValueError(msg)
        slugs: List[str] = []
        for item in value:
            if isinstance(item, str) and item.strip():
                slug = item.strip().lower()
                if slug not in slugs:
                    slugs.append(slug)
        return slugs


@dataclass(slots=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass(slots=True)
class SummaryResult:
    """A parsed summary plus the accounting of the call that produced it."""

    summary: AISummary
    model: str
    tier: str
    usage: TokenUsage
    cost_usd: Optional[float] = None
