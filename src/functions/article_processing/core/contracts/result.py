"""Result models returned by the batch entry point."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

OUTCOME_PUBLISHED = "published"
OUTCOME_LINKED = "linked_existing"
OUTCOME_REJECTED = "rejected"
OUTCOME_RETRY = "retry_scheduled"
OUTCOME_FAILED = "failed"


class ItemOutcome(BaseModel):
    """What happened to one raw article during a batch."""

    article_id: str
    title: str = ""
    outcome: str
    story_id: Optional[str] = None
    model: Optional[str] = None
    cost_usd: Optional[float] = None
    error: Optional[str] = None
    retry_count: Optional[int] = None
    retry_after: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return self.outcome in (OUTCOME_PUBLISHED, OUTCOME_LINKED)

    @property
    def is_failure(self) -> bool:
        return self.outcome in (OUTCOME_RETRY, OUTCOME_FAILED)

    def to_response(self) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", exclude_none=True)
        payload["success"] = self.success
        return payload


class BatchSummary(BaseModel):
    total_processed: int = Field(default=0, ge=0)
    successful: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    rejected: int = Field(default=0, ge=0)
    skipped_duplicates: int = Field(default=0, ge=0)
    reclaimed_stuck: int = Field(default=0, ge=0)
    total_cost_usd: float = Field(default=0.0, ge=0.0)
    cost_by_model: Dict[str, float] = Field(default_factory=dict)


class BatchResult(BaseModel):
    summary: BatchSummary = Field(default_factory=BatchSummary)
    results: List[ItemOutcome] = Field(default_factory=list)

    def add(self, outcome: ItemOutcome) -> None:
        self.results.append(outcome)
        summary = self.summary
        summary.total_processed += 1
        if outcome.outcome == OUTCOME_PUBLISHED:
            summary.successful += 1
        elif outcome.outcome == OUTCOME_LINKED:
            summary.skipped_duplicates += 1
        elif outcome.outcome == OUTCOME_REJECTED:
            summary.rejected += 1
        else:
            summary.failed += 1

    @property
    def all_failed(self) -> bool:
        """True when at least one item was attempted and every one failed."""

        return bool(self.results) and all(result.is_failure for result in self.results)

    def to_response(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.model_dump(mode="json"),
            "results": [result.to_response() for result in self.results],
        }
