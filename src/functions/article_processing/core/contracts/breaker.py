"""Persisted state of the enrichment circuit breaker."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from .raw_article import parse_timestamp


@dataclass(slots=True)
class CircuitBreakerState:
    is_open: bool = False
    failure_count: int = 0
    cooldown_until: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "CircuitBreakerState":
        return cls(
            is_open=bool(row.get("is_open")),
            failure_count=int(row.get("failure_count") or 0),
            cooldown_until=parse_timestamp(row.get("cooldown_until")),
        )

    def to_row(self) -> Dict[str, Any]:
        return {
            "is_open": self.is_open,
            "failure_count": self.failure_count,
            "cooldown_until": self.cooldown_until.isoformat() if self.cooldown_until else None,
        }
