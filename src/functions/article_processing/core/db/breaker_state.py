"""Persistence of the circuit breaker state between batch invocations.

Any failure to read or write the state is logged and treated as a closed
breaker; an unreachable state row must not stop story publishing.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from src.shared.db.connection import get_supabase_client
from ..contracts.breaker import CircuitBreakerState

logger = logging.getLogger(__name__)


class CircuitBreakerStore:
    TABLE_NAME = "pipeline_state"
    STATE_KEY = "process_articles_circuit_breaker"

    def __init__(self, client: Optional[Any] = None) -> None:
        self.client = client or get_supabase_client()

    def load(self) -> CircuitBreakerState:
        try:
            response = (
                self.client.table(self.TABLE_NAME)
                .select("is_open,failure_count,cooldown_until")
                .eq("key", self.STATE_KEY)
                .limit(1)
                .execute()
            )
            rows = getattr(response, "data", []) or []
            if not rows:
                return CircuitBreakerState()
            return CircuitBreakerState.from_row(rows[0])
        except Exception as exc:
            logger.warning("Failed to load circuit breaker state, assuming closed: %s", exc)
            return CircuitBreakerState()

    def save(self, state: CircuitBreakerState) -> bool:
        payload = {
            "key": self.STATE_KEY,
            **state.to_row(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self.client.table(self.TABLE_NAME).upsert(payload, on_conflict="key").execute()
            return True
        except Exception as exc:
            logger.warning("Failed to persist circuit breaker state: %s", exc)
            return False
