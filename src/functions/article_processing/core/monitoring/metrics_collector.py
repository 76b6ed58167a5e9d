"""Per-batch timing and cost accounting."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from ..contracts.summary import SummaryResult

logger = logging.getLogger(__name__)


@dataclass
class _ModelUsage:
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0


@dataclass
class MetricsCollector:
    """Collects stage durations and summarization spend for one batch.

    Cost is reporting only; nothing reads it to make decisions.
    """

    stage_durations: Dict[str, float] = field(default_factory=dict)
    models: Dict[str, _ModelUsage] = field(default_factory=dict)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.stage_durations[name] = round(self.stage_durations.get(name, 0.0) + elapsed, 4)

    def record_summary(self, result: SummaryResult) -> None:
        usage = self.models.setdefault(result.model, _ModelUsage())
        usage.calls += 1
        usage.input_tokens += result.usage.input_tokens
        usage.output_tokens += result.usage.output_tokens
        if result.cost_usd is not None:
            usage.cost_usd += result.cost_usd

    @property
    def total_cost_usd(self) -> float:
        return round(sum(usage.cost_usd for usage in self.models.values()), 6)

    def cost_by_model(self) -> Dict[str, float]:
        return {model: round(usage.cost_usd, 6) for model, usage in self.models.items()}

    def log_summary(self, log: Optional[logging.Logger] = None) -> None:
        log = log or logger
        for model, usage in self.models.items():
            log.info(
                "Model %s: %d calls, %d input / %d output tokens, $%.4f",
                model,
                usage.calls,
                usage.input_tokens,
                usage.output_tokens,
                usage.cost_usd,
            )
        if self.stage_durations:
            timings = ", ".join(f"{name}={seconds:.2f}s" for name, seconds in self.stage_durations.items())
            log.info("Stage timings: %s", timings)
