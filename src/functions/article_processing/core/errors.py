"""Exception types raised while enriching raw articles.

Item-level errors are caught by the orchestrator and turned into a status
update on the raw article. Only ``CircuitOpen`` and configuration errors
leave the batch loop.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .contracts.breaker import CircuitBreakerState


class PipelineError(Exception):
    """Base class for article processing errors."""


class ContentRejected(PipelineError):
    """The article can never produce a story (short content, low AI quality)."""


class ContentUnavailable(PipelineError):
    """No usable article text could be obtained on this attempt."""


class SummaryParseError(PipelineError):
    """The summarization response could not be parsed or failed validation."""


class SummarizationAPIError(PipelineError):
    """The summarization request failed at the network or HTTP layer."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_rate_limit_or_server_error(self) -> bool:
        return self.status_code is not None and (self.status_code == 429 or self.status_code >= 500)


class TopicResolutionError(PipelineError):
    """No topic could be assigned, not even the default one."""


class InvalidStatusTransition(PipelineError):
    """A raw article status change outside the allowed lifecycle."""


class CircuitOpen(PipelineError):
    """The enrichment stage is cooling down after repeated batch failures."""

    def __init__(self, state: "CircuitBreakerState") -> None:
        super().__init__("Circuit breaker is open")
        self.state = state
