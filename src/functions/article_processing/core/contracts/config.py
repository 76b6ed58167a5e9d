"""Configuration models for the article processing pipeline."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_BATCH_SIZE = 20


class PipelineConfig(BaseModel):
    """Batch and item handling settings."""

    batch_size: int = Field(default=10, ge=1, le=MAX_BATCH_SIZE)
    max_retries: int = Field(default=5, ge=1)
    item_delay_seconds: float = Field(default=0.5, ge=0.0)
    stuck_after_minutes: int = Field(default=5, ge=1)
    min_content_chars: int = Field(default=50, ge=1)
    quality_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    auto_approve: bool = True
    default_topic_slug: str = "general"

    model_config = ConfigDict(frozen=True)

    def clamp_limit(self, requested: object) -> int:
        """Clamp a caller supplied batch limit into ``[1, MAX_BATCH_SIZE]``."""

        if requested is None or isinstance(requested, bool):
            return self.batch_size
        try:
            value = int(requested)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return self.batch_size
        return max(1, min(value, MAX_BATCH_SIZE))


class BreakerSettings(BaseModel):
    """Circuit breaker thresholds."""

    failure_threshold: int = Field(default=3, ge=1)
    cooldown_minutes: int = Field(default=30, ge=1)

    model_config = ConfigDict(frozen=True)


class LLMSettings(BaseModel):
    """Summarization model tiers and call limits."""

    premium_model: str = "gpt-4.1"
    standard_model: str = "gpt-4.1-mini"
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_tokens: int = Field(default=1024, ge=128)
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_content_chars: int = Field(default=3000, ge=200)

    model_config = ConfigDict(frozen=True)

    @field_validator("premium_model", "standard_model")
    @classmethod
    def _validate_model(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            msg = "model names must be non-empty"
            raise ValueError(msg)
        return cleaned
