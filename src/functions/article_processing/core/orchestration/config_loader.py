"""Build pipeline configuration from the environment."""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

from pydantic import ValidationError

from src.shared.utils.config_validator import (
    ConfigurationError,
    validate_bool_env,
    validate_float_env,
    validate_int_env,
)
from ..contracts.config import MAX_BATCH_SIZE, BreakerSettings, LLMSettings, PipelineConfig

logger = logging.getLogger(__name__)


def _pick(overrides: Dict[str, object], key: str, loader):
    value = overrides.get(key)
    return loader() if value is None else value


def build_pipeline_config(overrides: Optional[Dict[str, object]] = None) -> PipelineConfig:
    """Read ``PIPELINE_*`` variables; a batch size above 20 is rejected."""

    overrides = overrides or {}
    try:
        return PipelineConfig(
            batch_size=_pick(
                overrides,
                "batch_size",
                lambda: validate_int_env("PIPELINE_BATCH_SIZE", 10, min_value=1, max_value=MAX_BATCH_SIZE),
            ),
            max_retries=_pick(overrides, "max_retries", lambda: validate_int_env("PIPELINE_MAX_RETRIES", 5, min_value=1)),
            item_delay_seconds=_pick(
                overrides,
                "item_delay_seconds",
                lambda: validate_float_env("PIPELINE_ITEM_DELAY_SECONDS", 0.5, min_value=0.0),
            ),
            stuck_after_minutes=_pick(
                overrides,
                "stuck_after_minutes",
                lambda: validate_int_env("PIPELINE_STUCK_MINUTES", 5, min_value=1),
            ),
            min_content_chars=_pick(
                overrides,
                "min_content_chars",
                lambda: validate_int_env("PIPELINE_MIN_CONTENT_CHARS", 50, min_value=1),
            ),
            quality_threshold=_pick(
                overrides,
                "quality_threshold",
                lambda: validate_float_env("PIPELINE_QUALITY_THRESHOLD", 0.4, min_value=0.0, max_value=1.0),
            ),
            auto_approve=_pick(overrides, "auto_approve", lambda: validate_bool_env("PIPELINE_AUTO_APPROVE", True)),
        )
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid pipeline configuration: {exc}") from exc


def build_breaker_settings(overrides: Optional[Dict[str, object]] = None) -> BreakerSettings:
    overrides = overrides or {}
    return BreakerSettings(
        failure_threshold=_pick(
            overrides,
            "failure_threshold",
            lambda: validate_int_env("CIRCUIT_BREAKER_FAILURE_THRESHOLD", 3, min_value=1),
        ),
        cooldown_minutes=_pick(
            overrides,
            "cooldown_minutes",
            lambda: validate_int_env("CIRCUIT_BREAKER_COOLDOWN_MINUTES", 30, min_value=1),
        ),
    )


def build_llm_settings(overrides: Optional[Dict[str, object]] = None) -> LLMSettings:
    overrides = overrides or {}
    defaults = LLMSettings()
    return LLMSettings(
        premium_model=overrides.get("premium_model") or os.getenv("OPENAI_PREMIUM_MODEL") or defaults.premium_model,
        standard_model=overrides.get("standard_model") or os.getenv("OPENAI_STANDARD_MODEL") or defaults.standard_model,
        timeout_seconds=_pick(
            overrides,
            "timeout_seconds",
            lambda: validate_float_env("SUMMARY_TIMEOUT_SECONDS", defaults.timeout_seconds, min_value=1.0),
        ),
    )
