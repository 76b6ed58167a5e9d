"""Model tier selection and per-call cost accounting."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from ..contracts.config import LLMSettings
from ..contracts.summary import TokenUsage

logger = logging.getLogger(__name__)

PREMIUM = "premium"
STANDARD = "standard"

PREMIUM_RELIABILITY_THRESHOLD = 0.7

# USD per one million tokens: (input, output)
TIER_PRICES: Dict[str, tuple[float, float]] = {
    PREMIUM: (2.00, 8.00),
    STANDARD: (0.40, 1.60),
}


def select_model(reliability_score: float) -> str:
    """Return the model tier for a source; premium only above 0.7."""

    return PREMIUM if reliability_score > PREMIUM_RELIABILITY_THRESHOLD else STANDARD


def model_for_tier(tier: str, settings: LLMSettings) -> str:
    return settings.premium_model if tier == PREMIUM else settings.standard_model


def compute_cost(tier: str, usage: TokenUsage) -> Optional[float]:
    """Price a call from its token usage.

    Returns None instead of raising when the tier or usage is unusable so
    accounting can never change the outcome of an item.
    """

    try:
        input_price, output_price = TIER_PRICES[tier]
        cost = (usage.input_tokens * input_price + usage.output_tokens * output_price) / 1_000_000
        return round(cost, 6)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Could not compute cost for tier %s: %s", tier, exc)
        return None
