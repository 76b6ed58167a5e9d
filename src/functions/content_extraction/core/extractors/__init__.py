"""Ordered extraction strategies.

Every strategy takes a ``PageDocument`` and returns an ``ExtractionResult``
or ``None``; the first acceptable result wins.
"""

from typing import Callable, Optional, Sequence

from ..contracts.extraction import ExtractionResult, PageDocument
from .dom_extractor import extract_from_dom
from .readability_extractor import extract_readable
from .structured_data import extract_structured_data

Strategy = Callable[[PageDocument], Optional[ExtractionResult]]

DEFAULT_STRATEGIES: Sequence[Strategy] = (
    extract_structured_data,
    extract_readable,
    extract_from_dom,
)

__all__ = [
    "DEFAULT_STRATEGIES",
    "Strategy",
    "extract_from_dom",
    "extract_readable",
    "extract_structured_data",
]
