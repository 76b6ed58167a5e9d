"""Contracts shared by extraction strategies and handlers."""

from .extraction import (
    METHOD_DOM,
    METHOD_ERROR,
    METHOD_HTTP_ERROR,
    METHOD_JSON_LD,
    METHOD_NOT_FOUND,
    METHOD_PARSE_FAILED,
    METHOD_READABILITY,
    METHOD_TIMEOUT,
    MIN_CONTENT_CHARS,
    ExtractionOptions,
    ExtractionResult,
    PageDocument,
    parse_options,
)

__all__ = [
    "METHOD_DOM",
    "METHOD_ERROR",
    "METHOD_HTTP_ERROR",
    "METHOD_JSON_LD",
    "METHOD_NOT_FOUND",
    "METHOD_PARSE_FAILED",
    "METHOD_READABILITY",
    "METHOD_TIMEOUT",
    "MIN_CONTENT_CHARS",
    "ExtractionOptions",
    "ExtractionResult",
    "PageDocument",
    "parse_options",
]
