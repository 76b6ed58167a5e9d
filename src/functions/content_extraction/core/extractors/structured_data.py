"""Extraction from embedded JSON-LD article metadata."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Optional

from ..contracts.extraction import METHOD_JSON_LD, ExtractionResult, PageDocument
from ..processors.content_cleaner import clean_text

logger = logging.getLogger(__name__)

ARTICLE_TYPES = frozenset({"NewsArticle", "Article", "BlogPosting", "WebPage", "ReportageNewsArticle"})
MIN_STRUCTURED_CHARS = 300
BODY_QUALITY = 0.9
FALLBACK_QUALITY = 0.85


def _iter_nodes(payload: Any) -> Iterator[dict]:
    if isinstance(payload, list):
        for item in payload:
            yield from _iter_nodes(item)
    elif isinstance(payload, dict):
        yield payload
        if "@graph" in payload:
            yield from _iter_nodes(payload["@graph"])


def _is_article(node: dict) -> bool:
    node_type = node.get("@type")
    if isinstance(node_type, list):
        return any(value in ARTICLE_TYPES for value in node_type)
    return node_type in ARTICLE_TYPES


def _as_text(value: Any) -> str:
    if isinstance(value, list):
        return "\n\n".join(str(item) for item in value if item)
    return value if isinstance(value, str) else ""


def extract_structured_data(page: PageDocument) -> Optional[ExtractionResult]:
    """Return the article body declared in ``application/ld+json`` blocks."""

    for script in page.soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Skipping malformed JSON-LD block on %s", page.url)
            continue

        for node in _iter_nodes(payload):
            if not _is_article(node):
                continue
            body = clean_text(_as_text(node.get("articleBody")))
            quality = BODY_QUALITY
            if not body:
                body = clean_text(_as_text(node.get("text")))
                quality = FALLBACK_QUALITY
            if not body:
                description = clean_text(_as_text(node.get("description")))
                body = description if len(description) > MIN_STRUCTURED_CHARS else ""
            if len(body) >= MIN_STRUCTURED_CHARS:
                return ExtractionResult(content=body, quality=quality, method=METHOD_JSON_LD)
    return None
