"""Text cleaning routines shared by the extraction strategies."""

from __future__ import annotations

import re
from typing import Iterable

# Publisher chrome in both served languages (English and Arabic)
_BOILERPLATE_PATTERNS = (
    re.compile(r"copyright|©|all rights reserved", re.IGNORECASE),
    re.compile(r"subscribe|newsletter|sign up", re.IGNORECASE),
    re.compile(r"share on|follow us|like us", re.IGNORECASE),
    re.compile(r"read more|continue reading|click here", re.IGNORECASE),
    re.compile(r"advertisement|sponsored|promoted", re.IGNORECASE),
    re.compile(r"cookie|privacy policy|terms of", re.IGNORECASE),
    re.compile(r"اشترك|تابعنا|شاركنا"),
    re.compile(r"حقوق النشر|جميع الحقوق محفوظة"),
    re.compile(r"اقرأ أيضا|مواضيع ذات صلة"),
)

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?،。])\s+")

MIN_PARAGRAPH_CHARS = 40
PSEUDO_PARAGRAPH_CHARS = 150
MIN_RESEGMENT_SOURCE_CHARS = 300


def clean_text(text: str) -> str:
    """Collapse layout whitespace while keeping paragraph breaks."""

    if not text:
        return ""
    text = re.sub(r"[\t\r]+", " ", text)
    text = re.sub(r"\n\s*\n", "\n\n", text)
    text = re.sub(r" {2,}", " ", text)
    return "\n".join(line.strip() for line in text.split("\n")).strip()


def is_boilerplate(text: str) -> bool:
    return any(pattern.search(text) for pattern in _BOILERPLATE_PATTERNS)


def filter_paragraphs(paragraphs: Iterable[str], *, min_chars: int = MIN_PARAGRAPH_CHARS) -> list[str]:
    """Drop short fragments and boilerplate notices."""

    kept: list[str] = []
    for paragraph in paragraphs:
        cleaned = clean_text(paragraph)
        if len(cleaned) < min_chars:
            continue
        if is_boilerplate(cleaned):
            continue
        kept.append(cleaned)
    return kept


def resegment(text: str, *, target_chars: int = PSEUDO_PARAGRAPH_CHARS) -> list[str]:
    """Split unstructured text into pseudo-paragraphs on sentence boundaries.

    Used when a container holds its text outside ``<p>`` tags. Sentences are
    accumulated until a chunk reaches ``target_chars``; a trailing remainder
    is kept only when it is longer than ``MIN_PARAGRAPH_CHARS``.
    """

    text = clean_text(text)
    if len(text) < MIN_RESEGMENT_SOURCE_CHARS or is_boilerplate(text):
        return []

    chunks: list[str] = []
    current = ""
    for sentence in _SENTENCE_BOUNDARY.split(text):
        current += sentence + " "
        if len(current) >= target_chars:
            chunks.append(current.strip())
            current = ""
    if len(current.strip()) > MIN_PARAGRAPH_CHARS:
        chunks.append(current.strip())
    return chunks
