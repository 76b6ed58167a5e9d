"""Heuristic DOM extraction for pages without structured or readable markup."""

from __future__ import annotations

from typing import Optional

from bs4 import BeautifulSoup, Tag

from ..contracts.extraction import METHOD_DOM, MIN_CONTENT_CHARS, ExtractionResult, PageDocument
from ..processors.content_cleaner import filter_paragraphs, resegment
from ..processors.quality import ContentQuality, score_content

UNWANTED_SELECTORS = (
    "script", "style", "nav", "footer", "aside", "header",
    ".ad", ".ads", ".advertisement", ".promo", ".banner",
    ".sidebar", ".related", ".comments", ".share", ".social",
    ".newsletter", ".popup", ".modal", '[role="navigation"]',
    ".breadcrumb", ".pagination", ".author-bio", ".tags",
)

CONTENT_SELECTORS = (
    "article", "main article", '[role="article"]',
    ".article-body", ".article-content", ".article__body", ".article__content",
    ".post-body", ".post-content", ".post__body", ".post__content",
    ".entry-content", ".entry-body", ".story-body", ".story-content",
    ".news-body", ".news-content", ".content-body", ".main-content",
    ".article-text", ".news-text", ".story-text", ".content-text",
    ".td-post-content", ".jeg_post_content", ".single-content",
    "#article", "#content", "#main-content", "#story", "#post-content",
    "main", '[role="main"]',
)

MIN_CONTAINER_CHARS = 200
MIN_DENSE_DIV_CHARS = 300
PARAGRAPH_WEIGHT = 100


def _strip_unwanted(soup: BeautifulSoup) -> None:
    for selector in UNWANTED_SELECTORS:
        for element in soup.select(selector):
            element.decompose()


def _find_container(soup: BeautifulSoup) -> tuple[Optional[Tag], bool]:
    """Return the content container and whether a known selector matched."""

    for selector in CONTENT_SELECTORS:
        element = soup.select_one(selector)
        if element is not None and len(element.get_text()) > MIN_CONTAINER_CHARS:
            return element, True

    best: Optional[Tag] = None
    best_score = 0
    for div in soup.find_all("div"):
        paragraph_count = len(div.find_all("p"))
        text_length = len(div.get_text())
        score = paragraph_count * PARAGRAPH_WEIGHT + text_length
        if score > best_score and paragraph_count >= 2 and text_length > MIN_DENSE_DIV_CHARS:
            best, best_score = div, score
    return best, False


def extract_from_dom(page: PageDocument) -> Optional[ExtractionResult]:
    # Work on a private tree; earlier strategies share ``page.soup``
    soup = BeautifulSoup(page.html, "lxml")
    _strip_unwanted(soup)

    container, matched_selector = _find_container(soup)
    if container is None:
        return None

    paragraphs = filter_paragraphs(p.get_text(" ", strip=True) for p in container.find_all("p"))
    if len(paragraphs) < 2:
        paragraphs = resegment(container.get_text("\n")) or paragraphs
    if not paragraphs:
        return None

    content = "\n\n".join(paragraphs)
    if len(content) < MIN_CONTENT_CHARS:
        return None

    quality = ContentQuality.measure(paragraphs, has_proper_structure=matched_selector)
    return ExtractionResult(content=content, quality=score_content(quality), method=METHOD_DOM)
