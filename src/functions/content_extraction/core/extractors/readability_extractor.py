"""Main-content extraction using readability-lxml."""

from __future__ import annotations

import logging
from typing import Optional

from lxml import html as lxml_html
from lxml.etree import ParserError
from readability import Document
from readability.readability import Unparseable

from ..contracts.extraction import METHOD_READABILITY, MIN_CONTENT_CHARS, ExtractionResult, PageDocument
from ..processors.content_cleaner import clean_text
from ..processors.metadata_extractor import extract_metadata
from ..processors.quality import score_readability

logger = logging.getLogger(__name__)


def extract_readable(page: PageDocument) -> Optional[ExtractionResult]:
    try:
        summary_html = Document(page.html).summary(html_partial=True)
        fragment = lxml_html.fromstring(summary_html)
    except (Unparseable, ParserError, ValueError) as exc:
        logger.debug("Readability failed for %s: %s", page.url, exc)
        return None

    paragraphs = [clean_text(node.text_content()) for node in fragment.iter("p")]
    paragraphs = [paragraph for paragraph in paragraphs if paragraph]
    text = "\n\n".join(paragraphs) if paragraphs else clean_text(fragment.text_content())
    if len(text) < MIN_CONTENT_CHARS:
        return None

    metadata = extract_metadata(page.soup)
    quality = score_readability(
        text,
        paragraph_count=len(paragraphs),
        excerpt=metadata.excerpt,
        byline=metadata.byline,
        site_name=metadata.site_name,
    )
    return ExtractionResult(content=text, quality=quality, method=METHOD_READABILITY)
