"""Map a raw article's feed onto a canonical source record."""

from __future__ import annotations

import logging
from typing import Dict, Optional
from urllib.parse import urlsplit

from ..contracts.raw_article import RawArticle
from ..contracts.story import SourceCandidate, site_root
from ..db.catalog import SourceStore, is_unique_violation

logger = logging.getLogger(__name__)


def candidate_for(article: RawArticle) -> SourceCandidate:
    """Build source metadata from the feed, falling back to the article URL."""

    feed = article.feed
    url = site_root(feed.website_url if feed else None) or site_root(article.original_url)
    name = feed.name if feed and feed.name else ""
    if not name:
        name = urlsplit(article.original_url).netloc.lower().removeprefix("www.") or "Unknown"
    return SourceCandidate(
        name=name,
        url=url,
        language=article.language,
        reliability_score=article.reliability_score,
        logo_url=feed.logo_url if feed else None,
    )


class SourceResolver:
    """Find a source by name, then by URL, creating it on first sight.

    Resolved ids are cached for the lifetime of the resolver, which is one
    batch.
    """

    def __init__(self, store: SourceStore) -> None:
        self.store = store
        self._cache: Dict[str, str] = {}

    def resolve(self, article: RawArticle) -> str:
        candidate = candidate_for(article)
        cached = self._cache.get(candidate.name)
        if cached:
            return cached

        source_id = self._lookup(candidate)
        if source_id is None:
            source_id = self._create(candidate)
        self._cache[candidate.name] = source_id
        return source_id

    def _lookup(self, candidate: SourceCandidate) -> Optional[str]:
        source_id = self.store.find_by_name(candidate.name)
        if source_id is None and candidate.url:
            source_id = self.store.find_by_url(candidate.url)
        return source_id

    def _create(self, candidate: SourceCandidate) -> str:
        try:
            return self.store.insert(candidate)
        except Exception as exc:
            if not is_unique_violation(exc):
                raise
            # Another run created it between our lookup and insert
            source_id = self._lookup(candidate)
            if source_id is None:
                raise
            logger.info("Source %s was created concurrently, reusing %s", candidate.name, source_id)
            return source_id
