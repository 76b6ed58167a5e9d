"""Topic assignment for new stories."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..db.catalog import TopicStore
from ..errors import TopicResolutionError

logger = logging.getLogger(__name__)


def merge_topic_ids(feed_topic_ids: Iterable[str], ai_topic_ids: Iterable[str]) -> List[str]:
    """Feed-curated ids first, then AI ids, without duplicates."""

    merged: List[str] = []
    for topic_id in (*feed_topic_ids, *ai_topic_ids):
        if topic_id and topic_id not in merged:
            merged.append(topic_id)
    return merged


class TopicResolver:
    def __init__(self, store: TopicStore, *, default_slug: str = "general") -> None:
        self.store = store
        self.default_slug = default_slug
        self._topics: Optional[Dict[str, str]] = None

    @property
    def topics(self) -> Dict[str, str]:
        if self._topics is None:
            self._topics = self.store.fetch_active()
            logger.debug("Loaded %d active topics", len(self._topics))
        return self._topics

    def resolve(self, ai_slugs: Sequence[str], feed_topic_ids: Sequence[str]) -> List[str]:
        """Return the topic ids for a story; never empty.

        Raises:
            TopicResolutionError: When nothing matched and no default topic exists.
        """

        ai_ids: List[str] = []
        for slug in ai_slugs:
            topic_id = self.topics.get(slug.strip().lower())
            if topic_id is None:
                logger.warning("Discarding unknown topic slug %r", slug)
                continue
            ai_ids.append(topic_id)

        merged = merge_topic_ids(feed_topic_ids, ai_ids)
        if merged:
            return merged

        default_id = self.topics.get(self.default_slug)
        if default_id is None:
            raise TopicResolutionError(f"No topics resolved and default topic {self.default_slug!r} is missing")
        return [default_id]
