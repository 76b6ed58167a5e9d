"""Final write that turns an enriched raw article into a story."""

from __future__ import annotations

import logging
from datetime import datetime

from ..contracts.raw_article import ArticleStatus, RawArticle
from ..contracts.story import PublishOutcome, StoryDraft
from ..db.catalog import StoryStore, is_unique_violation
from ..db.raw_articles import RawArticleStore
from ..errors import InvalidStatusTransition

logger = logging.getLogger(__name__)


class StoryPublisher:
    """Insert a story once per (source, original_url) and mark the raw row processed.

    A story that already exists, including one inserted by a concurrent run
    after our lookup, is linked instead of duplicated.
    """

    def __init__(self, stories: StoryStore, raw_articles: RawArticleStore) -> None:
        self.stories = stories
        self.raw_articles = raw_articles

    def publish(self, article: RawArticle, draft: StoryDraft, now: datetime) -> PublishOutcome:
        outcome = self._insert_or_link(draft)
        applied = self.raw_articles.transition(
            article,
            ArticleStatus.PROCESSED,
            now,
            story_id=outcome.story_id,
            processed_at=now,
            error_message=None,
        )
        if not applied:
            raise InvalidStatusTransition(f"Raw article {article.id} changed while publishing")
        return outcome

    def _insert_or_link(self, draft: StoryDraft) -> PublishOutcome:
        existing = self.stories.find_existing(draft.source_id, draft.original_url)
        if existing:
            logger.info("Story already exists for %s, linking %s", draft.original_url, existing)
            return PublishOutcome(story_id=existing, linked_existing=True)

        try:
            return PublishOutcome(story_id=self.stories.insert(draft))
        except Exception as exc:
            if not is_unique_violation(exc):
                raise
            winner = self.stories.find_existing(draft.source_id, draft.original_url)
            if winner is None:
                raise
            logger.warning("Lost story insert race for %s, linking %s", draft.original_url, winner)
            return PublishOutcome(story_id=winner, linked_existing=True)
