"""Reads and status updates for the ``raw_articles`` table.

``transition`` is the only place a raw article's status changes; it checks
the lifecycle table before writing and scopes the update to the status it
expects the row to have, so two concurrent runs cannot both claim an item.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from src.shared.db.connection import get_supabase_client
from ..contracts.raw_article import ArticleStatus, RawArticle, ensure_transition
from ..errors import InvalidStatusTransition

logger = logging.getLogger(__name__)

FEED_COLUMNS = "id,name,language,reliability_score,website_url,logo_url"


def _filter_value(moment: datetime) -> str:
    # PostgREST filter strings; avoid "+" offsets being read as spaces
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class RawArticleStore:
    TABLE_NAME = "raw_articles"

    def __init__(self, client: Optional[Any] = None) -> None:
        self.client = client or get_supabase_client()

    def reclaim_stuck(self, cutoff: datetime, now: datetime) -> int:
        """Return rows stuck in ``processing`` since before ``cutoff`` to the pool."""

        response = (
            self.client.table(self.TABLE_NAME)
            .update(
                {
                    "status": ArticleStatus.PENDING.value,
                    "retry_after": None,
                    "updated_at": now.isoformat(),
                }
            )
            .eq("status", ArticleStatus.PROCESSING.value)
            .lt("updated_at", _filter_value(cutoff))
            .execute()
        )
        rows = getattr(response, "data", []) or []
        if rows:
            logger.warning("Reclaimed %d raw articles stuck in processing", len(rows))
        return len(rows)

    def fetch_eligible(self, limit: int, now: datetime, *, max_retries: int) -> List[RawArticle]:
        """Oldest pending rows whose backoff has elapsed."""

        response = (
            self.client.table(self.TABLE_NAME)
            .select(f"*, rss_source:rss_sources({FEED_COLUMNS})")
            .eq("status", ArticleStatus.PENDING.value)
            .lt("retry_count", max_retries)
            .or_(f"retry_after.is.null,retry_after.lte.{_filter_value(now)}")
            .order("fetched_at", desc=False)
            .limit(limit)
            .execute()
        )
        rows = getattr(response, "data", []) or []
        articles: List[RawArticle] = []
        for row in rows:
            try:
                articles.append(RawArticle.from_row(row))
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping malformed raw article %s: %s", row.get("id"), exc)
        return articles

    def transition(
        self,
        article: RawArticle,
        target: ArticleStatus,
        now: datetime,
        **fields: Any,
    ) -> bool:
        """Move ``article`` to ``target`` and apply ``fields`` in the same write.

        Returns False when the row no longer had the expected status (another
        run got there first). The in-memory article is updated on success.

        Raises:
            InvalidStatusTransition: For changes outside the lifecycle, or a
                ``processed`` row without a story reference.
        """

        ensure_transition(article.status, target)
        if target is ArticleStatus.PROCESSED and not fields.get("story_id"):
            raise InvalidStatusTransition("A processed raw article must reference a story")

        payload: Dict[str, Any] = {"status": target.value, "updated_at": now.isoformat()}
        for key, value in fields.items():
            payload[key] = value.isoformat() if isinstance(value, datetime) else value

        response = (
            self.client.table(self.TABLE_NAME)
            .update(payload)
            .eq("id", article.id)
            .eq("status", article.status.value)
            .execute()
        )
        if not (getattr(response, "data", None) or []):
            logger.warning(
                "[%s] Status change %s -> %s matched no row", article.id, article.status.value, target.value
            )
            return False

        article.status = target
        article.updated_at = now
        for key, value in fields.items():
            if hasattr(article, key):
                setattr(article, key, value)
        return True

    def cache_content(self, article_id: str, content: str, quality: Optional[float]) -> None:
        """Store extracted text on the raw row; failures are logged only."""

        try:
            (
                self.client.table(self.TABLE_NAME)
                .update({"full_content": content, "content_quality": quality})
                .eq("id", article_id)
                .execute()
            )
        except Exception as exc:
            logger.warning("[%s] Failed to cache extracted content: %s", article_id, exc)
