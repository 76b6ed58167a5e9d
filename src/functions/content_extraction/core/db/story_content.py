"""Persistence of extracted article text on published stories."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from src.shared.db.connection import get_supabase_client

logger = logging.getLogger(__name__)


class StoryContentStore:
    """Read stories missing full content and write extraction results back."""

    TABLE_NAME = "stories"

    def __init__(self, client: Optional[Any] = None) -> None:
        self.client = client or get_supabase_client()

    def save_content(self, story_id: str, content: str, quality: float) -> bool:
        """Persist extracted text; failures are logged and reported as False."""

        try:
            (
                self.client.table(self.TABLE_NAME)
                .update({"full_content": content, "content_quality": round(quality, 3)})
                .eq("id", story_id)
                .execute()
            )
            return True
        except Exception as exc:
            logger.warning("Failed to save content for story %s: %s", story_id, exc)
            return False

    def fetch_missing_content(self, limit: int) -> List[Dict[str, Any]]:
        """Return the newest stories that still have no full content."""

        response = (
            self.client.table(self.TABLE_NAME)
            .select("id,original_url,title_en,title_ar")
            .is_("full_content", "null")
            .not_.is_("original_url", "null")
            .order("published_at", desc=True)
            .limit(limit)
            .execute()
        )
        return list(getattr(response, "data", []) or [])
