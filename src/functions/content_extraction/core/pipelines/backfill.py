"""Backfill full content for stories published without it."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..content_extractor import ContentExtractor
from ..db.story_content import StoryContentStore

logger = logging.getLogger(__name__)

DEFAULT_BACKFILL_LIMIT = 20
MAX_BACKFILL_LIMIT = 50


def clamp_backfill_limit(value: Any) -> int:
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return DEFAULT_BACKFILL_LIMIT
    return max(1, min(limit, MAX_BACKFILL_LIMIT))


class ContentBackfillPipeline:
    """Extract and store content for stories sequentially."""

    def __init__(
        self,
        store: StoryContentStore,
        extractor: ContentExtractor,
        *,
        delay_seconds: float = 0.5,
    ) -> None:
        self.store = store
        self.extractor = extractor
        self.delay_seconds = delay_seconds

    async def run(self, limit: Optional[int] = None) -> Dict[str, Any]:
        limit = clamp_backfill_limit(limit if limit is not None else DEFAULT_BACKFILL_LIMIT)
        stories = self.store.fetch_missing_content(limit)
        logger.info("Backfilling content for %d stories", len(stories))

        results: List[Dict[str, Any]] = []
        found = 0
        for index, story in enumerate(stories):
            if index and self.delay_seconds:
                await asyncio.sleep(self.delay_seconds)

            result = await self.extractor.extract(story["original_url"])
            saved = False
            if result.content:
                saved = self.store.save_content(story["id"], result.content, result.quality)
                found += 1 if saved else 0
            results.append(
                {
                    "id": story["id"],
                    "title": (story.get("title_en") or story.get("title_ar") or "")[:50],
                    "method": result.method,
                    "length": result.length,
                    "success": saved,
                }
            )

        return {
            "summary": {
                "total_processed": len(stories),
                "content_found": found,
                "content_not_found": len(stories) - found,
            },
            "results": results,
        }
