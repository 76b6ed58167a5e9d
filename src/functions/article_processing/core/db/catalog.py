"""Lookups and inserts for ``sources``, ``topics`` and ``stories``."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError

from src.shared.db.connection import get_supabase_client
from ..contracts.story import SourceCandidate, StoryDraft

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: BaseException) -> bool:
    return isinstance(exc, APIError) and str(getattr(exc, "code", "")) == UNIQUE_VIOLATION


def _first_id(response: Any) -> Optional[str]:
    rows = getattr(response, "data", []) or []
    if not rows:
        return None
    value = rows[0].get("id")
    return str(value) if value is not None else None


class SourceStore:
    TABLE_NAME = "sources"

    def __init__(self, client: Optional[Any] = None) -> None:
        self.client = client or get_supabase_client()

    def find_by_name(self, name: str) -> Optional[str]:
        response = self.client.table(self.TABLE_NAME).select("id").eq("name", name).limit(1).execute()
        return _first_id(response)

    def find_by_url(self, url: str) -> Optional[str]:
        response = self.client.table(self.TABLE_NAME).select("id").eq("url", url).limit(1).execute()
        return _first_id(response)

    def insert(self, candidate: SourceCandidate) -> str:
        response = self.client.table(self.TABLE_NAME).insert(candidate.to_row()).execute()
        source_id = _first_id(response)
        if source_id is None:
            raise RuntimeError(f"Source insert for {candidate.name!r} returned no id")
        logger.info("Created source %s (%s)", candidate.name, source_id)
        return source_id


class TopicStore:
    TABLE_NAME = "topics"

    def __init__(self, client: Optional[Any] = None) -> None:
        self.client = client or get_supabase_client()

    def fetch_active(self) -> Dict[str, str]:
        """Map of topic slug to id for every active topic."""

        response = self.client.table(self.TABLE_NAME).select("id,slug").eq("is_active", True).execute()
        rows = getattr(response, "data", []) or []
        return {str(row["slug"]).lower(): str(row["id"]) for row in rows if row.get("slug") and row.get("id")}


class StoryStore:
    TABLE_NAME = "stories"

    def __init__(self, client: Optional[Any] = None) -> None:
        self.client = client or get_supabase_client()

    def find_existing(self, source_id: str, original_url: str) -> Optional[str]:
        response = (
            self.client.table(self.TABLE_NAME)
            .select("id")
            .eq("source_id", source_id)
            .eq("original_url", original_url)
            .limit(1)
            .execute()
        )
        return _first_id(response)

    def insert(self, draft: StoryDraft) -> str:
        response = self.client.table(self.TABLE_NAME).insert(draft.to_row()).execute()
        story_id = _first_id(response)
        if story_id is None:
            raise RuntimeError(f"Story insert for {draft.original_url} returned no id")
        return story_id
