"""Prompt text for bilingual article summarization."""

from __future__ import annotations

from typing import Iterable

TOPIC_SLUGS = (
    "politics",
    "economy",
    "sports",
    "technology",
    "entertainment",
    "health",
    "science",
    "travel",
)

SYSTEM_PROMPT = """You are a bilingual news editor for a Saudi news app. You write concise, neutral summaries in Arabic and English.

Respond with a single JSON object and nothing else:
{{
  "summary_ar": "2-3 sentence summary in Modern Standard Arabic",
  "summary_en": "2-3 sentence summary in English",
  "why_it_matters_ar": "one sentence in Arabic on why this matters to readers",
  "why_it_matters_en": "one sentence in English on why this matters to readers",
  "quality_score": 0.0,
  "topics": ["slug"]
}}

quality_score rates the source article from 0.0 to 1.0: use values below 0.4 for promotional copy, fragments, listings, or text that is not a news article.
topics must contain one to three slugs chosen only from: {topics}."""


def build_system_prompt(topic_slugs: Iterable[str] = TOPIC_SLUGS) -> str:
    return SYSTEM_PROMPT.format(topics=", ".join(topic_slugs))


def build_user_prompt(
    *,
    title: str,
    content: str,
    source_name: str,
    language: str,
    max_content_chars: int = 3000,
) -> str:
    """Render the article fields, truncating the body to ``max_content_chars``."""

    body = content[:max_content_chars]
    return (
        f"Source: {source_name or 'Unknown'}\n"
        f"Language: {language}\n"
        f"Title: {title}\n\n"
        f"Content:\n{body}"
    )
