"""Page metadata helpers used to weigh readability results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup


@dataclass(slots=True)
class PageMetadata:
    byline: Optional[str] = None
    site_name: Optional[str] = None
    excerpt: Optional[str] = None


def _parse_meta(soup: BeautifulSoup, *names: str) -> Optional[str]:
    for name in names:
        tag = soup.find("meta", attrs={"property": name}) or soup.find("meta", attrs={"name": name})
        if tag and tag.get("content"):
            return tag["content"].strip() or None
    return None


def extract_metadata(soup: BeautifulSoup) -> PageMetadata:
    """Collect byline, site name and excerpt from meta tags."""

    byline = _parse_meta(soup, "author", "article:author", "og:author", "byl")
    if not byline:
        author_link = soup.find(attrs={"rel": "author"})
        if author_link:
            byline = author_link.get_text(" ", strip=True) or None
    return PageMetadata(
        byline=byline,
        site_name=_parse_meta(soup, "og:site_name", "application-name", "twitter:site"),
        excerpt=_parse_meta(soup, "og:description", "twitter:description", "description"),
    )
