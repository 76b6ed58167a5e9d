"""HTTP fetching for article pages."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,ar;q=0.8",
    "Cache-Control": "no-cache",
}


@dataclass(slots=True)
class FetchResponse:
    url: str
    html: Optional[str] = None
    status_code: Optional[int] = None
    timed_out: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.html is not None


class PageFetcher:
    """Fetch HTML with a browser profile and a hard deadline.

    The deadline covers the whole exchange, including servers that trickle
    bytes slowly enough to stay under the per-read timeout.
    """

    def __init__(self, *, client: Optional[httpx.AsyncClient] = None) -> None:
        self._client = client

    async def fetch(self, url: str, *, timeout_seconds: float) -> FetchResponse:
        try:
            return await asyncio.wait_for(self._get(url, timeout_seconds), timeout=timeout_seconds)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning("Fetch timed out after %.0fs for %s", timeout_seconds, url)
            return FetchResponse(url=url, timed_out=True, error="timeout")
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.warning("Fetch failed for %s: %s", url, exc)
            return FetchResponse(url=url, error=str(exc))

    async def _get(self, url: str, timeout_seconds: float) -> FetchResponse:
        headers = {**BROWSER_HEADERS, "Referer": url}
        if self._client is not None:
            response = await self._client.get(url, headers=headers, timeout=timeout_seconds)
        else:
            async with httpx.AsyncClient(follow_redirects=True, timeout=timeout_seconds) as client:
                response = await client.get(url, headers=headers)

        if not response.is_success:
            logger.info("HTTP %s for %s", response.status_code, url)
            return FetchResponse(url=url, status_code=response.status_code, error=f"HTTP {response.status_code}")
        return FetchResponse(url=str(response.url), html=response.text, status_code=response.status_code)
