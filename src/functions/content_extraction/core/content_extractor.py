"""Fetch a page and run the extraction cascade over it."""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from .contracts.extraction import (
    METHOD_ERROR,
    METHOD_HTTP_ERROR,
    METHOD_NOT_FOUND,
    METHOD_PARSE_FAILED,
    METHOD_TIMEOUT,
    ExtractionOptions,
    ExtractionResult,
    PageDocument,
    parse_options,
)
from .extractors import DEFAULT_STRATEGIES, Strategy
from .fetcher import PageFetcher


class ContentExtractor:
    """Return cleaned article text and a quality score for a URL.

    Fetching never raises: network problems come back as an empty result
    whose ``method`` names the failure (``timeout``, ``http_error`` ...).
    """

    def __init__(
        self,
        *,
        fetcher: Optional[PageFetcher] = None,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
        options: dict | ExtractionOptions | None = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._fetcher = fetcher or PageFetcher()
        self._strategies = tuple(strategies)
        self._options = parse_options(options)
        self._logger = logger or logging.getLogger(__name__)

    async def extract(self, url: str) -> ExtractionResult:
        start = time.perf_counter()
        response = await self._fetcher.fetch(url, timeout_seconds=self._options.timeout_seconds)
        if response.timed_out:
            return ExtractionResult.empty(METHOD_TIMEOUT, error="Fetch timed out")
        if not response.ok:
            method = METHOD_HTTP_ERROR if response.status_code else METHOD_ERROR
            return ExtractionResult.empty(method, error=response.error)

        result = self.extract_from_html(response.url, response.html or "")
        self._logger.info(
            "Extraction for %s finished via %s (%d chars, quality %.2f) in %.2fs",
            url,
            result.method,
            result.length,
            result.quality,
            time.perf_counter() - start,
        )
        return result

    def extract_from_html(self, url: str, html: str) -> ExtractionResult:
        """Run the strategy cascade over already fetched markup."""

        if not html.strip():
            return ExtractionResult.empty(METHOD_PARSE_FAILED, error="Empty document")
        page = PageDocument.parse(url, html)

        for strategy in self._strategies:
            try:
                result = strategy(page)
            except Exception as exc:  # noqa: BLE001
                self._logger.warning("Strategy %s failed for %s: %s", strategy.__name__, url, exc)
                continue
            if result is None or not result.content:
                continue
            if len(result.content) < self._options.min_content_chars:
                self._logger.debug(
                    "Discarding %s result for %s: %d chars", result.method, url, len(result.content)
                )
                continue
            return result

        return ExtractionResult.empty(METHOD_NOT_FOUND)
