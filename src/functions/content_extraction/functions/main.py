"""Cloud Function entry points for on-demand and backfill content extraction."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import flask

# Ensure project root is on sys.path before importing project modules
project_root = Path(__file__).parent.parent.parent.parent.parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.shared.utils.config_validator import ConfigurationError, validate_float_env
from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging

from src.functions.content_extraction.core.content_extractor import ContentExtractor
from src.functions.content_extraction.core.db.story_content import StoryContentStore
from src.functions.content_extraction.core.pipelines.backfill import ContentBackfillPipeline

load_env()
setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

WARMUP_STORY_ID = "warmup-ping"
NOT_FOUND_MESSAGE = "Could not extract content from this article"


def fetch_content_handler(
    request: flask.Request,
    *,
    extractor: Optional[ContentExtractor] = None,
    store: Optional[StoryContentStore] = None,
) -> flask.Response:
    """Extract one article on demand and cache the text on its story."""

    if request.method == "OPTIONS":
        return _cors_response({}, status=204)

    if request.method != "POST":
        return _error_response("Method not allowed. Use POST.", status=405)

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    story_id = payload.get("story_id")
    url = payload.get("url")

    if story_id == WARMUP_STORY_ID:
        return _cors_response({"success": True, "warmup": True})

    if not story_id or not url or not isinstance(url, str):
        return _error_response("story_id and url are required", status=400)

    try:
        extractor = extractor or ContentExtractor(options=_extraction_options())
        result = _run_async(extractor.extract(url))

        if not result.content:
            logger.info("No content extracted for story %s (%s)", story_id, result.method)
            return _cors_response(
                {"success": False, "content": None, "method": result.method, "error": NOT_FOUND_MESSAGE}
            )

        (store or StoryContentStore()).save_content(str(story_id), result.content, result.quality)
        return _cors_response({"success": True, **result.to_dict()})
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return _error_response(str(exc), status=500)
    except Exception as exc:  # noqa: BLE001
        logger.error("Unexpected failure extracting story %s", story_id, exc_info=True)
        return _error_response(str(exc), status=500)


def backfill_content_handler(
    request: flask.Request,
    *,
    pipeline: Optional[ContentBackfillPipeline] = None,
) -> flask.Response:
    """Extract content for stories that were published without it."""

    if request.method == "OPTIONS":
        return _cors_response({}, status=204)

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    try:
        if pipeline is None:
            pipeline = ContentBackfillPipeline(
                StoryContentStore(),
                ContentExtractor(options=_extraction_options()),
            )
        return _cors_response(_run_async(pipeline.run(payload.get("limit"))))
    except Exception as exc:  # noqa: BLE001
        logger.error("Content backfill failed", exc_info=True)
        return _error_response(str(exc), status=500)


def health_check_handler(request: flask.Request) -> flask.Response:
    """Health check endpoint."""

    return _cors_response({"status": "healthy", "service": "content_extraction"})


def _extraction_options() -> Dict[str, Any]:
    return {"timeout_seconds": validate_float_env("EXTRACTION_TIMEOUT_SECONDS", 25.0, min_value=1.0)}


def _cors_response(body: Dict[str, Any], status: int = 200) -> flask.Response:
    response = flask.make_response(json.dumps(body, ensure_ascii=False), status)
    headers = response.headers
    headers["Content-Type"] = "application/json; charset=utf-8"
    headers["Access-Control-Allow-Origin"] = "*"
    headers["Access-Control-Allow-Methods"] = "POST,OPTIONS"
    headers["Access-Control-Allow-Headers"] = "authorization,x-client-info,apikey,content-type"
    return response


def _error_response(message: str, status: int) -> flask.Response:
    return _cors_response({"success": False, "error": message}, status=status)


def _run_async(coro):
    try:
        return asyncio.run(coro)
    except RuntimeError as exc:
        if "event loop" in str(exc).lower():
            loop = asyncio.new_event_loop()
            try:
                asyncio.set_event_loop(loop)
                return loop.run_until_complete(coro)
            finally:
                loop.close()
        raise


# Optional functions-framework registration for local tooling parity
try:  # pragma: no cover - optional dependency
    import functions_framework
except ImportError:  # pragma: no cover
    functions_framework = None

if functions_framework is not None:

    @functions_framework.http
    def fetch_content(request: flask.Request):
        return fetch_content_handler(request)

    @functions_framework.http
    def backfill_content(request: flask.Request):
        return backfill_content_handler(request)
