"""Cloud Function entry point for the scheduled article processing batch."""

from __future__ import annotations

import asyncio
import hmac
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import flask

# Ensure project root is on sys.path before importing project modules
project_root = Path(__file__).parent.parent.parent.parent.parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.shared.db.connection import service_role_key
from src.shared.utils.config_validator import ConfigurationError
from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging

from src.functions.article_processing.core.db.breaker_state import CircuitBreakerStore
from src.functions.article_processing.core.errors import CircuitOpen
from src.functions.article_processing.core.orchestration.config_loader import build_breaker_settings
from src.functions.article_processing.core.orchestration.factory import build_pipeline
from src.functions.article_processing.core.orchestration.pipeline import ArticleProcessingPipeline, utcnow
from src.functions.article_processing.core.resilience.circuit_breaker import CircuitBreaker

load_env()
setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Pipeline-Secret"


def is_trusted_invoker(headers: Any, *, secret: Optional[str], service_key: Optional[str]) -> bool:
    """Accept the shared secret header or a bearer token equal to the service role key."""

    if secret:
        supplied = headers.get(SECRET_HEADER) or ""
        if supplied and hmac.compare_digest(supplied, secret):
            return True

    authorization = headers.get("Authorization") or ""
    if service_key and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip()
        return bool(token) and hmac.compare_digest(token, service_key)
    return False


def process_articles_handler(
    request: flask.Request,
    *,
    pipeline_factory: Callable[[], ArticleProcessingPipeline] = build_pipeline,
    breaker_store_factory: Callable[[], CircuitBreakerStore] = CircuitBreakerStore,
) -> flask.Response:
    """HTTP handler that runs one enrichment batch."""

    if request.method == "OPTIONS":
        return _cors_response({}, status=204)

    if request.method != "POST":
        logger.warning("Unsupported HTTP method: %s", request.method)
        return _cors_response({"error": "Method not allowed. Use POST."}, status=405)

    if not is_trusted_invoker(
        request.headers,
        secret=os.getenv("PIPELINE_INVOKE_SECRET"),
        service_key=service_role_key(),
    ):
        logger.warning("Rejected untrusted batch invocation")
        return _cors_response({"error": "Unauthorized"}, status=401)

    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    try:
        pipeline = pipeline_factory()
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        _record_startup_failure(breaker_store_factory)
        return _cors_response({"error": str(exc)}, status=500)

    try:
        result = _run_async(pipeline.run(payload.get("limit")))
        return _cors_response(result.to_response())
    except CircuitOpen as exc:
        cooldown = exc.state.cooldown_until
        return _cors_response(
            {
                "message": "Circuit breaker is open, processing paused",
                "cooldown_until": cooldown.isoformat() if cooldown else None,
                "failure_count": exc.state.failure_count,
            },
            status=503,
        )
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return _cors_response({"error": str(exc)}, status=500)
    except Exception as exc:  # noqa: BLE001
        logger.error("Unexpected failure", exc_info=True)
        return _cors_response({"error": str(exc) or type(exc).__name__}, status=500)


def _record_startup_failure(breaker_store_factory: Callable[[], CircuitBreakerStore]) -> None:
    """Count a batch that could not be configured as a failed batch.

    Only possible when the state store itself is configured; an open
    breaker is left as is.
    """

    try:
        store = breaker_store_factory()
        breaker = CircuitBreaker(build_breaker_settings())
    except ConfigurationError as exc:
        logger.warning("Circuit breaker failure not recorded: %s", exc)
        return

    now = utcnow()
    decision = breaker.check(store.load(), now)
    if decision.can_proceed:
        store.save(breaker.record_failure(decision.state, now))


def health_check_handler(request: flask.Request) -> flask.Response:
    """Health check endpoint."""

    return _cors_response({"status": "healthy", "service": "article_processing"})


def _cors_response(body: Dict[str, Any], status: int = 200) -> flask.Response:
    response = flask.make_response(json.dumps(body, ensure_ascii=False), status)
    headers = response.headers
    headers["Content-Type"] = "application/json; charset=utf-8"
    headers["Access-Control-Allow-Origin"] = "*"
    headers["Access-Control-Allow-Methods"] = "POST,OPTIONS"
    headers["Access-Control-Allow-Headers"] = f"Content-Type,Authorization,{SECRET_HEADER}"
    return response


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
    def process_articles(request: flask.Request):
        return process_articles_handler(request)
