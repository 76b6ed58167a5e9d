"""Run one article processing batch from the command line."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[4]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.shared.utils.config_validator import ConfigurationError
from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging
from src.functions.article_processing.core.contracts.config import MAX_BATCH_SIZE
from src.functions.article_processing.core.db.raw_articles import RawArticleStore
from src.functions.article_processing.core.errors import CircuitOpen
from src.functions.article_processing.core.orchestration.config_loader import build_pipeline_config
from src.functions.article_processing.core.orchestration.factory import build_pipeline

logger = logging.getLogger("process_articles_cli")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Enrich pending raw articles into stories")
    parser.add_argument("--limit", type=int, default=None, help=f"Batch size (max {MAX_BATCH_SIZE})")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only list the raw articles the next batch would pick up",
    )
    parser.add_argument("--no-delay", action="store_true", help="Skip the pause between items")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args()


def list_eligible(limit: int | None) -> int:
    config = build_pipeline_config()
    articles = RawArticleStore().fetch_eligible(
        config.clamp_limit(limit),
        datetime.now(timezone.utc),
        max_retries=config.max_retries,
    )
    for article in articles:
        print(
            f"{article.id}  retries={article.retry_count}  "
            f"reliability={article.reliability_score:.2f}  {article.original_title[:70]}"
        )
    print(f"\n{len(articles)} eligible")
    return 0


def main() -> int:
    args = parse_args()
    load_env()
    setup_logging(level=args.log_level)

    try:
        if args.dry_run:
            return list_eligible(args.limit)
        overrides = {"item_delay_seconds": 0.0} if args.no_delay else {}
        result = asyncio.run(build_pipeline(overrides).run(args.limit))
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2
    except CircuitOpen as exc:
        logger.error("Circuit breaker open until %s", exc.state.cooldown_until)
        return 3

    print(json.dumps(result.to_response(), indent=2, ensure_ascii=False))
    return 0 if result.summary.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
