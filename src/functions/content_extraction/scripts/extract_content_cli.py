"""Command-line entry point for the content extractor."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[4]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.shared.utils.logging import setup_logging
from src.functions.content_extraction.core.content_extractor import ContentExtractor


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract readable article text from a URL")
    parser.add_argument("url", help="Target article URL")
    parser.add_argument("--output", type=Path, help="Optional JSON file to write results to")
    parser.add_argument("--timeout", type=float, default=25.0, help="Fetch timeout in seconds (default: 25)")
    parser.add_argument("--preview", type=int, default=0, help="Only print the first N characters of content")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    setup_logging(level=args.log_level)

    extractor = ContentExtractor(options={"timeout_seconds": args.timeout})
    result = asyncio.run(extractor.extract(args.url))

    payload = {"url": args.url, **result.to_dict()}
    if args.preview and result.content:
        payload["content"] = result.content[: args.preview]

    serialized = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(serialized, encoding="utf-8")
    else:
        print(serialized)
    return 0 if result.content else 1


if __name__ == "__main__":
    sys.exit(main())
