"""Local development server for the content extraction functions."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from flask import Flask, request

project_root = Path(__file__).parent.parent.parent.parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.functions.content_extraction.functions.main import (
    backfill_content_handler,
    fetch_content_handler,
    health_check_handler,
)

app = Flask(__name__)


@app.route("/fetch-content", methods=["POST", "OPTIONS"])
def local_fetch_content():
    """Proxy to the on-demand extraction handler."""

    return fetch_content_handler(request)


@app.route("/backfill-content", methods=["POST", "OPTIONS"])
def local_backfill_content():
    return backfill_content_handler(request)


@app.route("/health", methods=["GET"])
def local_health():
    return health_check_handler(request)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "8080"))
    print(f"Starting content extraction server on http://localhost:{port}")
    print(
        "Test with: curl -X POST http://localhost:{port}/fetch-content -H 'Content-Type: application/json' "
        "-d '{\"story_id\": \"<uuid>\", \"url\": \"https://example.com/article\"}'".replace("{port}", str(port))
    )
    print("")
    app.run(host="0.0.0.0", port=port, debug=True)
