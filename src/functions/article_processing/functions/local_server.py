"""Local development server for the article processing function."""

from __future__ import annotations

import os
import sys
from pathlib import Path

from flask import Flask, request

project_root = Path(__file__).parent.parent.parent.parent.parent.resolve()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.functions.article_processing.functions.main import health_check_handler, process_articles_handler

app = Flask(__name__)


@app.route("/", methods=["POST", "OPTIONS"])
def local_handler():
    """Proxy HTTP requests to the batch handler for local testing."""

    return process_articles_handler(request)


@app.route("/health", methods=["GET"])
def local_health():
    return health_check_handler(request)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "8080"))
    print(f"Starting article processing server on http://localhost:{port}")
    print(
        "Test with: curl -X POST http://localhost:{port} -H 'Content-Type: application/json' "
        "-H \"Authorization: Bearer $SUPABASE_SERVICE_ROLE_KEY\" -d '{\"limit\": 5}'".replace("{port}", str(port))
    )
    print("")
    app.run(host="0.0.0.0", port=port, debug=True)
