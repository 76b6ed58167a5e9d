"""Deployment wrapper exposing the pipeline Cloud Functions.

Deploy with ``--entry-point`` set to one of ``process_articles``,
``fetch_content`` or ``backfill_content``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import flask

project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.functions.article_processing.functions.main import process_articles_handler
from src.functions.content_extraction.functions.main import (
    backfill_content_handler,
    fetch_content_handler,
)


def process_articles(request: flask.Request) -> flask.Response:
    return process_articles_handler(request)


def fetch_content(request: flask.Request) -> flask.Response:
    return fetch_content_handler(request)


def backfill_content(request: flask.Request) -> flask.Response:
    return backfill_content_handler(request)
