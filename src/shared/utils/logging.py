"""Shared logging configuration for the pipeline functions.

Both the content extraction and article processing functions call
``setup_logging`` once at import time of their HTTP entry point so log
lines look the same in Cloud Logging regardless of which function emitted
them.
"""

from __future__ import annotations
import logging
import os
import sys
from typing import Any, MutableMapping, Optional

_NOISY_LOGGERS = ("urllib3", "httpx", "httpcore", "hpack", "openai", "supabase", "postgrest")


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    include_timestamp: bool = True
) -> None:
    """Configure root logger with console handler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, reads from LOG_LEVEL env var or defaults to INFO.
        format_string: Custom format string. If None, uses default format.
        include_timestamp: Whether to include timestamp in log messages.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()

    if format_string is None:
        if include_timestamp:
            format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        else:
            format_string = "[%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True
    )

    # HTTP client and SDK loggers emit one line per request at INFO
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


class ItemLogger(logging.LoggerAdapter):
    """Prefix every message with the identifier of the item being processed.

    Example:
        >>> log = ItemLogger(logging.getLogger(__name__), "raw-123")
        >>> log.info("Summarized with %s", "gpt-4.1")
        # ... [raw-123] Summarized with gpt-4.1
    """

    def __init__(self, logger: logging.Logger, item_id: Any) -> None:
        super().__init__(logger, {"item_id": item_id})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['item_id']}] {msg}", kwargs
