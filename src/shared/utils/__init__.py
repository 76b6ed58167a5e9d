"""Shared utility functions."""

from .logging import ItemLogger, setup_logging
from .env import load_env

__all__ = ["ItemLogger", "setup_logging", "load_env"]
