"""Environment variable loading utilities."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _candidate_env_files(start: Path) -> List[Path]:
    # Outermost first so that a project-level .env can be refined closer to cwd
    candidates = [parent / ".env" for parent in reversed(list(start.parents))]
    candidates.append(start / ".env")
    return [path for path in candidates if path.exists()]


def load_env(env_file: Optional[str] = None, override: bool = False) -> None:
    """Load environment variables from .env files.

    Args:
        env_file: Path to a specific .env file. If None, every .env found in
                  the current directory and its parents is loaded.
        override: Whether to override existing environment variables.
    """
    if env_file:
        env_paths = [Path(env_file)] if Path(env_file).exists() else []
    else:
        env_paths = _candidate_env_files(Path.cwd())

    if not env_paths:
        logger.debug("No .env file found, using system environment")
        return

    seen = set()
    for path in env_paths:
        if path in seen:
            continue
        load_dotenv(path, override=override)
        seen.add(path)
        logger.debug("Loaded environment from %s", path)
