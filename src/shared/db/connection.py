"""Shared Supabase connection utilities.

Both pipeline functions talk to the same project with the service role key,
which bypasses row level security for ``raw_articles``, ``stories`` and the
pipeline state table.
"""

from __future__ import annotations
import os
import logging
from dataclasses import dataclass
from typing import Optional

from supabase import Client, ClientOptions, create_client

from src.shared.utils.config_validator import require_env

logger = logging.getLogger(__name__)

SERVICE_KEY_VARS = ("SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_KEY")


@dataclass
class SupabaseConfig:
    """Configuration for Supabase connection.

    Attributes:
        url: Supabase project URL
        key: Supabase service role key
        schema: Database schema to use (default: public)
    """
    url: str
    key: str
    schema: str = "public"

    @classmethod
    def from_env(cls, url_var: str = "SUPABASE_URL", schema_var: str = "SUPABASE_SCHEMA") -> SupabaseConfig:
        """Create configuration from environment variables.

        The key is read from ``SUPABASE_SERVICE_ROLE_KEY`` and falls back to
        ``SUPABASE_KEY``.

        Raises:
            ConfigurationError: If the URL or key is not set
        """
        return cls(
            url=require_env(url_var, "Supabase project URL"),
            key=require_env(SERVICE_KEY_VARS[0], "Supabase service role key", fallbacks=SERVICE_KEY_VARS[1:]),
            schema=os.getenv(schema_var, "public"),
        )


def service_role_key() -> Optional[str]:
    """Return the configured service role key, if any."""
    for name in SERVICE_KEY_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


def get_supabase_client(config: Optional[SupabaseConfig] = None) -> Client:
    """Create Supabase client.

    Args:
        config: Optional SupabaseConfig. If None, loads from environment.

    Raises:
        ConfigurationError: If required configuration is missing

    Example:
        >>> client = get_supabase_client()
        >>> client.table("raw_articles").select("id").limit(1).execute()
    """
    if config is None:
        config = SupabaseConfig.from_env()

    logger.debug("Creating Supabase client for %s", config.url)

    if config.schema and config.schema != "public":
        logger.debug("Using schema: %s", config.schema)
        return create_client(config.url, config.key, options=ClientOptions(schema=config.schema))

    return create_client(config.url, config.key)
