"""Shared database utilities."""

from .connection import SupabaseConfig, get_supabase_client, service_role_key

__all__ = ["SupabaseConfig", "get_supabase_client", "service_role_key"]
