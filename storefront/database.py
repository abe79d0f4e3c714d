from functools import lru_cache

from supabase import create_client, Client

from .config import settings


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """Client for the order store, created on first use"""
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
