"""Supabase client configuration for the waitlist batch jobs."""
from typing import Optional
import logging

from supabase import Client, create_client

from app.config.settings import settings

# Process-wide client; each job run still re-reads everything from the store
_supabase_service_client: Optional[Client] = None

logger = logging.getLogger(__name__)


def get_supabase_service_client() -> Optional[Client]:
    """
    Get Supabase client with service role for system operations.
    This bypasses RLS and should only be used by the background jobs.

    Returns None (after logging a warning) when credentials are missing
    or the client cannot be created.
    """
    global _supabase_service_client

    if _supabase_service_client is None:
        supabase_url = settings.SUPABASE_URL
        service_key = settings.SUPABASE_SERVICE_ROLE_KEY

        if not supabase_url or not service_key:
            logger.warning("Supabase service role credentials missing - waitlist jobs cannot reach the store")
            return None

        try:
            _supabase_service_client = create_client(supabase_url, service_key)
            logger.info("Supabase service client initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Supabase service client: {e}")
            return None

    return _supabase_service_client


def reset_supabase_service_client() -> None:
    """Drop the cached client so the next call rebuilds it from settings."""
    global _supabase_service_client
    _supabase_service_client = None
