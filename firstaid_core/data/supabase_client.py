# =============================================================================
# firstaid_core/data/supabase_client.py
# Supabase Client Construction
# =============================================================================

from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from firstaid_core.logging import get_logger

if TYPE_CHECKING:
    from supabase import Client
    from firstaid_core.config import AppSettings

logger = get_logger(__name__)


def create_supabase_client(settings: AppSettings) -> Optional[Client]:
    """
    Build a Supabase client from the application settings.

    Expects credentials in .streamlit/secrets.toml:
        [supabase]
        url = "https://your-project.supabase.co"
        key = "your-anon-key"

    or in the SUPABASE_URL / SUPABASE_KEY environment variables.

    Returns:
        Supabase client, or None when credentials are missing or the client
        cannot be created (the app then runs from the local mirror only)
    """
    if not settings.remote_configured:
        logger.warning("Supabase credentials not configured; running local-only")
        return None

    try:
        from supabase import create_client

        client = create_client(settings.supabase_url, settings.supabase_key)
        logger.info(f"Supabase client created for {settings.supabase_url[:40]}")
        return client
    except Exception as e:
        logger.error(f"Failed to initialize Supabase client: {e}")
        return None
