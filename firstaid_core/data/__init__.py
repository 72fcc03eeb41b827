from .remote_store import RemoteCaseStore, SupabaseCaseStore
from .supabase_client import create_supabase_client

__all__ = ["RemoteCaseStore", "SupabaseCaseStore", "create_supabase_client"]
