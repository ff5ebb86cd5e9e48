from __future__ import annotations

from supabase import create_client, Client

from ..config import require_supabase_env


def get_supabase_client() -> Client:
    url, key = require_supabase_env()
    return create_client(url, key)
