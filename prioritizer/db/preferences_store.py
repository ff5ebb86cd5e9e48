# prioritizer/db/preferences_store.py
"""
UserPreferences by user id.

Read-after-write by the same caller must see the write; nothing stronger is
promised across users.
"""
from __future__ import annotations

import logging
import threading
from datetime import timezone
from typing import Any, Optional, Protocol

from .. import config
from ..models import UserPreferences

logger = logging.getLogger(__name__)

PREFERENCES_TABLE = "user_preferences"


class PreferencesStore(Protocol):
    def get_user_preferences(self, user_id: str) -> Optional[UserPreferences]: ...

    def set_user_preferences(self, prefs: UserPreferences) -> None: ...


class InMemoryPreferencesStore:
    """Stores deep copies so callers cannot mutate stored state in place."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._prefs: dict[str, UserPreferences] = {}

    def get_user_preferences(self, user_id: str) -> Optional[UserPreferences]:
        with self._lock:
            prefs = self._prefs.get(user_id)
            return prefs.model_copy(deep=True) if prefs is not None else None

    def set_user_preferences(self, prefs: UserPreferences) -> None:
        with self._lock:
            self._prefs[prefs.user_id] = prefs.model_copy(deep=True)


class SupabasePreferencesStore:
    """
    Table user_preferences:
      user_id       text primary key
      preferences   jsonb   (UserPreferences.model_dump(mode="json"))
      last_updated  timestamptz
    """

    def __init__(self, supabase: Any) -> None:
        self._sb = supabase

    def get_user_preferences(self, user_id: str) -> Optional[UserPreferences]:
        resp = (
            self._sb.table(PREFERENCES_TABLE)
            .select("user_id,preferences")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = resp.data or []
        if not rows:
            return None
        return UserPreferences.model_validate(rows[0]["preferences"])

    def set_user_preferences(self, prefs: UserPreferences) -> None:
        last_updated = prefs.last_updated
        if last_updated.tzinfo is None:
            last_updated = last_updated.replace(tzinfo=timezone.utc)

        payload = {
            "user_id": prefs.user_id,
            "preferences": prefs.model_dump(mode="json"),
            "last_updated": last_updated.replace(microsecond=0).isoformat(),
        }
        try:
            self._sb.table(PREFERENCES_TABLE).upsert(payload, on_conflict="user_id").execute()
        except Exception as e:
            logger.error(
                "[preferences] set_user_preferences FAILED: %r | user_id=%s follows=%d",
                e, prefs.user_id, len(prefs.follows),
            )
            raise


def get_preferences_store() -> PreferencesStore:
    if config.STORE_BACKEND == "supabase":
        from .supabase_client import get_supabase_client
        return SupabasePreferencesStore(get_supabase_client())
    return InMemoryPreferencesStore()
