# prioritizer/preferences.py
"""
User preference operations and the per-user priority-list cache.

Preferences change only through update_user_preferences / add_follow /
remove_follow. Each of those:
  - bumps last_updated
  - writes through the injected PreferencesStore
  - drops every cached PrioritizedEventList for that user (and only that user)

Cached lists are keyed on the full content of every input (tags, profile,
engagement), so a new community tag or engagement change is a cache miss.
The cache is a bounded LRU.
"""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Optional, Sequence

from .db.preferences_store import InMemoryPreferencesStore, PreferencesStore
from .models import (
    EmotionalPreferences,
    PrioritizedEventList,
    PriorityCalculationInput,
    PriorityFilters,
    SportFamiliarity,
    UserFollow,
    UserPreferences,
)
from .scoring.listing import calculate_priorities
from .scoring.priority import PriorityCalculator

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str, tuple[str, ...]]

DEFAULT_MAX_CACHE_ENTRIES = 256


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def default_user_preferences(user_id: str) -> UserPreferences:
    return UserPreferences(user_id=user_id, last_updated=_utc_now())


class PreferencesService:

    def __init__(
        self,
        store: Optional[PreferencesStore] = None,
        calculator: Optional[PriorityCalculator] = None,
        max_cache_entries: int = DEFAULT_MAX_CACHE_ENTRIES,
    ) -> None:
        if max_cache_entries < 1:
            raise ValueError("max_cache_entries must be >= 1")
        self._store = store if store is not None else InMemoryPreferencesStore()
        self._calculator = calculator or PriorityCalculator()
        self._cache_lock = threading.Lock()
        self._max_cache_entries = max_cache_entries
        self._cache: OrderedDict[CacheKey, PrioritizedEventList] = OrderedDict()

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def get_user_preferences(self, user_id: str) -> UserPreferences:
        """Stored preferences, or freshly created defaults on first access."""
        prefs = self._store.get_user_preferences(user_id)
        if prefs is None:
            prefs = default_user_preferences(user_id)
            self._store.set_user_preferences(prefs)
            logger.info("[preferences] created defaults | user_id=%s", user_id)
        return prefs

    def update_user_preferences(
        self,
        user_id: str,
        *,
        follows: Optional[Sequence[UserFollow]] = None,
        sport_familiarity: Optional[Sequence[SportFamiliarity]] = None,
        emotional_preferences: Optional[dict[str, int]] = None,
    ) -> UserPreferences:
        """
        follows / sport_familiarity replace the stored lists; emotional
        preference sliders are merged key by key.
        """
        prefs = self.get_user_preferences(user_id)
        update: dict = {}

        if follows is not None:
            update["follows"] = list(follows)
        if sport_familiarity is not None:
            update["sport_familiarity"] = list(sport_familiarity)
        if emotional_preferences:
            sliders = prefs.emotional_preferences.model_dump()
            sliders.update(emotional_preferences)
            update["emotional_preferences"] = EmotionalPreferences.model_validate(sliders)

        return self._save(prefs.model_copy(update=update), "update")

    def add_follow(self, user_id: str, follow: UserFollow) -> UserPreferences:
        prefs = self.get_user_preferences(user_id)
        if any(f.id == follow.id for f in prefs.follows):
            return prefs
        return self._save(
            prefs.model_copy(update={"follows": [*prefs.follows, follow]}),
            "add_follow",
        )

    def remove_follow(self, user_id: str, follow_id: str) -> UserPreferences:
        prefs = self.get_user_preferences(user_id)
        return self._save(
            prefs.model_copy(update={"follows": [f for f in prefs.follows if f.id != follow_id]}),
            "remove_follow",
        )

    def _save(self, prefs: UserPreferences, op: str) -> UserPreferences:
        prefs = prefs.model_copy(update={"last_updated": _utc_now()})
        self._store.set_user_preferences(prefs)
        dropped = self.invalidate(prefs.user_id)
        logger.info(
            "[preferences] %s | user_id=%s follows=%d cache_dropped=%d",
            op, prefs.user_id, len(prefs.follows), dropped,
        )
        return prefs

    # ------------------------------------------------------------------
    # Priority lists
    # ------------------------------------------------------------------

    @property
    def cache_size(self) -> int:
        with self._cache_lock:
            return len(self._cache)

    def invalidate(self, user_id: str) -> int:
        with self._cache_lock:
            stale = [k for k in self._cache if k[0] == user_id]
            for k in stale:
                del self._cache[k]
        return len(stale)

    def prioritized_events(
        self,
        user_id: str,
        inputs: Sequence[PriorityCalculationInput],
        filters: Optional[PriorityFilters] = None,
        already_watched: Optional[Sequence[str]] = None,
    ) -> PrioritizedEventList:
        watched = set(already_watched or [])
        events = [i for i in inputs if i.event_id not in watched]

        key: CacheKey = (
            user_id,
            filters.model_dump_json() if filters is not None else "",
            tuple(i.model_dump_json() for i in events),
        )
        with self._cache_lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
        if cached is not None:
            return cached

        prefs = self.get_user_preferences(user_id)
        result = calculate_priorities(events, prefs, filters, calculator=self._calculator)

        with self._cache_lock:
            self._cache[key] = result
            self._cache.move_to_end(key)
            while len(self._cache) > self._max_cache_entries:
                self._cache.popitem(last=False)
        return result
