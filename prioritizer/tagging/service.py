# prioritizer/tagging/service.py
"""
Hybrid tagging: algorithmic + community (user) + curator tags.

Algorithmic tags are recomputed from the profile on every read. Community
state (user counters, curator verified set) lives in an injected TagStore.

Aggregation order (get_event_tags):
  1. curator-verified tags first
  2. then user_count, highest first (absent = 0)
  3. then confidence, highest first (absent = 50)
Ties keep insertion order: algorithmic (confidence order), then user-only,
then curator-only.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..db.tag_store import InMemoryTagStore, TagStore
from ..models import AggregatedTags, EmotionalProfile, EventTag, TagCategory, TagCount
from .algorithm import TagContext, generate_algorithm_tags
from .vocab import infer_category, normalize_tag, require_tag

logger = logging.getLogger(__name__)

DEFAULT_SORT_CONFIDENCE = 50
DEFAULT_POPULAR_LIMIT = 20


def _aggregate_sort_key(tag: EventTag) -> tuple[int, int, int]:
    return (
        0 if tag.curator_verified else 1,
        -(tag.user_count or 0),
        -(tag.confidence if tag.confidence is not None else DEFAULT_SORT_CONFIDENCE),
    )


class TagService:

    def __init__(self, store: Optional[TagStore] = None) -> None:
        self._store = store if store is not None else InMemoryTagStore()

    @property
    def store(self) -> TagStore:
        return self._store

    def generate_algorithm_tags(
        self,
        profile: EmotionalProfile,
        context: Optional[TagContext] = None,
    ) -> list[EventTag]:
        return generate_algorithm_tags(profile, context)

    def add_user_tag(
        self,
        event_id: str,
        user_id: str,
        raw_tag: str,
        category: Optional[TagCategory] = None,
    ) -> EventTag:
        """
        Record one community submission of *raw_tag* for *event_id*.
        Raises EmptyTagError (nothing stored) if the tag normalizes to "".
        """
        tag = require_tag(raw_tag)
        count = self._store.increment_user_tag(event_id, tag)
        verified = tag in self._store.event_snapshot(event_id).verified

        logger.info(
            "[tags] user tag | event_id=%s user_id=%s tag=%s count=%d",
            event_id, user_id, tag, count,
        )
        return EventTag(
            tag=tag,
            category=category or infer_category(tag),
            source="user",
            user_count=count,
            curator_verified=verified,
        )

    def verify_curator_tag(
        self,
        event_id: str,
        curator_id: str,
        raw_tag: str,
        verified: bool,
    ) -> EventTag:
        tag = require_tag(raw_tag)
        self._store.set_verified(event_id, tag, verified, curator_id=curator_id)
        snapshot = self._store.event_snapshot(event_id)

        logger.info(
            "[tags] curator %s | event_id=%s curator_id=%s tag=%s",
            "verify" if verified else "unverify", event_id, curator_id, tag,
        )
        return EventTag(
            tag=tag,
            category=infer_category(tag),
            source="curator",
            user_count=snapshot.user_counts.get(tag, 0),
            curator_verified=tag in snapshot.verified,
        )

    def get_event_tags(
        self,
        event_id: str,
        profile: EmotionalProfile,
        context: Optional[TagContext] = None,
    ) -> AggregatedTags:
        snapshot = self._store.event_snapshot(event_id)

        merged: dict[str, EventTag] = {
            t.tag: t for t in generate_algorithm_tags(profile, context)
        }

        for tag, count in snapshot.user_counts.items():
            is_verified = tag in snapshot.verified
            existing = merged.get(tag)
            if existing is not None:
                merged[tag] = existing.model_copy(
                    update={"user_count": count, "curator_verified": is_verified}
                )
            else:
                merged[tag] = EventTag(
                    tag=tag,
                    category=infer_category(tag),
                    source="user",
                    user_count=count,
                    curator_verified=is_verified,
                )

        for tag in sorted(snapshot.verified):
            if tag not in merged:
                merged[tag] = EventTag(
                    tag=tag,
                    category=infer_category(tag),
                    source="curator",
                    curator_verified=True,
                )
            elif not merged[tag].curator_verified:
                # algorithmic tag a curator endorsed without any user submission
                merged[tag] = merged[tag].model_copy(update={"curator_verified": True})

        return AggregatedTags(
            event_id=event_id,
            tags=sorted(merged.values(), key=_aggregate_sort_key),
            total_user_tags=sum(snapshot.user_counts.values()),
            curator_verified_count=len(snapshot.verified),
        )

    def popular_tags(self, limit: int = DEFAULT_POPULAR_LIMIT) -> list[TagCount]:
        totals: dict[str, int] = {}
        for counts in self._store.all_user_counts().values():
            for tag, count in counts.items():
                totals[tag] = totals.get(tag, 0) + count

        ranked = sorted(totals.items(), key=lambda kv: -kv[1])
        return [TagCount(tag=tag, count=count) for tag, count in ranked[:limit]]

    def find_events_by_tag(self, raw_tag: str) -> list[str]:
        tag = normalize_tag(raw_tag)
        if not tag:
            return []
        return [
            event_id
            for event_id, counts in self._store.all_user_counts().items()
            if tag in counts
        ]
