# prioritizer/db/tag_store.py
"""
Per-event community tag state: user submission counters and the curator
verified set.

The tag service is the only stateful part of the prioritization core; all of
that state lives behind this interface so the backing store can be swapped.

Contract every backend honours:
  - increment_user_tag is an atomic read-modify-write (no lost increments)
  - set_verified is idempotent (adding twice / removing twice is a no-op)
  - event_snapshot returns counts + verified set read together, so ordering
    decisions in aggregation see one consistent state
  - tags arrive already normalized; empty tags never reach a store
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Protocol

from .. import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagSnapshot:
    event_id: str
    user_counts: dict[str, int] = field(default_factory=dict)
    verified: frozenset[str] = frozenset()


class TagStore(Protocol):
    def increment_user_tag(self, event_id: str, tag: str) -> int: ...

    def set_verified(self, event_id: str, tag: str, verified: bool, curator_id: str | None = None) -> None: ...

    def event_snapshot(self, event_id: str) -> TagSnapshot: ...

    def all_user_counts(self) -> dict[str, dict[str, int]]: ...


# -----------------------------------------------------------------------------
# In-memory backend (single process)
# -----------------------------------------------------------------------------

class InMemoryTagStore:
    """Dict-backed store; one lock guards every read-modify-write."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._user_counts: dict[str, dict[str, int]] = {}
        self._verified: dict[str, set[str]] = {}

    def increment_user_tag(self, event_id: str, tag: str) -> int:
        with self._lock:
            counts = self._user_counts.setdefault(event_id, {})
            counts[tag] = counts.get(tag, 0) + 1
            return counts[tag]

    def set_verified(self, event_id: str, tag: str, verified: bool, curator_id: str | None = None) -> None:
        with self._lock:
            tags = self._verified.setdefault(event_id, set())
            if verified:
                tags.add(tag)
            else:
                tags.discard(tag)

    def event_snapshot(self, event_id: str) -> TagSnapshot:
        with self._lock:
            return TagSnapshot(
                event_id=event_id,
                user_counts=dict(self._user_counts.get(event_id, {})),
                verified=frozenset(self._verified.get(event_id, set())),
            )

    def all_user_counts(self) -> dict[str, dict[str, int]]:
        with self._lock:
            return {eid: dict(counts) for eid, counts in self._user_counts.items()}

    def clear(self) -> None:
        """Test helper; shared backends have no equivalent."""
        with self._lock:
            self._user_counts.clear()
            self._verified.clear()


# -----------------------------------------------------------------------------
# Supabase backend
# -----------------------------------------------------------------------------

USER_TAGS_TABLE = "event_user_tags"
CURATOR_TAGS_TABLE = "event_curator_tags"
INCREMENT_RPC = "increment_event_user_tag_v1"
SNAPSHOT_RPC = "event_tag_snapshot_v1"


class SupabaseTagStore:
    """
    Tables:
      event_user_tags     (event_id, tag, user_count)    UNIQUE(event_id, tag)
      event_curator_tags  (event_id, tag, curator_id)    UNIQUE(event_id, tag)

    Increments go through the DB RPC
      public.increment_event_user_tag_v1(p_event_id text, p_tag text) → int
    which does INSERT … ON CONFLICT DO UPDATE SET user_count = user_count + 1
    in one statement, so concurrent submissions are never lost.

    Snapshots go through
      public.event_tag_snapshot_v1(p_event_id text)
        → setof (tag text, user_count int, verified bool)
    a FULL OUTER JOIN of both tables in one statement, so a curator toggle
    can never land between the count read and the verified read.
    """

    def __init__(self, supabase: Any) -> None:
        self._sb = supabase

    def increment_user_tag(self, event_id: str, tag: str) -> int:
        try:
            resp = self._sb.rpc(INCREMENT_RPC, {"p_event_id": event_id, "p_tag": tag}).execute()
        except Exception as e:
            logger.error(
                "[tags] increment_user_tag FAILED: %r | event_id=%s tag=%s",
                e, event_id, tag,
            )
            raise
        return _rpc_int(resp.data)

    def set_verified(self, event_id: str, tag: str, verified: bool, curator_id: str | None = None) -> None:
        table = self._sb.table(CURATOR_TAGS_TABLE)
        if verified:
            payload: dict[str, Any] = {"event_id": event_id, "tag": tag}
            if curator_id is not None:
                payload["curator_id"] = curator_id
            table.upsert(payload, on_conflict="event_id,tag").execute()
        else:
            table.delete().eq("event_id", event_id).eq("tag", tag).execute()

    def event_snapshot(self, event_id: str) -> TagSnapshot:
        try:
            resp = self._sb.rpc(SNAPSHOT_RPC, {"p_event_id": event_id}).execute()
        except Exception as e:
            logger.error("[tags] event_snapshot FAILED: %r | event_id=%s", e, event_id)
            raise

        counts: dict[str, int] = {}
        verified: set[str] = set()
        for row in resp.data or []:
            n = int(row.get("user_count") or 0)
            if n > 0:
                counts[row["tag"]] = n
            if row.get("verified"):
                verified.add(row["tag"])
        return TagSnapshot(event_id=event_id, user_counts=counts, verified=frozenset(verified))

    def all_user_counts(self) -> dict[str, dict[str, int]]:
        out: dict[str, dict[str, int]] = {}
        offset = 0
        batch_size = 500
        while True:
            resp = (
                self._sb.table(USER_TAGS_TABLE)
                .select("event_id,tag,user_count")
                .range(offset, offset + batch_size - 1)
                .execute()
            )
            rows = resp.data or []
            if not rows:
                break
            for row in rows:
                out.setdefault(row["event_id"], {})[row["tag"]] = int(row.get("user_count") or 0)
            offset += batch_size
        return out


def _rpc_int(data: Any) -> int:
    """RPC scalars come back as a bare value, a one-item list, or a one-key dict."""
    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    if isinstance(data, dict):
        data = data.get("user_count", next(iter(data.values()), 0))
    return int(data or 0)


def get_tag_store() -> TagStore:
    if config.STORE_BACKEND == "supabase":
        from .supabase_client import get_supabase_client
        return SupabaseTagStore(get_supabase_client())
    return InMemoryTagStore()
