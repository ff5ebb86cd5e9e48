# tests/test_tag_store.py
"""
TagStore backends:

  1. InMemoryTagStore: concurrent increments are never lost; verification is
     idempotent; snapshots are copies.
  2. SupabaseTagStore: RPC increment, single-RPC snapshot and curator
     upsert/delete against a mocked client (no network).
"""
from __future__ import annotations

import threading
from unittest.mock import MagicMock

import pytest


class TestInMemoryTagStore:

    def test_concurrent_increments(self):
        from prioritizer.db.tag_store import InMemoryTagStore

        store = InMemoryTagStore()
        n_threads, per_thread = 8, 250

        def worker():
            for _ in range(per_thread):
                store.increment_user_tag("evt-1", "thriller")

        threads = [threading.Thread(target=worker) for _ in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.event_snapshot("evt-1").user_counts == {"thriller": n_threads * per_thread}

    def test_concurrent_verify_toggles_settle(self):
        from prioritizer.db.tag_store import InMemoryTagStore

        store = InMemoryTagStore()
        threads = [
            threading.Thread(target=store.set_verified, args=("evt-1", "classic", True))
            for _ in range(16)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert store.event_snapshot("evt-1").verified == frozenset({"classic"})

    def test_snapshot_is_a_copy(self):
        from prioritizer.db.tag_store import InMemoryTagStore

        store = InMemoryTagStore()
        store.increment_user_tag("evt-1", "a")
        snap = store.event_snapshot("evt-1")
        snap.user_counts["a"] = 99
        assert store.event_snapshot("evt-1").user_counts == {"a": 1}

    def test_clear(self):
        from prioritizer.db.tag_store import InMemoryTagStore

        store = InMemoryTagStore()
        store.increment_user_tag("evt-1", "a")
        store.set_verified("evt-1", "a", True)
        store.clear()
        assert store.all_user_counts() == {}
        assert store.event_snapshot("evt-1").verified == frozenset()


def _mock_supabase(tables: dict[str, list[dict]]) -> tuple[MagicMock, dict[str, MagicMock]]:
    sb = MagicMock()
    builders: dict[str, MagicMock] = {}

    def table_factory(name: str) -> MagicMock:
        builder = builders.get(name)
        if builder is None:
            builder = MagicMock()
            for method in ["select", "eq", "upsert", "delete", "range", "limit"]:
                getattr(builder, method).return_value = builder
            result = MagicMock()
            result.data = tables.get(name, [])
            builder.execute.return_value = result
            builders[name] = builder
        return builder

    sb.table.side_effect = table_factory
    return sb, builders


class TestSupabaseTagStore:

    def test_increment_uses_rpc(self):
        from prioritizer.db.tag_store import INCREMENT_RPC, SupabaseTagStore

        sb = MagicMock()
        sb.rpc.return_value.execute.return_value.data = 7
        assert SupabaseTagStore(sb).increment_user_tag("evt-1", "thriller") == 7
        sb.rpc.assert_called_once_with(INCREMENT_RPC, {"p_event_id": "evt-1", "p_tag": "thriller"})

    @pytest.mark.parametrize("data,expected", [
        (3, 3),
        ([4], 4),
        ([{"user_count": 5}], 5),
        ({"increment_event_user_tag_v1": 6}, 6),
        (None, 0),
    ])
    def test_rpc_result_shapes(self, data, expected):
        from prioritizer.db.tag_store import _rpc_int
        assert _rpc_int(data) == expected

    def test_increment_failure_propagates(self):
        from prioritizer.db.tag_store import SupabaseTagStore

        sb = MagicMock()
        sb.rpc.return_value.execute.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            SupabaseTagStore(sb).increment_user_tag("evt-1", "thriller")

    def test_verify_upserts_curator_row(self):
        from prioritizer.db.tag_store import CURATOR_TAGS_TABLE, SupabaseTagStore

        sb, builders = _mock_supabase({})
        SupabaseTagStore(sb).set_verified("evt-1", "classic", True, curator_id="cur-1")
        builders[CURATOR_TAGS_TABLE].upsert.assert_called_once_with(
            {"event_id": "evt-1", "tag": "classic", "curator_id": "cur-1"},
            on_conflict="event_id,tag",
        )

    def test_unverify_deletes_curator_row(self):
        from prioritizer.db.tag_store import CURATOR_TAGS_TABLE, SupabaseTagStore

        sb, builders = _mock_supabase({})
        SupabaseTagStore(sb).set_verified("evt-1", "classic", False)
        builder = builders[CURATOR_TAGS_TABLE]
        builder.delete.assert_called_once()
        builder.upsert.assert_not_called()

    def test_snapshot_is_one_rpc(self):
        from prioritizer.db.tag_store import SNAPSHOT_RPC, SupabaseTagStore

        sb = MagicMock()
        sb.rpc.return_value.execute.return_value.data = [
            {"tag": "a", "user_count": 2, "verified": True},
            {"tag": "b", "user_count": 1, "verified": False},
            {"tag": "curated-only", "user_count": None, "verified": True},
        ]
        snap = SupabaseTagStore(sb).event_snapshot("evt-1")

        sb.rpc.assert_called_once_with(SNAPSHOT_RPC, {"p_event_id": "evt-1"})
        sb.table.assert_not_called()
        assert snap.user_counts == {"a": 2, "b": 1}
        assert snap.verified == frozenset({"a", "curated-only"})

    def test_snapshot_failure_propagates(self):
        from prioritizer.db.tag_store import SupabaseTagStore

        sb = MagicMock()
        sb.rpc.return_value.execute.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            SupabaseTagStore(sb).event_snapshot("evt-1")

    def test_shared_store_has_no_clear(self):
        from prioritizer.db.tag_store import SupabaseTagStore, TagStore

        assert not hasattr(SupabaseTagStore, "clear")
        assert not hasattr(TagStore, "clear")


class TestTagStoreFactory:

    def test_memory_backend_by_default(self, monkeypatch):
        from prioritizer import config
        from prioritizer.db.tag_store import InMemoryTagStore, get_tag_store

        monkeypatch.setattr(config, "STORE_BACKEND", "memory")
        assert isinstance(get_tag_store(), InMemoryTagStore)
