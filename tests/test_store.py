# Area: Store Tests
"""Tests for the document store backends and the listener hub."""

import asyncio
import sqlite3

import pytest

from victordle._store import (
    SERVER_TIMESTAMP,
    Increment,
    Query,
    SqliteDocumentStore,
    resolve_fields,
)
from victordle.errors import DocumentNotFoundError, StoreError


async def settle(seconds: float = 0.05) -> None:
    """Give listener workers (and the sqlite executor) time to run."""
    await asyncio.sleep(seconds)


class TestResolveFields:
    """Tests for special field value resolution."""

    def test_server_timestamp(self):
        assert resolve_fields({"t": SERVER_TIMESTAMP}, {}, 42.0) == {"t": 42.0}

    def test_increment_from_existing(self):
        assert resolve_fields({"n": Increment(3)}, {"n": 4}, 0.0) == {"n": 7}

    def test_increment_missing_field_starts_at_zero(self):
        assert resolve_fields({"n": Increment(2)}, {}, 0.0) == {"n": 2}

    def test_nested_dicts_resolved(self):
        resolved = resolve_fields({"a": {"t": SERVER_TIMESTAMP}}, {}, 5.0)
        assert resolved == {"a": {"t": 5.0}}


class TestPointOperations:
    """Tests for get/set/update/delete on both backends."""

    def test_set_then_get(self, store):
        async def run():
            await store.set("players", "u1", {"id": "u1", "score": 0})
            return await store.get("players", "u1")

        assert asyncio.run(run()) == {"id": "u1", "score": 0}

    def test_get_missing_is_none(self, store):
        assert asyncio.run(store.get("players", "nobody")) is None

    def test_update_merges_top_level(self, store):
        async def run():
            await store.set("players", "u1", {"id": "u1", "username": "a", "score": 1})
            await store.update("players", "u1", {"username": "b"})
            return await store.get("players", "u1")

        assert asyncio.run(run()) == {"id": "u1", "username": "b", "score": 1}

    def test_update_missing_raises(self, store):
        with pytest.raises(DocumentNotFoundError):
            asyncio.run(store.update("players", "nobody", {"score": 1}))

    def test_delete_absent_is_silent(self, store):
        async def run():
            await store.delete("players", "nobody")
            await store.set("players", "u1", {"id": "u1"})
            await store.delete("players", "u1")
            return await store.get("players", "u1")

        assert asyncio.run(run()) is None

    def test_server_timestamp_uses_store_clock(self, store, clock):
        async def run():
            await store.set("queues", "u1", {"lastPing": SERVER_TIMESTAMP})
            clock.advance(7)
            await store.update("queues", "u1", {"lastPing": SERVER_TIMESTAMP})
            return await store.get("queues", "u1")

        start = clock.now
        assert asyncio.run(run()) == {"lastPing": start + 7}

    def test_concurrent_increments_are_not_lost(self, store):
        async def run():
            await store.set("players", "u1", {"score": 0})
            await asyncio.gather(*(
                store.update("players", "u1", {"score": Increment(1)}) for _ in range(20)
            ))
            return await store.get("players", "u1")

        assert asyncio.run(run())["score"] == 20


class TestQueries:
    """Tests for equality-filtered ordered queries."""

    def test_filter_order_and_limit(self, store):
        async def run():
            await store.set("queues", "c", {"status": "searching", "timestamp": 3})
            await store.set("queues", "a", {"status": "searching", "timestamp": 1})
            await store.set("queues", "b", {"status": "gettingReady", "timestamp": 2})
            await store.set("queues", "d", {"status": "searching", "timestamp": 4})
            query = Query("queues", where=(("status", "searching"),), order_by="timestamp", limit=2)
            return await store.query(query)

        assert [doc_id for doc_id, _ in asyncio.run(run())] == ["a", "c"]

    def test_descending_with_ties_by_id(self, store):
        async def run():
            await store.set("players", "b", {"score": 5})
            await store.set("players", "a", {"score": 5})
            await store.set("players", "c", {"score": 9})
            return await store.query(Query("players", order_by="score", descending=True))

        assert [doc_id for doc_id, _ in asyncio.run(run())] == ["c", "a", "b"]

    def test_missing_order_field_excluded(self, store):
        async def run():
            await store.set("queues", "a", {"status": "searching"})
            await store.set("queues", "b", {"status": "searching", "timestamp": 1})
            return await store.query(Query("queues", order_by="timestamp"))

        assert [doc_id for doc_id, _ in asyncio.run(run())] == ["b"]


class TestSubscriptions:
    """Tests for live document and query subscriptions."""

    def test_document_initial_and_change_snapshots(self, store):
        seen = []

        async def run():
            dispose = await store.subscribe_document("games", "g1", seen.append)
            await settle()
            await store.set("games", "g1", {"v": 1})
            await settle()
            await store.update("games", "g1", {"v": 2})
            await settle()
            dispose()

        asyncio.run(run())
        assert [s.data for s in seen] == [None, {"v": 1}, {"v": 2}]
        assert seen[0].exists is False

    def test_disposer_stops_delivery_and_is_idempotent(self, store):
        seen = []

        async def run():
            dispose = await store.subscribe_document("games", "g1", seen.append)
            await settle()
            dispose()
            dispose()
            await store.set("games", "g1", {"v": 1})
            await settle()
            return store.listener_count()

        assert asyncio.run(run()) == 0
        assert len(seen) == 1

    def test_query_snapshot_only_on_result_change(self, store):
        seen = []

        async def run():
            query = Query("queues", where=(("status", "searching"),))
            dispose = await store.subscribe_query(query, seen.append)
            await settle()
            await store.set("queues", "a", {"status": "searching"})
            await settle()
            # Not part of the results: no new snapshot
            await store.set("queues", "b", {"status": "gettingReady"})
            await settle()
            dispose()

        asyncio.run(run())
        assert [len(s) for s in seen] == [0, 1]

    def test_async_callbacks_supported(self, store):
        seen = []

        async def on_snapshot(snapshot):
            await asyncio.sleep(0)
            seen.append(snapshot.data)

        async def run():
            dispose = await store.subscribe_document("games", "g1", on_snapshot)
            await store.set("games", "g1", {"v": 1})
            await settle()
            dispose()

        asyncio.run(run())
        assert seen[-1] == {"v": 1}

    def test_failing_listener_does_not_break_others(self, store):
        seen = []

        def broken(snapshot):
            raise RuntimeError("boom")

        async def run():
            d1 = await store.subscribe_document("games", "g1", broken)
            d2 = await store.subscribe_document("games", "g1", seen.append)
            await store.set("games", "g1", {"v": 1})
            await settle()
            await store.set("games", "g1", {"v": 2})
            await settle()
            d1()
            d2()

        asyncio.run(run())
        assert seen[-1].data == {"v": 2}


class TestSqlitePersistence:
    """Tests specific to the SQLite backend."""

    def test_documents_survive_new_instance(self, tmp_path):
        db_path = str(tmp_path / "victordle.db")

        async def write():
            await SqliteDocumentStore(db_path).set("players", "u1", {"id": "u1", "score": 3})

        async def read():
            return await SqliteDocumentStore(db_path).get("players", "u1")

        asyncio.run(write())
        assert asyncio.run(read()) == {"id": "u1", "score": 3}

    def test_schema_created_on_open(self, tmp_path):
        db_path = str(tmp_path / "victordle.db")
        SqliteDocumentStore(db_path)
        SqliteDocumentStore(db_path)
        conn = sqlite3.connect(db_path)
        try:
            tables = [row[0] for row in conn.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table'"
            )]
        finally:
            conn.close()
        assert tables == ["documents"]

    def test_sqlite_failure_raises_store_error(self, tmp_path):
        db_path = str(tmp_path / "victordle.db")
        store = SqliteDocumentStore(db_path)
        conn = sqlite3.connect(db_path)
        try:
            conn.execute("DROP TABLE documents")
            conn.commit()
        finally:
            conn.close()

        with pytest.raises(StoreError) as exc_info:
            asyncio.run(store.get("players", "u1"))
        assert exc_info.value.context()["operation"] == "get"
