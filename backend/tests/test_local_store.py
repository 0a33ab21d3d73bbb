"""Tests for the local key/value stores."""

import json

import pytest

from frontdesk.db.session import create_local_engine
from frontdesk.services.local_store import MemoryLocalStore, SqlLocalStore, StorageKeys


@pytest.fixture
def sql_store():
    """SQL-backed store on an in-memory SQLite database."""
    engine = create_local_engine("sqlite:///:memory:")
    yield SqlLocalStore(engine)
    engine.dispose()


class TestSqlLocalStore:

    def test_set_get_overwrite(self, sql_store):
        """Test values round-trip as JSON and can be replaced."""
        sql_store.set("k", {"rooms": ["1", "11/13"]})
        assert sql_store.get("k") == {"rooms": ["1", "11/13"]}
        sql_store.set("k", [1, 2])
        assert sql_store.get("k") == [1, 2]

    def test_missing_key_returns_default(self, sql_store):
        """Test absent keys fall back to the default."""
        assert sql_store.get("missing") is None
        assert sql_store.get("missing", []) == []

    def test_delete_and_keys(self, sql_store):
        """Test keys are listed sorted and deletion is idempotent."""
        sql_store.set("b", 1)
        sql_store.set("a", 2)
        assert sql_store.keys() == ["a", "b"]
        sql_store.delete("a")
        sql_store.delete("a")
        assert sql_store.keys() == ["b"]

    def test_malformed_json_raises(self, sql_store):
        """Test corrupt stored text is not silently replaced."""
        sql_store.set_raw("broken", "{not json")
        with pytest.raises(json.JSONDecodeError):
            sql_store.get("broken")


class TestMemoryLocalStore:

    def test_initial_values(self):
        """Test seeded values are stored as JSON."""
        store = MemoryLocalStore({"x": {"a": 1}})
        assert store.get_raw("x") == '{"a": 1}'
        assert store.keys() == ["x"]


class TestStorageKeys:

    def test_namespaced_keys(self):
        """Test every key carries the install namespace."""
        keys = StorageKeys()
        assert keys.receipts == "atlantic_hotel_receipts"
        assert keys.receipts_sync_queue == "atlantic_hotel_sync_queue"
        assert keys.rooms_sync_queue == "atlantic_hotel_rooms_sync_queue"
        assert StorageKeys("branch2").bills == "branch2_bills"
