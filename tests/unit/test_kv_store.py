"""Unit tests for the SQLite key-value store."""

import pytest

from taskflow.core.kv_store import KeyValueStore


@pytest.mark.unit
class TestKeyValueStore:
    """Tests for KeyValueStore."""

    async def test_get_missing_key(self, kv):
        """Test an absent key reads as None."""
        assert await kv.get("nothing") is None

    async def test_set_replaces_value(self, kv):
        """Test set overwrites the previous value."""
        await kv.set("k", "one")
        await kv.set("k", "two")

        assert await kv.get("k") == "two"

    async def test_values_survive_reopen(self, tmp_path):
        """Test values are durable across connections to the same file."""
        first = KeyValueStore(tmp_path / "nested" / "store.db")
        await first.set("k", "v")
        await first.close()

        second = KeyValueStore(tmp_path / "nested" / "store.db")
        try:
            assert await second.get("k") == "v"
        finally:
            await second.close()

    async def test_close_without_connection(self, tmp_path):
        """Test closing an unopened store is a no-op."""
        await KeyValueStore(tmp_path / "unused.db").close()
