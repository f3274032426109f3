"""Tests for the Disk driver."""

import pytest

from udstore.kv.disk import Disk


@pytest.fixture
def disk_store(tmp_path):
    store = Disk("db", "users", str(tmp_path))
    yield store, str(tmp_path)
    store.close()


class TestDiskBasic:
    @pytest.mark.asyncio
    async def test_set_get(self, disk_store):
        store, _ = disk_store
        await store.set_item("k", {"key": "k", "data": 1})
        assert await store.get_item("k") == {"key": "k", "data": 1}

    @pytest.mark.asyncio
    async def test_get_missing(self, disk_store):
        store, _ = disk_store
        assert await store.get_item("nope") is None

    @pytest.mark.asyncio
    async def test_get_items(self, disk_store):
        store, _ = disk_store
        await store.set_item("a", 1)
        await store.set_item("b", 2)
        assert sorted(await store.get_items()) == [1, 2]

    @pytest.mark.asyncio
    async def test_clear(self, disk_store):
        store, _ = disk_store
        await store.set_item("a", 1)
        await store.set_item("b", 2)
        await store.clear()
        assert await store.get_item("a") is None
        assert await store.get_items() == []

    def test_namespace_directory(self, disk_store):
        store, tmpdir = disk_store
        assert store.directory.startswith(tmpdir)
        assert store.directory.endswith("db_users")


class TestDiskPersistence:
    @pytest.mark.asyncio
    async def test_survives_reload(self, disk_store):
        store, tmpdir = disk_store
        await store.set_item("k", "persistent")
        store.close()
        store2 = Disk("db", "users", tmpdir)
        assert await store2.get_item("k") == "persistent"
        store2.close()

    @pytest.mark.asyncio
    async def test_namespaces_are_separate(self, disk_store):
        store, tmpdir = disk_store
        await store.set_item("k", "live")
        backup = Disk("db", "users_bak", tmpdir)
        assert await backup.get_item("k") is None
        backup.close()


class TestDiskRemove:
    @pytest.mark.asyncio
    async def test_remove(self, disk_store):
        store, _ = disk_store
        await store.set_item("k", "v")
        await store.remove_item("k")
        assert await store.get_item("k") is None

    @pytest.mark.asyncio
    async def test_remove_missing(self, disk_store):
        store, _ = disk_store
        await store.remove_item("nope")  # should not raise
