"""Unit tests for InMemoryCacheStore."""

from infrastructure.cache.memory_store import InMemoryCacheStore


class Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestInMemoryCacheStore:
    async def test_set_get_delete(self):
        store = InMemoryCacheStore()
        await store.set("k", b"v", ttl_seconds=60)

        assert await store.get("k") == b"v"
        await store.delete("k")
        assert await store.get("k") is None

    async def test_delete_missing_key(self):
        await InMemoryCacheStore().delete("missing")

    async def test_expiry_fixed_at_write(self):
        clock = Clock()
        store = InMemoryCacheStore(clock=clock)
        await store.set("k", b"v", ttl_seconds=10)

        clock.now = 9.999
        assert await store.get("k") == b"v"
        clock.now = 10.0
        assert await store.get("k") is None
        assert len(store) == 0

    async def test_overwrite_refreshes_ttl(self):
        clock = Clock()
        store = InMemoryCacheStore(clock=clock)
        await store.set("k", b"v1", ttl_seconds=10)
        clock.now = 8
        await store.set("k", b"v2", ttl_seconds=10)
        clock.now = 15

        assert await store.get("k") == b"v2"
        assert "k" in store

    async def test_ping(self):
        assert await InMemoryCacheStore().ping() is True
