"""Read-through cache over a primary store.

Reads are served from the cache when possible and populate it on a miss.
Writes go to the primary store first and only then refresh the cache, so an
unpersisted value is never cached. Cache failures are logged and swallowed;
primary-store failures propagate.
"""

from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

import structlog

from core.exceptions import CacheUnavailableError
from domain.repositories.cache_store import ICacheStore

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 30 * 60


class ReadThroughCache(Generic[T]):
    """Cache-aside wrapper for single-entity lookups of one entity type."""

    def __init__(
        self,
        cache: ICacheStore,
        entity_type: str,
        load: Callable[[str], Awaitable[T | None]],
        save: Callable[[T], Awaitable[T]],
        remove: Callable[[str], Awaitable[bool]],
        serialize: Callable[[T], bytes],
        deserialize: Callable[[bytes], T],
        identify: Callable[[T], str],
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        key_prefix: str = "",
    ) -> None:
        self._cache = cache
        self._entity_type = entity_type
        self._load = load
        self._save = save
        self._remove = remove
        self._serialize = serialize
        self._deserialize = deserialize
        self._identify = identify
        self._ttl_seconds = ttl_seconds
        self._key_prefix = key_prefix

    def key_for(self, id: str) -> str:
        """Deterministic cache key for an entity ID."""
        parts = [self._key_prefix, self._entity_type, id]
        return ":".join(p for p in parts if p)

    async def get(self, id: str) -> T | None:
        """Return the entity, from cache if fresh, else from the store.

        A store miss is not cached.
        """
        key = self.key_for(id)
        cached = await self._cache_get(key)
        if cached is not None:
            logger.debug("cache_hit", key=key)
            return cached

        logger.debug("cache_miss", key=key)
        entity = await self._load(id)
        if entity is not None:
            await self._cache_set(key, entity)
        return entity

    async def put(self, entity: T) -> T:
        """Persist the entity, then overwrite its cache entry."""
        saved = await self._save(entity)
        await self._cache_set(self.key_for(self._identify(saved)), saved)
        return saved

    async def delete(self, id: str) -> bool:
        """Delete from the store and always invalidate the cache entry."""
        key = self.key_for(id)
        try:
            return await self._remove(id)
        finally:
            await self._cache_delete(key)

    async def invalidate(self, id: str) -> None:
        """Drop the cache entry without touching the store."""
        await self._cache_delete(self.key_for(id))

    async def _cache_get(self, key: str) -> T | None:
        try:
            raw = await self._cache.get(key)
        except CacheUnavailableError as e:
            logger.warning("cache_unavailable", operation="get", key=key, reason=e.message)
            return None
        if raw is None:
            return None
        try:
            return self._deserialize(raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("cache_entry_corrupt", key=key, error=str(e))
            await self._cache_delete(key)
            return None

    async def _cache_set(self, key: str, entity: T) -> None:
        try:
            await self._cache.set(key, self._serialize(entity), self._ttl_seconds)
        except CacheUnavailableError as e:
            logger.warning("cache_unavailable", operation="set", key=key, reason=e.message)

    async def _cache_delete(self, key: str) -> None:
        try:
            await self._cache.delete(key)
        except CacheUnavailableError as e:
            logger.warning("cache_unavailable", operation="delete", key=key, reason=e.message)
