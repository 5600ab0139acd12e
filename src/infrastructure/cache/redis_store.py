"""Redis cache backend."""

import redis.asyncio as redis
import structlog
from redis.exceptions import RedisError

from core.exceptions import CacheUnavailableError

logger = structlog.get_logger()


class RedisCacheStore:
    """ICacheStore backed by Redis string keys with ``EX`` expiry.

    Redis enforces expiry itself, so an expired entry is never returned.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> bytes | None:
        try:
            value = await self._client.get(key)
        except RedisError as e:
            raise CacheUnavailableError("get", str(e)) from e
        if value is None:
            return None
        return value if isinstance(value, bytes) else str(value).encode("utf-8")

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise CacheUnavailableError("set", str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as e:
            raise CacheUnavailableError("delete", str(e)) from e

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning("redis_ping_failed", error=str(e))
            return False
