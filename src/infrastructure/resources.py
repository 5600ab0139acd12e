"""Process-wide resources built once at startup from settings."""

from dataclasses import dataclass

import redis.asyncio as redis
import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from core.config import Settings
from domain.repositories.cache_store import ICacheStore
from domain.repositories.event_publisher import IEventPublisher
from infrastructure.cache.memory_store import InMemoryCacheStore
from infrastructure.cache.redis_store import RedisCacheStore
from infrastructure.database.session import create_engine, create_session_factory
from infrastructure.events.redis_stream_publisher import RedisStreamEventPublisher

logger = structlog.get_logger()

CACHE_BACKENDS = ("redis", "memory")


@dataclass
class Resources:
    """Engine, cache and event sink shared by every request."""

    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    cache_store: ICacheStore
    event_publisher: IEventPublisher | None = None
    redis_client: redis.Redis | None = None


def build_resources(settings: Settings) -> Resources:
    """Create the engine, cache backend and event publisher for ``settings``.

    Nothing connects here; Redis and the database are contacted lazily on
    first use.
    """
    if settings.cache_backend not in CACHE_BACKENDS:
        raise ValueError(
            f"Unknown cache backend {settings.cache_backend!r}, expected one of {CACHE_BACKENDS}"
        )

    engine = create_engine(settings)
    redis_client: redis.Redis | None = None
    if settings.cache_backend == "redis" or settings.events_enabled:
        redis_client = redis.from_url(
            settings.redis_url,
            socket_timeout=settings.redis_socket_timeout,
            socket_connect_timeout=settings.redis_socket_timeout,
        )

    cache_store: ICacheStore
    if settings.cache_backend == "redis":
        assert redis_client is not None
        cache_store = RedisCacheStore(redis_client)
    else:
        cache_store = InMemoryCacheStore()

    event_publisher: IEventPublisher | None = None
    if settings.events_enabled:
        assert redis_client is not None
        event_publisher = RedisStreamEventPublisher(
            redis_client,
            stream_prefix=settings.event_stream_prefix,
            maxlen=settings.event_stream_maxlen,
        )

    logger.info(
        "resources_built",
        cache_backend=settings.cache_backend,
        events_enabled=settings.events_enabled,
    )
    return Resources(
        settings=settings,
        engine=engine,
        session_factory=create_session_factory(engine),
        cache_store=cache_store,
        event_publisher=event_publisher,
        redis_client=redis_client,
    )


async def close_resources(resources: Resources) -> None:
    """Release connections held by ``resources``."""
    if resources.redis_client is not None:
        await resources.redis_client.aclose()
    await resources.engine.dispose()
    logger.info("resources_closed")
