"""Redis Streams event publisher."""

from typing import Any

import orjson
import redis.asyncio as redis


class RedisStreamEventPublisher:
    """IEventPublisher appending each event to a Redis stream per topic.

    Streams are named ``<prefix>-<topic>`` and trimmed to roughly
    ``maxlen`` entries.
    """

    def __init__(self, client: redis.Redis, stream_prefix: str, maxlen: int = 100_000) -> None:
        self._client = client
        self._stream_prefix = stream_prefix
        self._maxlen = maxlen

    def stream_for(self, topic: str) -> str:
        return f"{self._stream_prefix}-{topic}" if self._stream_prefix else topic

    async def publish(self, topic: str, key: str, payload: dict[str, Any]) -> None:
        await self._client.xadd(
            self.stream_for(topic),
            {"key": key, "payload": orjson.dumps(payload)},
            maxlen=self._maxlen,
            approximate=True,
        )
