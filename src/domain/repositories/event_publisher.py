"""Event sink protocol."""

from typing import Any, Protocol


class IEventPublisher(Protocol):
    """Publishes domain events to a topic."""

    async def publish(self, topic: str, key: str, payload: dict[str, Any]) -> None:
        """Publish one event. Raises on delivery failure."""
        ...
