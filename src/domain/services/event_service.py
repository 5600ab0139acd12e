"""Fire-and-forget domain event publishing."""

import time
from datetime import datetime

import structlog

from domain.entities.event import DomainEvent, EventTopics, EventTypes
from domain.entities.profile import Profile
from domain.repositories.event_publisher import IEventPublisher

logger = structlog.get_logger()


def match_id(user_id_1: str, user_id_2: str) -> str:
    """Order-independent identifier for a pair of profiles."""
    first, second = sorted((user_id_1, user_id_2))
    return f"{first}_{second}"


class EventService:
    """Publishes domain events without ever failing the caller.

    Delivery failures are logged and dropped; there is no retry.
    """

    def __init__(self, publisher: IEventPublisher | None) -> None:
        self._publisher = publisher

    async def emit(self, event: DomainEvent) -> bool:
        """Publish one event. Returns whether it was handed to the sink."""
        if self._publisher is None:
            logger.debug("event_publishing_disabled", topic=event.topic, type=event.type)
            return False
        try:
            await self._publisher.publish(event.topic, event.key, event.payload())
        except Exception as e:
            logger.error(
                "event_publish_failed",
                topic=event.topic,
                key=event.key,
                type=event.type,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        logger.info("event_published", topic=event.topic, key=event.key, type=event.type)
        return True

    async def profile_changed(self, profile: Profile, created: bool = False) -> bool:
        assert profile.id is not None
        return await self.emit(
            DomainEvent(
                topic=EventTopics.PROFILES,
                key=profile.id,
                type=EventTypes.PROFILE_CREATED if created else EventTypes.PROFILE_UPDATED,
                data=profile.to_dict(),
            )
        )

    async def profile_deleted(self, profile_id: str) -> bool:
        return await self.emit(
            DomainEvent(
                topic=EventTopics.PROFILES,
                key=profile_id,
                type=EventTypes.PROFILE_DELETED,
                data={"id": profile_id},
            )
        )

    async def match_created(self, user_id_1: str, user_id_2: str) -> bool:
        mid = match_id(user_id_1, user_id_2)
        return await self.emit(
            DomainEvent(
                topic=EventTopics.MATCHES,
                key=mid,
                type=EventTypes.MATCH_CREATED,
                data={"match_id": mid, "user_id_1": user_id_1, "user_id_2": user_id_2},
            )
        )

    async def message_sent(self, sender_id: str, recipient_id: str, content: str) -> bool:
        sent_at = datetime.utcnow()
        message_id = f"{int(time.time() * 1000)}_{sender_id}_{recipient_id}"
        return await self.emit(
            DomainEvent(
                topic=EventTopics.MESSAGES,
                key=f"{sender_id}-{recipient_id}",
                type=EventTypes.MESSAGE_SENT,
                data={
                    "message_id": message_id,
                    "sender_id": sender_id,
                    "recipient_id": recipient_id,
                    "content": content,
                },
                occurred_at=sent_at,
            )
        )
