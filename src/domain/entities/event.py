"""Domain event names and topics."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


class EventTopics:
    """Topics events are published to."""

    PROFILES = "profiles"
    MATCHES = "matches"
    MESSAGES = "messages"


class EventTypes:
    """Event type names carried in each payload."""

    PROFILE_CREATED = "profile.created"
    PROFILE_UPDATED = "profile.updated"
    PROFILE_DELETED = "profile.deleted"
    MATCH_CREATED = "match.created"
    MESSAGE_SENT = "message.sent"


@dataclass
class DomainEvent:
    """An event ready to be published."""

    topic: str
    key: str
    type: str
    data: dict[str, Any]
    occurred_at: datetime = field(default_factory=datetime.utcnow)

    def payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "occurred_at": self.occurred_at.isoformat(),
            "data": self.data,
        }
