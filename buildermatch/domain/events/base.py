"""Base domain event infrastructure."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Optional
from uuid import UUID, uuid4

from buildermatch.domain.entities.profile import UserAccount
from buildermatch.domain.value_objects import UserId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ActorSummary:
    """Display data for the user who caused an event."""

    id: UserId
    name: str
    avatar: Optional[str] = None

    @classmethod
    def from_account(cls, account: UserAccount) -> "ActorSummary":
        return cls(id=account.id, name=account.name, avatar=account.avatar_url)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": str(self.id), "name": self.name, "avatar": self.avatar}


@dataclass(kw_only=True)
class DomainEvent:
    """Base class for all domain events.

    ``event_name`` is the wire name handed to the event sink; ``recipient_id``
    is the user the notification is addressed to.
    """

    event_name: ClassVar[str] = "domain_event"

    recipient_id: UserId
    event_id: UUID = field(default_factory=uuid4)
    event_type: str = field(init=False)
    occurred_at: datetime = field(default_factory=_utcnow)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Set event type from class name."""
        self.event_type = self.__class__.__name__

    def payload(self) -> Dict[str, Any]:
        """Event-specific body, overridden by subclasses."""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for delivery."""
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "event_name": self.event_name,
            "recipient_id": str(self.recipient_id),
            "occurred_at": self.occurred_at.isoformat(),
            "metadata": self.metadata,
            **self.payload(),
        }


class IEventSink(ABC):
    """Outbound port of the external real-time notification mechanism."""

    @abstractmethod
    async def emit(self, event_name: str, payload: Dict[str, Any]) -> None:
        """Deliver one event. Implementations may raise; callers swallow failures."""
        raise NotImplementedError


__all__ = ["ActorSummary", "DomainEvent", "IEventSink"]
