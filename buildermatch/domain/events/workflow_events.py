"""Events emitted by the interest, conversation and trial workflows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from buildermatch.domain.events.base import ActorSummary, DomainEvent
from buildermatch.domain.value_objects import (
    ConversationId,
    InterestId,
    MessageId,
    OpeningId,
    TrialId,
)


@dataclass(kw_only=True)
class NewInterestEvent(DomainEvent):
    """Sent to the founder when a builder expresses interest."""

    event_name = "new_interest"

    interest_id: InterestId
    builder: ActorSummary
    opening_id: OpeningId
    opening_title: str
    note: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        return {
            "interest_id": str(self.interest_id),
            "builder": self.builder.to_dict(),
            "opening": {"id": str(self.opening_id), "title": self.opening_title},
            "note": self.note,
        }


@dataclass(kw_only=True)
class InterestWithdrawnEvent(DomainEvent):
    event_name = "interest_withdrawn"

    interest_id: InterestId
    builder: ActorSummary
    opening_id: OpeningId

    def payload(self) -> Dict[str, Any]:
        return {
            "interest_id": str(self.interest_id),
            "builder": self.builder.to_dict(),
            "opening_id": str(self.opening_id),
        }


@dataclass(kw_only=True)
class ShortlistedEvent(DomainEvent):
    """Sent to the builder when the founder shortlists them (mutual match)."""

    event_name = "shortlisted"

    interest_id: InterestId
    founder: ActorSummary
    opening_id: OpeningId
    opening_title: str

    def payload(self) -> Dict[str, Any]:
        return {
            "interest_id": str(self.interest_id),
            "founder": self.founder.to_dict(),
            "opening": {"id": str(self.opening_id), "title": self.opening_title},
        }


@dataclass(kw_only=True)
class BuilderPassedEvent(DomainEvent):
    event_name = "builder_passed"

    interest_id: InterestId
    opening_id: OpeningId
    opening_title: str

    def payload(self) -> Dict[str, Any]:
        return {
            "interest_id": str(self.interest_id),
            "opening": {"id": str(self.opening_id), "title": self.opening_title},
        }


@dataclass(kw_only=True)
class NewMessageEvent(DomainEvent):
    event_name = "new_message"

    conversation_id: ConversationId
    message_id: MessageId
    sender: ActorSummary
    message_type: str
    preview: str

    def payload(self) -> Dict[str, Any]:
        return {
            "conversation_id": str(self.conversation_id),
            "message_id": str(self.message_id),
            "sender": self.sender.to_dict(),
            "message_type": self.message_type,
            "preview": self.preview,
        }


@dataclass(kw_only=True)
class MessagesReadEvent(DomainEvent):
    """Read receipt sent to the author of the messages that were read."""

    event_name = "messages_read"

    conversation_id: ConversationId
    reader: ActorSummary
    read_count: int
    up_to_message_id: MessageId

    def payload(self) -> Dict[str, Any]:
        return {
            "conversation_id": str(self.conversation_id),
            "reader": self.reader.to_dict(),
            "read_count": self.read_count,
            "up_to_message_id": str(self.up_to_message_id),
        }


@dataclass(kw_only=True)
class _TrialEvent(DomainEvent):
    trial_id: TrialId
    conversation_id: ConversationId
    actor: ActorSummary

    def payload(self) -> Dict[str, Any]:
        return {
            "trial_id": str(self.trial_id),
            "conversation_id": str(self.conversation_id),
            "actor": self.actor.to_dict(),
        }


@dataclass(kw_only=True)
class TrialProposedEvent(_TrialEvent):
    event_name = "trial_proposed"

    duration_days: int
    goal: str

    def payload(self) -> Dict[str, Any]:
        return {**super().payload(), "duration_days": self.duration_days, "goal": self.goal}


@dataclass(kw_only=True)
class TrialAcceptedEvent(_TrialEvent):
    event_name = "trial_accepted"

    ends_at: datetime

    def payload(self) -> Dict[str, Any]:
        return {**super().payload(), "ends_at": self.ends_at.isoformat()}


@dataclass(kw_only=True)
class TrialDeclinedEvent(_TrialEvent):
    event_name = "trial_declined"


@dataclass(kw_only=True)
class TrialCancelledEvent(_TrialEvent):
    event_name = "trial_cancelled"

    reason: Optional[str] = None

    def payload(self) -> Dict[str, Any]:
        return {**super().payload(), "reason": self.reason}


@dataclass(kw_only=True)
class TrialCompletedEvent(_TrialEvent):
    """``actor`` is the other participant, so the recipient sees who to review."""

    event_name = "trial_completed"

    goal: str
    completed_at: datetime

    def payload(self) -> Dict[str, Any]:
        return {
            **super().payload(),
            "goal": self.goal,
            "completed_at": self.completed_at.isoformat(),
        }


@dataclass(kw_only=True)
class TrialEndingSoonEvent(_TrialEvent):
    event_name = "trial_ending_soon"

    ends_at: datetime
    days_remaining: int

    def payload(self) -> Dict[str, Any]:
        return {
            **super().payload(),
            "ends_at": self.ends_at.isoformat(),
            "days_remaining": self.days_remaining,
        }


__all__ = [
    "BuilderPassedEvent",
    "InterestWithdrawnEvent",
    "MessagesReadEvent",
    "NewInterestEvent",
    "NewMessageEvent",
    "ShortlistedEvent",
    "TrialAcceptedEvent",
    "TrialCancelledEvent",
    "TrialCompletedEvent",
    "TrialDeclinedEvent",
    "TrialEndingSoonEvent",
    "TrialProposedEvent",
]
