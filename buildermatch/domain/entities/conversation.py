"""Conversation aggregate and its messages."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from buildermatch.domain.entities.interest import Interest
from buildermatch.domain.entities.state_machine import TransitionTable
from buildermatch.domain.exceptions import AuthorizationError, InvalidStateError, ValidationError
from buildermatch.domain.value_objects import (
    ConversationId,
    InterestId,
    MessageId,
    OpeningId,
    TrialId,
    UserId,
)

MAX_MESSAGE_LENGTH = 5000
PREVIEW_LENGTH = 100

ICE_BREAKER_PROMPTS: tuple[str, ...] = (
    "What excited you most about the other person's profile?",
    "What's one question you'd want answered before working together?",
    "If you could work on any problem, what would it be and why?",
    "What does your ideal working relationship look like?",
    "What accomplishment are you most proud of?",
    "What's one thing you're hoping to learn from this collaboration?",
    "How do you prefer to communicate when working remotely?",
    "What does a successful first month working together look like to you?",
)


def pick_ice_breaker(rng: random.Random | None = None) -> str:
    """Choose a prompt uniformly at random."""
    return (rng or random).choice(ICE_BREAKER_PROMPTS)


class ConversationStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    BLOCKED = "blocked"


class MessageType(str, Enum):
    TEXT = "text"
    SYSTEM = "system"
    ICE_BREAKER = "ice_breaker"
    TRIAL_PROPOSAL = "trial_proposal"
    TRIAL_UPDATE = "trial_update"
    ATTACHMENT = "attachment"


CONVERSATION_TRANSITIONS: TransitionTable[ConversationStatus] = TransitionTable(
    "conversation",
    {
        ConversationStatus.ACTIVE: {
            "archive": ConversationStatus.ARCHIVED,
            "block": ConversationStatus.BLOCKED,
        },
        ConversationStatus.ARCHIVED: {
            "unarchive": ConversationStatus.ACTIVE,
            "block": ConversationStatus.BLOCKED,
        },
    },
)


@dataclass
class Conversation:
    """Messaging channel unlocked by a mutual match; one per interest."""

    id: ConversationId
    interest_id: InterestId
    opening_id: OpeningId
    founder_id: UserId
    builder_id: UserId
    status: ConversationStatus = ConversationStatus.ACTIVE
    last_message_preview: str | None = None
    last_message_at: datetime | None = None
    message_count: int = 0
    trial_id: TrialId | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_match(cls, interest: Interest, now: datetime) -> "Conversation":
        if not interest.unlocks_conversation:
            raise AuthorizationError("Conversation requires a mutual match")
        return cls(
            id=ConversationId.generate(),
            interest_id=interest.id,
            opening_id=interest.opening_id,
            founder_id=interest.founder_id,
            builder_id=interest.builder_id,
            created_at=now,
            updated_at=now,
        )

    @property
    def participants(self) -> frozenset[UserId]:
        return frozenset((self.founder_id, self.builder_id))

    def is_participant(self, user_id: UserId) -> bool:
        return user_id in self.participants

    def ensure_participant(self, user_id: UserId) -> None:
        if not self.is_participant(user_id):
            raise AuthorizationError("You are not a participant in this conversation")

    def other_participant(self, user_id: UserId) -> UserId:
        self.ensure_participant(user_id)
        return self.builder_id if user_id == self.founder_id else self.founder_id

    @property
    def accepts_messages(self) -> bool:
        return self.status == ConversationStatus.ACTIVE

    def ensure_accepts_messages(self) -> None:
        if not self.accepts_messages:
            raise InvalidStateError(
                "conversation",
                self.status.value,
                "send message",
                message="Cannot send messages in an inactive conversation",
            )

    def archive(self, now: datetime) -> ConversationStatus:
        return self._transition("archive", now)

    def unarchive(self, now: datetime) -> ConversationStatus:
        return self._transition("unarchive", now)

    def _transition(self, action: str, now: datetime) -> ConversationStatus:
        previous = self.status
        self.status = CONVERSATION_TRANSITIONS.apply(self.status, action)
        self.updated_at = now
        return previous


@dataclass
class Message:
    """A message inside a conversation. System messages have no sender."""

    id: MessageId
    conversation_id: ConversationId
    message_type: MessageType
    content: str
    created_at: datetime
    sender_id: UserId | None = None
    read_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def text(
        cls,
        *,
        conversation_id: ConversationId,
        sender_id: UserId,
        content: str,
        now: datetime,
        message_type: MessageType = MessageType.TEXT,
        metadata: dict[str, Any] | None = None,
    ) -> "Message":
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content is required")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise ValidationError(f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters")
        if message_type not in (MessageType.TEXT, MessageType.ATTACHMENT):
            raise ValidationError(f"Users cannot send {message_type.value} messages")
        return cls(
            id=MessageId.generate(),
            conversation_id=conversation_id,
            message_type=message_type,
            content=content,
            created_at=now,
            sender_id=sender_id,
            metadata=metadata or {},
        )

    @classmethod
    def system(
        cls,
        *,
        conversation_id: ConversationId,
        message_type: MessageType,
        content: str,
        now: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> "Message":
        return cls(
            id=MessageId.generate(),
            conversation_id=conversation_id,
            message_type=message_type,
            content=content,
            created_at=now,
            metadata=metadata or {},
        )

    @property
    def is_system(self) -> bool:
        return self.sender_id is None

    @property
    def preview(self) -> str:
        return self.content[:PREVIEW_LENGTH]


__all__ = [
    "CONVERSATION_TRANSITIONS",
    "Conversation",
    "ConversationStatus",
    "ICE_BREAKER_PROMPTS",
    "MAX_MESSAGE_LENGTH",
    "Message",
    "MessageType",
    "pick_ice_breaker",
]
