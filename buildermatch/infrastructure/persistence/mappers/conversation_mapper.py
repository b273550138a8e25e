"""Mappers for conversations and messages."""

from __future__ import annotations

from buildermatch.domain.entities.conversation import (
    Conversation,
    ConversationStatus,
    Message,
    MessageType,
)
from buildermatch.domain.value_objects import (
    ConversationId,
    InterestId,
    MessageId,
    OpeningId,
    TrialId,
    UserId,
)
from buildermatch.infrastructure.persistence.mappers.time_utils import ensure_utc
from buildermatch.infrastructure.persistence.models.conversation_table import (
    ConversationTable,
    MessageTable,
)


class ConversationMapper:
    @staticmethod
    def to_domain(table: ConversationTable) -> Conversation:
        return Conversation(
            id=ConversationId(table.id),
            interest_id=InterestId(table.interest_id),
            opening_id=OpeningId(table.opening_id),
            founder_id=UserId(table.founder_id),
            builder_id=UserId(table.builder_id),
            status=ConversationStatus(table.status),
            last_message_preview=table.last_message_preview,
            last_message_at=ensure_utc(table.last_message_at),
            message_count=table.message_count,
            trial_id=TrialId(table.trial_id) if table.trial_id else None,
            created_at=ensure_utc(table.created_at),
            updated_at=ensure_utc(table.updated_at),
        )

    @staticmethod
    def to_table(entity: Conversation) -> ConversationTable:
        return ConversationTable(
            id=entity.id.value,
            interest_id=entity.interest_id.value,
            opening_id=entity.opening_id.value,
            founder_id=entity.founder_id.value,
            builder_id=entity.builder_id.value,
            status=entity.status.value,
            last_message_preview=entity.last_message_preview,
            last_message_at=entity.last_message_at,
            message_count=entity.message_count,
            trial_id=entity.trial_id.value if entity.trial_id else None,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )


class MessageMapper:
    @staticmethod
    def to_domain(table: MessageTable) -> Message:
        return Message(
            id=MessageId(table.id),
            conversation_id=ConversationId(table.conversation_id),
            message_type=MessageType(table.message_type),
            content=table.content,
            created_at=ensure_utc(table.created_at),
            sender_id=UserId(table.sender_id) if table.sender_id else None,
            read_at=ensure_utc(table.read_at),
            metadata=dict(table.extra_metadata or {}),
        )

    @staticmethod
    def to_table(entity: Message) -> MessageTable:
        return MessageTable(
            id=entity.id.value,
            conversation_id=entity.conversation_id.value,
            sender_id=entity.sender_id.value if entity.sender_id else None,
            message_type=entity.message_type.value,
            content=entity.content,
            created_at=entity.created_at,
            read_at=entity.read_at,
            extra_metadata=dict(entity.metadata),
        )


__all__ = ["ConversationMapper", "MessageMapper"]
