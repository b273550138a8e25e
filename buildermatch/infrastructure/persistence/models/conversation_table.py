"""SQLModel tables for conversations and messages."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import Column, ForeignKey, Index, String, Text, Uuid
from sqlmodel import Field, SQLModel

from buildermatch.infrastructure.persistence.models.base import (
    counter_column,
    json_column,
    status_column,
    timestamp_column,
    uuid_column,
    uuid_pk_column,
)


class ConversationTable(SQLModel, table=True):
    """Messaging channel; ``interest_id`` is unique so a match opens at most one."""

    __tablename__ = "conversations"
    __table_args__ = (
        Index("idx_conversations_founder_status", "founder_id", "status"),
        Index("idx_conversations_builder_status", "builder_id", "status"),
    )

    id: UUID = Field(sa_column=uuid_pk_column())
    interest_id: UUID = Field(sa_column=uuid_column(unique=True))
    opening_id: UUID = Field(sa_column=uuid_column())
    founder_id: UUID = Field(sa_column=uuid_column())
    builder_id: UUID = Field(sa_column=uuid_column())
    status: str = Field(default="active", sa_column=status_column("active", index=False))
    last_message_preview: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    last_message_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    message_count: int = Field(default=0, sa_column=counter_column())
    trial_id: Optional[UUID] = Field(default=None, sa_column=uuid_column(nullable=True))
    created_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())


class MessageTable(SQLModel, table=True):
    """A message; ``sender_id`` is NULL for system messages."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("idx_messages_conversation_created", "conversation_id", "created_at"),
        Index("idx_messages_unread", "conversation_id", "sender_id", "read_at"),
    )

    id: UUID = Field(sa_column=uuid_pk_column())
    conversation_id: UUID = Field(
        sa_column=Column(Uuid, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False)
    )
    sender_id: Optional[UUID] = Field(default=None, sa_column=uuid_column(nullable=True))
    message_type: str = Field(sa_column=Column(String(32), nullable=False))
    content: str = Field(sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(sa_column=timestamp_column(nullable=False))
    read_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    extra_metadata: Dict[str, Any] = Field(default_factory=dict, sa_column=json_column())


__all__ = ["ConversationTable", "MessageTable"]
