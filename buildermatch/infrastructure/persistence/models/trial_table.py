"""SQLModel table for trials."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import Boolean, Column, Index, Integer, String, text
from sqlmodel import Field, SQLModel

from buildermatch.infrastructure.persistence.models.base import (
    json_column,
    status_column,
    timestamp_column,
    uuid_column,
    uuid_pk_column,
)

LIVE_TRIAL_PREDICATE = "status IN ('proposed', 'active')"


class TrialTable(SQLModel, table=True):
    """
    Trial collaboration inside a conversation.

    The partial unique index admits at most one proposed-or-active trial per
    conversation. Feedback columns stay NULL until that side submits.
    """

    __tablename__ = "trials"
    __table_args__ = (
        Index(
            "uq_trials_live_per_conversation",
            "conversation_id",
            unique=True,
            postgresql_where=text(LIVE_TRIAL_PREDICATE),
            sqlite_where=text(LIVE_TRIAL_PREDICATE),
        ),
        Index("idx_trials_status_ends_at", "status", "ends_at"),
        Index("idx_trials_founder_status", "founder_id", "status"),
        Index("idx_trials_builder_status", "builder_id", "status"),
    )

    id: UUID = Field(sa_column=uuid_pk_column())
    conversation_id: UUID = Field(sa_column=uuid_column(index=True))
    interest_id: UUID = Field(sa_column=uuid_column())
    founder_id: UUID = Field(sa_column=uuid_column())
    builder_id: UUID = Field(sa_column=uuid_column())
    proposed_by: UUID = Field(sa_column=uuid_column())
    duration_days: int = Field(sa_column=Column(Integer, nullable=False))
    goal: str = Field(sa_column=Column(String(500), nullable=False))
    checkin_frequency: str = Field(default="weekly", sa_column=Column(String(16), nullable=False))
    status: str = Field(default="proposed", sa_column=status_column("proposed", index=False))
    proposed_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    accepted_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    ends_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    completed_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    cancelled_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    cancelled_by: Optional[UUID] = Field(default=None, sa_column=uuid_column(nullable=True))
    cancellation_reason: Optional[str] = Field(default=None, sa_column=Column(String(500), nullable=True))
    declined: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    founder_feedback: Optional[Dict[str, Any]] = Field(
        default=None, sa_column=json_column(nullable=True, none_as_null=True)
    )
    builder_feedback: Optional[Dict[str, Any]] = Field(
        default=None, sa_column=json_column(nullable=True, none_as_null=True)
    )
    outcome: str = Field(default="pending", sa_column=Column(String(16), nullable=False, default="pending"))
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())


__all__ = ["LIVE_TRIAL_PREDICATE", "TrialTable"]
