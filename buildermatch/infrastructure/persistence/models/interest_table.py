"""SQLModel table for interests."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, Column, Index, String, UniqueConstraint
from sqlmodel import Field, SQLModel

from buildermatch.infrastructure.persistence.models.base import (
    status_column,
    timestamp_column,
    uuid_column,
    uuid_pk_column,
)


class InterestTable(SQLModel, table=True):
    """
    Builder-to-opening interest.

    The (builder_id, opening_id) unique constraint is what makes concurrent
    duplicate submissions resolve to a single row.
    """

    __tablename__ = "interests"
    __table_args__ = (
        UniqueConstraint("builder_id", "opening_id", name="uq_interests_builder_opening"),
        Index("idx_interests_builder_created", "builder_id", "created_at"),
        Index("idx_interests_founder_status", "founder_id", "status"),
        Index("idx_interests_mutual_pair", "founder_id", "builder_id", "is_mutual_match"),
    )

    id: UUID = Field(sa_column=uuid_pk_column())
    builder_id: UUID = Field(sa_column=uuid_column())
    opening_id: UUID = Field(sa_column=uuid_column(index=True))
    founder_id: UUID = Field(sa_column=uuid_column())
    status: str = Field(default="interested", sa_column=status_column("interested"))
    is_mutual_match: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False),
    )
    builder_note: Optional[str] = Field(default=None, sa_column=Column(String(500), nullable=True))
    conversation_id: Optional[UUID] = Field(default=None, sa_column=uuid_column(nullable=True))
    created_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=False))
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    shortlisted_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    passed_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    withdrawn_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    matched_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())


__all__ = ["InterestTable"]
