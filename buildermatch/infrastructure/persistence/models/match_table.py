"""SQLModel table for suggested matches."""

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import Column, Float, Index, String, UniqueConstraint
from sqlmodel import Field, SQLModel

from buildermatch.infrastructure.persistence.models.base import (
    json_column,
    timestamp_column,
    uuid_column,
    uuid_pk_column,
)


class SuggestedMatchTable(SQLModel, table=True):
    """Nightly match suggestions, one row per (opening, builder)."""

    __tablename__ = "suggested_matches"
    __table_args__ = (
        UniqueConstraint("opening_id", "builder_id", name="uq_suggested_matches_opening_builder"),
        Index("idx_suggested_matches_opening_score", "opening_id", "score"),
        Index("idx_suggested_matches_builder_score", "builder_id", "score"),
    )

    id: UUID = Field(sa_column=uuid_pk_column())
    opening_id: UUID = Field(sa_column=uuid_column())
    founder_id: UUID = Field(sa_column=uuid_column(index=True))
    builder_id: UUID = Field(sa_column=uuid_column())
    score: float = Field(default=0.0, sa_column=Column(Float, nullable=False))
    tier: str = Field(default="low", sa_column=Column(String(16), nullable=False))
    breakdown: Dict[str, float] = Field(default_factory=dict, sa_column=json_column())
    created_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=False))
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())


__all__ = ["SuggestedMatchTable"]
