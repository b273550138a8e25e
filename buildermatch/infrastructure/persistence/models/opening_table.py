"""SQLModel table for openings."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import Column, Float, Index, Integer, String
from sqlmodel import Field, SQLModel

from buildermatch.infrastructure.persistence.models.base import (
    counter_column,
    json_column,
    status_column,
    timestamp_column,
    uuid_column,
    uuid_pk_column,
)


class OpeningTable(SQLModel, table=True):
    """A role posted by a founder."""

    __tablename__ = "openings"
    __table_args__ = (
        Index("idx_openings_status_created", "status", "created_at"),
    )

    id: UUID = Field(sa_column=uuid_pk_column())
    founder_id: UUID = Field(sa_column=uuid_column(index=True))
    title: str = Field(sa_column=Column(String(200), nullable=False))
    role_type: str = Field(sa_column=Column(String(32), nullable=False))
    hours_per_week: int = Field(sa_column=Column(Integer, nullable=False))
    skills_required: List[str] = Field(default_factory=list, sa_column=json_column())
    skills_preferred: List[str] = Field(default_factory=list, sa_column=json_column())
    equity_min: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    equity_max: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    cash_min: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    cash_max: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    remote_preference: str = Field(default="remote", sa_column=Column(String(16), nullable=False))
    city: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    country: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    status: str = Field(default="active", sa_column=status_column("active"))
    view_count: int = Field(default=0, sa_column=counter_column())
    interest_count: int = Field(default=0, sa_column=counter_column())
    shortlist_count: int = Field(default=0, sa_column=counter_column())
    filled_by: Optional[UUID] = Field(default=None, sa_column=uuid_column(nullable=True))
    filled_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    closed_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    created_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())


__all__ = ["OpeningTable"]
