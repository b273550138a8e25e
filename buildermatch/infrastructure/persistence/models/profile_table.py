"""SQLModel tables for user accounts and matching profiles."""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import Boolean, Column, Float, ForeignKey, Integer, String, Uuid
from sqlmodel import Field, SQLModel

from buildermatch.infrastructure.persistence.models.base import (
    counter_column,
    json_column,
    timestamp_column,
    uuid_pk_column,
)


class UserAccountTable(SQLModel, table=True):
    """Identity-level user data owned by the external account service."""

    __tablename__ = "user_accounts"

    id: UUID = Field(sa_column=uuid_pk_column())
    role: str = Field(
        sa_column=Column(String(16), nullable=False, index=True),
        description="founder or builder"
    )
    name: str = Field(sa_column=Column(String(100), nullable=False))
    avatar_url: Optional[str] = Field(default=None, sa_column=Column(String(500), nullable=True))
    subscription_tier: str = Field(
        default="free",
        sa_column=Column(String(32), nullable=False, default="free"),
    )
    created_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column())


class BuilderProfileTable(SQLModel, table=True):
    """Matching-relevant builder attributes plus analytics counters."""

    __tablename__ = "builder_profiles"

    user_id: UUID = Field(
        sa_column=Column(Uuid, ForeignKey("user_accounts.id", ondelete="CASCADE"), primary_key=True)
    )
    skills: List[str] = Field(default_factory=list, sa_column=json_column())
    risk_appetite: Optional[str] = Field(default=None, sa_column=Column(String(16), nullable=True))
    compensation_openness: List[str] = Field(default_factory=list, sa_column=json_column())
    expected_cash_min: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    expected_cash_max: Optional[float] = Field(default=None, sa_column=Column(Float, nullable=True))
    hours_per_week: Optional[int] = Field(default=None, sa_column=Column(Integer, nullable=True))
    roles_interested: List[str] = Field(default_factory=list, sa_column=json_column())
    city: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    country: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    remote_preference: Optional[str] = Field(default=None, sa_column=Column(String(16), nullable=True))
    scenario_responses: Dict[str, str] = Field(default_factory=dict, sa_column=json_column())
    is_complete: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False, index=True))
    is_visible: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))
    is_open_to_opportunities: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))
    interest_sent_count: int = Field(default=0, sa_column=counter_column())
    shortlist_count: int = Field(default=0, sa_column=counter_column())
    match_count: int = Field(default=0, sa_column=counter_column())


class FounderProfileTable(SQLModel, table=True):
    """Startup context of a founder."""

    __tablename__ = "founder_profiles"

    user_id: UUID = Field(
        sa_column=Column(Uuid, ForeignKey("user_accounts.id", ondelete="CASCADE"), primary_key=True)
    )
    startup_name: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    startup_stage: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))
    city: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    country: Optional[str] = Field(default=None, sa_column=Column(String(100), nullable=True))
    scenario_responses: Dict[str, str] = Field(default_factory=dict, sa_column=json_column())
    is_complete: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    match_count: int = Field(default=0, sa_column=counter_column())


__all__ = ["BuilderProfileTable", "FounderProfileTable", "UserAccountTable"]
