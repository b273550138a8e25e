"""Column factories shared by the table models.

Each factory returns a new ``Column`` because SQLAlchemy columns cannot be
shared between tables.
"""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB


def uuid_pk_column() -> Column:
    return Column(Uuid, primary_key=True, nullable=False)


def uuid_column(*, nullable: bool = False, index: bool = False, unique: bool = False) -> Column:
    return Column(Uuid, nullable=nullable, index=index, unique=unique)


def timestamp_column(*, nullable: bool = True, index: bool = False) -> Column:
    return Column(DateTime(timezone=True), nullable=nullable, index=index)


def status_column(default: str, *, index: bool = True) -> Column:
    return Column(String(32), nullable=False, default=default, index=index)


def counter_column() -> Column:
    return Column(Integer, nullable=False, default=0, server_default="0")


def json_column(*, nullable: bool = False, none_as_null: bool = False) -> Column:
    """JSON on every dialect, JSONB on PostgreSQL."""
    json_type = JSON(none_as_null=none_as_null).with_variant(
        JSONB(none_as_null=none_as_null), "postgresql"
    )
    return Column(json_type, nullable=nullable)


__all__ = [
    "counter_column",
    "json_column",
    "status_column",
    "timestamp_column",
    "uuid_column",
    "uuid_pk_column",
]
