"""Mapper between Opening entities and OpeningTable rows."""

from __future__ import annotations

from buildermatch.domain.entities.common import RemotePreference, RoleType
from buildermatch.domain.entities.opening import Opening, OpeningStatus
from buildermatch.domain.value_objects import Location, NumericRange, OpeningId, UserId
from buildermatch.infrastructure.persistence.mappers.time_utils import ensure_utc
from buildermatch.infrastructure.persistence.models.opening_table import OpeningTable


def _range(low: float | None, high: float | None) -> NumericRange | None:
    if low is None or high is None:
        return None
    return NumericRange(low, high)


class OpeningMapper:
    """Counters are excluded from updates; they change only through atomic increments."""

    @staticmethod
    def to_domain(table: OpeningTable) -> Opening:
        location = None
        if table.city or table.country:
            location = Location(city=table.city, country=table.country)
        return Opening(
            id=OpeningId(table.id),
            founder_id=UserId(table.founder_id),
            title=table.title,
            role_type=RoleType(table.role_type),
            hours_per_week=table.hours_per_week,
            skills_required=list(table.skills_required or []),
            skills_preferred=list(table.skills_preferred or []),
            equity_range=_range(table.equity_min, table.equity_max),
            cash_range=_range(table.cash_min, table.cash_max),
            remote_preference=RemotePreference(table.remote_preference),
            location=location,
            status=OpeningStatus(table.status),
            view_count=table.view_count,
            interest_count=table.interest_count,
            shortlist_count=table.shortlist_count,
            filled_by=UserId(table.filled_by) if table.filled_by else None,
            filled_at=ensure_utc(table.filled_at),
            closed_at=ensure_utc(table.closed_at),
            created_at=ensure_utc(table.created_at),
            updated_at=ensure_utc(table.updated_at),
        )

    @staticmethod
    def update_table_from_domain(table: OpeningTable, entity: Opening) -> None:
        table.founder_id = entity.founder_id.value
        table.title = entity.title
        table.role_type = entity.role_type.value
        table.hours_per_week = entity.hours_per_week
        table.skills_required = list(entity.skills_required)
        table.skills_preferred = list(entity.skills_preferred)
        table.equity_min = entity.equity_range.min if entity.equity_range else None
        table.equity_max = entity.equity_range.max if entity.equity_range else None
        table.cash_min = entity.cash_range.min if entity.cash_range else None
        table.cash_max = entity.cash_range.max if entity.cash_range else None
        table.remote_preference = entity.remote_preference.value
        table.city = entity.location.city if entity.location else None
        table.country = entity.location.country if entity.location else None
        table.status = entity.status.value
        table.filled_by = entity.filled_by.value if entity.filled_by else None
        table.filled_at = entity.filled_at
        table.closed_at = entity.closed_at
        table.updated_at = entity.updated_at

    @staticmethod
    def to_table(entity: Opening) -> OpeningTable:
        table = OpeningTable(
            id=entity.id.value,
            founder_id=entity.founder_id.value,
            title=entity.title,
            role_type=entity.role_type.value,
            hours_per_week=entity.hours_per_week,
            view_count=entity.view_count,
            interest_count=entity.interest_count,
            shortlist_count=entity.shortlist_count,
            created_at=entity.created_at,
        )
        OpeningMapper.update_table_from_domain(table, entity)
        return table


__all__ = ["OpeningMapper"]
