"""Mappers between account/profile entities and their table models."""

from __future__ import annotations

from buildermatch.domain.entities.common import (
    CompensationType,
    RemotePreference,
    RiskAppetite,
    RoleType,
    StartupStage,
)
from buildermatch.domain.entities.profile import (
    BuilderProfile,
    FounderProfile,
    SubscriptionTier,
    UserAccount,
    UserRole,
)
from buildermatch.domain.value_objects import Location, NumericRange, UserId
from buildermatch.infrastructure.persistence.models.profile_table import (
    BuilderProfileTable,
    FounderProfileTable,
    UserAccountTable,
)


def _location(city: str | None, country: str | None) -> Location | None:
    if not city and not country:
        return None
    return Location(city=city, country=country)


class UserAccountMapper:
    @staticmethod
    def to_domain(table: UserAccountTable) -> UserAccount:
        return UserAccount(
            id=UserId(table.id),
            role=UserRole(table.role),
            name=table.name,
            avatar_url=table.avatar_url,
            subscription_tier=SubscriptionTier(table.subscription_tier),
        )

    @staticmethod
    def update_table_from_domain(table: UserAccountTable, entity: UserAccount) -> None:
        table.role = entity.role.value
        table.name = entity.name
        table.avatar_url = entity.avatar_url
        table.subscription_tier = entity.subscription_tier.value

    @staticmethod
    def to_table(entity: UserAccount) -> UserAccountTable:
        table = UserAccountTable(id=entity.id.value, role=entity.role.value, name=entity.name)
        UserAccountMapper.update_table_from_domain(table, entity)
        return table


class BuilderProfileMapper:
    """Maps BuilderProfile entities to rows; counters are only written by atomic updates."""

    @staticmethod
    def to_domain(table: BuilderProfileTable) -> BuilderProfile:
        expected_cash = None
        if table.expected_cash_min is not None and table.expected_cash_max is not None:
            expected_cash = NumericRange(table.expected_cash_min, table.expected_cash_max)
        return BuilderProfile(
            user_id=UserId(table.user_id),
            skills=list(table.skills or []),
            risk_appetite=RiskAppetite(table.risk_appetite) if table.risk_appetite else None,
            compensation_openness=[CompensationType(v) for v in table.compensation_openness or []],
            expected_cash_range=expected_cash,
            hours_per_week=table.hours_per_week,
            roles_interested=[RoleType(v) for v in table.roles_interested or []],
            location=_location(table.city, table.country),
            remote_preference=RemotePreference(table.remote_preference) if table.remote_preference else None,
            scenario_responses=dict(table.scenario_responses or {}),
            is_complete=table.is_complete,
            is_visible=table.is_visible,
            is_open_to_opportunities=table.is_open_to_opportunities,
            interest_sent_count=table.interest_sent_count,
            shortlist_count=table.shortlist_count,
            match_count=table.match_count,
        )

    @staticmethod
    def update_table_from_domain(table: BuilderProfileTable, entity: BuilderProfile) -> None:
        table.skills = list(entity.skills)
        table.risk_appetite = entity.risk_appetite.value if entity.risk_appetite else None
        table.compensation_openness = [v.value for v in entity.compensation_openness]
        table.expected_cash_min = entity.expected_cash_range.min if entity.expected_cash_range else None
        table.expected_cash_max = entity.expected_cash_range.max if entity.expected_cash_range else None
        table.hours_per_week = entity.hours_per_week
        table.roles_interested = [v.value for v in entity.roles_interested]
        table.city = entity.location.city if entity.location else None
        table.country = entity.location.country if entity.location else None
        table.remote_preference = entity.remote_preference.value if entity.remote_preference else None
        table.scenario_responses = dict(entity.scenario_responses)
        table.is_complete = entity.is_complete
        table.is_visible = entity.is_visible
        table.is_open_to_opportunities = entity.is_open_to_opportunities

    @staticmethod
    def to_table(entity: BuilderProfile) -> BuilderProfileTable:
        table = BuilderProfileTable(
            user_id=entity.user_id.value,
            interest_sent_count=entity.interest_sent_count,
            shortlist_count=entity.shortlist_count,
            match_count=entity.match_count,
        )
        BuilderProfileMapper.update_table_from_domain(table, entity)
        return table


class FounderProfileMapper:
    @staticmethod
    def to_domain(table: FounderProfileTable) -> FounderProfile:
        return FounderProfile(
            user_id=UserId(table.user_id),
            startup_name=table.startup_name,
            startup_stage=StartupStage(table.startup_stage) if table.startup_stage else None,
            location=_location(table.city, table.country),
            scenario_responses=dict(table.scenario_responses or {}),
            is_complete=table.is_complete,
            match_count=table.match_count,
        )

    @staticmethod
    def update_table_from_domain(table: FounderProfileTable, entity: FounderProfile) -> None:
        table.startup_name = entity.startup_name
        table.startup_stage = entity.startup_stage.value if entity.startup_stage else None
        table.city = entity.location.city if entity.location else None
        table.country = entity.location.country if entity.location else None
        table.scenario_responses = dict(entity.scenario_responses)
        table.is_complete = entity.is_complete

    @staticmethod
    def to_table(entity: FounderProfile) -> FounderProfileTable:
        table = FounderProfileTable(user_id=entity.user_id.value, match_count=entity.match_count)
        FounderProfileMapper.update_table_from_domain(table, entity)
        return table


__all__ = ["BuilderProfileMapper", "FounderProfileMapper", "UserAccountMapper"]
