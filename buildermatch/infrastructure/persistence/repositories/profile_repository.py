"""SQLModel implementation of IProfileRepository."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import update
from sqlmodel import select

from buildermatch.database.sqlmodel_engine import SQLModelDatabaseManager
from buildermatch.domain.entities.profile import BuilderProfile, FounderProfile, UserAccount
from buildermatch.domain.repositories.profile_repository import IProfileRepository
from buildermatch.domain.value_objects import UserId
from buildermatch.infrastructure.persistence.mappers.profile_mapper import (
    BuilderProfileMapper,
    FounderProfileMapper,
    UserAccountMapper,
)
from buildermatch.infrastructure.persistence.models.profile_table import (
    BuilderProfileTable,
    FounderProfileTable,
    UserAccountTable,
)


class SQLModelProfileRepository(IProfileRepository):
    """SQL adapter for accounts, builder profiles and founder profiles."""

    def __init__(self, db_manager: SQLModelDatabaseManager):
        self._db = db_manager

    async def get_account(self, user_id: UserId) -> Optional[UserAccount]:
        async with self._db.get_session() as session:
            row = await session.get(UserAccountTable, user_id.value)
            return UserAccountMapper.to_domain(row) if row else None

    async def save_account(self, account: UserAccount) -> UserAccount:
        async with self._db.get_session() as session:
            existing_row = await session.get(UserAccountTable, account.id.value)
            if existing_row:
                UserAccountMapper.update_table_from_domain(existing_row, account)
            else:
                session.add(UserAccountMapper.to_table(account))
        return account

    async def get_builder_profile(self, user_id: UserId) -> Optional[BuilderProfile]:
        async with self._db.get_session() as session:
            row = await session.get(BuilderProfileTable, user_id.value)
            return BuilderProfileMapper.to_domain(row) if row else None

    async def save_builder_profile(self, profile: BuilderProfile) -> BuilderProfile:
        async with self._db.get_session() as session:
            existing_row = await session.get(BuilderProfileTable, profile.user_id.value)
            if existing_row:
                BuilderProfileMapper.update_table_from_domain(existing_row, profile)
            else:
                session.add(BuilderProfileMapper.to_table(profile))
        return profile

    async def get_founder_profile(self, user_id: UserId) -> Optional[FounderProfile]:
        async with self._db.get_session() as session:
            row = await session.get(FounderProfileTable, user_id.value)
            return FounderProfileMapper.to_domain(row) if row else None

    async def save_founder_profile(self, profile: FounderProfile) -> FounderProfile:
        async with self._db.get_session() as session:
            existing_row = await session.get(FounderProfileTable, profile.user_id.value)
            if existing_row:
                FounderProfileMapper.update_table_from_domain(existing_row, profile)
            else:
                session.add(FounderProfileMapper.to_table(profile))
        return profile

    async def list_discoverable_builders(
        self,
        limit: int = 500,
        offset: int = 0,
    ) -> List[BuilderProfile]:
        async with self._db.get_session() as session:
            stmt = (
                select(BuilderProfileTable)
                .where(
                    BuilderProfileTable.is_complete == True,  # noqa: E712
                    BuilderProfileTable.is_visible == True,  # noqa: E712
                    BuilderProfileTable.is_open_to_opportunities == True,  # noqa: E712
                )
                .order_by(BuilderProfileTable.user_id)
                .offset(offset)
                .limit(limit)
            )
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [BuilderProfileMapper.to_domain(row) for row in rows]

    async def increment_builder_counters(
        self,
        user_id: UserId,
        *,
        interest_sent: int = 0,
        shortlist: int = 0,
        match: int = 0,
    ) -> None:
        values = {}
        if interest_sent:
            values["interest_sent_count"] = BuilderProfileTable.interest_sent_count + interest_sent
        if shortlist:
            values["shortlist_count"] = BuilderProfileTable.shortlist_count + shortlist
        if match:
            values["match_count"] = BuilderProfileTable.match_count + match
        if not values:
            return

        async with self._db.get_session() as session:
            await session.execute(
                update(BuilderProfileTable)
                .where(BuilderProfileTable.user_id == user_id.value)
                .values(**values)
            )

    async def increment_founder_counters(self, user_id: UserId, *, match: int = 0) -> None:
        if not match:
            return
        async with self._db.get_session() as session:
            await session.execute(
                update(FounderProfileTable)
                .where(FounderProfileTable.user_id == user_id.value)
                .values(match_count=FounderProfileTable.match_count + match)
            )


__all__ = ["SQLModelProfileRepository"]
