"""SQLModel implementation of IOpeningRepository using OpeningMapper."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import update
from sqlmodel import select

from buildermatch.database.sqlmodel_engine import SQLModelDatabaseManager
from buildermatch.domain.entities.opening import Opening, OpeningStatus
from buildermatch.domain.repositories.opening_repository import IOpeningRepository
from buildermatch.domain.value_objects import OpeningId, UserId
from buildermatch.infrastructure.persistence.mappers.opening_mapper import OpeningMapper
from buildermatch.infrastructure.persistence.models.opening_table import OpeningTable


class SQLModelOpeningRepository(IOpeningRepository):
    """SQL adapter implementation of IOpeningRepository."""

    def __init__(self, db_manager: SQLModelDatabaseManager):
        self._db = db_manager

    async def get_by_id(self, opening_id: OpeningId) -> Optional[Opening]:
        async with self._db.get_session() as session:
            row = await session.get(OpeningTable, opening_id.value)
            return OpeningMapper.to_domain(row) if row else None

    async def save(self, opening: Opening) -> Opening:
        """Insert or update an opening. Counters are left to ``increment_counters``."""
        async with self._db.get_session() as session:
            existing_row = await session.get(OpeningTable, opening.id.value)
            if existing_row:
                OpeningMapper.update_table_from_domain(existing_row, opening)
            else:
                session.add(OpeningMapper.to_table(opening))
        return opening

    async def increment_counters(
        self,
        opening_id: OpeningId,
        *,
        interest_count: int = 0,
        shortlist_count: int = 0,
        view_count: int = 0,
    ) -> None:
        values = {}
        if interest_count:
            values["interest_count"] = OpeningTable.interest_count + interest_count
        if shortlist_count:
            values["shortlist_count"] = OpeningTable.shortlist_count + shortlist_count
        if view_count:
            values["view_count"] = OpeningTable.view_count + view_count
        if not values:
            return

        async with self._db.get_session() as session:
            await session.execute(
                update(OpeningTable).where(OpeningTable.id == opening_id.value).values(**values)
            )

    async def list_by_status(
        self,
        status: OpeningStatus,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Opening]:
        async with self._db.get_session() as session:
            stmt = (
                select(OpeningTable)
                .where(OpeningTable.status == status.value)
                .order_by(OpeningTable.created_at, OpeningTable.id)
                .offset(offset)
                .limit(limit)
            )
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [OpeningMapper.to_domain(row) for row in rows]

    async def list_by_founder(self, founder_id: UserId) -> List[Opening]:
        async with self._db.get_session() as session:
            stmt = (
                select(OpeningTable)
                .where(OpeningTable.founder_id == founder_id.value)
                .order_by(OpeningTable.created_at, OpeningTable.id)
            )
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [OpeningMapper.to_domain(row) for row in rows]


__all__ = ["SQLModelOpeningRepository"]
