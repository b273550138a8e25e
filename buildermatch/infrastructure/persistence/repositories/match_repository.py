"""SQLModel implementation of IMatchRepository."""

from __future__ import annotations

from typing import List, Optional, Sequence

import structlog
from sqlalchemy import desc, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from buildermatch.database.sqlmodel_engine import SQLModelDatabaseManager
from buildermatch.domain.entities.match import SuggestedMatch
from buildermatch.domain.repositories.match_repository import IMatchRepository
from buildermatch.domain.value_objects import OpeningId, UserId
from buildermatch.infrastructure.persistence.mappers.match_mapper import SuggestedMatchMapper
from buildermatch.infrastructure.persistence.models.match_table import SuggestedMatchTable

logger = structlog.get_logger(__name__)


class SQLModelMatchRepository(IMatchRepository):
    """SQL adapter; the (opening_id, builder_id) unique constraint keeps one row per pair."""

    def __init__(self, db_manager: SQLModelDatabaseManager):
        self._db = db_manager

    async def _refresh(self, match: SuggestedMatch) -> bool:
        async with self._db.get_session() as session:
            result = await session.execute(
                update(SuggestedMatchTable)
                .where(
                    SuggestedMatchTable.opening_id == match.opening_id.value,
                    SuggestedMatchTable.builder_id == match.builder_id.value,
                )
                .values(**SuggestedMatchMapper.score_values(match))
            )
        return result.rowcount == 1

    async def upsert(self, match: SuggestedMatch) -> bool:
        if await self._refresh(match):
            return False
        try:
            async with self._db.get_session() as session:
                session.add(SuggestedMatchMapper.to_table(match))
                await session.flush()
        except IntegrityError:
            # A concurrent run inserted the pair first.
            logger.debug(
                "Suggested match inserted concurrently",
                opening_id=str(match.opening_id),
                builder_id=str(match.builder_id),
            )
            await self._refresh(match)
            return False
        return True

    async def get_for_pair(self, opening_id: OpeningId, builder_id: UserId) -> Optional[SuggestedMatch]:
        async with self._db.get_session() as session:
            result = await session.execute(
                select(SuggestedMatchTable).where(
                    SuggestedMatchTable.opening_id == opening_id.value,
                    SuggestedMatchTable.builder_id == builder_id.value,
                )
            )
            row = result.scalars().first()
            return SuggestedMatchMapper.to_domain(row) if row else None

    async def _list(self, condition, limit: int, offset: int) -> List[SuggestedMatch]:
        stmt = (
            select(SuggestedMatchTable)
            .where(condition)
            .order_by(desc(SuggestedMatchTable.score), SuggestedMatchTable.id)
            .offset(offset)
            .limit(limit)
        )
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [SuggestedMatchMapper.to_domain(row) for row in rows]

    async def list_for_openings(
        self,
        opening_ids: Sequence[OpeningId],
        limit: int = 50,
        offset: int = 0,
    ) -> List[SuggestedMatch]:
        if not opening_ids:
            return []
        condition = SuggestedMatchTable.opening_id.in_([opening_id.value for opening_id in opening_ids])
        return await self._list(condition, limit, offset)

    async def list_for_builder(
        self,
        builder_id: UserId,
        limit: int = 50,
        offset: int = 0,
    ) -> List[SuggestedMatch]:
        return await self._list(SuggestedMatchTable.builder_id == builder_id.value, limit, offset)


__all__ = ["SQLModelMatchRepository"]
