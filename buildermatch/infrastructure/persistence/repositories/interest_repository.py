"""SQLModel implementation of IInterestRepository using InterestMapper."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

import structlog
from sqlalchemy import desc, func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from buildermatch.database.sqlmodel_engine import SQLModelDatabaseManager
from buildermatch.domain.entities.interest import Interest, InterestStatus
from buildermatch.domain.exceptions import DuplicateInterestError
from buildermatch.domain.repositories.interest_repository import IInterestRepository
from buildermatch.domain.value_objects import ConversationId, InterestId, OpeningId, UserId
from buildermatch.infrastructure.persistence.mappers.interest_mapper import InterestMapper
from buildermatch.infrastructure.persistence.models.interest_table import InterestTable

logger = structlog.get_logger(__name__)


class SQLModelInterestRepository(IInterestRepository):
    """SQL adapter; the (builder_id, opening_id) unique constraint backs duplicate detection."""

    def __init__(self, db_manager: SQLModelDatabaseManager):
        self._db = db_manager

    async def add(self, interest: Interest) -> Interest:
        try:
            async with self._db.get_session() as session:
                session.add(InterestMapper.to_table(interest))
                await session.flush()
        except IntegrityError as e:
            logger.info(
                "Duplicate interest rejected by storage",
                builder_id=str(interest.builder_id),
                opening_id=str(interest.opening_id),
            )
            raise DuplicateInterestError(
                "You have already expressed interest in this opening"
            ) from e
        return interest

    async def get_by_id(self, interest_id: InterestId) -> Optional[Interest]:
        async with self._db.get_session() as session:
            row = await session.get(InterestTable, interest_id.value)
            return InterestMapper.to_domain(row) if row else None

    async def find_by_builder_and_opening(
        self,
        builder_id: UserId,
        opening_id: OpeningId,
    ) -> Optional[Interest]:
        async with self._db.get_session() as session:
            stmt = select(InterestTable).where(
                InterestTable.builder_id == builder_id.value,
                InterestTable.opening_id == opening_id.value,
            )
            result = await session.execute(stmt)
            row = result.scalars().first()
            return InterestMapper.to_domain(row) if row else None

    async def save_transition(self, interest: Interest, expected_status: InterestStatus) -> bool:
        async with self._db.get_session() as session:
            result = await session.execute(
                update(InterestTable)
                .where(
                    InterestTable.id == interest.id.value,
                    InterestTable.status == expected_status.value,
                )
                .values(**InterestMapper.transition_values(interest))
            )
        return result.rowcount == 1

    async def link_conversation(
        self,
        interest_id: InterestId,
        conversation_id: ConversationId,
    ) -> bool:
        async with self._db.get_session() as session:
            result = await session.execute(
                update(InterestTable)
                .where(
                    InterestTable.id == interest_id.value,
                    InterestTable.conversation_id.is_(None),
                )
                .values(conversation_id=conversation_id.value)
            )
        return result.rowcount == 1

    async def count_created_since(self, builder_id: UserId, since: datetime) -> int:
        async with self._db.get_session() as session:
            stmt = (
                select(func.count())
                .select_from(InterestTable)
                .where(
                    InterestTable.builder_id == builder_id.value,
                    InterestTable.created_at >= since,
                )
            )
            result = await session.execute(stmt)
            return result.scalar_one()

    @staticmethod
    def _builder_filter(stmt, builder_id: UserId, status: Optional[InterestStatus]):
        stmt = stmt.where(InterestTable.builder_id == builder_id.value)
        if status:
            stmt = stmt.where(InterestTable.status == status.value)
        return stmt

    @staticmethod
    def _founder_filter(
        stmt,
        founder_id: UserId,
        opening_id: Optional[OpeningId],
        status: Optional[InterestStatus],
    ):
        stmt = stmt.where(InterestTable.founder_id == founder_id.value)
        if opening_id:
            stmt = stmt.where(InterestTable.opening_id == opening_id.value)
        if status:
            stmt = stmt.where(InterestTable.status == status.value)
        return stmt

    async def _fetch(self, stmt) -> List[Interest]:
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [InterestMapper.to_domain(row) for row in rows]

    async def _count(self, stmt) -> int:
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def list_for_builder(
        self,
        builder_id: UserId,
        status: Optional[InterestStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Interest]:
        stmt = self._builder_filter(select(InterestTable), builder_id, status)
        stmt = (
            stmt.order_by(desc(InterestTable.created_at), desc(InterestTable.id))
            .offset(offset)
            .limit(limit)
        )
        return await self._fetch(stmt)

    async def count_for_builder(
        self,
        builder_id: UserId,
        status: Optional[InterestStatus] = None,
    ) -> int:
        stmt = select(func.count()).select_from(InterestTable)
        return await self._count(self._builder_filter(stmt, builder_id, status))

    async def list_for_founder(
        self,
        founder_id: UserId,
        opening_id: Optional[OpeningId] = None,
        status: Optional[InterestStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Interest]:
        stmt = self._founder_filter(select(InterestTable), founder_id, opening_id, status)
        stmt = (
            stmt.order_by(desc(InterestTable.created_at), desc(InterestTable.id))
            .offset(offset)
            .limit(limit)
        )
        return await self._fetch(stmt)

    async def count_for_founder(
        self,
        founder_id: UserId,
        opening_id: Optional[OpeningId] = None,
        status: Optional[InterestStatus] = None,
    ) -> int:
        stmt = select(func.count()).select_from(InterestTable)
        return await self._count(self._founder_filter(stmt, founder_id, opening_id, status))

    async def list_mutual_matches(
        self,
        *,
        founder_id: Optional[UserId] = None,
        builder_id: Optional[UserId] = None,
    ) -> List[Interest]:
        stmt = select(InterestTable).where(InterestTable.is_mutual_match == True)  # noqa: E712
        if founder_id:
            stmt = stmt.where(InterestTable.founder_id == founder_id.value)
        if builder_id:
            stmt = stmt.where(InterestTable.builder_id == builder_id.value)
        stmt = stmt.order_by(desc(InterestTable.matched_at), desc(InterestTable.id))
        return await self._fetch(stmt)

    async def find_mutual_match(self, founder_id: UserId, builder_id: UserId) -> Optional[Interest]:
        matches = await self._fetch(
            select(InterestTable)
            .where(
                InterestTable.founder_id == founder_id.value,
                InterestTable.builder_id == builder_id.value,
                InterestTable.is_mutual_match == True,  # noqa: E712
            )
            .order_by(desc(InterestTable.matched_at))
            .limit(1)
        )
        return matches[0] if matches else None

    async def count_by_status(
        self,
        *,
        founder_id: Optional[UserId] = None,
        builder_id: Optional[UserId] = None,
    ) -> Dict[InterestStatus, int]:
        stmt = select(InterestTable.status, func.count()).group_by(InterestTable.status)
        if founder_id:
            stmt = stmt.where(InterestTable.founder_id == founder_id.value)
        if builder_id:
            stmt = stmt.where(InterestTable.builder_id == builder_id.value)

        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            rows = result.all()
        return {InterestStatus(status): count for status, count in rows}


__all__ = ["SQLModelInterestRepository"]
