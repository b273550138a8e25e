"""SQLModel implementation of ITrialRepository using TrialMapper."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

import structlog
from sqlalchemy import and_, desc, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from buildermatch.database.sqlmodel_engine import SQLModelDatabaseManager
from buildermatch.domain.entities.trial import (
    LIVE_TRIAL_STATUSES,
    Feedback,
    FeedbackSide,
    Trial,
    TrialOutcome,
    TrialStatus,
)
from buildermatch.domain.exceptions import LiveTrialExistsError
from buildermatch.domain.repositories.trial_repository import ITrialRepository
from buildermatch.domain.value_objects import ConversationId, TrialId, UserId
from buildermatch.infrastructure.persistence.mappers.trial_mapper import (
    TrialMapper,
    feedback_to_json,
)
from buildermatch.infrastructure.persistence.models.trial_table import TrialTable

logger = structlog.get_logger(__name__)


def _status_filter(status: TrialStatus):
    """DECLINED is stored as CANCELLED with the ``declined`` flag set."""
    if status == TrialStatus.DECLINED:
        return and_(
            TrialTable.status == TrialStatus.CANCELLED.value,
            TrialTable.declined == True,  # noqa: E712
        )
    if status == TrialStatus.CANCELLED:
        return and_(
            TrialTable.status == TrialStatus.CANCELLED.value,
            TrialTable.declined == False,  # noqa: E712
        )
    return TrialTable.status == status.value


def _participant_filter(user_id: UserId):
    return or_(TrialTable.founder_id == user_id.value, TrialTable.builder_id == user_id.value)


class SQLModelTrialRepository(ITrialRepository):
    """
    SQL adapter for trials.

    The partial unique index on ``conversation_id`` for live statuses rejects a
    second proposed or active trial even under concurrent proposals.
    """

    def __init__(self, db_manager: SQLModelDatabaseManager):
        self._db = db_manager

    async def add(self, trial: Trial) -> Trial:
        try:
            async with self._db.get_session() as session:
                session.add(TrialMapper.to_table(trial))
                await session.flush()
        except IntegrityError as e:
            logger.info(
                "Live trial conflict rejected by storage",
                conversation_id=str(trial.conversation_id),
            )
            raise LiveTrialExistsError(
                "An active or proposed trial already exists for this conversation"
            ) from e
        return trial

    async def get_by_id(self, trial_id: TrialId) -> Optional[Trial]:
        async with self._db.get_session() as session:
            row = await session.get(TrialTable, trial_id.value)
            return TrialMapper.to_domain(row) if row else None

    async def _fetch(self, stmt) -> List[Trial]:
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [TrialMapper.to_domain(row) for row in rows]

    async def find_live_for_conversation(self, conversation_id: ConversationId) -> Optional[Trial]:
        trials = await self._fetch(
            select(TrialTable)
            .where(
                TrialTable.conversation_id == conversation_id.value,
                TrialTable.status.in_([s.value for s in LIVE_TRIAL_STATUSES]),
            )
            .limit(1)
        )
        return trials[0] if trials else None

    async def find_latest_for_conversation(
        self,
        conversation_id: ConversationId,
        *,
        include_cancelled: bool = False,
    ) -> Optional[Trial]:
        stmt = select(TrialTable).where(TrialTable.conversation_id == conversation_id.value)
        if not include_cancelled:
            stmt = stmt.where(TrialTable.status != TrialStatus.CANCELLED.value)
        stmt = stmt.order_by(desc(TrialTable.proposed_at), desc(TrialTable.id)).limit(1)
        trials = await self._fetch(stmt)
        return trials[0] if trials else None

    async def save_transition(self, trial: Trial, expected_status: TrialStatus) -> bool:
        async with self._db.get_session() as session:
            result = await session.execute(
                update(TrialTable)
                .where(
                    TrialTable.id == trial.id.value,
                    TrialTable.status == expected_status.value,
                )
                .values(**TrialMapper.transition_values(trial))
            )
        return result.rowcount == 1

    async def record_feedback(
        self,
        trial_id: TrialId,
        side: FeedbackSide,
        feedback: Feedback,
    ) -> bool:
        column = TrialTable.founder_feedback if side == FeedbackSide.FOUNDER else TrialTable.builder_feedback
        async with self._db.get_session() as session:
            result = await session.execute(
                update(TrialTable)
                .where(
                    TrialTable.id == trial_id.value,
                    TrialTable.status == TrialStatus.COMPLETED.value,
                    column.is_(None),
                )
                .values(**{column.key: feedback_to_json(feedback), "updated_at": feedback.submitted_at})
            )
        return result.rowcount == 1

    async def resolve_outcome(self, trial_id: TrialId, outcome: TrialOutcome) -> bool:
        async with self._db.get_session() as session:
            result = await session.execute(
                update(TrialTable)
                .where(
                    TrialTable.id == trial_id.value,
                    TrialTable.outcome == TrialOutcome.PENDING.value,
                )
                .values(outcome=outcome.value)
            )
        return result.rowcount == 1

    async def list_for_user(
        self,
        user_id: UserId,
        status: Optional[TrialStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Trial]:
        stmt = select(TrialTable).where(_participant_filter(user_id))
        if status:
            stmt = stmt.where(_status_filter(status))
        stmt = (
            stmt.order_by(desc(TrialTable.proposed_at), desc(TrialTable.id))
            .offset(offset)
            .limit(limit)
        )
        return await self._fetch(stmt)

    async def count_for_user(self, user_id: UserId, status: Optional[TrialStatus] = None) -> int:
        stmt = select(func.count()).select_from(TrialTable).where(_participant_filter(user_id))
        if status:
            stmt = stmt.where(_status_filter(status))
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def list_expired_active(self, now: datetime, limit: int = 500) -> List[Trial]:
        return await self._fetch(
            select(TrialTable)
            .where(
                TrialTable.status == TrialStatus.ACTIVE.value,
                TrialTable.ends_at <= now,
            )
            .order_by(TrialTable.ends_at, TrialTable.id)
            .limit(limit)
        )

    async def list_active_ending_between(self, start: datetime, end: datetime) -> List[Trial]:
        return await self._fetch(
            select(TrialTable)
            .where(
                TrialTable.status == TrialStatus.ACTIVE.value,
                TrialTable.ends_at > start,
                TrialTable.ends_at <= end,
            )
            .order_by(TrialTable.ends_at, TrialTable.id)
        )

    async def list_needing_feedback(self, limit: int = 500) -> List[Trial]:
        return await self._fetch(
            select(TrialTable)
            .where(
                TrialTable.status == TrialStatus.COMPLETED.value,
                TrialTable.outcome == TrialOutcome.PENDING.value,
            )
            .order_by(TrialTable.completed_at, TrialTable.id)
            .limit(limit)
        )

    async def count_by_status(self, user_id: UserId) -> Dict[TrialStatus, int]:
        stmt = (
            select(TrialTable.status, TrialTable.declined, func.count())
            .where(_participant_filter(user_id))
            .group_by(TrialTable.status, TrialTable.declined)
        )
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            rows = result.all()

        counts: Dict[TrialStatus, int] = {}
        for status, declined, count in rows:
            key = TrialStatus.DECLINED if status == TrialStatus.CANCELLED.value and declined else TrialStatus(status)
            counts[key] = counts.get(key, 0) + count
        return counts

    async def count_by_outcome(self, user_id: UserId) -> Dict[TrialOutcome, int]:
        stmt = (
            select(TrialTable.outcome, func.count())
            .where(
                _participant_filter(user_id),
                TrialTable.status == TrialStatus.COMPLETED.value,
            )
            .group_by(TrialTable.outcome)
        )
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            rows = result.all()
        return {TrialOutcome(outcome): count for outcome, count in rows}


__all__ = ["SQLModelTrialRepository"]
