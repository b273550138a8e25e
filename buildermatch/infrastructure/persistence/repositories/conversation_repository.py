"""SQLModel implementation of IConversationRepository."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

import structlog
from sqlalchemy import desc, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from buildermatch.database.sqlmodel_engine import SQLModelDatabaseManager
from buildermatch.domain.entities.conversation import Conversation, ConversationStatus, Message
from buildermatch.domain.exceptions import ConflictError, InvalidStateError
from buildermatch.domain.repositories.conversation_repository import IConversationRepository
from buildermatch.domain.value_objects import (
    ConversationId,
    InterestId,
    MessageId,
    TrialId,
    UserId,
)
from buildermatch.infrastructure.persistence.mappers.conversation_mapper import (
    ConversationMapper,
    MessageMapper,
)
from buildermatch.infrastructure.persistence.models.conversation_table import (
    ConversationTable,
    MessageTable,
)

logger = structlog.get_logger(__name__)


class SQLModelConversationRepository(IConversationRepository):
    """SQL adapter for conversations and messages."""

    def __init__(self, db_manager: SQLModelDatabaseManager):
        self._db = db_manager

    async def add(self, conversation: Conversation) -> Conversation:
        try:
            async with self._db.get_session() as session:
                session.add(ConversationMapper.to_table(conversation))
                await session.flush()
        except IntegrityError as e:
            logger.info(
                "Duplicate conversation rejected by storage",
                interest_id=str(conversation.interest_id),
            )
            raise ConflictError("A conversation already exists for this match") from e
        return conversation

    async def get_by_id(self, conversation_id: ConversationId) -> Optional[Conversation]:
        async with self._db.get_session() as session:
            row = await session.get(ConversationTable, conversation_id.value)
            return ConversationMapper.to_domain(row) if row else None

    async def get_by_interest(self, interest_id: InterestId) -> Optional[Conversation]:
        async with self._db.get_session() as session:
            result = await session.execute(
                select(ConversationTable).where(ConversationTable.interest_id == interest_id.value)
            )
            row = result.scalars().first()
            return ConversationMapper.to_domain(row) if row else None

    async def save_transition(
        self,
        conversation: Conversation,
        expected_status: ConversationStatus,
    ) -> bool:
        async with self._db.get_session() as session:
            result = await session.execute(
                update(ConversationTable)
                .where(
                    ConversationTable.id == conversation.id.value,
                    ConversationTable.status == expected_status.value,
                )
                .values(status=conversation.status.value, updated_at=conversation.updated_at)
            )
        return result.rowcount == 1

    async def link_trial(self, conversation_id: ConversationId, trial_id: TrialId) -> None:
        async with self._db.get_session() as session:
            await session.execute(
                update(ConversationTable)
                .where(ConversationTable.id == conversation_id.value)
                .values(trial_id=trial_id.value)
            )

    @staticmethod
    def _user_filter(stmt, user_id: UserId, statuses: Sequence[ConversationStatus]):
        stmt = stmt.where(
            or_(
                ConversationTable.founder_id == user_id.value,
                ConversationTable.builder_id == user_id.value,
            )
        )
        if statuses:
            stmt = stmt.where(ConversationTable.status.in_([s.value for s in statuses]))
        return stmt

    async def list_for_user(
        self,
        user_id: UserId,
        statuses: Sequence[ConversationStatus],
        limit: int = 20,
        offset: int = 0,
    ) -> List[Conversation]:
        last_activity = func.coalesce(ConversationTable.last_message_at, ConversationTable.created_at)
        stmt = (
            self._user_filter(select(ConversationTable), user_id, statuses)
            .order_by(desc(last_activity), desc(ConversationTable.id))
            .offset(offset)
            .limit(limit)
        )
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [ConversationMapper.to_domain(row) for row in rows]

    async def count_for_user(self, user_id: UserId, statuses: Sequence[ConversationStatus]) -> int:
        stmt = self._user_filter(select(func.count()).select_from(ConversationTable), user_id, statuses)
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def append_message(self, message: Message) -> Message:
        async with self._db.get_session() as session:
            result = await session.execute(
                update(ConversationTable)
                .where(
                    ConversationTable.id == message.conversation_id.value,
                    ConversationTable.status == ConversationStatus.ACTIVE.value,
                )
                .values(
                    last_message_preview=message.preview,
                    last_message_at=message.created_at,
                    message_count=ConversationTable.message_count + 1,
                    updated_at=message.created_at,
                )
            )
            if result.rowcount != 1:
                raise InvalidStateError(
                    "conversation",
                    "inactive",
                    "append message to",
                    message="Cannot send messages in an inactive conversation",
                )
            session.add(MessageMapper.to_table(message))
            await session.flush()
        return message

    async def get_message(self, message_id: MessageId) -> Optional[Message]:
        async with self._db.get_session() as session:
            row = await session.get(MessageTable, message_id.value)
            return MessageMapper.to_domain(row) if row else None

    async def list_messages(
        self,
        conversation_id: ConversationId,
        *,
        before: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Message]:
        stmt = select(MessageTable).where(MessageTable.conversation_id == conversation_id.value)
        if before is not None:
            stmt = stmt.where(MessageTable.created_at < before)
        stmt = (
            stmt.order_by(desc(MessageTable.created_at), desc(MessageTable.id))
            .offset(offset)
            .limit(limit)
        )
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()
        return [MessageMapper.to_domain(row) for row in reversed(rows)]

    async def count_messages(
        self,
        conversation_id: ConversationId,
        sender_id: Optional[UserId] = None,
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(MessageTable)
            .where(MessageTable.conversation_id == conversation_id.value)
        )
        if sender_id:
            stmt = stmt.where(MessageTable.sender_id == sender_id.value)
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            return result.scalar_one()

    async def mark_read(
        self,
        conversation_id: ConversationId,
        author_id: UserId,
        up_to: datetime,
        read_at: datetime,
    ) -> int:
        async with self._db.get_session() as session:
            result = await session.execute(
                update(MessageTable)
                .where(
                    MessageTable.conversation_id == conversation_id.value,
                    MessageTable.sender_id == author_id.value,
                    MessageTable.read_at.is_(None),
                    MessageTable.created_at <= up_to,
                )
                .values(read_at=read_at)
            )
        return result.rowcount

    async def count_unread(self, conversation_id: ConversationId, reader_id: UserId) -> int:
        stmt = (
            select(func.count())
            .select_from(MessageTable)
            .where(
                MessageTable.conversation_id == conversation_id.value,
                MessageTable.sender_id.is_not(None),
                MessageTable.sender_id != reader_id.value,
                MessageTable.read_at.is_(None),
            )
        )
        async with self._db.get_session() as session:
            result = await session.execute(stmt)
            return result.scalar_one()


__all__ = ["SQLModelConversationRepository"]
