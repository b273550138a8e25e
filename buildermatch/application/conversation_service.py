"""Application service gating messaging behind a mutual match."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog

from buildermatch.application.dependencies.workflow_dependencies import ConversationDependencies
from buildermatch.application.results import Page, WorkflowResult, page_window
from buildermatch.application.support import load_actor, post_system_message, run_best_effort
from buildermatch.domain.entities.conversation import (
    Conversation,
    ConversationStatus,
    Message,
    MessageType,
    pick_ice_breaker,
)
from buildermatch.domain.events.workflow_events import MessagesReadEvent, NewMessageEvent
from buildermatch.domain.exceptions import (
    AuthorizationError,
    ConcurrencyError,
    ConflictError,
    ConversationNotFoundError,
    InterestNotFoundError,
)
from buildermatch.domain.value_objects import ConversationId, InterestId, MessageId, UserId

logger = structlog.get_logger(__name__)

DEFAULT_LISTED_STATUSES = (ConversationStatus.ACTIVE, ConversationStatus.BLOCKED)


@dataclass
class ConversationSummary:
    conversation: Conversation
    unread_count: int


@dataclass
class ConversationStats:
    total_messages: int
    sent_by_me: int
    sent_by_other: int
    unread: int
    status: ConversationStatus
    has_trial: bool
    created_at: datetime | None
    last_message_at: datetime | None
    days_active: int


class ConversationService:
    """Create conversations from mutual matches and run messaging inside them."""

    def __init__(self, dependencies: ConversationDependencies) -> None:
        self._deps = dependencies
        self._conversations = dependencies.conversation_repository
        self._interests = dependencies.interest_repository
        self._profiles = dependencies.profile_repository

    async def create_conversation_from_match(
        self,
        *,
        interest_id: Any,
        user_id: Any | None = None,
    ) -> WorkflowResult[Conversation]:
        """Open the conversation for a mutual match, or return the existing one."""
        now = self._deps.clock()
        interest = await self._interests.get_by_id(InterestId(interest_id))
        if interest is None:
            raise InterestNotFoundError("Interest not found")
        if not interest.unlocks_conversation:
            raise AuthorizationError("Conversations can only be created from a mutual match")
        if user_id is not None and not interest.is_participant(UserId(user_id)):
            raise AuthorizationError("You are not part of this match")

        existing = await self._find_existing(interest.id, interest.conversation_id)
        if existing is not None:
            return WorkflowResult(existing)

        conversation = Conversation.from_match(interest, now)
        try:
            await self._conversations.add(conversation)
        except ConflictError:
            # Lost the race against a concurrent create; hand back the winner's row.
            existing = await self._conversations.get_by_interest(interest.id)
            if existing is None:
                raise
            return WorkflowResult(existing)

        await run_best_effort(
            "link_conversation_to_interest",
            self._interests.link_conversation(interest.id, conversation.id),
            interest_id=str(interest.id),
            conversation_id=str(conversation.id),
        )
        await post_system_message(
            self._conversations,
            conversation_id=conversation.id,
            message_type=MessageType.ICE_BREAKER,
            content=pick_ice_breaker(self._deps.rng),
            now=now,
        )

        logger.info(
            "Conversation created from match",
            conversation_id=str(conversation.id),
            interest_id=str(interest.id),
        )
        refreshed = await self._conversations.get_by_id(conversation.id)
        return WorkflowResult(refreshed or conversation)

    async def get_conversation(self, *, conversation_id: Any, user_id: Any) -> Conversation:
        conversation = await self._require_conversation(ConversationId(conversation_id))
        conversation.ensure_participant(UserId(user_id))
        return conversation

    async def get_user_conversations(
        self,
        *,
        user_id: Any,
        status: ConversationStatus | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[ConversationSummary]:
        """List the caller's conversations; archived ones only when asked for."""
        user_id = UserId(user_id)
        statuses = (status,) if status is not None else DEFAULT_LISTED_STATUSES
        offset = page_window(page, limit)
        conversations = await self._conversations.list_for_user(user_id, statuses, limit, offset)
        total = await self._conversations.count_for_user(user_id, statuses)
        items = [
            ConversationSummary(
                conversation=conversation,
                unread_count=await self._conversations.count_unread(conversation.id, user_id),
            )
            for conversation in conversations
        ]
        return Page(items=items, total=total, page=page, limit=limit)

    async def archive_conversation(self, *, conversation_id: Any, user_id: Any) -> Conversation:
        conversation = await self.get_conversation(conversation_id=conversation_id, user_id=user_id)
        previous = conversation.archive(self._deps.clock())
        await self._store_transition(conversation, previous)
        logger.info("Conversation archived", conversation_id=str(conversation.id), user_id=str(user_id))
        return conversation

    async def unarchive_conversation(self, *, conversation_id: Any, user_id: Any) -> Conversation:
        conversation = await self.get_conversation(conversation_id=conversation_id, user_id=user_id)
        previous = conversation.unarchive(self._deps.clock())
        await self._store_transition(conversation, previous)
        logger.info("Conversation unarchived", conversation_id=str(conversation.id), user_id=str(user_id))
        return conversation

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------

    async def send_message(
        self,
        *,
        conversation_id: Any,
        sender_id: Any,
        content: str,
        message_type: MessageType = MessageType.TEXT,
        metadata: dict[str, Any] | None = None,
    ) -> WorkflowResult[Message]:
        sender_id = UserId(sender_id)
        now = self._deps.clock()
        conversation = await self._require_conversation(ConversationId(conversation_id))
        recipient_id = conversation.other_participant(sender_id)
        conversation.ensure_accepts_messages()

        message = Message.text(
            conversation_id=conversation.id,
            sender_id=sender_id,
            content=content,
            now=now,
            message_type=message_type,
            metadata=metadata,
        )
        await self._conversations.append_message(message)

        event = NewMessageEvent(
            recipient_id=recipient_id,
            occurred_at=now,
            conversation_id=conversation.id,
            message_id=message.id,
            sender=await load_actor(self._profiles, sender_id),
            message_type=message.message_type.value,
            preview=message.preview,
        )
        logger.info(
            "Message sent",
            conversation_id=str(conversation.id),
            message_id=str(message.id),
            sender_id=str(sender_id),
        )
        return WorkflowResult(message, [event])

    async def get_messages(
        self,
        *,
        conversation_id: Any,
        user_id: Any,
        before: Any | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> Page[Message]:
        """Return messages oldest-first, paged back from the newest or from ``before``."""
        conversation = await self.get_conversation(conversation_id=conversation_id, user_id=user_id)
        offset = page_window(page, limit)

        before_at = None
        if before is not None:
            cursor = await self._require_message(conversation, MessageId(before))
            before_at = cursor.created_at
            offset = 0

        items = await self._conversations.list_messages(
            conversation.id, before=before_at, limit=limit, offset=offset
        )
        total = await self._conversations.count_messages(conversation.id)
        return Page(items=items, total=total, page=page if before is None else 1, limit=limit)

    async def mark_messages_as_read(
        self,
        *,
        conversation_id: Any,
        user_id: Any,
        up_to_message_id: Any,
    ) -> WorkflowResult[int]:
        """Mark the other participant's messages up to and including the given one as read."""
        user_id = UserId(user_id)
        now = self._deps.clock()
        conversation = await self._require_conversation(ConversationId(conversation_id))
        author_id = conversation.other_participant(user_id)
        up_to = await self._require_message(conversation, MessageId(up_to_message_id))

        marked = await self._conversations.mark_read(conversation.id, author_id, up_to.created_at, now)
        events = []
        if marked:
            events.append(
                MessagesReadEvent(
                    recipient_id=author_id,
                    occurred_at=now,
                    conversation_id=conversation.id,
                    reader=await load_actor(self._profiles, user_id),
                    read_count=marked,
                    up_to_message_id=up_to.id,
                )
            )
        logger.debug("Messages marked as read", conversation_id=str(conversation.id), count=marked)
        return WorkflowResult(marked, events)

    async def get_unread_count(self, *, user_id: Any) -> int:
        per_conversation = await self.get_unread_count_per_conversation(user_id=user_id)
        return sum(per_conversation.values())

    async def get_unread_count_per_conversation(self, *, user_id: Any) -> dict[str, int]:
        user_id = UserId(user_id)
        statuses = (ConversationStatus.ACTIVE,)
        total = await self._conversations.count_for_user(user_id, statuses)
        counts: dict[str, int] = {}
        offset = 0
        while offset < total:
            batch = await self._conversations.list_for_user(user_id, statuses, 100, offset)
            if not batch:
                break
            for conversation in batch:
                unread = await self._conversations.count_unread(conversation.id, user_id)
                if unread:
                    counts[str(conversation.id)] = unread
            offset += len(batch)
        return counts

    async def send_new_ice_breaker(self, *, conversation_id: Any, user_id: Any) -> WorkflowResult[Message]:
        user_id = UserId(user_id)
        now = self._deps.clock()
        conversation = await self._require_conversation(ConversationId(conversation_id))
        recipient_id = conversation.other_participant(user_id)
        conversation.ensure_accepts_messages()

        message = Message.system(
            conversation_id=conversation.id,
            message_type=MessageType.ICE_BREAKER,
            content=pick_ice_breaker(self._deps.rng),
            now=now,
            metadata={"requested_by": str(user_id)},
        )
        await self._conversations.append_message(message)

        event = NewMessageEvent(
            recipient_id=recipient_id,
            occurred_at=now,
            conversation_id=conversation.id,
            message_id=message.id,
            sender=await load_actor(self._profiles, user_id),
            message_type=message.message_type.value,
            preview=message.preview,
        )
        return WorkflowResult(message, [event])

    async def get_conversation_stats(self, *, conversation_id: Any, user_id: Any) -> ConversationStats:
        user_id = UserId(user_id)
        conversation = await self.get_conversation(conversation_id=conversation_id, user_id=user_id)
        other_id = conversation.other_participant(user_id)
        now = self._deps.clock()

        has_trial = conversation.trial_id is not None
        trials = self._deps.trial_repository
        if not has_trial and trials is not None:
            has_trial = await trials.find_latest_for_conversation(conversation.id) is not None

        days_active = (now - conversation.created_at).days if conversation.created_at else 0
        return ConversationStats(
            total_messages=await self._conversations.count_messages(conversation.id),
            sent_by_me=await self._conversations.count_messages(conversation.id, user_id),
            sent_by_other=await self._conversations.count_messages(conversation.id, other_id),
            unread=await self._conversations.count_unread(conversation.id, user_id),
            status=conversation.status,
            has_trial=has_trial,
            created_at=conversation.created_at,
            last_message_at=conversation.last_message_at,
            days_active=max(0, days_active),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _find_existing(self, interest_id: InterestId, linked_id: ConversationId | None):
        if linked_id is not None:
            linked = await self._conversations.get_by_id(linked_id)
            if linked is not None:
                return linked
        return await self._conversations.get_by_interest(interest_id)

    async def _require_conversation(self, conversation_id: ConversationId) -> Conversation:
        conversation = await self._conversations.get_by_id(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError("Conversation not found")
        return conversation

    async def _require_message(self, conversation: Conversation, message_id: MessageId) -> Message:
        message = await self._conversations.get_message(message_id)
        if message is None or message.conversation_id != conversation.id:
            raise ConversationNotFoundError("Message not found")
        return message

    async def _store_transition(self, conversation: Conversation, previous: ConversationStatus) -> None:
        if not await self._conversations.save_transition(conversation, previous):
            raise ConcurrencyError("Conversation was modified by another request")


__all__ = ["ConversationService", "ConversationStats", "ConversationSummary"]
