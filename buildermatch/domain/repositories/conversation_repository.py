"""Domain repository contract for conversations and their messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from buildermatch.domain.entities.conversation import Conversation, ConversationStatus, Message
from buildermatch.domain.value_objects import (
    ConversationId,
    InterestId,
    MessageId,
    TrialId,
    UserId,
)


class IConversationRepository(ABC):
    """Conversation persistence with one conversation per interest."""

    @abstractmethod
    async def add(self, conversation: Conversation) -> Conversation:
        """Insert a conversation.

        Raises:
            ConflictError: a conversation already exists for the interest.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, conversation_id: ConversationId) -> Optional[Conversation]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_interest(self, interest_id: InterestId) -> Optional[Conversation]:
        raise NotImplementedError

    @abstractmethod
    async def save_transition(
        self,
        conversation: Conversation,
        expected_status: ConversationStatus,
    ) -> bool:
        """Persist a status change only if the stored status is still ``expected_status``."""
        raise NotImplementedError

    @abstractmethod
    async def link_trial(self, conversation_id: ConversationId, trial_id: TrialId) -> None:
        raise NotImplementedError

    @abstractmethod
    async def list_for_user(
        self,
        user_id: UserId,
        statuses: Sequence[ConversationStatus],
        limit: int = 20,
        offset: int = 0,
    ) -> List[Conversation]:
        """List a participant's conversations, most recent activity first."""
        raise NotImplementedError

    @abstractmethod
    async def count_for_user(self, user_id: UserId, statuses: Sequence[ConversationStatus]) -> int:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    @abstractmethod
    async def append_message(self, message: Message) -> Message:
        """Insert a message and atomically bump the conversation's last-message pointer and count.

        Raises:
            InvalidStateError: the conversation is not ACTIVE.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_message(self, message_id: MessageId) -> Optional[Message]:
        raise NotImplementedError

    @abstractmethod
    async def list_messages(
        self,
        conversation_id: ConversationId,
        *,
        before: Optional[datetime] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Message]:
        """Return a page counted back from the newest message, ordered oldest-first.

        ``before`` restricts the page to messages created strictly earlier.
        """
        raise NotImplementedError

    @abstractmethod
    async def count_messages(
        self,
        conversation_id: ConversationId,
        sender_id: Optional[UserId] = None,
    ) -> int:
        raise NotImplementedError

    @abstractmethod
    async def mark_read(
        self,
        conversation_id: ConversationId,
        author_id: UserId,
        up_to: datetime,
        read_at: datetime,
    ) -> int:
        """Stamp ``read_at`` on unread messages by ``author_id`` created at or before ``up_to``."""
        raise NotImplementedError

    @abstractmethod
    async def count_unread(self, conversation_id: ConversationId, reader_id: UserId) -> int:
        """Count unread non-system messages sent by the other participant."""
        raise NotImplementedError


__all__ = ["IConversationRepository"]
