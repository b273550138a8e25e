"""Domain repository contract for interests."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from buildermatch.domain.entities.interest import Interest, InterestStatus
from buildermatch.domain.value_objects import ConversationId, InterestId, OpeningId, UserId


class IInterestRepository(ABC):
    """Interest persistence with storage-enforced (builder, opening) uniqueness."""

    @abstractmethod
    async def add(self, interest: Interest) -> Interest:
        """Insert a new interest.

        Raises:
            DuplicateInterestError: an interest already exists for the pair.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, interest_id: InterestId) -> Optional[Interest]:
        raise NotImplementedError

    @abstractmethod
    async def find_by_builder_and_opening(
        self,
        builder_id: UserId,
        opening_id: OpeningId,
    ) -> Optional[Interest]:
        raise NotImplementedError

    @abstractmethod
    async def save_transition(self, interest: Interest, expected_status: InterestStatus) -> bool:
        """Persist ``interest`` only if its stored status is still ``expected_status``."""
        raise NotImplementedError

    @abstractmethod
    async def link_conversation(
        self,
        interest_id: InterestId,
        conversation_id: ConversationId,
    ) -> bool:
        """Set the conversation reference if none is set yet."""
        raise NotImplementedError

    @abstractmethod
    async def count_created_since(self, builder_id: UserId, since: datetime) -> int:
        """Count interests a builder created at or after ``since``."""
        raise NotImplementedError

    @abstractmethod
    async def list_for_builder(
        self,
        builder_id: UserId,
        status: Optional[InterestStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Interest]:
        """List a builder's interests, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def count_for_builder(
        self,
        builder_id: UserId,
        status: Optional[InterestStatus] = None,
    ) -> int:
        raise NotImplementedError

    @abstractmethod
    async def list_for_founder(
        self,
        founder_id: UserId,
        opening_id: Optional[OpeningId] = None,
        status: Optional[InterestStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Interest]:
        """List interests received by a founder, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def count_for_founder(
        self,
        founder_id: UserId,
        opening_id: Optional[OpeningId] = None,
        status: Optional[InterestStatus] = None,
    ) -> int:
        raise NotImplementedError

    @abstractmethod
    async def list_mutual_matches(
        self,
        *,
        founder_id: Optional[UserId] = None,
        builder_id: Optional[UserId] = None,
    ) -> List[Interest]:
        """List mutual matches for one side, most recently matched first."""
        raise NotImplementedError

    @abstractmethod
    async def find_mutual_match(self, founder_id: UserId, builder_id: UserId) -> Optional[Interest]:
        raise NotImplementedError

    @abstractmethod
    async def count_by_status(
        self,
        *,
        founder_id: Optional[UserId] = None,
        builder_id: Optional[UserId] = None,
    ) -> Dict[InterestStatus, int]:
        raise NotImplementedError


__all__ = ["IInterestRepository"]
