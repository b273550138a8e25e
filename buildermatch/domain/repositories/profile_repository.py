"""Domain repository contract for user accounts and matching profiles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from buildermatch.domain.entities.profile import BuilderProfile, FounderProfile, UserAccount
from buildermatch.domain.value_objects import UserId


class IProfileRepository(ABC):
    """Read access to the profile store plus atomic analytics counters."""

    @abstractmethod
    async def get_account(self, user_id: UserId) -> Optional[UserAccount]:
        """Load the identity-level account of a user."""
        raise NotImplementedError

    @abstractmethod
    async def save_account(self, account: UserAccount) -> UserAccount:
        """Insert or update a user account."""
        raise NotImplementedError

    @abstractmethod
    async def get_builder_profile(self, user_id: UserId) -> Optional[BuilderProfile]:
        """Load a builder's matching profile."""
        raise NotImplementedError

    @abstractmethod
    async def save_builder_profile(self, profile: BuilderProfile) -> BuilderProfile:
        """Insert or update a builder profile."""
        raise NotImplementedError

    @abstractmethod
    async def get_founder_profile(self, user_id: UserId) -> Optional[FounderProfile]:
        """Load a founder's startup profile."""
        raise NotImplementedError

    @abstractmethod
    async def save_founder_profile(self, profile: FounderProfile) -> FounderProfile:
        """Insert or update a founder profile."""
        raise NotImplementedError

    @abstractmethod
    async def list_discoverable_builders(
        self,
        limit: int = 500,
        offset: int = 0,
    ) -> List[BuilderProfile]:
        """List complete, visible builders open to opportunities."""
        raise NotImplementedError

    @abstractmethod
    async def increment_builder_counters(
        self,
        user_id: UserId,
        *,
        interest_sent: int = 0,
        shortlist: int = 0,
        match: int = 0,
    ) -> None:
        """Atomically add to a builder's analytics counters."""
        raise NotImplementedError

    @abstractmethod
    async def increment_founder_counters(self, user_id: UserId, *, match: int = 0) -> None:
        """Atomically add to a founder's analytics counters."""
        raise NotImplementedError


__all__ = ["IProfileRepository"]
