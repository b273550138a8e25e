"""Domain repository contract for openings."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from buildermatch.domain.entities.opening import Opening, OpeningStatus
from buildermatch.domain.value_objects import OpeningId, UserId


class IOpeningRepository(ABC):
    """Domain-facing abstraction for opening persistence operations."""

    @abstractmethod
    async def get_by_id(self, opening_id: OpeningId) -> Optional[Opening]:
        """Load an opening by identifier."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, opening: Opening) -> Opening:
        """Insert or update an opening."""
        raise NotImplementedError

    @abstractmethod
    async def increment_counters(
        self,
        opening_id: OpeningId,
        *,
        interest_count: int = 0,
        shortlist_count: int = 0,
        view_count: int = 0,
    ) -> None:
        """Atomically add to the opening's analytics counters."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_status(
        self,
        status: OpeningStatus,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Opening]:
        """List openings in a status, oldest first."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_founder(self, founder_id: UserId) -> List[Opening]:
        """List every opening a founder owns."""
        raise NotImplementedError


__all__ = ["IOpeningRepository"]
