"""Domain repository contract for suggested matches."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from buildermatch.domain.entities.match import SuggestedMatch
from buildermatch.domain.value_objects import OpeningId, UserId


class IMatchRepository(ABC):
    """Suggested-match persistence keyed by (opening, builder)."""

    @abstractmethod
    async def upsert(self, match: SuggestedMatch) -> bool:
        """Insert the pair, or refresh score, tier and breakdown if it already exists.

        Returns:
            True when a new row was created, False when an existing one was updated.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_for_pair(self, opening_id: OpeningId, builder_id: UserId) -> Optional[SuggestedMatch]:
        raise NotImplementedError

    @abstractmethod
    async def list_for_openings(
        self,
        opening_ids: Sequence[OpeningId],
        limit: int = 50,
        offset: int = 0,
    ) -> List[SuggestedMatch]:
        """Matches on any of ``opening_ids``, best score first."""
        raise NotImplementedError

    @abstractmethod
    async def list_for_builder(
        self,
        builder_id: UserId,
        limit: int = 50,
        offset: int = 0,
    ) -> List[SuggestedMatch]:
        """Matches suggested to a builder, best score first."""
        raise NotImplementedError


__all__ = ["IMatchRepository"]
