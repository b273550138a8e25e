"""Mapper between SuggestedMatch entities and SuggestedMatchTable rows."""

from __future__ import annotations

from buildermatch.domain.entities.match import SuggestedMatch
from buildermatch.domain.policies import MatchTier
from buildermatch.domain.value_objects import MatchId, OpeningId, UserId
from buildermatch.infrastructure.persistence.mappers.time_utils import ensure_utc
from buildermatch.infrastructure.persistence.models.match_table import SuggestedMatchTable


class SuggestedMatchMapper:
    @staticmethod
    def to_domain(table: SuggestedMatchTable) -> SuggestedMatch:
        return SuggestedMatch(
            id=MatchId(table.id),
            opening_id=OpeningId(table.opening_id),
            founder_id=UserId(table.founder_id),
            builder_id=UserId(table.builder_id),
            score=table.score,
            tier=MatchTier(table.tier),
            breakdown=dict(table.breakdown or {}),
            created_at=ensure_utc(table.created_at),
            updated_at=ensure_utc(table.updated_at),
        )

    @staticmethod
    def score_values(entity: SuggestedMatch) -> dict:
        """Columns a later generation run refreshes."""
        return {
            "score": entity.score,
            "tier": entity.tier.value,
            "breakdown": dict(entity.breakdown),
            "updated_at": entity.updated_at,
        }

    @staticmethod
    def to_table(entity: SuggestedMatch) -> SuggestedMatchTable:
        return SuggestedMatchTable(
            id=entity.id.value,
            opening_id=entity.opening_id.value,
            founder_id=entity.founder_id.value,
            builder_id=entity.builder_id.value,
            created_at=entity.created_at,
            **SuggestedMatchMapper.score_values(entity),
        )


__all__ = ["SuggestedMatchMapper"]
