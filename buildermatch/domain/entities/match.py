"""Suggested match: a scored opening/builder pairing kept by match generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from buildermatch.domain.entities.opening import Opening
from buildermatch.domain.exceptions import ValidationError
from buildermatch.domain.policies import MatchTier
from buildermatch.domain.value_objects import MatchId, OpeningId, UserId


@dataclass
class SuggestedMatch:
    """
    One row per (opening, builder) pair.

    A new generation run refreshes the score of an existing pair in place;
    ``created_at`` keeps the first time the pair was suggested.
    """

    id: MatchId
    opening_id: OpeningId
    founder_id: UserId
    builder_id: UserId
    score: float
    tier: MatchTier
    breakdown: dict[str, float] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def suggest(
        cls,
        *,
        opening: Opening,
        builder_id: UserId,
        score: float,
        tier: MatchTier,
        breakdown: dict[str, float],
        now: datetime,
    ) -> "SuggestedMatch":
        if not 0.0 <= score <= 1.0:
            raise ValidationError("Match score must be between 0 and 1")
        return cls(
            id=MatchId.generate(),
            opening_id=opening.id,
            founder_id=opening.founder_id,
            builder_id=builder_id,
            score=score,
            tier=tier,
            breakdown=dict(breakdown),
            created_at=now,
            updated_at=now,
        )


__all__ = ["SuggestedMatch"]
