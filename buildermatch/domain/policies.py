"""Injected workflow configuration: scorer weights, tier thresholds and quotas."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from buildermatch.domain.entities.profile import SubscriptionTier
from buildermatch.domain.exceptions import ConfigurationError


class MatchTier(str, Enum):
    LOW = "low"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    def at_least(self, other: "MatchTier") -> bool:
        return self.rank >= other.rank


_TIER_ORDER = [MatchTier.LOW, MatchTier.FAIR, MatchTier.GOOD, MatchTier.EXCELLENT]


@dataclass(frozen=True)
class ScoringWeights:
    skills: float = 0.25
    compensation: float = 0.25
    commitment: float = 0.20
    scenario: float = 0.15
    geography: float = 0.15

    def as_dict(self) -> dict[str, float]:
        return {
            "skills": self.skills,
            "compensation": self.compensation,
            "commitment": self.commitment,
            "scenario": self.scenario,
            "geography": self.geography,
        }

    def validate(self) -> None:
        for name, weight in self.as_dict().items():
            if not 0.0 <= weight <= 1.0:
                raise ConfigurationError(f"Scoring weight '{name}' must be within [0, 1], got {weight}")
        total = sum(self.as_dict().values())
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ConfigurationError(f"Scoring weights must sum to 1.0, got {total:.6f}")


@dataclass(frozen=True)
class TierThresholds:
    """Lower bounds of the fair, good and excellent tiers."""

    fair: float = 0.5
    good: float = 0.7
    excellent: float = 0.85

    def validate(self) -> None:
        if not 0.0 < self.fair < self.good < self.excellent < 1.0:
            raise ConfigurationError(
                "Tier thresholds must be strictly increasing within (0, 1): "
                f"fair={self.fair}, good={self.good}, excellent={self.excellent}"
            )

    def tier_for(self, overall: float) -> MatchTier:
        if overall >= self.excellent:
            return MatchTier.EXCELLENT
        if overall >= self.good:
            return MatchTier.GOOD
        if overall >= self.fair:
            return MatchTier.FAIR
        return MatchTier.LOW

    def min_score_for(self, tier: MatchTier) -> float:
        return {
            MatchTier.LOW: 0.0,
            MatchTier.FAIR: self.fair,
            MatchTier.GOOD: self.good,
            MatchTier.EXCELLENT: self.excellent,
        }[tier]


@dataclass(frozen=True)
class QuotaPolicy:
    """Daily interest quota per subscription tier, reset at local midnight."""

    free_limit: int = 5
    boosted_limit: int = 15
    timezone_name: str = "UTC"

    def validate(self) -> None:
        if self.free_limit <= 0 or self.boosted_limit <= 0:
            raise ConfigurationError("Daily interest limits must be positive")
        if self.boosted_limit < self.free_limit:
            raise ConfigurationError("Boosted interest limit cannot be lower than the free limit")
        try:
            ZoneInfo(self.timezone_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError(f"Unknown quota timezone '{self.timezone_name}'") from exc

    def limit_for(self, tier: SubscriptionTier) -> int:
        if tier == SubscriptionTier.BUILDER_BOOST:
            return self.boosted_limit
        return self.free_limit

    def day_start(self, now: datetime) -> datetime:
        """Return local midnight of ``now``'s quota day as an aware UTC datetime."""
        zone = ZoneInfo(self.timezone_name)
        local_now = now.astimezone(zone)
        local_midnight = datetime.combine(local_now.date(), time.min, tzinfo=zone)
        return local_midnight.astimezone(timezone.utc)


@dataclass(frozen=True)
class WorkflowConfig:
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    thresholds: TierThresholds = field(default_factory=TierThresholds)
    quota: QuotaPolicy = field(default_factory=QuotaPolicy)
    trial_ending_soon_days: int = 2
    match_generation_limit: int = 50
    match_generation_min_tier: MatchTier = MatchTier.FAIR
    daily_match_limit: int = 5

    def validate(self) -> "WorkflowConfig":
        self.weights.validate()
        self.thresholds.validate()
        self.quota.validate()
        if self.trial_ending_soon_days <= 0:
            raise ConfigurationError("Trial ending-soon window must be at least one day")
        if self.match_generation_limit <= 0:
            raise ConfigurationError("Match generation limit must be positive")
        if self.daily_match_limit <= 0:
            raise ConfigurationError("Daily match limit must be positive")
        return self


__all__ = [
    "MatchTier",
    "QuotaPolicy",
    "ScoringWeights",
    "TierThresholds",
    "WorkflowConfig",
]
