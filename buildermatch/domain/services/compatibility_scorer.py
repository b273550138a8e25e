"""Domain service scoring how well a builder fits an opening."""

from __future__ import annotations

from dataclasses import dataclass, field

from buildermatch.domain.entities.common import (
    CompensationType,
    RemotePreference,
    RiskAppetite,
    StartupStage,
)
from buildermatch.domain.entities.opening import Opening
from buildermatch.domain.entities.profile import SCENARIO_ANSWERS, BuilderProfile, FounderProfile
from buildermatch.domain.policies import MatchTier, ScoringWeights, TierThresholds
from buildermatch.domain.value_objects import NumericRange

NEUTRAL_SCORE = 0.5
MIN_COMMITMENT_RATIO = 0.4

_CASH_ACCEPTING = frozenset(
    {CompensationType.EQUITY_STIPEND, CompensationType.INTERNSHIP, CompensationType.PAID_ONLY}
)


@dataclass(frozen=True)
class ScoreBreakdown:
    skills: float
    compensation: float
    commitment: float
    scenario: float
    geography: float

    def as_dict(self) -> dict[str, float]:
        return {
            "skills": self.skills,
            "compensation": self.compensation,
            "commitment": self.commitment,
            "scenario": self.scenario,
            "geography": self.geography,
        }


@dataclass(frozen=True)
class CompatibilityScore:
    """Scored pairing of an opening and a builder."""

    overall: float
    breakdown: ScoreBreakdown
    tier: MatchTier
    matching_skills: list[str] = field(default_factory=list)
    missing_skills: list[str] = field(default_factory=list)
    disqualified_reason: str | None = None

    @property
    def is_eligible(self) -> bool:
        return self.disqualified_reason is None


def _normalize_skills(skills: list[str]) -> dict[str, str]:
    return {skill.strip().lower(): skill for skill in skills if skill and skill.strip()}


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class CompatibilityScorer:
    """Pure, deterministic weighted scorer.

    Holds only immutable configuration, so one instance can be shared across
    concurrent callers.
    """

    def __init__(
        self,
        weights: ScoringWeights | None = None,
        thresholds: TierThresholds | None = None,
    ) -> None:
        self._weights = weights or ScoringWeights()
        self._thresholds = thresholds or TierThresholds()
        self._weights.validate()
        self._thresholds.validate()

    @property
    def thresholds(self) -> TierThresholds:
        return self._thresholds

    def score(
        self,
        opening: Opening,
        builder: BuilderProfile,
        founder: FounderProfile | None = None,
    ) -> CompatibilityScore:
        """Score ``builder`` against ``opening``; ``founder`` adds startup context."""
        required = _normalize_skills(opening.skills_required)
        offered = _normalize_skills(builder.skills)
        matching = sorted(required[key] for key in required.keys() & offered.keys())
        missing = sorted(required[key] for key in required.keys() - offered.keys())

        breakdown = ScoreBreakdown(
            skills=round(self._skills_score(required, offered), 4),
            compensation=round(self._compensation_score(opening, builder), 4),
            commitment=round(self._commitment_score(opening, builder), 4),
            scenario=round(self._scenario_score(builder, founder), 4),
            geography=round(self._geography_score(opening, builder, founder), 4),
        )
        weights = self._weights.as_dict()
        overall = _clamp(
            sum(weights[name] * value for name, value in breakdown.as_dict().items())
        )
        overall = round(overall, 4)

        return CompatibilityScore(
            overall=overall,
            breakdown=breakdown,
            tier=self._thresholds.tier_for(overall),
            matching_skills=matching,
            missing_skills=missing,
            disqualified_reason=self.disqualification_reason(opening, builder, founder),
        )

    def disqualification_reason(
        self,
        opening: Opening,
        builder: BuilderProfile,
        founder: FounderProfile | None = None,
    ) -> str | None:
        """Hard filters applied before ranking; ``None`` means eligible."""
        if opening.is_equity_only and builder.compensation_openness == [CompensationType.PAID_ONLY]:
            return "compensation"
        if builder.hours_per_week is not None:
            if builder.hours_per_week / opening.hours_per_week < MIN_COMMITMENT_RATIO:
                return "commitment"
        if (
            founder is not None
            and founder.startup_stage == StartupStage.IDEA
            and builder.risk_appetite == RiskAppetite.LOW
        ):
            return "risk"
        if builder.roles_interested and opening.role_type not in builder.roles_interested:
            return "role"
        if (
            opening.remote_preference == RemotePreference.ONSITE
            and builder.remote_preference == RemotePreference.REMOTE
        ):
            return "geography"
        return None

    # ------------------------------------------------------------------
    # Dimensions
    # ------------------------------------------------------------------

    @staticmethod
    def _skills_score(required: dict[str, str], offered: dict[str, str]) -> float:
        if not required:
            return 1.0
        return len(required.keys() & offered.keys()) / len(required)

    @staticmethod
    def _compensation_score(opening: Opening, builder: BuilderProfile) -> float:
        accepted = set(builder.compensation_openness)
        if opening.is_equity_only:
            return 1.0 if CompensationType.EQUITY_ONLY in accepted else 0.0
        if not opening.offers_cash:
            return NEUTRAL_SCORE

        if accepted & _CASH_ACCEPTING:
            base = 1.0
        elif opening.offers_equity:
            base = 0.75
        else:
            base = 0.25

        if builder.expected_cash_range is None:
            return base
        # Share of the builder's expected band the opening can pay up to.
        coverage = NumericRange(0, opening.cash_range.max).overlap_fraction(
            builder.expected_cash_range
        )
        return base * coverage

    @staticmethod
    def _commitment_score(opening: Opening, builder: BuilderProfile) -> float:
        if not builder.hours_per_week:
            return 0.0
        ratio = builder.hours_per_week / opening.hours_per_week
        if ratio >= 1.0:
            return 1.0
        return _clamp((ratio - 0.5) / 0.5)

    @staticmethod
    def _scenario_score(builder: BuilderProfile, founder: FounderProfile | None) -> float:
        if founder is None:
            return NEUTRAL_SCORE
        shared = builder.scenario_responses.keys() & founder.scenario_responses.keys()
        if not shared:
            return NEUTRAL_SCORE

        total = 0.0
        for key in shared:
            distance = abs(
                SCENARIO_ANSWERS.index(builder.scenario_responses[key])
                - SCENARIO_ANSWERS.index(founder.scenario_responses[key])
            )
            if distance == 0:
                total += 1.0
            elif distance == 1:
                total += 0.5
        return total / len(shared)

    @staticmethod
    def _geography_score(
        opening: Opening,
        builder: BuilderProfile,
        founder: FounderProfile | None,
    ) -> float:
        if (
            opening.remote_preference == RemotePreference.REMOTE
            and builder.remote_preference == RemotePreference.REMOTE
        ):
            return 1.0

        opening_location = opening.location or (founder.location if founder else None)
        if opening_location is not None and builder.location is not None:
            if opening_location.same_city(builder.location):
                return 1.0
            if opening_location.same_country(builder.location):
                return 0.75

        if RemotePreference.HYBRID in (opening.remote_preference, builder.remote_preference):
            return 0.5
        return 0.25


__all__ = ["CompatibilityScore", "CompatibilityScorer", "ScoreBreakdown"]
