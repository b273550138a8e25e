"""User accounts and the matching-relevant profiles of founders and builders."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from buildermatch.domain.entities.common import (
    CompensationType,
    RemotePreference,
    RiskAppetite,
    RoleType,
    StartupStage,
)
from buildermatch.domain.value_objects import Location, NumericRange, UserId

SCENARIO_KEYS: tuple[str, ...] = (
    "scenario_1",
    "scenario_2",
    "scenario_3",
    "scenario_4",
    "scenario_5",
    "scenario_6",
)
SCENARIO_ANSWERS: tuple[str, ...] = ("A", "B", "C", "D")


class UserRole(str, Enum):
    FOUNDER = "founder"
    BUILDER = "builder"


class SubscriptionTier(str, Enum):
    FREE = "free"
    FOUNDER_PRO = "founder_pro"
    BUILDER_BOOST = "builder_boost"


@dataclass
class UserAccount:
    """Identity-level data needed for authorization and event payloads."""

    id: UserId
    role: UserRole
    name: str
    avatar_url: str | None = None
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE

    @property
    def is_builder(self) -> bool:
        return self.role == UserRole.BUILDER

    @property
    def is_founder(self) -> bool:
        return self.role == UserRole.FOUNDER

    def summary(self) -> dict[str, str | None]:
        """Denormalized actor info carried by outgoing events."""
        return {"id": str(self.id), "name": self.name, "avatar": self.avatar_url}


def _validate_scenarios(responses: dict[str, str]) -> None:
    for key, answer in responses.items():
        if key not in SCENARIO_KEYS:
            raise ValueError(f"Unknown scenario '{key}'")
        if answer not in SCENARIO_ANSWERS:
            raise ValueError(f"Scenario answer for '{key}' must be one of A-D")


@dataclass
class BuilderProfile:
    """Matching-relevant attributes of a builder."""

    user_id: UserId
    skills: list[str] = field(default_factory=list)
    risk_appetite: RiskAppetite | None = None
    compensation_openness: list[CompensationType] = field(default_factory=list)
    expected_cash_range: NumericRange | None = None
    hours_per_week: int | None = None
    roles_interested: list[RoleType] = field(default_factory=list)
    location: Location | None = None
    remote_preference: RemotePreference | None = None
    scenario_responses: dict[str, str] = field(default_factory=dict)
    is_complete: bool = False
    is_visible: bool = True
    is_open_to_opportunities: bool = True
    interest_sent_count: int = 0
    shortlist_count: int = 0
    match_count: int = 0

    def __post_init__(self) -> None:
        if len(self.compensation_openness) > len(CompensationType):
            raise ValueError("compensation openness accepts at most four values")
        if len(set(self.compensation_openness)) != len(self.compensation_openness):
            raise ValueError("compensation openness values must be unique")
        if self.hours_per_week is not None and not 0 < self.hours_per_week <= 168:
            raise ValueError("hours per week must be between 1 and 168")
        _validate_scenarios(self.scenario_responses)

    def missing_required_fields(self) -> list[str]:
        missing = []
        if not self.skills:
            missing.append("skills")
        if self.risk_appetite is None:
            missing.append("risk_appetite")
        if not self.compensation_openness:
            missing.append("compensation_openness")
        if self.hours_per_week is None:
            missing.append("hours_per_week")
        if not self.roles_interested:
            missing.append("roles_interested")
        if self.remote_preference is None:
            missing.append("remote_preference")
        return missing

    def refresh_completeness(self) -> bool:
        self.is_complete = not self.missing_required_fields()
        return self.is_complete

    def accepts(self, compensation: CompensationType) -> bool:
        return compensation in self.compensation_openness

    @property
    def is_discoverable(self) -> bool:
        return self.is_complete and self.is_visible and self.is_open_to_opportunities


@dataclass
class FounderProfile:
    """Startup context of a founder used when scoring their openings."""

    user_id: UserId
    startup_name: str | None = None
    startup_stage: StartupStage | None = None
    location: Location | None = None
    scenario_responses: dict[str, str] = field(default_factory=dict)
    is_complete: bool = False
    match_count: int = 0

    def __post_init__(self) -> None:
        _validate_scenarios(self.scenario_responses)


__all__ = [
    "BuilderProfile",
    "FounderProfile",
    "SCENARIO_ANSWERS",
    "SCENARIO_KEYS",
    "SubscriptionTier",
    "UserAccount",
    "UserRole",
]
