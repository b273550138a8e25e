"""
Test fixtures for the matching workflow.

Provides builder-pattern factories for accounts, profiles and openings plus
a seeder that stores them in the in-memory repositories.
"""

from datetime import datetime, timezone
from typing import List, Optional

from buildermatch.domain.entities.common import (
    CompensationType,
    RemotePreference,
    RiskAppetite,
    RoleType,
    StartupStage,
)
from buildermatch.domain.entities.opening import Opening, OpeningStatus
from buildermatch.domain.entities.profile import (
    BuilderProfile,
    FounderProfile,
    SubscriptionTier,
    UserAccount,
    UserRole,
)
from buildermatch.domain.value_objects import Location, NumericRange, OpeningId, UserId

DEFAULT_CREATED_AT = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


class BuilderProfileTestBuilder:
    """Builder pattern for complete builder profiles."""

    def __init__(self, user_id: Optional[UserId] = None):
        self.data = {
            "user_id": user_id or UserId.generate(),
            "skills": ["Python", "React", "PostgreSQL"],
            "risk_appetite": RiskAppetite.HIGH,
            "compensation_openness": [CompensationType.EQUITY_ONLY, CompensationType.EQUITY_STIPEND],
            "expected_cash_range": None,
            "hours_per_week": 40,
            "roles_interested": [RoleType.COFOUNDER, RoleType.EMPLOYEE],
            "location": Location(city="Berlin", country="Germany"),
            "remote_preference": RemotePreference.REMOTE,
            "scenario_responses": {},
            "is_complete": True,
        }

    def with_skills(self, *skills: str) -> "BuilderProfileTestBuilder":
        self.data["skills"] = list(skills)
        return self

    def with_hours(self, hours: Optional[int]) -> "BuilderProfileTestBuilder":
        self.data["hours_per_week"] = hours
        return self

    def with_compensation(self, *types: CompensationType) -> "BuilderProfileTestBuilder":
        self.data["compensation_openness"] = list(types)
        return self

    def with_expected_cash(self, low: float, high: float) -> "BuilderProfileTestBuilder":
        self.data["expected_cash_range"] = NumericRange(low, high)
        return self

    def with_risk(self, risk: Optional[RiskAppetite]) -> "BuilderProfileTestBuilder":
        self.data["risk_appetite"] = risk
        return self

    def with_roles(self, *roles: RoleType) -> "BuilderProfileTestBuilder":
        self.data["roles_interested"] = list(roles)
        return self

    def with_remote(self, preference: Optional[RemotePreference]) -> "BuilderProfileTestBuilder":
        self.data["remote_preference"] = preference
        return self

    def with_location(self, city: Optional[str], country: Optional[str]) -> "BuilderProfileTestBuilder":
        self.data["location"] = Location(city=city, country=country)
        return self

    def with_scenarios(self, **answers: str) -> "BuilderProfileTestBuilder":
        self.data["scenario_responses"] = dict(answers)
        return self

    def incomplete(self) -> "BuilderProfileTestBuilder":
        self.data["skills"] = []
        self.data["is_complete"] = False
        return self

    def build(self) -> BuilderProfile:
        return BuilderProfile(**self.data)


class FounderProfileTestBuilder:
    """Builder pattern for founder profiles."""

    def __init__(self, user_id: Optional[UserId] = None):
        self.data = {
            "user_id": user_id or UserId.generate(),
            "startup_name": "Acme Robotics",
            "startup_stage": StartupStage.MVP_PROGRESS,
            "location": Location(city="Berlin", country="Germany"),
            "scenario_responses": {},
            "is_complete": True,
        }

    def with_stage(self, stage: StartupStage) -> "FounderProfileTestBuilder":
        self.data["startup_stage"] = stage
        return self

    def with_location(self, city: Optional[str], country: Optional[str]) -> "FounderProfileTestBuilder":
        self.data["location"] = Location(city=city, country=country)
        return self

    def with_scenarios(self, **answers: str) -> "FounderProfileTestBuilder":
        self.data["scenario_responses"] = dict(answers)
        return self

    def build(self) -> FounderProfile:
        return FounderProfile(**self.data)


class OpeningTestBuilder:
    """Builder pattern for openings."""

    def __init__(self, founder_id: Optional[UserId] = None):
        self.data = {
            "id": OpeningId.generate(),
            "founder_id": founder_id or UserId.generate(),
            "title": "Founding Engineer",
            "role_type": RoleType.COFOUNDER,
            "hours_per_week": 40,
            "skills_required": ["Python", "React"],
            "skills_preferred": [],
            "equity_range": NumericRange(1.0, 5.0),
            "cash_range": None,
            "remote_preference": RemotePreference.REMOTE,
            "location": None,
            "status": OpeningStatus.ACTIVE,
            "created_at": DEFAULT_CREATED_AT,
            "updated_at": DEFAULT_CREATED_AT,
        }

    def with_title(self, title: str) -> "OpeningTestBuilder":
        self.data["title"] = title
        return self

    def with_role(self, role: RoleType) -> "OpeningTestBuilder":
        self.data["role_type"] = role
        return self

    def with_hours(self, hours: int) -> "OpeningTestBuilder":
        self.data["hours_per_week"] = hours
        return self

    def with_skills(self, *skills: str) -> "OpeningTestBuilder":
        self.data["skills_required"] = list(skills)
        return self

    def with_equity(self, low: float, high: float) -> "OpeningTestBuilder":
        self.data["equity_range"] = NumericRange(low, high)
        return self

    def without_equity(self) -> "OpeningTestBuilder":
        self.data["equity_range"] = None
        return self

    def with_cash(self, low: float, high: float) -> "OpeningTestBuilder":
        self.data["cash_range"] = NumericRange(low, high)
        return self

    def with_remote(self, preference: RemotePreference) -> "OpeningTestBuilder":
        self.data["remote_preference"] = preference
        return self

    def with_location(self, city: Optional[str], country: Optional[str]) -> "OpeningTestBuilder":
        self.data["location"] = Location(city=city, country=country)
        return self

    def with_status(self, status: OpeningStatus) -> "OpeningTestBuilder":
        self.data["status"] = status
        return self

    def created_at(self, value: datetime) -> "OpeningTestBuilder":
        self.data["created_at"] = value
        self.data["updated_at"] = value
        return self

    def build(self) -> Opening:
        return Opening(**self.data)


def make_account(
    role: UserRole,
    *,
    name: Optional[str] = None,
    tier: SubscriptionTier = SubscriptionTier.FREE,
    user_id: Optional[UserId] = None,
) -> UserAccount:
    return UserAccount(
        id=user_id or UserId.generate(),
        role=role,
        name=name or f"Test {role.value.title()}",
        subscription_tier=tier,
    )


class WorkflowSeeder:
    """Stores accounts, profiles and openings in the mock repositories."""

    def __init__(self, profile_repository, opening_repository):
        self.profiles = profile_repository
        self.openings = opening_repository

    async def builder(
        self,
        *,
        name: str = "Bea Builder",
        tier: SubscriptionTier = SubscriptionTier.FREE,
        profile: Optional[BuilderProfileTestBuilder] = None,
    ) -> UserAccount:
        account = make_account(UserRole.BUILDER, name=name, tier=tier)
        await self.profiles.save_account(account)
        builder = profile or BuilderProfileTestBuilder()
        builder.data["user_id"] = account.id
        await self.profiles.save_builder_profile(builder.build())
        return account

    async def founder(
        self,
        *,
        name: str = "Fay Founder",
        profile: Optional[FounderProfileTestBuilder] = None,
    ) -> UserAccount:
        account = make_account(UserRole.FOUNDER, name=name)
        await self.profiles.save_account(account)
        founder = profile or FounderProfileTestBuilder()
        founder.data["user_id"] = account.id
        await self.profiles.save_founder_profile(founder.build())
        return account

    async def opening(
        self,
        founder_id: UserId,
        builder: Optional[OpeningTestBuilder] = None,
    ) -> Opening:
        opening_builder = builder or OpeningTestBuilder()
        opening_builder.data["founder_id"] = founder_id
        opening = opening_builder.build()
        await self.openings.save(opening)
        return opening

    async def openings_for(self, founder_id: UserId, count: int) -> List[Opening]:
        return [
            await self.opening(founder_id, OpeningTestBuilder().with_title(f"Opening {index}"))
            for index in range(count)
        ]
