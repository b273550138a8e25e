"""Shared fixtures: a controllable clock, in-memory repositories and wired services."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from buildermatch.application.conversation_service import ConversationService
from buildermatch.application.dependencies.workflow_dependencies import (
    ConversationDependencies,
    InterestDependencies,
    MatchGenerationDependencies,
    OpeningDependencies,
    TrialDependencies,
)
from buildermatch.application.interest_service import InterestService
from buildermatch.application.match_generation_service import MatchGenerationService
from buildermatch.application.opening_service import OpeningService
from buildermatch.application.trial_service import TrialService
from buildermatch.domain.policies import WorkflowConfig
from buildermatch.domain.services.compatibility_scorer import CompatibilityScorer
from buildermatch.infrastructure.adapters.event_dispatcher import EventDispatcher
from buildermatch.infrastructure.adapters.event_sink_adapter import InMemoryEventSink
from tests.fixtures.workflow_fixtures import WorkflowSeeder
from tests.mocks.mock_repositories import (
    MockConversationRepository,
    MockInterestRepository,
    MockMatchRepository,
    MockOpeningRepository,
    MockProfileRepository,
    MockTrialRepository,
)

CLOCK_START = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Mutable UTC clock injected wherever services read the current time."""

    def __init__(self, start: datetime = CLOCK_START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now

    def set(self, value: datetime) -> None:
        self.now = value


# =============================================================================
# CLOCK / CONFIG
# =============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def workflow_config() -> WorkflowConfig:
    return WorkflowConfig().validate()


# =============================================================================
# REPOSITORIES
# =============================================================================


@pytest.fixture
def opening_repository() -> MockOpeningRepository:
    return MockOpeningRepository()


@pytest.fixture
def profile_repository() -> MockProfileRepository:
    return MockProfileRepository()


@pytest.fixture
def interest_repository() -> MockInterestRepository:
    return MockInterestRepository()


@pytest.fixture
def conversation_repository() -> MockConversationRepository:
    return MockConversationRepository()


@pytest.fixture
def trial_repository() -> MockTrialRepository:
    return MockTrialRepository()


@pytest.fixture
def match_repository() -> MockMatchRepository:
    return MockMatchRepository()


@pytest.fixture
def seeder(profile_repository, opening_repository) -> WorkflowSeeder:
    return WorkflowSeeder(profile_repository, opening_repository)


# =============================================================================
# SERVICES
# =============================================================================


@pytest.fixture
def interest_service(
    interest_repository,
    opening_repository,
    profile_repository,
    workflow_config,
    clock,
) -> InterestService:
    return InterestService(
        InterestDependencies(
            interest_repository=interest_repository,
            opening_repository=opening_repository,
            profile_repository=profile_repository,
            config=workflow_config,
            clock=clock,
        )
    )


@pytest.fixture
def conversation_service(
    conversation_repository,
    interest_repository,
    profile_repository,
    trial_repository,
    clock,
) -> ConversationService:
    return ConversationService(
        ConversationDependencies(
            conversation_repository=conversation_repository,
            interest_repository=interest_repository,
            profile_repository=profile_repository,
            trial_repository=trial_repository,
            clock=clock,
            rng=random.Random(7),
        )
    )


@pytest.fixture
def trial_service(
    trial_repository,
    conversation_repository,
    profile_repository,
    workflow_config,
    clock,
) -> TrialService:
    return TrialService(
        TrialDependencies(
            trial_repository=trial_repository,
            conversation_repository=conversation_repository,
            profile_repository=profile_repository,
            config=workflow_config,
            clock=clock,
        )
    )


@pytest.fixture
def scorer(workflow_config) -> CompatibilityScorer:
    return CompatibilityScorer(workflow_config.weights, workflow_config.thresholds)


@pytest.fixture
def match_service(
    opening_repository,
    profile_repository,
    match_repository,
    interest_repository,
    scorer,
    workflow_config,
    clock,
) -> MatchGenerationService:
    return MatchGenerationService(
        MatchGenerationDependencies(
            opening_repository=opening_repository,
            profile_repository=profile_repository,
            match_repository=match_repository,
            interest_repository=interest_repository,
            scorer=scorer,
            config=workflow_config,
            clock=clock,
        )
    )


@pytest.fixture
def opening_service(opening_repository, clock) -> OpeningService:
    return OpeningService(OpeningDependencies(opening_repository=opening_repository, clock=clock))


# =============================================================================
# EVENTS
# =============================================================================


@pytest.fixture
def event_sink() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def dispatcher(event_sink) -> EventDispatcher:
    return EventDispatcher(event_sink)


# =============================================================================
# SCENARIO HELPERS
# =============================================================================


@pytest.fixture
async def matched_pair(seeder, interest_service, clock):
    """A founder and builder whose interest has been shortlisted."""
    founder = await seeder.founder()
    builder = await seeder.builder()
    opening = await seeder.opening(founder.id)
    expressed = await interest_service.express_interest(builder_id=builder.id, opening_id=opening.id)
    clock.advance(minutes=5)
    shortlisted = await interest_service.shortlist_builder(
        founder_id=founder.id, interest_id=expressed.value.id
    )
    return founder, builder, opening, shortlisted.value


@pytest.fixture
async def active_conversation(matched_pair, conversation_service, clock):
    """Conversation opened from ``matched_pair``."""
    founder, builder, _, interest = matched_pair
    clock.advance(minutes=1)
    result = await conversation_service.create_conversation_from_match(interest_id=interest.id)
    return founder, builder, result.value
