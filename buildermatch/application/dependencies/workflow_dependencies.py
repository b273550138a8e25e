"""Dependency contracts for the workflow application services."""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from buildermatch.domain.policies import WorkflowConfig
from buildermatch.domain.repositories.conversation_repository import IConversationRepository
from buildermatch.domain.repositories.interest_repository import IInterestRepository
from buildermatch.domain.repositories.match_repository import IMatchRepository
from buildermatch.domain.repositories.opening_repository import IOpeningRepository
from buildermatch.domain.repositories.profile_repository import IProfileRepository
from buildermatch.domain.repositories.trial_repository import ITrialRepository
from buildermatch.domain.services.compatibility_scorer import CompatibilityScorer

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class InterestDependencies:
    """Dependencies required by InterestService."""

    interest_repository: IInterestRepository
    opening_repository: IOpeningRepository
    profile_repository: IProfileRepository
    config: WorkflowConfig = field(default_factory=WorkflowConfig)
    clock: Clock = utc_now


@dataclass
class ConversationDependencies:
    """Dependencies required by ConversationService."""

    conversation_repository: IConversationRepository
    interest_repository: IInterestRepository
    profile_repository: IProfileRepository
    trial_repository: ITrialRepository | None = None
    clock: Clock = utc_now
    rng: random.Random | None = None


@dataclass
class TrialDependencies:
    """Dependencies required by TrialService."""

    trial_repository: ITrialRepository
    conversation_repository: IConversationRepository
    profile_repository: IProfileRepository
    config: WorkflowConfig = field(default_factory=WorkflowConfig)
    clock: Clock = utc_now


@dataclass
class MatchGenerationDependencies:
    """Dependencies required by MatchGenerationService."""

    opening_repository: IOpeningRepository
    profile_repository: IProfileRepository
    match_repository: IMatchRepository
    interest_repository: IInterestRepository
    scorer: CompatibilityScorer
    config: WorkflowConfig = field(default_factory=WorkflowConfig)
    clock: Clock = utc_now


@dataclass
class OpeningDependencies:
    """Dependencies required by OpeningService."""

    opening_repository: IOpeningRepository
    clock: Clock = utc_now


__all__ = [
    "Clock",
    "ConversationDependencies",
    "InterestDependencies",
    "MatchGenerationDependencies",
    "OpeningDependencies",
    "TrialDependencies",
    "utc_now",
]
