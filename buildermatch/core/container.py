"""Composition root: wires settings, repositories and services together."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

import structlog

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
from buildermatch.core.config import Settings, get_settings
from buildermatch.core.logging_config import configure_logging
from buildermatch.database.sqlmodel_engine import SQLModelDatabaseManager
from buildermatch.domain.events.base import IEventSink
from buildermatch.domain.policies import WorkflowConfig
from buildermatch.domain.services.compatibility_scorer import CompatibilityScorer
from buildermatch.infrastructure.adapters.event_dispatcher import EventDispatcher
from buildermatch.infrastructure.adapters.event_sink_adapter import LoggingEventSink
from buildermatch.infrastructure.persistence.repositories import (
    SQLModelConversationRepository,
    SQLModelInterestRepository,
    SQLModelMatchRepository,
    SQLModelOpeningRepository,
    SQLModelProfileRepository,
    SQLModelTrialRepository,
)
from buildermatch.infrastructure.scheduling.trial_sweep import TrialSweepRunner

logger = structlog.get_logger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    config: WorkflowConfig
    db_manager: SQLModelDatabaseManager
    dispatcher: EventDispatcher
    scorer: CompatibilityScorer
    interests: InterestService
    conversations: ConversationService
    trials: TrialService
    matches: MatchGenerationService
    openings: OpeningService
    trial_sweep: TrialSweepRunner

    async def close(self) -> None:
        await self.trial_sweep.stop()
        await self.db_manager.close()


async def build_container(
    settings: Optional[Settings] = None,
    *,
    db_manager: Optional[SQLModelDatabaseManager] = None,
    event_sink: Optional[IEventSink] = None,
) -> ServiceContainer:
    """
    Build every service against one database manager.

    The workflow configuration is validated here, so a bad weight or threshold
    fails startup with ConfigurationError instead of surfacing per request.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    config = settings.build_workflow_config()

    if db_manager is None:
        db_manager = SQLModelDatabaseManager(settings)
    if not db_manager.is_initialized:
        await db_manager.initialize()

    openings = SQLModelOpeningRepository(db_manager)
    profiles = SQLModelProfileRepository(db_manager)
    interests = SQLModelInterestRepository(db_manager)
    conversations = SQLModelConversationRepository(db_manager)
    trials = SQLModelTrialRepository(db_manager)

    scorer = CompatibilityScorer(config.weights, config.thresholds)
    dispatcher = EventDispatcher(event_sink or LoggingEventSink())

    trial_service = TrialService(
        TrialDependencies(
            trial_repository=trials,
            conversation_repository=conversations,
            profile_repository=profiles,
            config=config,
        )
    )

    container = ServiceContainer(
        settings=settings,
        config=config,
        db_manager=db_manager,
        dispatcher=dispatcher,
        scorer=scorer,
        interests=InterestService(
            InterestDependencies(
                interest_repository=interests,
                opening_repository=openings,
                profile_repository=profiles,
                config=config,
            )
        ),
        conversations=ConversationService(
            ConversationDependencies(
                conversation_repository=conversations,
                interest_repository=interests,
                profile_repository=profiles,
                trial_repository=trials,
            )
        ),
        trials=trial_service,
        matches=MatchGenerationService(
            MatchGenerationDependencies(
                opening_repository=openings,
                profile_repository=profiles,
                match_repository=SQLModelMatchRepository(db_manager),
                interest_repository=interests,
                scorer=scorer,
                config=config,
            )
        ),
        openings=OpeningService(OpeningDependencies(opening_repository=openings)),
        trial_sweep=TrialSweepRunner(
            trial_service,
            dispatcher,
            interval_minutes=settings.TRIAL_SWEEP_INTERVAL_MINUTES,
        ),
    )
    logger.info("Service container built", environment=settings.ENVIRONMENT)
    return container


_container: Optional[ServiceContainer] = None
_container_lock = asyncio.Lock()


async def get_container() -> ServiceContainer:
    """Return the process-wide container, building it on first use."""
    global _container
    if _container is not None:
        return _container

    async with _container_lock:
        if _container is None:
            _container = await build_container()
        return _container


async def reset_container() -> None:
    global _container
    async with _container_lock:
        if _container is not None:
            await _container.close()
        _container = None


__all__ = ["ServiceContainer", "build_container", "get_container", "reset_container"]
