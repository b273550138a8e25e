"""End-to-end check of the composition root against SQLite."""

from unittest.mock import patch

import pytest

from buildermatch.core.config import Settings
from buildermatch.core.container import build_container
from buildermatch.core.logging_config import configure_logging
from buildermatch.domain.exceptions import ConfigurationError
from buildermatch.infrastructure.adapters.event_sink_adapter import InMemoryEventSink
from buildermatch.infrastructure.persistence.repositories import (
    SQLModelOpeningRepository,
    SQLModelProfileRepository,
)
from tests.fixtures.workflow_fixtures import WorkflowSeeder

pytestmark = pytest.mark.integration


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'container.db'}",
        LOG_JSON=True,
        TRIAL_SWEEP_INTERVAL_MINUTES=5,
    )


@pytest.fixture
async def container(settings):
    sink = InMemoryEventSink()
    container = await build_container(settings, event_sink=sink)
    await container.db_manager.create_tables()
    yield container, sink
    await container.close()


class TestContainer:
    @pytest.mark.asyncio
    async def test_match_to_conversation_flow(self, container):
        services, sink = container
        seeder = WorkflowSeeder(
            SQLModelProfileRepository(services.db_manager),
            SQLModelOpeningRepository(services.db_manager),
        )
        founder = await seeder.founder()
        builder = await seeder.builder()
        opening = await seeder.opening(founder.id)

        expressed = await services.interests.express_interest(builder_id=builder.id, opening_id=opening.id)
        shortlisted = await services.interests.shortlist_builder(
            founder_id=founder.id, interest_id=expressed.value.id
        )
        conversation = await services.conversations.create_conversation_from_match(
            interest_id=shortlisted.value.id
        )
        delivered = await services.dispatcher.dispatch(
            expressed.events + shortlisted.events + conversation.events
        )

        assert delivered == len(sink.emitted)
        assert sink.for_recipient(founder.id)[0][0] == "new_interest"
        assert "shortlisted" in [name for name, _ in sink.for_recipient(builder.id)]
        assert conversation.value.message_count == 1

    @pytest.mark.asyncio
    async def test_sweep_runner_uses_configured_interval(self, container):
        services, _ = container
        assert services.trial_sweep._interval == 5
        run = await services.trial_sweep.run_once()
        assert run.report.examined == 0

    @pytest.mark.asyncio
    async def test_invalid_workflow_config_fails_startup(self, tmp_path):
        settings = Settings(
            _env_file=None,
            DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'bad.db'}",
            SCORE_WEIGHT_GEOGRAPHY=0.5,
        )
        with pytest.raises(ConfigurationError):
            await build_container(settings)


def test_configure_logging_accepts_settings(settings):
    configure_logging(settings)


@pytest.mark.asyncio
async def test_build_container_configures_logging(settings):
    with patch("buildermatch.core.container.configure_logging") as configure:
        container = await build_container(settings, event_sink=InMemoryEventSink())
    await container.close()

    configure.assert_called_once_with(settings)
