"""
Unit tests for TrialService.

This test suite covers:
- Proposal, acceptance, decline, cancellation and completion
- One live trial per conversation
- Write-once dual feedback with a single outcome announcement
- Expired-trial sweep isolation and ending-soon reminders
- Trial queries and stats
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from buildermatch.application.support import UNKNOWN_USER_NAME
from buildermatch.application.trial_service import (
    COMPLETED_ANNOUNCEMENT,
    CONTINUE_ANNOUNCEMENT,
    END_ANNOUNCEMENT,
)
from buildermatch.domain.entities.conversation import Message, MessageType
from buildermatch.domain.entities.trial import CheckinFrequency, TrialOutcome, TrialStatus
from buildermatch.domain.events.workflow_events import (
    TrialAcceptedEvent,
    TrialCancelledEvent,
    TrialCompletedEvent,
    TrialDeclinedEvent,
    TrialEndingSoonEvent,
    TrialProposedEvent,
)
from buildermatch.domain.exceptions import (
    AuthorizationError,
    ConcurrencyError,
    DuplicateFeedbackError,
    InvalidStateError,
    LiveTrialExistsError,
    TrialNotFoundError,
    ValidationError,
    status_code_for,
)
from buildermatch.domain.value_objects import TrialId, UserId
from tests.fixtures.workflow_fixtures import OpeningTestBuilder

# =============================================================================
# HELPERS
# =============================================================================


async def open_conversation(seeder, interest_service, conversation_service, founder, builder, title):
    opening = await seeder.opening(founder.id, OpeningTestBuilder().with_title(title))
    interest = (await interest_service.express_interest(builder_id=builder.id, opening_id=opening.id)).value
    await interest_service.shortlist_builder(founder_id=founder.id, interest_id=interest.id)
    return (await conversation_service.create_conversation_from_match(interest_id=interest.id)).value


async def propose(trial_service, conversation, proposer, *, days=14, goal="Ship the onboarding flow"):
    result = await trial_service.propose_trial(
        conversation_id=conversation.id, proposer_id=proposer.id, duration_days=days, goal=goal
    )
    return result.value


async def give_feedback(trial_service, trial, user, would_continue=True):
    return await trial_service.submit_feedback(
        trial_id=trial.id,
        user_id=user.id,
        communication=5,
        reliability=4,
        skill_match=4,
        would_continue=would_continue,
    )


def announcements(conversation_repository, conversation_id, content):
    return [m for m in conversation_repository.messages_for(conversation_id) if m.content == content]


@pytest.fixture
async def proposed_trial(active_conversation, trial_service, clock):
    founder, builder, conversation = active_conversation
    clock.advance(minutes=5)
    trial = await propose(trial_service, conversation, founder)
    return founder, builder, conversation, trial


@pytest.fixture
async def active_trial(proposed_trial, trial_service, clock):
    founder, builder, conversation, trial = proposed_trial
    clock.advance(hours=2)
    accepted = (await trial_service.accept_trial(trial_id=trial.id, user_id=builder.id)).value
    return founder, builder, conversation, accepted


@pytest.fixture
async def completed_trial(active_trial, trial_service, clock):
    founder, builder, conversation, trial = active_trial
    clock.advance(days=3)
    completed = (await trial_service.complete_trial(trial_id=trial.id, user_id=founder.id)).value
    return founder, builder, conversation, completed


# =============================================================================
# PROPOSE
# =============================================================================


class TestProposeTrial:
    @pytest.mark.asyncio
    async def test_proposal_posts_message_and_notifies_other_side(
        self, active_conversation, trial_service, conversation_repository
    ):
        founder, builder, conversation = active_conversation

        result = await trial_service.propose_trial(
            conversation_id=conversation.id,
            proposer_id=founder.id,
            duration_days=21,
            goal="Prototype the analytics dashboard",
            checkin_frequency=CheckinFrequency.DAILY,
        )

        trial = result.value
        assert trial.status == TrialStatus.PROPOSED
        assert trial.checkin_frequency == CheckinFrequency.DAILY
        event = result.events[0]
        assert isinstance(event, TrialProposedEvent)
        assert event.recipient_id == builder.id
        assert event.duration_days == 21

        proposals = [
            m for m in conversation_repository.messages_for(conversation.id)
            if m.message_type == MessageType.TRIAL_PROPOSAL
        ]
        assert len(proposals) == 1
        assert proposals[0].metadata == {"trial_id": str(trial.id)}

    @pytest.mark.asyncio
    async def test_second_live_trial_rejected(self, proposed_trial, trial_service, trial_repository):
        _, builder, conversation, _ = proposed_trial
        with pytest.raises(LiveTrialExistsError):
            await propose(trial_service, conversation, builder, days=7)
        assert len(trial_repository.trials) == 1

    @pytest.mark.asyncio
    async def test_storage_rejects_concurrent_live_trial(self, proposed_trial, trial_service, trial_repository):
        _, builder, conversation, _ = proposed_trial
        trial_repository.find_live_for_conversation = AsyncMock(return_value=None)
        with pytest.raises(LiveTrialExistsError):
            await propose(trial_service, conversation, builder, days=7)

    @pytest.mark.asyncio
    async def test_new_trial_after_cancellation(self, proposed_trial, trial_service):
        founder, builder, conversation, trial = proposed_trial
        await trial_service.cancel_trial(trial_id=trial.id, user_id=founder.id)

        replacement = await propose(trial_service, conversation, builder, days=7)
        assert replacement.status == TrialStatus.PROPOSED

    @pytest.mark.asyncio
    async def test_invalid_duration_stores_nothing(self, active_conversation, trial_service, trial_repository):
        founder, _, conversation = active_conversation
        with pytest.raises(ValidationError):
            await propose(trial_service, conversation, founder, days=10)
        assert trial_repository.trials == {}

    @pytest.mark.asyncio
    async def test_archived_conversation(self, active_conversation, trial_service, conversation_service):
        founder, _, conversation = active_conversation
        await conversation_service.archive_conversation(conversation_id=conversation.id, user_id=founder.id)
        with pytest.raises(InvalidStateError, match="active conversations"):
            await propose(trial_service, conversation, founder)

    @pytest.mark.asyncio
    async def test_outsider_cannot_propose(self, active_conversation, trial_service, seeder):
        *_, conversation = active_conversation
        outsider = await seeder.builder(name="Outsider")
        with pytest.raises(AuthorizationError):
            await propose(trial_service, conversation, outsider)


# =============================================================================
# ACCEPT / DECLINE / CANCEL
# =============================================================================


class TestAcceptTrial:
    @pytest.mark.asyncio
    async def test_accept_starts_the_clock(
        self, proposed_trial, trial_service, conversation_repository, clock
    ):
        founder, builder, conversation, trial = proposed_trial
        clock.advance(days=1)

        result = await trial_service.accept_trial(trial_id=trial.id, user_id=builder.id)

        accepted = result.value
        assert accepted.status == TrialStatus.ACTIVE
        assert accepted.accepted_at == clock.now
        assert accepted.ends_at == clock.now + timedelta(days=14)
        event = result.events[0]
        assert isinstance(event, TrialAcceptedEvent)
        assert event.recipient_id == founder.id
        assert conversation_repository.conversations[conversation.id].trial_id == trial.id

    @pytest.mark.asyncio
    async def test_proposer_cannot_accept(self, proposed_trial, trial_service, trial_repository):
        founder, _, _, trial = proposed_trial
        with pytest.raises(ValidationError, match="cannot accept your own"):
            await trial_service.accept_trial(trial_id=trial.id, user_id=founder.id)
        assert trial_repository.trials[trial.id].status == TrialStatus.PROPOSED

    @pytest.mark.asyncio
    async def test_cannot_accept_twice(self, active_trial, trial_service):
        founder, builder, _, trial = active_trial
        with pytest.raises(InvalidStateError):
            await trial_service.accept_trial(trial_id=trial.id, user_id=builder.id)
        with pytest.raises(ValidationError) as exc_info:
            await trial_service.accept_trial(trial_id=trial.id, user_id=founder.id)
        assert status_code_for(exc_info.value) == 400

    @pytest.mark.asyncio
    async def test_lost_race_raises_concurrency_error(self, proposed_trial, trial_service, trial_repository):
        _, builder, _, trial = proposed_trial
        trial_repository.save_transition = AsyncMock(return_value=False)
        with pytest.raises(ConcurrencyError):
            await trial_service.accept_trial(trial_id=trial.id, user_id=builder.id)

    @pytest.mark.asyncio
    async def test_unknown_trial(self, trial_service):
        with pytest.raises(TrialNotFoundError):
            await trial_service.accept_trial(trial_id=TrialId.generate(), user_id=UserId.generate())

    @pytest.mark.asyncio
    async def test_failed_conversation_link_leaves_proposal_retryable(
        self, proposed_trial, trial_service, trial_repository, conversation_repository
    ):
        _, builder, conversation, trial = proposed_trial
        original = conversation_repository.link_trial
        conversation_repository.link_trial = AsyncMock(side_effect=RuntimeError("database unavailable"))

        with pytest.raises(RuntimeError):
            await trial_service.accept_trial(trial_id=trial.id, user_id=builder.id)
        assert trial_repository.trials[trial.id].status == TrialStatus.PROPOSED

        conversation_repository.link_trial = original
        result = await trial_service.accept_trial(trial_id=trial.id, user_id=builder.id)

        assert result.value.status == TrialStatus.ACTIVE
        assert conversation_repository.conversations[conversation.id].trial_id == trial.id

    @pytest.mark.asyncio
    async def test_profile_lookup_failure_keeps_acceptance(
        self, proposed_trial, trial_service, profile_repository, trial_repository
    ):
        _, builder, _, trial = proposed_trial
        profile_repository.get_account = AsyncMock(side_effect=RuntimeError("profile store timeout"))

        result = await trial_service.accept_trial(trial_id=trial.id, user_id=builder.id)

        assert result.value.status == TrialStatus.ACTIVE
        assert trial_repository.trials[trial.id].status == TrialStatus.ACTIVE
        actor = result.events[0].actor
        assert actor.id == builder.id
        assert actor.name == UNKNOWN_USER_NAME


class TestDeclineAndCancel:
    @pytest.mark.asyncio
    async def test_decline_notifies_proposer(self, proposed_trial, trial_service, conversation_repository):
        founder, builder, conversation, trial = proposed_trial

        result = await trial_service.decline_trial(trial_id=trial.id, user_id=builder.id)

        assert result.value.display_status == TrialStatus.DECLINED
        assert isinstance(result.events[0], TrialDeclinedEvent)
        assert result.events[0].recipient_id == founder.id
        assert conversation_repository.messages_for(conversation.id)[-1].content == "Trial proposal was declined."

    @pytest.mark.asyncio
    async def test_proposer_withdrawing_own_proposal_sends_no_event(self, proposed_trial, trial_service):
        founder, _, _, trial = proposed_trial
        result = await trial_service.decline_trial(trial_id=trial.id, user_id=founder.id)
        assert result.events == []
        assert result.value.cancelled_by == founder.id

    @pytest.mark.asyncio
    async def test_cannot_decline_active_trial(self, active_trial, trial_service):
        _, builder, _, trial = active_trial
        with pytest.raises(InvalidStateError):
            await trial_service.decline_trial(trial_id=trial.id, user_id=builder.id)

    @pytest.mark.asyncio
    async def test_cancel_active_trial_with_reason(self, active_trial, trial_service, conversation_repository):
        founder, builder, conversation, trial = active_trial

        result = await trial_service.cancel_trial(trial_id=trial.id, user_id=builder.id, reason="New job")

        assert result.value.status == TrialStatus.CANCELLED
        assert not result.value.declined
        event = result.events[0]
        assert isinstance(event, TrialCancelledEvent)
        assert event.recipient_id == founder.id
        assert event.reason == "New job"
        last = conversation_repository.messages_for(conversation.id)[-1]
        assert last.content == "Trial was cancelled. Reason: New job"

    @pytest.mark.asyncio
    async def test_cannot_cancel_completed_trial(self, completed_trial, trial_service):
        founder, _, _, trial = completed_trial
        with pytest.raises(InvalidStateError):
            await trial_service.cancel_trial(trial_id=trial.id, user_id=founder.id)


# =============================================================================
# COMPLETION AND FEEDBACK
# =============================================================================


class TestCompleteTrial:
    @pytest.mark.asyncio
    async def test_completion_notifies_both_participants(
        self, active_trial, trial_service, conversation_repository
    ):
        founder, builder, conversation, trial = active_trial

        result = await trial_service.complete_trial(trial_id=trial.id, user_id=builder.id)

        assert result.value.status == TrialStatus.COMPLETED
        assert result.value.outcome == TrialOutcome.PENDING
        assert all(isinstance(e, TrialCompletedEvent) for e in result.events)
        assert {e.recipient_id for e in result.events} == {founder.id, builder.id}
        # Each side is told who to review.
        by_recipient = {e.recipient_id: e.actor.id for e in result.events}
        assert by_recipient == {founder.id: builder.id, builder.id: founder.id}
        assert len(announcements(conversation_repository, conversation.id, COMPLETED_ANNOUNCEMENT)) == 1

    @pytest.mark.asyncio
    async def test_outsider_cannot_complete(self, active_trial, trial_service):
        *_, trial = active_trial
        with pytest.raises(AuthorizationError):
            await trial_service.complete_trial(trial_id=trial.id, user_id=UserId.generate())

    @pytest.mark.asyncio
    async def test_cannot_complete_proposal(self, proposed_trial, trial_service):
        founder, _, _, trial = proposed_trial
        with pytest.raises(InvalidStateError):
            await trial_service.complete_trial(trial_id=trial.id, user_id=founder.id)


class TestFeedback:
    @pytest.mark.asyncio
    async def test_both_continue_announces_once(
        self, completed_trial, trial_service, trial_repository, conversation_repository
    ):
        founder, builder, conversation, trial = completed_trial

        first = await give_feedback(trial_service, trial, founder, True)
        assert first.value.outcome == TrialOutcome.PENDING
        assert announcements(conversation_repository, conversation.id, CONTINUE_ANNOUNCEMENT) == []

        second = await give_feedback(trial_service, trial, builder, True)

        assert second.value.outcome == TrialOutcome.CONTINUE
        assert trial_repository.trials[trial.id].outcome == TrialOutcome.CONTINUE
        assert len(announcements(conversation_repository, conversation.id, CONTINUE_ANNOUNCEMENT)) == 1
        assert announcements(conversation_repository, conversation.id, END_ANNOUNCEMENT) == []

    @pytest.mark.asyncio
    async def test_either_side_ending_ends_the_trial(
        self, completed_trial, trial_service, trial_repository, conversation_repository
    ):
        founder, builder, conversation, trial = completed_trial

        await give_feedback(trial_service, trial, builder, True)
        await give_feedback(trial_service, trial, founder, False)

        assert trial_repository.trials[trial.id].outcome == TrialOutcome.END
        assert len(announcements(conversation_repository, conversation.id, END_ANNOUNCEMENT)) == 1

    @pytest.mark.asyncio
    async def test_losing_outcome_writer_does_not_announce(
        self, completed_trial, trial_service, trial_repository, conversation_repository
    ):
        founder, builder, conversation, trial = completed_trial
        await give_feedback(trial_service, trial, founder, True)
        # A concurrent submitter already flipped the outcome.
        trial_repository.resolve_outcome = AsyncMock(return_value=False)

        await give_feedback(trial_service, trial, builder, True)

        assert announcements(conversation_repository, conversation.id, CONTINUE_ANNOUNCEMENT) == []

    @pytest.mark.asyncio
    async def test_feedback_is_write_once(self, completed_trial, trial_service, trial_repository):
        founder, _, _, trial = completed_trial
        await give_feedback(trial_service, trial, founder, True)

        with pytest.raises(DuplicateFeedbackError):
            await give_feedback(trial_service, trial, founder, False)
        assert trial_repository.trials[trial.id].founder_feedback.would_continue is True

    @pytest.mark.asyncio
    async def test_conditional_write_rejects_concurrent_duplicate(
        self, completed_trial, trial_service, trial_repository
    ):
        founder, _, _, trial = completed_trial
        trial_repository.record_feedback = AsyncMock(return_value=False)
        with pytest.raises(DuplicateFeedbackError):
            await give_feedback(trial_service, trial, founder, True)

    @pytest.mark.asyncio
    async def test_feedback_requires_completed_trial(self, active_trial, trial_service):
        founder, _, _, trial = active_trial
        with pytest.raises(InvalidStateError, match="completed trials"):
            await give_feedback(trial_service, trial, founder)

    @pytest.mark.asyncio
    async def test_outsider_cannot_give_feedback(self, completed_trial, trial_service, seeder):
        *_, trial = completed_trial
        outsider = await seeder.builder(name="Outsider")
        with pytest.raises(AuthorizationError):
            await give_feedback(trial_service, trial, outsider)

    @pytest.mark.asyncio
    async def test_invalid_rating(self, completed_trial, trial_service):
        founder, _, _, trial = completed_trial
        with pytest.raises(ValidationError, match="between 1 and 5"):
            await trial_service.submit_feedback(
                trial_id=trial.id,
                user_id=founder.id,
                communication=7,
                reliability=4,
                skill_match=4,
                would_continue=True,
            )


class TestInactiveConversation:
    @pytest.mark.asyncio
    async def test_archived_conversation_gets_no_trial_updates(
        self,
        proposed_trial,
        trial_service,
        conversation_service,
        conversation_repository,
        trial_repository,
        clock,
    ):
        founder, builder, conversation, trial = proposed_trial
        await conversation_service.archive_conversation(conversation_id=conversation.id, user_id=founder.id)
        before = len(conversation_repository.messages_for(conversation.id))

        accepted = await trial_service.accept_trial(trial_id=trial.id, user_id=builder.id)
        clock.advance(days=15)
        sweep = await trial_service.auto_complete_expired_trials()

        assert accepted.value.status == TrialStatus.ACTIVE
        assert sweep.value.completed == 1
        assert len(sweep.events) == 2
        assert trial_repository.trials[trial.id].status == TrialStatus.COMPLETED
        assert len(conversation_repository.messages_for(conversation.id)) == before

    @pytest.mark.asyncio
    async def test_cancel_in_archived_conversation_posts_nothing(
        self, active_trial, trial_service, conversation_service, conversation_repository
    ):
        founder, builder, conversation, trial = active_trial
        await conversation_service.archive_conversation(conversation_id=conversation.id, user_id=builder.id)
        before = len(conversation_repository.messages_for(conversation.id))

        result = await trial_service.cancel_trial(trial_id=trial.id, user_id=founder.id, reason="Paused hiring")

        assert result.value.status == TrialStatus.CANCELLED
        assert len(conversation_repository.messages_for(conversation.id)) == before

    @pytest.mark.asyncio
    async def test_repository_rejects_message_for_archived_conversation(
        self, active_conversation, conversation_service, conversation_repository, clock
    ):
        founder, _, conversation = active_conversation
        await conversation_service.archive_conversation(conversation_id=conversation.id, user_id=founder.id)
        message = Message.system(
            conversation_id=conversation.id,
            message_type=MessageType.TRIAL_UPDATE,
            content="Trial started!",
            now=clock.now,
        )

        with pytest.raises(InvalidStateError):
            await conversation_repository.append_message(message)


# =============================================================================
# SWEEP AND REMINDERS
# =============================================================================


class TestSweep:
    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_the_batch(
        self,
        active_conversation,
        seeder,
        interest_service,
        conversation_service,
        trial_service,
        trial_repository,
        clock,
    ):
        founder, builder, conversation = active_conversation
        second = await open_conversation(
            seeder, interest_service, conversation_service, founder, builder, "Second role"
        )
        broken = await propose(trial_service, conversation, founder, days=7)
        healthy = await propose(trial_service, second, founder, days=7)
        await trial_service.accept_trial(trial_id=broken.id, user_id=builder.id)
        await trial_service.accept_trial(trial_id=healthy.id, user_id=builder.id)

        original = trial_repository.save_transition

        async def flaky_save(trial, expected_status):
            if trial.id == broken.id:
                raise RuntimeError("database unavailable")
            return await original(trial, expected_status)

        trial_repository.save_transition = flaky_save
        clock.advance(days=8)

        result = await trial_service.auto_complete_expired_trials()

        report = result.value
        assert report.examined == 2
        assert report.completed == 1
        assert report.failed == 1
        assert report.failures[0].trial_id == broken.id
        assert trial_repository.trials[healthy.id].status == TrialStatus.COMPLETED
        assert trial_repository.trials[broken.id].status == TrialStatus.ACTIVE
        assert len(result.events) == 2

    @pytest.mark.asyncio
    async def test_nothing_expired(self, active_trial, trial_service):
        result = await trial_service.auto_complete_expired_trials()
        assert result.value.examined == 0
        assert result.events == []

    @pytest.mark.asyncio
    async def test_expiry_is_inclusive(self, active_trial, trial_service, trial_repository, clock):
        *_, trial = active_trial
        clock.set(trial.ends_at)

        result = await trial_service.auto_complete_expired_trials()

        assert result.value.completed == 1
        assert trial_repository.trials[trial.id].completed_at == trial.ends_at


class TestReminders:
    @pytest.mark.asyncio
    async def test_both_participants_reminded(self, active_trial, trial_service, clock):
        founder, builder, _, trial = active_trial
        clock.advance(days=13)

        result = await trial_service.send_ending_soon_reminders()

        assert result.value == 1
        assert len(result.events) == 2
        assert all(isinstance(e, TrialEndingSoonEvent) for e in result.events)
        assert {e.recipient_id for e in result.events} == {founder.id, builder.id}
        assert result.events[0].days_remaining == 1

    @pytest.mark.asyncio
    async def test_trials_far_from_end_are_skipped(self, active_trial, trial_service):
        result = await trial_service.send_ending_soon_reminders()
        assert result.value == 0
        assert result.events == []

    @pytest.mark.asyncio
    async def test_custom_window(self, active_trial, trial_service):
        trials = await trial_service.get_trials_ending_soon(days_ahead=20)
        assert len(trials) == 1


# =============================================================================
# QUERIES
# =============================================================================


class TestQueries:
    @pytest.mark.asyncio
    async def test_trial_by_id_is_participant_only(self, proposed_trial, trial_service):
        founder, _, _, trial = proposed_trial
        assert (await trial_service.get_trial_by_id(trial_id=trial.id, user_id=founder.id)).id == trial.id
        with pytest.raises(AuthorizationError):
            await trial_service.get_trial_by_id(trial_id=trial.id, user_id=UserId.generate())

    @pytest.mark.asyncio
    async def test_declined_and_cancelled_filters(self, proposed_trial, trial_service, clock):
        founder, builder, conversation, trial = proposed_trial
        await trial_service.decline_trial(trial_id=trial.id, user_id=builder.id)
        clock.advance(minutes=1)
        second = await propose(trial_service, conversation, builder, days=7)
        await trial_service.cancel_trial(trial_id=second.id, user_id=builder.id)

        declined = await trial_service.get_user_trials(user_id=founder.id, status=TrialStatus.DECLINED)
        cancelled = await trial_service.get_user_trials(user_id=founder.id, status=TrialStatus.CANCELLED)

        assert [t.id for t in declined.items] == [trial.id]
        assert [t.id for t in cancelled.items] == [second.id]

        stats = await trial_service.get_trial_stats(user_id=founder.id)
        assert stats.by_status[TrialStatus.DECLINED] == 1
        assert stats.by_status[TrialStatus.CANCELLED] == 1
        assert stats.total == 2

    @pytest.mark.asyncio
    async def test_active_trials_and_conversation_lookup(self, active_trial, trial_service):
        founder, _, conversation, trial = active_trial

        active = await trial_service.get_active_trials(user_id=founder.id)
        current = await trial_service.get_trial_for_conversation(
            conversation_id=conversation.id, user_id=founder.id
        )

        assert [t.id for t in active] == [trial.id]
        assert current.id == trial.id

    @pytest.mark.asyncio
    async def test_conversation_lookup_skips_cancelled(self, proposed_trial, trial_service):
        founder, _, conversation, trial = proposed_trial
        await trial_service.cancel_trial(trial_id=trial.id, user_id=founder.id)
        assert await trial_service.get_trial_for_conversation(conversation_id=conversation.id, user_id=founder.id) is None

    @pytest.mark.asyncio
    async def test_needing_feedback_and_outcome_stats(self, completed_trial, trial_service):
        founder, builder, _, trial = completed_trial
        assert [t.id for t in await trial_service.get_trials_needing_feedback()] == [trial.id]

        await give_feedback(trial_service, trial, founder, True)
        await give_feedback(trial_service, trial, builder, True)

        assert await trial_service.get_trials_needing_feedback() == []
        stats = await trial_service.get_trial_stats(user_id=builder.id)
        assert stats.outcomes[TrialOutcome.CONTINUE] == 1
        assert stats.by_status[TrialStatus.COMPLETED] == 1
