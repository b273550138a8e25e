"""Tests for the Trial aggregate, feedback and outcome resolution."""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from buildermatch.domain.entities.conversation import Conversation
from buildermatch.domain.entities.interest import Interest
from buildermatch.domain.entities.trial import (
    CheckinFrequency,
    Feedback,
    FeedbackSide,
    Trial,
    TrialOutcome,
    TrialStatus,
    derive_outcome,
)
from buildermatch.domain.exceptions import (
    AuthorizationError,
    DuplicateFeedbackError,
    InvalidStateError,
    ValidationError,
    status_code_for,
)
from buildermatch.domain.value_objects import UserId
from tests.fixtures.workflow_fixtures import OpeningTestBuilder

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_feedback(would_continue: bool = True, rating: int = 4) -> Feedback:
    return Feedback(
        communication=rating,
        reliability=rating,
        skill_match=rating,
        would_continue=would_continue,
        submitted_at=NOW,
    )


@pytest.fixture
def conversation():
    interest = Interest.express(builder_id=UserId.generate(), opening=OpeningTestBuilder().build(), now=NOW)
    interest.shortlist(NOW)
    return Conversation.from_match(interest, NOW)


@pytest.fixture
def trial(conversation):
    return Trial.propose(
        conversation=conversation,
        proposer_id=conversation.founder_id,
        duration_days=14,
        goal="  Ship the onboarding flow  ",
        now=NOW,
    )


@pytest.fixture
def active_trial(trial):
    trial.accept(trial.builder_id, NOW)
    return trial


@pytest.fixture
def completed_trial(active_trial):
    active_trial.complete(NOW + timedelta(days=14))
    return active_trial


class TestPropose:
    def test_copies_conversation_context(self, trial, conversation):
        assert trial.status == TrialStatus.PROPOSED
        assert trial.conversation_id == conversation.id
        assert trial.interest_id == conversation.interest_id
        assert trial.goal == "Ship the onboarding flow"
        assert trial.checkin_frequency == CheckinFrequency.WEEKLY
        assert trial.proposed_at == NOW
        assert trial.ends_at is None

    @pytest.mark.parametrize("days", [0, 5, 10, 30])
    def test_duration_must_be_allowed(self, conversation, days):
        with pytest.raises(ValidationError, match="7, 14, or 21"):
            Trial.propose(
                conversation=conversation,
                proposer_id=conversation.builder_id,
                duration_days=days,
                goal="Goal",
                now=NOW,
            )

    def test_goal_is_required(self, conversation):
        with pytest.raises(ValidationError, match="goal is required"):
            Trial.propose(
                conversation=conversation,
                proposer_id=conversation.builder_id,
                duration_days=7,
                goal="   ",
                now=NOW,
            )

    def test_goal_length_is_limited(self, conversation):
        with pytest.raises(ValidationError, match="Goal cannot exceed 500"):
            Trial.propose(
                conversation=conversation,
                proposer_id=conversation.builder_id,
                duration_days=7,
                goal="g" * 501,
                now=NOW,
            )

    def test_only_participants_propose(self, conversation):
        with pytest.raises(AuthorizationError):
            Trial.propose(
                conversation=conversation,
                proposer_id=UserId.generate(),
                duration_days=7,
                goal="Goal",
                now=NOW,
            )


class TestLifecycle:
    @pytest.mark.parametrize("days", [7, 14, 21])
    def test_accept_sets_end_from_acceptance(self, conversation, days):
        trial = Trial.propose(
            conversation=conversation,
            proposer_id=conversation.founder_id,
            duration_days=days,
            goal="Goal",
            now=NOW,
        )
        accepted_at = NOW + timedelta(hours=30)
        trial.accept(conversation.builder_id, accepted_at)

        assert trial.status == TrialStatus.ACTIVE
        assert trial.accepted_at == accepted_at
        assert trial.ends_at == accepted_at + timedelta(days=days)

    @pytest.mark.parametrize("proposer_side", ["founder", "builder"])
    @pytest.mark.parametrize("days", [7, 14, 21])
    def test_proposer_cannot_accept(self, conversation, proposer_side, days):
        proposer_id = getattr(conversation, f"{proposer_side}_id")
        trial = Trial.propose(
            conversation=conversation,
            proposer_id=proposer_id,
            duration_days=days,
            goal="Goal",
            now=NOW,
        )

        with pytest.raises(ValidationError, match="cannot accept your own") as exc_info:
            trial.accept(proposer_id, NOW)

        assert status_code_for(exc_info.value) == 400
        assert trial.status == TrialStatus.PROPOSED
        assert trial.accepted_at is None

    def test_decline_is_reported_as_declined(self, trial):
        trial.decline(trial.builder_id, NOW)
        assert trial.status == TrialStatus.CANCELLED
        assert trial.declined
        assert trial.cancelled_by == trial.builder_id
        assert trial.display_status == TrialStatus.DECLINED
        assert not trial.is_live

    def test_cancel_stores_reason(self, active_trial):
        active_trial.cancel(active_trial.founder_id, NOW, reason="  Funding fell through ")
        assert active_trial.cancellation_reason == "Funding fell through"
        assert active_trial.display_status == TrialStatus.CANCELLED

    def test_cannot_decline_active_trial(self, active_trial):
        with pytest.raises(InvalidStateError):
            active_trial.decline(active_trial.builder_id, NOW)

    def test_complete_requires_active(self, trial):
        with pytest.raises(InvalidStateError):
            trial.complete(NOW)

    def test_complete_starts_with_pending_outcome(self, completed_trial):
        assert completed_trial.status == TrialStatus.COMPLETED
        assert completed_trial.outcome == TrialOutcome.PENDING

    def test_expiry_and_days_remaining(self, active_trial):
        assert not active_trial.is_expired(NOW)
        assert active_trial.days_remaining(NOW) == 14
        assert active_trial.is_expired(active_trial.ends_at)
        assert active_trial.days_remaining(active_trial.ends_at + timedelta(days=1)) == 0


class TestFeedback:
    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_ratings_must_be_one_to_five(self, rating):
        with pytest.raises(ValidationError, match="between 1 and 5"):
            make_feedback(rating=rating)

    def test_boolean_is_not_a_rating(self):
        with pytest.raises(ValidationError):
            Feedback(communication=True, reliability=3, skill_match=3, would_continue=True, submitted_at=NOW)

    def test_would_continue_must_be_boolean(self):
        with pytest.raises(ValidationError, match="would_continue"):
            Feedback(communication=3, reliability=3, skill_match=3, would_continue="yes", submitted_at=NOW)

    def test_private_notes_limit(self):
        with pytest.raises(ValidationError, match="Private notes"):
            Feedback(
                communication=3,
                reliability=3,
                skill_match=3,
                would_continue=True,
                submitted_at=NOW,
                private_notes="n" * 1001,
            )

    def test_dict_form_survives_storage(self):
        feedback = make_feedback(would_continue=False, rating=2)
        assert Feedback.from_dict(feedback.to_dict()) == feedback
        assert feedback.average_rating == 2.0

    def test_feedback_only_after_completion(self, active_trial):
        with pytest.raises(InvalidStateError, match="completed trials"):
            active_trial.record_feedback(FeedbackSide.FOUNDER, make_feedback())

    def test_feedback_is_write_once(self, completed_trial):
        completed_trial.record_feedback(FeedbackSide.BUILDER, make_feedback())
        with pytest.raises(DuplicateFeedbackError):
            completed_trial.record_feedback(FeedbackSide.BUILDER, make_feedback(would_continue=False))
        assert completed_trial.builder_feedback.would_continue is True

    def test_side_for_participants(self, trial):
        assert trial.side_for(trial.founder_id) == FeedbackSide.FOUNDER
        assert trial.side_for(trial.builder_id) == FeedbackSide.BUILDER
        with pytest.raises(AuthorizationError):
            trial.side_for(UserId.generate())


class TestDeriveOutcome:
    def test_pending_until_both_sides_answer(self):
        assert derive_outcome(make_feedback(), None) == TrialOutcome.PENDING
        assert derive_outcome(None, make_feedback()) == TrialOutcome.PENDING

    @given(st.booleans(), st.booleans())
    def test_continue_only_when_both_want_to(self, founder_continues, builder_continues):
        outcome = derive_outcome(make_feedback(founder_continues), make_feedback(builder_continues))
        if founder_continues and builder_continues:
            assert outcome == TrialOutcome.CONTINUE
        else:
            assert outcome == TrialOutcome.END

    @given(st.booleans(), st.booleans())
    def test_outcome_ignores_submission_order(self, first, second):
        assert derive_outcome(make_feedback(first), make_feedback(second)) == derive_outcome(
            make_feedback(second), make_feedback(first)
        )
