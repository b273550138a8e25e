"""Tests for the explicit transition tables of every aggregate."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from buildermatch.domain.entities.conversation import CONVERSATION_TRANSITIONS, ConversationStatus
from buildermatch.domain.entities.interest import INTEREST_TRANSITIONS, InterestStatus
from buildermatch.domain.entities.opening import OPENING_TRANSITIONS, OpeningStatus
from buildermatch.domain.entities.trial import TRIAL_TRANSITIONS, TrialStatus
from buildermatch.domain.exceptions import InvalidStateError, ValidationError

INTEREST_ACTIONS = ["shortlist", "pass", "withdraw"]
TRIAL_ACTIONS = ["accept", "decline", "cancel", "complete"]


class TestInterestTransitions:
    @pytest.mark.parametrize(
        "action,expected",
        [
            ("shortlist", InterestStatus.SHORTLISTED),
            ("pass", InterestStatus.PASSED),
            ("withdraw", InterestStatus.WITHDRAWN),
        ],
    )
    def test_interested_moves_forward(self, action, expected):
        assert INTEREST_TRANSITIONS.apply(InterestStatus.INTERESTED, action) == expected

    @pytest.mark.parametrize(
        "status",
        [InterestStatus.SHORTLISTED, InterestStatus.PASSED, InterestStatus.WITHDRAWN],
    )
    def test_outcomes_are_terminal(self, status):
        assert INTEREST_TRANSITIONS.is_terminal(status)
        assert INTEREST_TRANSITIONS.allowed_actions(status) == frozenset()

    def test_illegal_transition_names_the_move(self):
        with pytest.raises(InvalidStateError) as exc_info:
            INTEREST_TRANSITIONS.apply(InterestStatus.PASSED, "shortlist")
        assert exc_info.value.entity == "interest"
        assert exc_info.value.current == "passed"
        assert exc_info.value.attempted == "shortlist"
        assert "Cannot shortlist interest in status 'passed'" in str(exc_info.value)

    def test_invalid_state_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            INTEREST_TRANSITIONS.apply(InterestStatus.WITHDRAWN, "withdraw")

    @given(st.lists(st.sampled_from(INTEREST_ACTIONS), min_size=1, max_size=6))
    def test_any_action_sequence_applies_at_most_one_transition(self, actions):
        status = InterestStatus.INTERESTED
        applied = 0
        for action in actions:
            if INTEREST_TRANSITIONS.can_apply(status, action):
                status = INTEREST_TRANSITIONS.apply(status, action)
                applied += 1
        assert applied == 1
        assert INTEREST_TRANSITIONS.is_terminal(status)


class TestConversationTransitions:
    def test_archive_and_unarchive(self):
        archived = CONVERSATION_TRANSITIONS.apply(ConversationStatus.ACTIVE, "archive")
        assert archived == ConversationStatus.ARCHIVED
        assert CONVERSATION_TRANSITIONS.apply(archived, "unarchive") == ConversationStatus.ACTIVE

    def test_blocked_is_terminal(self):
        assert CONVERSATION_TRANSITIONS.is_terminal(ConversationStatus.BLOCKED)

    def test_cannot_unarchive_active(self):
        with pytest.raises(InvalidStateError):
            CONVERSATION_TRANSITIONS.apply(ConversationStatus.ACTIVE, "unarchive")


class TestTrialTransitions:
    def test_proposed_actions(self):
        assert TRIAL_TRANSITIONS.allowed_actions(TrialStatus.PROPOSED) == frozenset(
            {"accept", "decline", "cancel"}
        )

    def test_active_actions(self):
        assert TRIAL_TRANSITIONS.allowed_actions(TrialStatus.ACTIVE) == frozenset({"complete", "cancel"})

    def test_cannot_complete_a_proposal(self):
        with pytest.raises(InvalidStateError):
            TRIAL_TRANSITIONS.apply(TrialStatus.PROPOSED, "complete")

    @pytest.mark.parametrize("status", [TrialStatus.COMPLETED, TrialStatus.CANCELLED])
    def test_end_states_are_terminal(self, status):
        assert TRIAL_TRANSITIONS.is_terminal(status)

    @given(st.lists(st.sampled_from(TRIAL_ACTIONS), max_size=8))
    def test_reachable_statuses_follow_the_table(self, actions):
        status = TrialStatus.PROPOSED
        seen = [status]
        for action in actions:
            if TRIAL_TRANSITIONS.can_apply(status, action):
                status = TRIAL_TRANSITIONS.apply(status, action)
                seen.append(status)
        assert status in set(TrialStatus) - {TrialStatus.DECLINED}
        # A trial never returns to an earlier status.
        assert len(seen) == len(set(seen))


class TestOpeningTransitions:
    def test_pause_and_reactivate(self):
        paused = OPENING_TRANSITIONS.apply(OpeningStatus.ACTIVE, "pause")
        assert OPENING_TRANSITIONS.apply(paused, "activate") == OpeningStatus.ACTIVE

    @pytest.mark.parametrize("status", [OpeningStatus.FILLED, OpeningStatus.CLOSED])
    def test_filled_and_closed_are_terminal(self, status):
        assert OPENING_TRANSITIONS.is_terminal(status)

    def test_cannot_reactivate_active(self):
        with pytest.raises(InvalidStateError):
            OPENING_TRANSITIONS.apply(OpeningStatus.ACTIVE, "activate")
