"""Tests for TrialMapper and the feedback JSON helpers."""

from datetime import datetime, timedelta, timezone

from buildermatch.domain.entities.trial import Feedback, Trial, TrialOutcome, TrialStatus
from buildermatch.domain.value_objects import ConversationId, InterestId, TrialId, UserId
from buildermatch.infrastructure.persistence.mappers.trial_mapper import (
    TrialMapper,
    feedback_from_json,
    feedback_to_json,
)

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_trial(**overrides) -> Trial:
    founder_id = UserId.generate()
    data = {
        "id": TrialId.generate(),
        "conversation_id": ConversationId.generate(),
        "interest_id": InterestId.generate(),
        "founder_id": founder_id,
        "builder_id": UserId.generate(),
        "proposed_by": founder_id,
        "duration_days": 14,
        "goal": "Ship the onboarding flow",
        "proposed_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return Trial(**data)


class TestTrialMapper:
    def test_round_trip_preserves_declined_flag(self):
        trial = make_trial(
            status=TrialStatus.CANCELLED,
            declined=True,
            cancelled_at=NOW,
        )
        trial.cancelled_by = trial.builder_id

        restored = TrialMapper.to_domain(TrialMapper.to_table(trial))

        assert restored.status == TrialStatus.CANCELLED
        assert restored.display_status == TrialStatus.DECLINED
        assert restored.cancelled_by == trial.builder_id

    def test_naive_timestamps_are_read_as_utc(self):
        table = TrialMapper.to_table(
            make_trial(status=TrialStatus.ACTIVE, accepted_at=NOW, ends_at=NOW + timedelta(days=14))
        )
        table.ends_at = table.ends_at.replace(tzinfo=None)

        restored = TrialMapper.to_domain(table)

        assert restored.ends_at == NOW + timedelta(days=14)
        assert restored.ends_at.tzinfo is not None

    def test_transition_values_exclude_feedback(self):
        values = TrialMapper.transition_values(make_trial())
        assert "founder_feedback" not in values
        assert "outcome" not in values
        assert values["status"] == "proposed"


class TestFeedbackJson:
    def test_missing_feedback_is_none(self):
        assert feedback_to_json(None) is None
        assert feedback_from_json(None) is None
        assert feedback_from_json({}) is None

    def test_round_trip(self):
        feedback = Feedback(
            communication=5,
            reliability=4,
            skill_match=3,
            would_continue=False,
            private_notes="Needs more async updates",
            submitted_at=NOW,
        )

        restored = feedback_from_json(feedback_to_json(feedback))

        assert restored == feedback
        assert restored.average_rating == 4.0

    def test_outcome_column_round_trip(self):
        table = TrialMapper.to_table(make_trial(status=TrialStatus.COMPLETED, outcome=TrialOutcome.END))
        assert TrialMapper.to_domain(table).outcome == TrialOutcome.END
