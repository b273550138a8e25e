"""Mapper between Trial entities and TrialTable rows.

Feedback is stored as a JSON object per side; ``None`` means not yet submitted.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional

from buildermatch.domain.entities.trial import (
    CheckinFrequency,
    Feedback,
    Trial,
    TrialOutcome,
    TrialStatus,
)
from buildermatch.domain.value_objects import ConversationId, InterestId, TrialId, UserId
from buildermatch.infrastructure.persistence.mappers.time_utils import ensure_utc
from buildermatch.infrastructure.persistence.models.trial_table import TrialTable


def feedback_to_json(feedback: Optional[Feedback]) -> Optional[Dict[str, Any]]:
    return feedback.to_dict() if feedback else None


def feedback_from_json(data: Optional[Dict[str, Any]]) -> Optional[Feedback]:
    if not data:
        return None
    feedback = Feedback.from_dict(data)
    return replace(feedback, submitted_at=ensure_utc(feedback.submitted_at))


class TrialMapper:
    @staticmethod
    def to_domain(table: TrialTable) -> Trial:
        return Trial(
            id=TrialId(table.id),
            conversation_id=ConversationId(table.conversation_id),
            interest_id=InterestId(table.interest_id),
            founder_id=UserId(table.founder_id),
            builder_id=UserId(table.builder_id),
            proposed_by=UserId(table.proposed_by),
            duration_days=table.duration_days,
            goal=table.goal,
            checkin_frequency=CheckinFrequency(table.checkin_frequency),
            status=TrialStatus(table.status),
            proposed_at=ensure_utc(table.proposed_at),
            accepted_at=ensure_utc(table.accepted_at),
            ends_at=ensure_utc(table.ends_at),
            completed_at=ensure_utc(table.completed_at),
            cancelled_at=ensure_utc(table.cancelled_at),
            cancelled_by=UserId(table.cancelled_by) if table.cancelled_by else None,
            cancellation_reason=table.cancellation_reason,
            declined=table.declined,
            founder_feedback=feedback_from_json(table.founder_feedback),
            builder_feedback=feedback_from_json(table.builder_feedback),
            outcome=TrialOutcome(table.outcome),
            updated_at=ensure_utc(table.updated_at),
        )

    @staticmethod
    def transition_values(entity: Trial) -> Dict[str, Any]:
        """Column values written by a lifecycle transition. Feedback is written separately."""
        return {
            "status": entity.status.value,
            "accepted_at": entity.accepted_at,
            "ends_at": entity.ends_at,
            "completed_at": entity.completed_at,
            "cancelled_at": entity.cancelled_at,
            "cancelled_by": entity.cancelled_by.value if entity.cancelled_by else None,
            "cancellation_reason": entity.cancellation_reason,
            "declined": entity.declined,
            "updated_at": entity.updated_at,
        }

    @staticmethod
    def to_table(entity: Trial) -> TrialTable:
        return TrialTable(
            id=entity.id.value,
            conversation_id=entity.conversation_id.value,
            interest_id=entity.interest_id.value,
            founder_id=entity.founder_id.value,
            builder_id=entity.builder_id.value,
            proposed_by=entity.proposed_by.value,
            duration_days=entity.duration_days,
            goal=entity.goal,
            checkin_frequency=entity.checkin_frequency.value,
            proposed_at=entity.proposed_at,
            founder_feedback=feedback_to_json(entity.founder_feedback),
            builder_feedback=feedback_to_json(entity.builder_feedback),
            outcome=entity.outcome.value,
            **TrialMapper.transition_values(entity),
        )


__all__ = ["TrialMapper", "feedback_from_json", "feedback_to_json"]
