"""Trial aggregate: a fixed-length collaboration inside a conversation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from buildermatch.domain.entities.conversation import Conversation
from buildermatch.domain.entities.state_machine import TransitionTable
from buildermatch.domain.exceptions import (
    AuthorizationError,
    DuplicateFeedbackError,
    InvalidStateError,
    ValidationError,
)
from buildermatch.domain.value_objects import ConversationId, InterestId, TrialId, UserId

ALLOWED_DURATIONS: tuple[int, ...] = (7, 14, 21)
MAX_GOAL_LENGTH = 500
MAX_PRIVATE_NOTES_LENGTH = 1000


class TrialStatus(str, Enum):
    PROPOSED = "proposed"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    # Reported for declined proposals; the stored status is CANCELLED.
    DECLINED = "declined"


class TrialOutcome(str, Enum):
    PENDING = "pending"
    CONTINUE = "continue"
    END = "end"


class CheckinFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    NONE = "none"


class FeedbackSide(str, Enum):
    FOUNDER = "founder"
    BUILDER = "builder"


LIVE_TRIAL_STATUSES: frozenset[TrialStatus] = frozenset({TrialStatus.PROPOSED, TrialStatus.ACTIVE})

TRIAL_TRANSITIONS: TransitionTable[TrialStatus] = TransitionTable(
    "trial",
    {
        TrialStatus.PROPOSED: {
            "accept": TrialStatus.ACTIVE,
            "decline": TrialStatus.CANCELLED,
            "cancel": TrialStatus.CANCELLED,
        },
        TrialStatus.ACTIVE: {
            "complete": TrialStatus.COMPLETED,
            "cancel": TrialStatus.CANCELLED,
        },
    },
)


def _validate_rating(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise ValidationError(f"{name} rating must be an integer between 1 and 5")


@dataclass(frozen=True)
class Feedback:
    """One participant's write-once trial feedback."""

    communication: int
    reliability: int
    skill_match: int
    would_continue: bool
    submitted_at: datetime
    private_notes: str | None = None

    def __post_init__(self) -> None:
        _validate_rating("communication", self.communication)
        _validate_rating("reliability", self.reliability)
        _validate_rating("skill_match", self.skill_match)
        if not isinstance(self.would_continue, bool):
            raise ValidationError("would_continue must be a boolean")
        if self.private_notes and len(self.private_notes) > MAX_PRIVATE_NOTES_LENGTH:
            raise ValidationError(
                f"Private notes cannot exceed {MAX_PRIVATE_NOTES_LENGTH} characters"
            )

    @property
    def average_rating(self) -> float:
        return round((self.communication + self.reliability + self.skill_match) / 3, 2)

    def to_dict(self) -> dict[str, Any]:
        return {
            "communication": self.communication,
            "reliability": self.reliability,
            "skill_match": self.skill_match,
            "would_continue": self.would_continue,
            "private_notes": self.private_notes,
            "submitted_at": self.submitted_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Feedback":
        return cls(
            communication=data["communication"],
            reliability=data["reliability"],
            skill_match=data["skill_match"],
            would_continue=data["would_continue"],
            private_notes=data.get("private_notes"),
            submitted_at=datetime.fromisoformat(data["submitted_at"]),
        )


def derive_outcome(
    founder_feedback: Feedback | None,
    builder_feedback: Feedback | None,
) -> TrialOutcome:
    """CONTINUE only when both sides want to continue; PENDING until both answered."""
    if founder_feedback is None or builder_feedback is None:
        return TrialOutcome.PENDING
    if founder_feedback.would_continue and builder_feedback.would_continue:
        return TrialOutcome.CONTINUE
    return TrialOutcome.END


@dataclass
class Trial:
    """A structured collaboration proposed by one conversation participant."""

    id: TrialId
    conversation_id: ConversationId
    interest_id: InterestId
    founder_id: UserId
    builder_id: UserId
    proposed_by: UserId
    duration_days: int
    goal: str
    checkin_frequency: CheckinFrequency = CheckinFrequency.WEEKLY
    status: TrialStatus = TrialStatus.PROPOSED
    proposed_at: datetime | None = None
    accepted_at: datetime | None = None
    ends_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancelled_by: UserId | None = None
    cancellation_reason: str | None = None
    declined: bool = False
    founder_feedback: Feedback | None = None
    builder_feedback: Feedback | None = None
    outcome: TrialOutcome = TrialOutcome.PENDING
    updated_at: datetime | None = None

    @classmethod
    def propose(
        cls,
        *,
        conversation: Conversation,
        proposer_id: UserId,
        duration_days: int,
        goal: str,
        now: datetime,
        checkin_frequency: CheckinFrequency | None = None,
    ) -> "Trial":
        conversation.ensure_participant(proposer_id)
        if duration_days not in ALLOWED_DURATIONS:
            raise ValidationError("Trial duration must be 7, 14, or 21 days")
        goal = (goal or "").strip()
        if not goal:
            raise ValidationError("Trial goal is required")
        if len(goal) > MAX_GOAL_LENGTH:
            raise ValidationError(f"Goal cannot exceed {MAX_GOAL_LENGTH} characters")
        return cls(
            id=TrialId.generate(),
            conversation_id=conversation.id,
            interest_id=conversation.interest_id,
            founder_id=conversation.founder_id,
            builder_id=conversation.builder_id,
            proposed_by=proposer_id,
            duration_days=duration_days,
            goal=goal,
            checkin_frequency=checkin_frequency or CheckinFrequency.WEEKLY,
            proposed_at=now,
            updated_at=now,
        )

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    @property
    def participants(self) -> frozenset[UserId]:
        return frozenset((self.founder_id, self.builder_id))

    def is_participant(self, user_id: UserId) -> bool:
        return user_id in self.participants

    def ensure_participant(self, user_id: UserId) -> None:
        if not self.is_participant(user_id):
            raise AuthorizationError("You are not a participant in this trial")

    def side_for(self, user_id: UserId) -> FeedbackSide:
        self.ensure_participant(user_id)
        return FeedbackSide.FOUNDER if user_id == self.founder_id else FeedbackSide.BUILDER

    def feedback_for(self, side: FeedbackSide) -> Feedback | None:
        return self.founder_feedback if side == FeedbackSide.FOUNDER else self.builder_feedback

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _transition(self, action: str, now: datetime) -> TrialStatus:
        previous = self.status
        self.status = TRIAL_TRANSITIONS.apply(self.status, action)
        self.updated_at = now
        return previous

    def accept(self, user_id: UserId, now: datetime) -> TrialStatus:
        self.ensure_participant(user_id)
        if user_id == self.proposed_by:
            raise ValidationError("You cannot accept your own trial proposal")
        previous = self._transition("accept", now)
        self.accepted_at = now
        self.ends_at = now + timedelta(days=self.duration_days)
        return previous

    def decline(self, user_id: UserId, now: datetime) -> TrialStatus:
        self.ensure_participant(user_id)
        previous = self._transition("decline", now)
        self.declined = True
        self.cancelled_by = user_id
        self.cancelled_at = now
        return previous

    def cancel(self, user_id: UserId, now: datetime, reason: str | None = None) -> TrialStatus:
        self.ensure_participant(user_id)
        previous = self._transition("cancel", now)
        self.cancelled_by = user_id
        self.cancelled_at = now
        self.cancellation_reason = (reason or "").strip() or None
        return previous

    def complete(self, now: datetime) -> TrialStatus:
        previous = self._transition("complete", now)
        self.completed_at = now
        self.outcome = derive_outcome(self.founder_feedback, self.builder_feedback)
        return previous

    def record_feedback(self, side: FeedbackSide, feedback: Feedback) -> None:
        if self.status != TrialStatus.COMPLETED:
            raise InvalidStateError(
                "trial",
                self.status.value,
                "submit feedback",
                message="Feedback can only be submitted for completed trials",
            )
        if self.feedback_for(side) is not None:
            raise DuplicateFeedbackError("You have already submitted feedback for this trial")
        if side == FeedbackSide.FOUNDER:
            self.founder_feedback = feedback
        else:
            self.builder_feedback = feedback

    def resolved_outcome(self) -> TrialOutcome:
        return derive_outcome(self.founder_feedback, self.builder_feedback)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_live(self) -> bool:
        return self.status in LIVE_TRIAL_STATUSES

    @property
    def display_status(self) -> TrialStatus:
        if self.status == TrialStatus.CANCELLED and self.declined:
            return TrialStatus.DECLINED
        return self.status

    @property
    def has_both_feedback(self) -> bool:
        return self.founder_feedback is not None and self.builder_feedback is not None

    def is_expired(self, now: datetime) -> bool:
        return (
            self.status == TrialStatus.ACTIVE
            and self.ends_at is not None
            and self.ends_at <= now
        )

    def days_remaining(self, now: datetime) -> int | None:
        if self.status != TrialStatus.ACTIVE or self.ends_at is None:
            return None
        return max(0, (self.ends_at - now).days)


__all__ = [
    "ALLOWED_DURATIONS",
    "CheckinFrequency",
    "Feedback",
    "FeedbackSide",
    "LIVE_TRIAL_STATUSES",
    "MAX_GOAL_LENGTH",
    "TRIAL_TRANSITIONS",
    "Trial",
    "TrialOutcome",
    "TrialStatus",
    "derive_outcome",
]
