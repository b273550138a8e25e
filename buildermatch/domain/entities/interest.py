"""Interest aggregate: the join between one builder and one opening."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from buildermatch.domain.entities.opening import Opening
from buildermatch.domain.entities.state_machine import TransitionTable
from buildermatch.domain.exceptions import ValidationError
from buildermatch.domain.value_objects import ConversationId, InterestId, OpeningId, UserId

MAX_NOTE_LENGTH = 500


class InterestStatus(str, Enum):
    INTERESTED = "interested"
    SHORTLISTED = "shortlisted"
    PASSED = "passed"
    WITHDRAWN = "withdrawn"


# SHORTLISTED, PASSED and WITHDRAWN are terminal.
INTEREST_TRANSITIONS: TransitionTable[InterestStatus] = TransitionTable(
    "interest",
    {
        InterestStatus.INTERESTED: {
            "shortlist": InterestStatus.SHORTLISTED,
            "pass": InterestStatus.PASSED,
            "withdraw": InterestStatus.WITHDRAWN,
        },
    },
)


@dataclass
class Interest:
    """A builder's interest in an opening; becomes a mutual match when shortlisted."""

    id: InterestId
    builder_id: UserId
    opening_id: OpeningId
    founder_id: UserId
    status: InterestStatus = InterestStatus.INTERESTED
    is_mutual_match: bool = False
    builder_note: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    shortlisted_at: datetime | None = None
    passed_at: datetime | None = None
    withdrawn_at: datetime | None = None
    matched_at: datetime | None = None
    conversation_id: ConversationId | None = None

    @classmethod
    def express(
        cls,
        *,
        builder_id: UserId,
        opening: Opening,
        now: datetime,
        note: str | None = None,
    ) -> "Interest":
        if note is not None:
            note = note.strip() or None
        if note and len(note) > MAX_NOTE_LENGTH:
            raise ValidationError(f"Note cannot exceed {MAX_NOTE_LENGTH} characters")
        return cls(
            id=InterestId.generate(),
            builder_id=builder_id,
            opening_id=opening.id,
            founder_id=opening.founder_id,
            builder_note=note,
            created_at=now,
            updated_at=now,
        )

    def _transition(self, action: str, now: datetime) -> InterestStatus:
        previous = self.status
        self.status = INTEREST_TRANSITIONS.apply(self.status, action)
        self.updated_at = now
        return previous

    def shortlist(self, now: datetime) -> InterestStatus:
        """Founder shortlists the builder; this is the only way to a mutual match."""
        previous = self._transition("shortlist", now)
        self.is_mutual_match = True
        self.shortlisted_at = now
        self.matched_at = now
        return previous

    def pass_on(self, now: datetime) -> InterestStatus:
        previous = self._transition("pass", now)
        self.passed_at = now
        return previous

    def withdraw(self, now: datetime) -> InterestStatus:
        previous = self._transition("withdraw", now)
        self.withdrawn_at = now
        return previous

    @property
    def is_terminal(self) -> bool:
        return INTEREST_TRANSITIONS.is_terminal(self.status)

    @property
    def unlocks_conversation(self) -> bool:
        return self.is_mutual_match or self.status == InterestStatus.SHORTLISTED

    def is_participant(self, user_id: UserId) -> bool:
        return user_id in (self.builder_id, self.founder_id)


__all__ = ["INTEREST_TRANSITIONS", "Interest", "InterestStatus", "MAX_NOTE_LENGTH"]
