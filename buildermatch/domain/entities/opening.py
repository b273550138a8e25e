"""Opening aggregate: a role a founder is hiring for."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from buildermatch.domain.entities.common import RemotePreference, RoleType
from buildermatch.domain.entities.state_machine import TransitionTable
from buildermatch.domain.exceptions import ValidationError
from buildermatch.domain.value_objects import Location, NumericRange, OpeningId, UserId


class OpeningStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    FILLED = "filled"
    CLOSED = "closed"


OPENING_TRANSITIONS: TransitionTable[OpeningStatus] = TransitionTable(
    "opening",
    {
        OpeningStatus.ACTIVE: {
            "pause": OpeningStatus.PAUSED,
            "fill": OpeningStatus.FILLED,
            "close": OpeningStatus.CLOSED,
        },
        OpeningStatus.PAUSED: {
            "activate": OpeningStatus.ACTIVE,
            "fill": OpeningStatus.FILLED,
            "close": OpeningStatus.CLOSED,
        },
    },
)

_ACTION_FOR_TARGET = {
    OpeningStatus.ACTIVE: "activate",
    OpeningStatus.PAUSED: "pause",
    OpeningStatus.FILLED: "fill",
    OpeningStatus.CLOSED: "close",
}


@dataclass
class Opening:
    """Opening owned exclusively by its founder."""

    id: OpeningId
    founder_id: UserId
    title: str
    role_type: RoleType
    hours_per_week: int
    skills_required: list[str] = field(default_factory=list)
    skills_preferred: list[str] = field(default_factory=list)
    equity_range: NumericRange | None = None
    cash_range: NumericRange | None = None
    remote_preference: RemotePreference = RemotePreference.REMOTE
    location: Location | None = None
    status: OpeningStatus = OpeningStatus.ACTIVE
    view_count: int = 0
    interest_count: int = 0
    shortlist_count: int = 0
    filled_by: UserId | None = None
    filled_at: datetime | None = None
    closed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValidationError("Opening title is required")
        if not 0 < self.hours_per_week <= 168:
            raise ValidationError("Opening hours per week must be between 1 and 168")

    @property
    def offers_equity(self) -> bool:
        return self.equity_range is not None and self.equity_range.max > 0

    @property
    def offers_cash(self) -> bool:
        return self.cash_range is not None and self.cash_range.max > 0

    @property
    def is_equity_only(self) -> bool:
        return self.offers_equity and not self.offers_cash

    @property
    def is_accepting_interest(self) -> bool:
        return self.status == OpeningStatus.ACTIVE

    def is_owned_by(self, user_id: UserId) -> bool:
        return self.founder_id == user_id

    def change_status(
        self,
        new_status: OpeningStatus,
        *,
        now: datetime,
        filled_by: UserId | None = None,
    ) -> None:
        """Move the opening to ``new_status``; FILLED requires the filling builder."""
        target = OPENING_TRANSITIONS.apply(self.status, _ACTION_FOR_TARGET[new_status])
        if target == OpeningStatus.FILLED:
            if filled_by is None:
                raise ValidationError("Filling an opening requires the builder who filled it")
            self.filled_by = filled_by
            self.filled_at = now
        elif target == OpeningStatus.CLOSED:
            self.closed_at = now
        self.status = target
        self.updated_at = now


__all__ = ["OPENING_TRANSITIONS", "Opening", "OpeningStatus"]
