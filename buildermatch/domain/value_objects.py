"""Domain value objects used across aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import UUID, uuid4


def _coerce_uuid(value: Any, *, field_name: str) -> UUID:
    """Convert strings to UUID instances while validating type."""
    if isinstance(value, UUID):
        return value
    if isinstance(value, str):
        return UUID(value)
    raise TypeError(f"{field_name} must be a UUID-compatible value")


@dataclass(frozen=True)
class _Identifier:
    value: UUID

    _field_name = "id"

    def __init__(self, value: Any):
        if isinstance(value, _Identifier):
            value = value.value
        object.__setattr__(self, "value", _coerce_uuid(value, field_name=self._field_name))

    @classmethod
    def generate(cls):
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, init=False)
class UserId(_Identifier):
    """Identifier of a founder or builder account."""

    _field_name = "user_id"


@dataclass(frozen=True, init=False)
class OpeningId(_Identifier):
    """Aggregate identifier for Opening entities."""

    _field_name = "opening_id"


@dataclass(frozen=True, init=False)
class InterestId(_Identifier):
    """Aggregate identifier for Interest entities."""

    _field_name = "interest_id"


@dataclass(frozen=True, init=False)
class ConversationId(_Identifier):
    """Aggregate identifier for Conversation entities."""

    _field_name = "conversation_id"


@dataclass(frozen=True, init=False)
class MessageId(_Identifier):
    """Identifier for messages inside a conversation."""

    _field_name = "message_id"


@dataclass(frozen=True, init=False)
class MatchId(_Identifier):
    """Identifier for suggested matches produced by match generation."""

    _field_name = "match_id"


@dataclass(frozen=True, init=False)
class TrialId(_Identifier):
    """Aggregate identifier for Trial entities."""

    _field_name = "trial_id"


@dataclass(frozen=True)
class NumericRange:
    """Inclusive numeric range such as an equity or cash band."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min < 0:
            raise ValueError("range minimum cannot be negative")
        if self.min > self.max:
            raise ValueError(f"range minimum {self.min} exceeds maximum {self.max}")

    @property
    def width(self) -> float:
        return self.max - self.min

    def overlap_fraction(self, other: "NumericRange") -> float:
        """Fraction of ``other`` covered by this range, in [0, 1]."""
        low = max(self.min, other.min)
        high = min(self.max, other.max)
        if high < low:
            return 0.0
        if other.width == 0:
            return 1.0
        return (high - low) / other.width


@dataclass(frozen=True)
class Location:
    """Coarse location used for geography matching."""

    city: str | None = None
    country: str | None = None

    def same_city(self, other: "Location | None") -> bool:
        if other is None or not self.city or not other.city:
            return False
        if self.city.strip().lower() != other.city.strip().lower():
            return False
        if self.country and other.country:
            return self.same_country(other)
        return True

    def same_country(self, other: "Location | None") -> bool:
        if other is None or not self.country or not other.country:
            return False
        return self.country.strip().lower() == other.country.strip().lower()


__all__ = [
    "ConversationId",
    "InterestId",
    "Location",
    "MatchId",
    "MessageId",
    "NumericRange",
    "OpeningId",
    "TrialId",
    "UserId",
]
