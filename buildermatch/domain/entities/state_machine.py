"""Explicit transition tables shared by the workflow aggregates."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Generic, TypeVar

from buildermatch.domain.exceptions import InvalidStateError

StatusT = TypeVar("StatusT", bound=Enum)


class TransitionTable(Generic[StatusT]):
    """Maps ``(current status, action)`` to the resulting status.

    Statuses that do not appear as keys are terminal. Every status mutation of
    an aggregate goes through :meth:`apply` so illegal moves fail the same way
    everywhere.
    """

    def __init__(self, entity: str, transitions: Mapping[StatusT, Mapping[str, StatusT]]):
        self.entity = entity
        self._transitions = {status: dict(actions) for status, actions in transitions.items()}

    def allowed_actions(self, current: StatusT) -> frozenset[str]:
        return frozenset(self._transitions.get(current, {}))

    def can_apply(self, current: StatusT, action: str) -> bool:
        return action in self._transitions.get(current, {})

    def is_terminal(self, current: StatusT) -> bool:
        return not self._transitions.get(current)

    def apply(self, current: StatusT, action: str) -> StatusT:
        """Return the target status or raise ``InvalidStateError``."""
        try:
            return self._transitions[current][action]
        except KeyError:
            raise InvalidStateError(self.entity, current.value, action) from None


__all__ = ["TransitionTable"]
