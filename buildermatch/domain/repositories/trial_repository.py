"""Domain repository contract for trials."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from buildermatch.domain.entities.trial import (
    Feedback,
    FeedbackSide,
    Trial,
    TrialOutcome,
    TrialStatus,
)
from buildermatch.domain.value_objects import ConversationId, TrialId, UserId


class ITrialRepository(ABC):
    """Trial persistence with at most one live trial per conversation."""

    @abstractmethod
    async def add(self, trial: Trial) -> Trial:
        """Insert a proposed trial.

        Raises:
            LiveTrialExistsError: the conversation already has a proposed or active trial.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, trial_id: TrialId) -> Optional[Trial]:
        raise NotImplementedError

    @abstractmethod
    async def find_live_for_conversation(self, conversation_id: ConversationId) -> Optional[Trial]:
        raise NotImplementedError

    @abstractmethod
    async def find_latest_for_conversation(
        self,
        conversation_id: ConversationId,
        *,
        include_cancelled: bool = False,
    ) -> Optional[Trial]:
        raise NotImplementedError

    @abstractmethod
    async def save_transition(self, trial: Trial, expected_status: TrialStatus) -> bool:
        """Persist ``trial`` only if its stored status is still ``expected_status``."""
        raise NotImplementedError

    @abstractmethod
    async def record_feedback(
        self,
        trial_id: TrialId,
        side: FeedbackSide,
        feedback: Feedback,
    ) -> bool:
        """Write one side's feedback if the trial is completed and that side is still empty."""
        raise NotImplementedError

    @abstractmethod
    async def resolve_outcome(self, trial_id: TrialId, outcome: TrialOutcome) -> bool:
        """Set the outcome if it is still pending. Exactly one caller wins."""
        raise NotImplementedError

    @abstractmethod
    async def list_for_user(
        self,
        user_id: UserId,
        status: Optional[TrialStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Trial]:
        """List trials a user participates in, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def count_for_user(self, user_id: UserId, status: Optional[TrialStatus] = None) -> int:
        raise NotImplementedError

    @abstractmethod
    async def list_expired_active(self, now: datetime, limit: int = 500) -> List[Trial]:
        """Active trials whose ``ends_at`` is at or before ``now``."""
        raise NotImplementedError

    @abstractmethod
    async def list_active_ending_between(self, start: datetime, end: datetime) -> List[Trial]:
        raise NotImplementedError

    @abstractmethod
    async def list_needing_feedback(self, limit: int = 500) -> List[Trial]:
        """Completed trials whose outcome is still pending."""
        raise NotImplementedError

    @abstractmethod
    async def count_by_status(self, user_id: UserId) -> Dict[TrialStatus, int]:
        raise NotImplementedError

    @abstractmethod
    async def count_by_outcome(self, user_id: UserId) -> Dict[TrialOutcome, int]:
        """Outcome counts over the user's completed trials."""
        raise NotImplementedError


__all__ = ["ITrialRepository"]
