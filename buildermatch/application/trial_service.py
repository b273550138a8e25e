"""Application service owning the trial lifecycle and feedback resolution."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

import structlog

from buildermatch.application.dependencies.workflow_dependencies import TrialDependencies
from buildermatch.application.results import Page, WorkflowResult, page_window
from buildermatch.application.support import load_actor, post_system_message
from buildermatch.domain.entities.conversation import Conversation, ConversationStatus, MessageType
from buildermatch.domain.entities.trial import (
    CheckinFrequency,
    Feedback,
    Trial,
    TrialOutcome,
    TrialStatus,
)
from buildermatch.domain.events.base import DomainEvent
from buildermatch.domain.events.workflow_events import (
    TrialAcceptedEvent,
    TrialCancelledEvent,
    TrialCompletedEvent,
    TrialDeclinedEvent,
    TrialEndingSoonEvent,
    TrialProposedEvent,
)
from buildermatch.domain.exceptions import (
    ConcurrencyError,
    ConversationNotFoundError,
    DuplicateFeedbackError,
    InvalidStateError,
    LiveTrialExistsError,
    TrialNotFoundError,
)
from buildermatch.domain.value_objects import ConversationId, TrialId, UserId

logger = structlog.get_logger(__name__)

CONTINUE_ANNOUNCEMENT = "Great news! Both parties want to continue working together."
END_ANNOUNCEMENT = "Trial feedback submitted. Thank you for your participation."
COMPLETED_ANNOUNCEMENT = "Trial completed! Please provide your feedback."
DECLINED_ANNOUNCEMENT = "Trial proposal was declined."


@dataclass
class SweepFailure:
    trial_id: TrialId
    error: str


@dataclass
class SweepReport:
    """Summary of one expired-trial sweep."""

    examined: int = 0
    completed: int = 0
    failures: list[SweepFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)


@dataclass
class TrialStats:
    by_status: dict[TrialStatus, int]
    outcomes: dict[TrialOutcome, int]
    total: int


class TrialService:
    """Propose, accept, decline, cancel and complete trials; collect dual feedback."""

    def __init__(self, dependencies: TrialDependencies) -> None:
        self._deps = dependencies
        self._trials = dependencies.trial_repository
        self._conversations = dependencies.conversation_repository
        self._profiles = dependencies.profile_repository

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def propose_trial(
        self,
        *,
        conversation_id: Any,
        proposer_id: Any,
        duration_days: int,
        goal: str,
        checkin_frequency: CheckinFrequency | None = None,
    ) -> WorkflowResult[Trial]:
        proposer_id = UserId(proposer_id)
        now = self._deps.clock()
        conversation = await self._require_conversation(ConversationId(conversation_id))
        conversation.ensure_participant(proposer_id)
        if conversation.status != ConversationStatus.ACTIVE:
            raise InvalidStateError(
                "conversation",
                conversation.status.value,
                "propose trial in",
                message="Trials can only be proposed in active conversations",
            )

        if await self._trials.find_live_for_conversation(conversation.id) is not None:
            raise LiveTrialExistsError("An active or proposed trial already exists for this conversation")

        trial = Trial.propose(
            conversation=conversation,
            proposer_id=proposer_id,
            duration_days=duration_days,
            goal=goal,
            now=now,
            checkin_frequency=checkin_frequency,
        )
        await self._trials.add(trial)

        await post_system_message(
            self._conversations,
            conversation_id=conversation.id,
            message_type=MessageType.TRIAL_PROPOSAL,
            content=f"A {trial.duration_days}-day trial has been proposed. Goal: {trial.goal}",
            now=now,
            metadata={"trial_id": str(trial.id)},
        )

        event = TrialProposedEvent(
            recipient_id=conversation.other_participant(proposer_id),
            occurred_at=now,
            trial_id=trial.id,
            conversation_id=conversation.id,
            actor=await load_actor(self._profiles, proposer_id),
            duration_days=trial.duration_days,
            goal=trial.goal,
        )
        logger.info(
            "Trial proposed",
            trial_id=str(trial.id),
            conversation_id=str(conversation.id),
            proposer_id=str(proposer_id),
            duration_days=trial.duration_days,
        )
        return WorkflowResult(trial, [event])

    async def accept_trial(self, *, trial_id: Any, user_id: Any) -> WorkflowResult[Trial]:
        """Start a proposed trial; the proposer cannot accept their own proposal."""
        user_id = UserId(user_id)
        now = self._deps.clock()
        trial = await self._require_trial(TrialId(trial_id))

        previous = trial.accept(user_id, now)
        # Linked before the status write so a failed link leaves the proposal untouched.
        await self._conversations.link_trial(trial.conversation_id, trial.id)
        await self._store_transition(trial, previous)

        await post_system_message(
            self._conversations,
            conversation_id=trial.conversation_id,
            message_type=MessageType.TRIAL_UPDATE,
            content=f"Trial started! {trial.duration_days} days to complete: {trial.goal}",
            now=now,
            metadata={"trial_id": str(trial.id), "ends_at": trial.ends_at.isoformat()},
        )

        event = TrialAcceptedEvent(
            recipient_id=trial.proposed_by,
            occurred_at=now,
            trial_id=trial.id,
            conversation_id=trial.conversation_id,
            actor=await load_actor(self._profiles, user_id),
            ends_at=trial.ends_at,
        )
        logger.info("Trial accepted", trial_id=str(trial.id), user_id=str(user_id), ends_at=trial.ends_at.isoformat())
        return WorkflowResult(trial, [event])

    async def decline_trial(self, *, trial_id: Any, user_id: Any) -> WorkflowResult[Trial]:
        user_id = UserId(user_id)
        now = self._deps.clock()
        trial = await self._require_trial(TrialId(trial_id))

        previous = trial.decline(user_id, now)
        await self._store_transition(trial, previous)

        await post_system_message(
            self._conversations,
            conversation_id=trial.conversation_id,
            message_type=MessageType.TRIAL_UPDATE,
            content=DECLINED_ANNOUNCEMENT,
            now=now,
            metadata={"trial_id": str(trial.id)},
        )
        events: list[DomainEvent] = []
        if trial.proposed_by != user_id:
            events.append(
                TrialDeclinedEvent(
                    recipient_id=trial.proposed_by,
                    occurred_at=now,
                    trial_id=trial.id,
                    conversation_id=trial.conversation_id,
                    actor=await load_actor(self._profiles, user_id),
                )
            )
        logger.info("Trial declined", trial_id=str(trial.id), user_id=str(user_id))
        return WorkflowResult(trial, events)

    async def cancel_trial(
        self,
        *,
        trial_id: Any,
        user_id: Any,
        reason: str | None = None,
    ) -> WorkflowResult[Trial]:
        user_id = UserId(user_id)
        now = self._deps.clock()
        trial = await self._require_trial(TrialId(trial_id))

        previous = trial.cancel(user_id, now, reason)
        await self._store_transition(trial, previous)

        content = (
            f"Trial was cancelled. Reason: {trial.cancellation_reason}"
            if trial.cancellation_reason
            else "Trial was cancelled."
        )
        await post_system_message(
            self._conversations,
            conversation_id=trial.conversation_id,
            message_type=MessageType.TRIAL_UPDATE,
            content=content,
            now=now,
            metadata={"trial_id": str(trial.id)},
        )
        event = TrialCancelledEvent(
            recipient_id=self._other_participant(trial, user_id),
            occurred_at=now,
            trial_id=trial.id,
            conversation_id=trial.conversation_id,
            actor=await load_actor(self._profiles, user_id),
            reason=trial.cancellation_reason,
        )
        logger.info("Trial cancelled", trial_id=str(trial.id), user_id=str(user_id), previous_status=previous.value)
        return WorkflowResult(trial, [event])

    async def complete_trial(self, *, trial_id: Any, user_id: Any | None = None) -> WorkflowResult[Trial]:
        """Complete an active trial manually (participant) or from the sweep (no user)."""
        trial = await self._require_trial(TrialId(trial_id))
        if user_id is not None:
            trial.ensure_participant(UserId(user_id))
        return await self._complete(trial)

    async def submit_feedback(
        self,
        *,
        trial_id: Any,
        user_id: Any,
        communication: int,
        reliability: int,
        skill_match: int,
        would_continue: bool,
        private_notes: str | None = None,
    ) -> WorkflowResult[Trial]:
        """Store one side's write-once feedback and resolve the outcome once both are in."""
        user_id = UserId(user_id)
        now = self._deps.clock()
        trial = await self._require_trial(TrialId(trial_id))
        side = trial.side_for(user_id)

        feedback = Feedback(
            communication=communication,
            reliability=reliability,
            skill_match=skill_match,
            would_continue=would_continue,
            private_notes=(private_notes or "").strip() or None,
            submitted_at=now,
        )
        trial.record_feedback(side, feedback)

        if not await self._trials.record_feedback(trial.id, side, feedback):
            raise DuplicateFeedbackError("You have already submitted feedback for this trial")
        logger.info("Trial feedback submitted", trial_id=str(trial.id), side=side.value)

        stored = await self._trials.get_by_id(trial.id) or trial
        await self._resolve_outcome(stored, now)
        return WorkflowResult(stored)

    async def auto_complete_expired_trials(self) -> WorkflowResult[SweepReport]:
        """Complete every active trial past ``ends_at``; one failure never stops the batch."""
        now = self._deps.clock()
        expired = await self._trials.list_expired_active(now)
        report = SweepReport(examined=len(expired))
        events: list[DomainEvent] = []

        for trial in expired:
            try:
                result = await self._complete(trial)
            except Exception as exc:
                report.failures.append(SweepFailure(trial_id=trial.id, error=str(exc)))
                logger.error("Failed to auto-complete trial", trial_id=str(trial.id), error=str(exc))
                continue
            report.completed += 1
            events.extend(result.events)

        logger.info(
            "Expired trial sweep finished",
            examined=report.examined,
            completed=report.completed,
            failed=report.failed,
        )
        return WorkflowResult(report, events)

    async def send_ending_soon_reminders(self, *, days_ahead: int | None = None) -> WorkflowResult[int]:
        """Notify both participants of active trials ending within the window."""
        now = self._deps.clock()
        trials = await self.get_trials_ending_soon(days_ahead=days_ahead)
        events: list[DomainEvent] = []
        for trial in trials:
            for recipient, counterpart in (
                (trial.founder_id, trial.builder_id),
                (trial.builder_id, trial.founder_id),
            ):
                events.append(
                    TrialEndingSoonEvent(
                        recipient_id=recipient,
                        occurred_at=now,
                        trial_id=trial.id,
                        conversation_id=trial.conversation_id,
                        actor=await load_actor(self._profiles, counterpart),
                        ends_at=trial.ends_at,
                        days_remaining=trial.days_remaining(now) or 0,
                    )
                )
        logger.info("Trial reminders prepared", trials=len(trials), notifications=len(events))
        return WorkflowResult(len(trials), events)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_trial_by_id(self, *, trial_id: Any, user_id: Any) -> Trial:
        trial = await self._require_trial(TrialId(trial_id))
        trial.ensure_participant(UserId(user_id))
        return trial

    async def get_user_trials(
        self,
        *,
        user_id: Any,
        status: TrialStatus | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Page[Trial]:
        user_id = UserId(user_id)
        offset = page_window(page, limit)
        items = await self._trials.list_for_user(user_id, status, limit, offset)
        total = await self._trials.count_for_user(user_id, status)
        return Page(items=items, total=total, page=page, limit=limit)

    async def get_active_trials(self, *, user_id: Any) -> list[Trial]:
        user_id = UserId(user_id)
        total = await self._trials.count_for_user(user_id, TrialStatus.ACTIVE)
        if not total:
            return []
        return await self._trials.list_for_user(user_id, TrialStatus.ACTIVE, total, 0)

    async def get_trial_for_conversation(self, *, conversation_id: Any, user_id: Any) -> Trial | None:
        conversation = await self._require_conversation(ConversationId(conversation_id))
        conversation.ensure_participant(UserId(user_id))
        return await self._trials.find_latest_for_conversation(conversation.id)

    async def get_trials_ending_soon(self, *, days_ahead: int | None = None) -> list[Trial]:
        now = self._deps.clock()
        window = days_ahead if days_ahead is not None else self._deps.config.trial_ending_soon_days
        return await self._trials.list_active_ending_between(now, now + timedelta(days=window))

    async def get_trials_needing_feedback(self) -> list[Trial]:
        return await self._trials.list_needing_feedback()

    async def get_trial_stats(self, *, user_id: Any) -> TrialStats:
        user_id = UserId(user_id)
        counts = await self._trials.count_by_status(user_id)
        outcomes = await self._trials.count_by_outcome(user_id)
        by_status = {status: counts.get(status, 0) for status in TrialStatus}
        return TrialStats(
            by_status=by_status,
            outcomes={outcome: outcomes.get(outcome, 0) for outcome in TrialOutcome},
            total=sum(by_status.values()),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _complete(self, trial: Trial) -> WorkflowResult[Trial]:
        now = self._deps.clock()
        previous = trial.complete(now)
        await self._store_transition(trial, previous)

        await post_system_message(
            self._conversations,
            conversation_id=trial.conversation_id,
            message_type=MessageType.TRIAL_UPDATE,
            content=COMPLETED_ANNOUNCEMENT,
            now=now,
            metadata={"trial_id": str(trial.id)},
        )
        if trial.outcome != TrialOutcome.PENDING:
            await self._announce_outcome(trial, trial.outcome, now)

        founder = await load_actor(self._profiles, trial.founder_id)
        builder = await load_actor(self._profiles, trial.builder_id)
        events: list[DomainEvent] = [
            TrialCompletedEvent(
                recipient_id=recipient,
                occurred_at=now,
                trial_id=trial.id,
                conversation_id=trial.conversation_id,
                actor=counterpart,
                goal=trial.goal,
                completed_at=now,
            )
            for recipient, counterpart in ((trial.founder_id, builder), (trial.builder_id, founder))
        ]
        logger.info("Trial completed", trial_id=str(trial.id), outcome=trial.outcome.value)
        return WorkflowResult(trial, events)

    async def _resolve_outcome(self, trial: Trial, now: datetime) -> None:
        outcome = trial.resolved_outcome()
        if outcome == TrialOutcome.PENDING:
            return
        # Only the submitter whose update flips PENDING announces the outcome.
        if await self._trials.resolve_outcome(trial.id, outcome):
            trial.outcome = outcome
            await self._announce_outcome(trial, outcome, now)
            logger.info("Trial outcome resolved", trial_id=str(trial.id), outcome=outcome.value)

    async def _announce_outcome(self, trial: Trial, outcome: TrialOutcome, now: datetime) -> None:
        content = CONTINUE_ANNOUNCEMENT if outcome == TrialOutcome.CONTINUE else END_ANNOUNCEMENT
        await post_system_message(
            self._conversations,
            conversation_id=trial.conversation_id,
            message_type=MessageType.TRIAL_UPDATE,
            content=content,
            now=now,
            metadata={"trial_id": str(trial.id), "outcome": outcome.value},
        )

    @staticmethod
    def _other_participant(trial: Trial, user_id: UserId) -> UserId:
        return trial.builder_id if user_id == trial.founder_id else trial.founder_id

    async def _require_trial(self, trial_id: TrialId) -> Trial:
        trial = await self._trials.get_by_id(trial_id)
        if trial is None:
            raise TrialNotFoundError("Trial not found")
        return trial

    async def _require_conversation(self, conversation_id: ConversationId) -> Conversation:
        conversation = await self._conversations.get_by_id(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError("Conversation not found")
        return conversation

    async def _store_transition(self, trial: Trial, previous: TrialStatus) -> None:
        if not await self._trials.save_transition(trial, previous):
            raise ConcurrencyError("Trial was modified by another request")


__all__ = ["SweepFailure", "SweepReport", "TrialService", "TrialStats"]
