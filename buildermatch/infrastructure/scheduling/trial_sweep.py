"""Periodic trial sweep: auto-completes expired trials and sends ending-soon reminders."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

import structlog

from buildermatch.application.dependencies.workflow_dependencies import Clock, utc_now
from buildermatch.application.trial_service import SweepReport, TrialService
from buildermatch.infrastructure.adapters.event_dispatcher import EventDispatcher

logger = structlog.get_logger(__name__)


@dataclass
class SweepRun:
    """Outcome of one sweep pass."""

    started_at: datetime
    report: SweepReport
    reminders_sent: int = 0
    events_delivered: int = 0


class TrialSweepRunner:
    """
    Runs the expired-trial sweep on an asyncio task.

    Reminders go out at most once per UTC calendar day no matter how often
    the sweep runs.
    """

    def __init__(
        self,
        trial_service: TrialService,
        dispatcher: EventDispatcher,
        *,
        interval_minutes: int = 60,
        clock: Clock = utc_now,
    ):
        """
        Args:
            trial_service: Service owning the sweep and reminder operations
            dispatcher: Delivers the events each pass produces
            interval_minutes: Pause between passes
            clock: Time source used to decide when reminders are due
        """
        self._trial_service = trial_service
        self._dispatcher = dispatcher
        self._interval = interval_minutes
        self._clock = clock
        self._task: Optional[asyncio.Task] = None
        self._shutdown = False
        self._last_reminder_day: Optional[date] = None
        self.last_run: Optional[SweepRun] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the periodic loop. Calling it twice is a no-op."""
        if self.is_running:
            return
        self._shutdown = False
        self._task = asyncio.create_task(self._sweep_loop())
        logger.info("Trial sweep started", interval_minutes=self._interval)

    async def stop(self) -> None:
        self._shutdown = True
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Trial sweep stopped")

    async def _sweep_loop(self) -> None:
        while not self._shutdown:
            try:
                await self.run_once()
            except Exception as e:
                logger.error("Error during trial sweep loop", error=str(e))
            await asyncio.sleep(self._interval * 60)

    async def run_once(self) -> SweepRun:
        """Run one pass now, outside the regular schedule."""
        started_at = self._clock()
        sweep = await self._trial_service.auto_complete_expired_trials()
        # Completed trials are never swept again; deliver their events before reminders.
        delivered = await self._dispatcher.dispatch(sweep.events)

        reminders_sent = 0
        today = started_at.date()
        if self._last_reminder_day != today:
            try:
                reminders = await self._trial_service.send_ending_soon_reminders()
            except Exception as e:
                logger.error("Failed to send trial reminders", error=str(e))
            else:
                reminders_sent = reminders.value
                delivered += await self._dispatcher.dispatch(reminders.events)
                self._last_reminder_day = today

        run = SweepRun(
            started_at=started_at,
            report=sweep.value,
            reminders_sent=reminders_sent,
            events_delivered=delivered,
        )
        self.last_run = run

        if sweep.value.failed:
            logger.warning(
                "Trial sweep finished with failures",
                completed=sweep.value.completed,
                failed=sweep.value.failed,
            )
        else:
            logger.debug(
                "Trial sweep pass finished",
                completed=sweep.value.completed,
                reminders=reminders_sent,
                events=delivered,
            )
        return run


__all__ = ["SweepRun", "TrialSweepRunner"]
