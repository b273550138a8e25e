"""Delivery of workflow events to the configured event sink."""

from __future__ import annotations

from typing import Iterable

import structlog

from buildermatch.domain.events.base import DomainEvent, IEventSink

logger = structlog.get_logger(__name__)


class EventDispatcher:
    """
    Forwards domain events to an ``IEventSink``.

    Delivery is best-effort: a failing sink is logged and the remaining events
    are still attempted. ``dispatch`` never raises, so a notification failure
    can not undo or fail an already persisted transition.
    """

    def __init__(self, sink: IEventSink):
        self._sink = sink

    async def dispatch(self, events: Iterable[DomainEvent]) -> int:
        """Deliver events in order and return how many were accepted by the sink."""
        delivered = 0
        for event in events:
            try:
                await self._sink.emit(event.event_name, event.to_dict())
                delivered += 1
            except Exception as exc:
                logger.warning(
                    "Failed to deliver workflow event",
                    event_name=event.event_name,
                    event_id=str(event.event_id),
                    recipient_id=str(event.recipient_id),
                    error=str(exc),
                )
        return delivered


__all__ = ["EventDispatcher"]
