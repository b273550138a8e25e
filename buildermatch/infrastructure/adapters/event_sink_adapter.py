"""Event sink adapters for the external real-time notification mechanism."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from buildermatch.domain.events.base import IEventSink

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

logger = structlog.get_logger(__name__)


class LoggingEventSink(IEventSink):
    """Writes every event to the structured log. Default sink when no transport is wired."""

    async def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        logger.info(
            "Workflow event emitted",
            event_name=event_name,
            recipient_id=payload.get("recipient_id"),
            event_id=payload.get("event_id"),
        )


class InMemoryEventSink(IEventSink):
    """Keeps emitted events in memory and notifies registered handlers.

    Used by local runs and tests to observe what would be pushed to users.
    """

    def __init__(self):
        self._handlers: dict[str, list[Callable[[dict[str, Any]], Awaitable[None]]]] = {}
        self._emitted: list[tuple[str, dict[str, Any]]] = []

    async def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self._emitted.append((event_name, payload))
        for handler in self._handlers.get(event_name, []):
            await handler(payload)

    def register_handler(
        self,
        event_name: str,
        handler: Callable[[dict[str, Any]], Awaitable[None]],
    ) -> None:
        self._handlers.setdefault(event_name, []).append(handler)
        logger.debug(
            "Event handler registered",
            event_name=event_name,
            handler=getattr(handler, "__name__", str(handler)),
        )

    @property
    def emitted(self) -> list[tuple[str, dict[str, Any]]]:
        return list(self._emitted)

    def names(self) -> list[str]:
        return [name for name, _ in self._emitted]

    def for_recipient(self, recipient_id: Any) -> list[tuple[str, dict[str, Any]]]:
        recipient = str(recipient_id)
        return [(name, payload) for name, payload in self._emitted if payload.get("recipient_id") == recipient]

    def clear(self) -> None:
        self._emitted.clear()


class CompositeEventSink(IEventSink):
    """Fans one event out to several sinks; a failing sink does not block the others."""

    def __init__(self, sinks: Sequence[IEventSink]):
        self._sinks = list(sinks)

    async def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        failures = 0
        for sink in self._sinks:
            try:
                await sink.emit(event_name, payload)
            except Exception as exc:
                failures += 1
                logger.warning(
                    "Event sink failed",
                    sink=type(sink).__name__,
                    event_name=event_name,
                    error=str(exc),
                )
        if failures and failures == len(self._sinks):
            raise RuntimeError(f"All event sinks failed for {event_name}")


__all__ = ["CompositeEventSink", "InMemoryEventSink", "LoggingEventSink"]
