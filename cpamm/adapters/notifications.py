"""Notification sinks for AMM events.

Delivery is fire-and-forget: the AMM has already committed the operation
when it notifies, and nothing it does depends on the sink succeeding.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar, runtime_checkable

import structlog
from pydantic import BaseModel

from cpamm.models.events import AmmEvent

logger = structlog.get_logger()

E = TypeVar("E", bound=BaseModel)


@runtime_checkable
class NotificationSink(Protocol):
    """Receives a structured event for each completed operation."""

    def notify(self, event: AmmEvent) -> None: ...


class LoggingSink:
    """Writes every event to the structlog logger."""

    def notify(self, event: AmmEvent) -> None:
        fields = event.model_dump(exclude={"event"})
        logger.info(event.event, **fields)


class RecordingSink:
    """Keeps every event in memory, in emission order."""

    def __init__(self) -> None:
        self.events: list[AmmEvent] = []

    def notify(self, event: AmmEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type[E]) -> list[E]:
        """Recorded events of one type, e.g. ``sink.of_type(PoolCreated)``."""
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()


class FanoutSink:
    """Forwards each event to several sinks."""

    def __init__(self, sinks: Iterable[NotificationSink]) -> None:
        self.sinks = list(sinks)

    def notify(self, event: AmmEvent) -> None:
        for sink in self.sinks:
            deliver(sink, event)


def deliver(sink: NotificationSink, event: AmmEvent) -> None:
    """Hand an event to a sink, logging (not raising) if the sink fails."""
    try:
        sink.notify(event)
    except Exception:
        logger.exception(
            "notification_failed",
            sink=type(sink).__name__,
            event_type=event.event,
            pool_id=event.pool_id,
        )


__all__ = [
    "NotificationSink",
    "LoggingSink",
    "RecordingSink",
    "FanoutSink",
    "deliver",
]
