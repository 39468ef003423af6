"""In-memory task event channel.

Delivers published events to subscribers in subscription order. A failing
subscriber is logged and skipped so one broken listener cannot block the
others or the action that published the event.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog

from task_engine.application.ports.task_event_channel import TaskEventChannelProtocol
from task_engine.domain.events.task_lifecycle import TaskLifecycleEvent

logger = structlog.get_logger(__name__)

TaskEventSubscriber = Callable[[TaskLifecycleEvent], Awaitable[None]]


class TaskEventChannelStub(TaskEventChannelProtocol):
    """In-memory publish/subscribe channel for lifecycle events.

    Attributes:
        published: Every event published, in order.
    """

    def __init__(self) -> None:
        self.published: list[TaskLifecycleEvent] = []
        self._subscribers: list[TaskEventSubscriber] = []

    def subscribe(self, callback: TaskEventSubscriber) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def clear(self) -> None:
        self.published.clear()
        self._subscribers.clear()

    def events_of_type(self, event_type: str) -> list[TaskLifecycleEvent]:
        return [e for e in self.published if e.event_type == event_type]

    async def publish(self, event: TaskLifecycleEvent) -> None:
        self.published.append(event)
        for subscriber in list(self._subscribers):
            try:
                await subscriber(event)
            except Exception as exc:
                logger.warning(
                    "task_event_subscriber_failed",
                    event_type=event.event_type,
                    task_id=event.task_id,
                    error=str(exc),
                )
