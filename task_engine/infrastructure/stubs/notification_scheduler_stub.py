"""Notification scheduler stub implementation.

Records every call instead of talking to a platform notification API, so
tests can assert what the engine asked for.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from task_engine.application.ports.notification_scheduler import (
    NotificationSchedulerProtocol,
)
from task_engine.domain.models.task_record import TaskRecord


@dataclass(frozen=True)
class ScheduledSnooze:
    """A snooze reminder the stub was asked to schedule."""

    task_id: str
    title: str
    body: str
    fire_at: datetime
    payload: dict[str, Any] = field(default_factory=dict)


class NotificationSchedulerStub(NotificationSchedulerProtocol):
    """In-memory notification scheduler (testing only).

    Attributes:
        scheduled: Snooze reminders currently scheduled, by task id.
        cancelled: Task ids passed to ``cancel_all_for_task``, in call order.
        rescheduled: Task ids passed to ``reschedule_for_task``, in call order.
    """

    def __init__(self) -> None:
        self.scheduled: dict[str, list[ScheduledSnooze]] = {}
        self.cancelled: list[str] = []
        self.rescheduled: list[str] = []

    def clear(self) -> None:
        self.scheduled.clear()
        self.cancelled.clear()
        self.rescheduled.clear()

    async def schedule_snooze(
        self,
        task_id: str,
        title: str,
        body: str,
        fire_at: datetime,
        payload: dict[str, Any],
    ) -> None:
        self.scheduled.setdefault(task_id, []).append(
            ScheduledSnooze(task_id, title, body, fire_at, dict(payload))
        )

    async def cancel_all_for_task(self, task_id: str) -> None:
        self.scheduled.pop(task_id, None)
        self.cancelled.append(task_id)

    async def reschedule_for_task(self, task: TaskRecord) -> None:
        self.scheduled.pop(task.id, None)
        self.rescheduled.append(task.id)
