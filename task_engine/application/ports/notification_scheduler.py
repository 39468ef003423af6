"""Notification scheduler port.

Protocol for the platform notification subsystem. The engine decides nothing
about when regular reminders fire; it only asks for a snooze reminder, for
cancellation when a task is resolved, and for a reschedule when a task's due
date changes.

Developer Golden Rules:
1. Called only AFTER the record has been saved
2. Failures are logged and reported by the caller, never rolled back
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import Any, Protocol

from task_engine.domain.models.task_record import TaskRecord


class NotificationSchedulerProtocol(Protocol):
    """Protocol for scheduling and cancelling task notifications."""

    @abstractmethod
    async def schedule_snooze(
        self,
        task_id: str,
        title: str,
        body: str,
        fire_at: datetime,
        payload: dict[str, Any],
    ) -> None:
        """Schedule a one-off reminder for a snoozed task.

        Args:
            task_id: Task the reminder belongs to.
            title: Notification title.
            body: Notification body.
            fire_at: When the reminder should fire.
            payload: Opaque data handed back when the user taps it.
        """
        ...

    @abstractmethod
    async def cancel_all_for_task(self, task_id: str) -> None:
        """Cancel every pending notification of a task."""
        ...

    @abstractmethod
    async def reschedule_for_task(self, task: TaskRecord) -> None:
        """Replace a task's notifications after its due date changed."""
        ...
