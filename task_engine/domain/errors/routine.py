"""Routine recurrence errors."""

from __future__ import annotations

from task_engine.domain.exceptions import TaskEngineError


class NotRoutineTaskError(TaskEngineError):
    """Raised when asking for the next occurrence of a non-routine task.

    Attributes:
        task_id: ID of the source task.
    """

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task {task_id} is not a routine task")
