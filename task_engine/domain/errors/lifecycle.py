"""Lifecycle transition errors for the task state machine.

These errors are raised synchronously by the transition functions in
``task_engine.domain.services.task_lifecycle``. Every one of them is raised
before any new record is built, so the caller's TaskRecord is never altered.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from task_engine.domain.exceptions import TaskEngineError

if TYPE_CHECKING:
    from task_engine.domain.models.task_record import TaskStatus


class AlreadyCompletedError(TaskEngineError):
    """Raised when completing a task that is already completed.

    This is a no-op signal rather than a crash: the UI shows a message and
    the stored record keeps its original ``points_earned`` and ``completed_at``.

    Attributes:
        task_id: ID of the task.
    """

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task {task_id} is already completed")


class IncompleteSubtasksError(TaskEngineError):
    """Raised when completing a task whose subtasks are not all done.

    Attributes:
        task_id: ID of the task.
        pending_indices: Positions of the unfinished subtasks.
        pending_titles: Titles of the unfinished subtasks, same order.
    """

    def __init__(
        self,
        task_id: str,
        pending_indices: Sequence[int],
        pending_titles: Sequence[str],
    ) -> None:
        self.task_id = task_id
        self.pending_indices = tuple(pending_indices)
        self.pending_titles = tuple(pending_titles)
        titles = ", ".join(repr(t) for t in self.pending_titles)
        super().__init__(
            f"Task {task_id} has {len(self.pending_indices)} incomplete "
            f"subtask(s): {titles}"
        )


class TaskLockedError(TaskEngineError):
    """Raised when mutating subtasks of a task in a terminal status.

    Subtasks are frozen once a task is completed or marked not done so the
    record keeps what was actually done at resolution time.

    Attributes:
        task_id: ID of the task.
        status: The terminal status the task is in.
    """

    def __init__(self, task_id: str, status: TaskStatus) -> None:
        self.task_id = task_id
        self.status = status
        super().__init__(
            f"Task {task_id} is {status.value}; its subtasks are locked"
        )


class InvalidStateTransitionError(TaskEngineError):
    """Raised when an action is not permitted from the task's current status.

    Attributes:
        task_id: ID of the task.
        from_status: Current status of the task.
        action: Name of the attempted action (e.g. ``"postpone"``).
    """

    def __init__(self, task_id: str, from_status: TaskStatus, action: str) -> None:
        self.task_id = task_id
        self.from_status = from_status
        self.action = action
        super().__init__(
            f"Cannot {action} task {task_id}: status is {from_status.value}"
        )


class InvalidReasonError(TaskEngineError):
    """Raised when a not-done or postpone reason is missing or blank.

    Attributes:
        task_id: ID of the task.
        action: The action that required a reason.
    """

    def __init__(self, task_id: str, action: str) -> None:
        self.task_id = task_id
        self.action = action
        super().__init__(f"A non-empty reason is required to {action} task {task_id}")


class SubtaskIndexError(TaskEngineError):
    """Raised when a subtask index does not address an existing subtask.

    Attributes:
        task_id: ID of the task.
        index: The requested index.
        subtask_count: Number of subtasks on the task.
    """

    def __init__(self, task_id: str, index: int, subtask_count: int) -> None:
        self.task_id = task_id
        self.index = index
        self.subtask_count = subtask_count
        super().__init__(
            f"Task {task_id} has no subtask at index {index} "
            f"(subtask count: {subtask_count})"
        )


class TaskNotFoundError(TaskEngineError):
    """Raised by orchestration services when a task id is unknown."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")
