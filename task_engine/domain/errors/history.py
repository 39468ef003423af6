"""History log errors.

Raised by ``task_engine.domain.services.history_log`` and the undo
coordinator. Decode failures of persisted history are deliberately NOT
represented here: they degrade to an empty history and are reported instead.
"""

from __future__ import annotations

from task_engine.domain.exceptions import TaskEngineError


class EmptyHistoryError(TaskEngineError):
    """Raised when popping from, or undoing against, an empty history.

    Callers should only offer undo when ``postpone_count > 0`` (or the task
    is in a terminal status). Reaching this error means the caller offered
    an undo that does not exist.

    Attributes:
        task_id: ID of the task, when known.
    """

    def __init__(self, task_id: str | None = None) -> None:
        self.task_id = task_id
        if task_id is None:
            message = "History is empty: nothing to undo"
        else:
            message = f"Task {task_id} has nothing to undo"
        super().__init__(message)


class InvalidHistoryEntryError(TaskEngineError):
    """Raised when appending an entry that breaks the history contract.

    Postpone entries must carry ``penalty_applied <= 0`` and snooze entries
    must carry ``minutes > 0``.
    """
