"""Transition results and undo classification."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from task_engine.domain.events.task_lifecycle import TaskLifecycleEvent
from task_engine.domain.models.task_record import TaskRecord


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a successful lifecycle transition.

    Attributes:
        task: The new record to persist.
        previous: The record the transition was applied to.
        event: Lifecycle event describing the change, for the event channel.
        offer_next_instance: True when a routine was completed and the caller
            should offer scheduling its next occurrence. The engine never
            creates the occurrence on its own.
    """

    task: TaskRecord
    previous: TaskRecord
    event: TaskLifecycleEvent
    offer_next_instance: bool = False


class UndoType(Enum):
    """Which transition an undo would reverse."""

    COMPLETION = "completion"
    SKIP = "skip"
    POSTPONE = "postpone"
    NONE = "none"


@dataclass(frozen=True)
class UndoClassification:
    """What an undo would do, for confirmation messaging before committing.

    Attributes:
        undo_type: The transition that would be reversed.
        will_delete_tasks: Number of auto-generated occurrences that the
            caller would remove alongside the undo.
    """

    undo_type: UndoType
    will_delete_tasks: int = 0

    @property
    def can_undo(self) -> bool:
        return self.undo_type is not UndoType.NONE
