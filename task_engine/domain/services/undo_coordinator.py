"""Undo coordinator domain service.

Reverses the most recent undoable transition of a task. Priority when
classifying what an undo would do:

1. A completed task reopens (completion undo).
2. A not-done task reopens (skip undo).
3. An open task with postpone history loses its last postpone.
4. Otherwise there is nothing to undo.

Snooze history is never touched by undo. Auto-generated occurrences created
when a recurring task was completed are identified here but deleted by the
caller, which owns the repository.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from task_engine.domain.errors.history import EmptyHistoryError
from task_engine.domain.events.task_lifecycle import (
    TASK_UNDONE_EVENT_TYPE,
    TaskLifecycleEvent,
    utc_now,
)
from task_engine.domain.models.task_record import TaskRecord, TaskStatus
from task_engine.domain.models.transition import (
    TransitionResult,
    UndoClassification,
    UndoType,
)
from task_engine.domain.services.history_log import pop_last

# Tolerance before ``completed_at`` when matching occurrences generated by a
# completion; generation and the completion write are separate saves.
SPAWN_DETECTION_BUFFER: timedelta = timedelta(seconds=5)


def classify_undo(task: TaskRecord, spawned_instance_count: int = 0) -> UndoClassification:
    """Describe what ``undo(task)`` would do, without doing it.

    Args:
        task: The task to inspect.
        spawned_instance_count: Occurrences the caller found with
            ``find_spawned_instances``; only reported for completion undo.
    """
    if task.status is TaskStatus.COMPLETED:
        return UndoClassification(UndoType.COMPLETION, spawned_instance_count)
    if task.status is TaskStatus.NOT_DONE:
        return UndoClassification(UndoType.SKIP)
    if task.postpone_count > 0:
        return UndoClassification(UndoType.POSTPONE)
    return UndoClassification(UndoType.NONE)


def find_spawned_instances(
    task: TaskRecord,
    group_tasks: Iterable[TaskRecord],
    buffer: timedelta = SPAWN_DETECTION_BUFFER,
) -> list[TaskRecord]:
    """Occurrences auto-generated when ``task`` was completed.

    A candidate is a pending task of the same recurrence group, later in the
    series than ``task``, created no earlier than ``completed_at - buffer``.

    Args:
        task: The completed task being undone.
        group_tasks: Tasks to search, usually the repository's query result.
        buffer: Tolerance before ``completed_at``.
    """
    if task.completed_at is None or task.recurrence_group_id is None:
        return []
    cutoff = task.completed_at - buffer
    return [
        candidate
        for candidate in group_tasks
        if candidate.id != task.id
        and candidate.recurrence_group_id == task.recurrence_group_id
        and candidate.status is TaskStatus.PENDING
        and candidate.recurrence_index > task.recurrence_index
        and candidate.created_at >= cutoff
    ]


def _undo_completion(task: TaskRecord) -> TaskRecord:
    return task.evolve(
        status=TaskStatus.PENDING,
        completed_at=None,
        reflection=None,
        points_earned=0,
        subtasks=tuple(s.reset() for s in task.subtasks),
    )


def _undo_skip(task: TaskRecord) -> TaskRecord:
    return task.evolve(
        status=TaskStatus.PENDING,
        not_done_reason=None,
        points_earned=0,
    )


def _undo_postpone(task: TaskRecord) -> TaskRecord:
    entry, remaining = pop_last(task.postpone_history)
    if not remaining:
        return task.evolve(
            status=TaskStatus.PENDING,
            due_date=entry.from_date,
            due_time=entry.from_time,
            postpone_history=(),
            original_due_date=None,
            postponed_at=None,
            postpone_reason=None,
        )
    previous = remaining[-1]
    return task.evolve(
        status=TaskStatus.POSTPONED,
        due_date=entry.from_date,
        due_time=entry.from_time,
        postpone_history=remaining,
        postponed_at=previous.postponed_at,
        postpone_reason=previous.reason,
    )


def undo(task: TaskRecord, *, now: datetime | None = None) -> TransitionResult:
    """Reverse the most recent undoable transition.

    Raises:
        EmptyHistoryError: If there is nothing to undo.
    """
    classification = classify_undo(task)
    if classification.undo_type is UndoType.COMPLETION:
        updated = _undo_completion(task)
    elif classification.undo_type is UndoType.SKIP:
        updated = _undo_skip(task)
    elif classification.undo_type is UndoType.POSTPONE:
        updated = _undo_postpone(task)
    else:
        raise EmptyHistoryError(task.id)

    event = TaskLifecycleEvent(
        event_type=TASK_UNDONE_EVENT_TYPE,
        task_id=task.id,
        occurred_at=now or utc_now(),
        payload={
            "undo_type": classification.undo_type.value,
            "from_status": task.status.value,
            "to_status": updated.status.value,
            "postpone_count": updated.postpone_count,
            "cumulative_postpone_penalty": updated.cumulative_postpone_penalty,
        },
    )
    return TransitionResult(task=updated, previous=task, event=event)
