"""Routine recurrence domain service.

Routines repeat on a user-chosen schedule: when one instance is completed the
user is offered to schedule the next one. This module builds that next
instance and computes the countdown progress shown for it.

Progress is anchored at ``progress_start_date``, which for a generated
instance is the moment the previous instance was completed. Every surface
that shows routine progress uses ``progress_fraction``.
"""

from __future__ import annotations

from datetime import datetime, time
from uuid import uuid4

from task_engine.domain.errors.routine import NotRoutineTaskError
from task_engine.domain.events.task_lifecycle import utc_now
from task_engine.domain.models.task_record import TaskKind, TaskRecord, TaskStatus


def create_next_instance(
    task: TaskRecord,
    new_due_date: datetime,
    new_due_time: time | None = None,
    progress_start_date: datetime | None = None,
    *,
    now: datetime | None = None,
) -> TaskRecord:
    """Build the next pending instance of a routine.

    The instance joins the source's routine group (the source's own id when
    the source is the first instance), gets the next recurrence index, fresh
    histories and unticked subtasks. ``new_due_time`` falls back to the
    source's due time.

    Progress anchor, first match wins: ``progress_start_date``, the source's
    ``completed_at``, ``now``.

    Raises:
        NotRoutineTaskError: If ``task`` is not a routine.
    """
    if not task.is_routine:
        raise NotRoutineTaskError(task.id)

    now = now or utc_now()
    anchor = progress_start_date or task.completed_at or now
    return TaskRecord(
        id=str(uuid4()),
        title=task.title,
        description=task.description,
        due_date=new_due_date,
        due_time=new_due_time if new_due_time is not None else task.due_time,
        task_kind=TaskKind.ROUTINE,
        status=TaskStatus.PENDING,
        task_type_id=task.task_type_id,
        subtasks=tuple(s.reset() for s in task.subtasks),
        routine_group_id=task.effective_routine_group_id,
        recurrence_index=task.recurrence_index + 1,
        progress_start_date=anchor,
        created_at=now,
    )


def progress_fraction(task: TaskRecord, now: datetime | None = None) -> float:
    """Elapsed share of the interval from the progress anchor to the due time.

    Returns a value clamped to ``[0.0, 1.0]``; 1.0 when the due time is not
    after the anchor.
    """
    now = now or utc_now()
    start = task.effective_progress_start_date
    due = task.due_datetime
    if due <= start:
        return 1.0
    fraction = (now - start) / (due - start)
    return min(max(fraction, 0.0), 1.0)
