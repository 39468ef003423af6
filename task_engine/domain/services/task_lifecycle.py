"""Task lifecycle state machine.

Pure transition functions over TaskRecord. Every transition either returns a
TransitionResult holding the new record, or raises a typed TaskEngineError
before building anything, so the input record is never altered.

Transitions:
- complete:       open -> COMPLETED (all subtasks must be done)
- mark_not_done:  open -> NOT_DONE (reason required)
- postpone:       open -> POSTPONED (reason required, penalty recorded)
- snooze:         open -> same status, ``snoozed_until`` set
- toggle_subtask: any non-terminal status, one subtask flipped

Undo lives in ``undo_coordinator``; the command surface below dispatches to
it as well, so callers can drive every user action through ``apply_command``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Union

from task_engine.domain.errors.lifecycle import (
    AlreadyCompletedError,
    IncompleteSubtasksError,
    InvalidReasonError,
    InvalidStateTransitionError,
    SubtaskIndexError,
    TaskLockedError,
)
from task_engine.domain.events.task_lifecycle import (
    TASK_COMPLETED_EVENT_TYPE,
    TASK_NOT_DONE_EVENT_TYPE,
    TASK_POSTPONED_EVENT_TYPE,
    TASK_SNOOZED_EVENT_TYPE,
    TASK_SUBTASK_TOGGLED_EVENT_TYPE,
    TaskLifecycleEvent,
    utc_now,
)
from task_engine.domain.models.history_entry import PostponeEntry, SnoozeEntry
from task_engine.domain.models.task_record import TaskRecord, TaskStatus
from task_engine.domain.models.task_type import TaskType
from task_engine.domain.models.transition import TransitionResult
from task_engine.domain.services.duration_validator import (
    MAX_SNOOZE_MINUTES,
    validate_snooze_minutes,
)
from task_engine.domain.services.history_log import append_postpone, append_snooze
from task_engine.domain.services.scoring_policy import (
    DEFAULT_POSTPONE_PENALTY,
    resolve_scoring,
)
from task_engine.domain.services.undo_coordinator import undo


def _require_open(task: TaskRecord, action: str) -> None:
    if not task.status.is_open():
        raise InvalidStateTransitionError(task.id, task.status, action)


def _require_reason(task: TaskRecord, reason: str | None, action: str) -> str:
    if reason is None or not reason.strip():
        raise InvalidReasonError(task.id, action)
    return reason.strip()


def complete(
    task: TaskRecord,
    task_type: TaskType | None = None,
    reflection: str | None = None,
    *,
    now: datetime | None = None,
) -> TransitionResult:
    """Complete an open task and award its reward.

    Raises:
        AlreadyCompletedError: If the task is already completed.
        InvalidStateTransitionError: If the task was marked not done.
        IncompleteSubtasksError: If any subtask is not done.
    """
    if task.status is TaskStatus.COMPLETED:
        raise AlreadyCompletedError(task.id)
    _require_open(task, "complete")

    pending = task.incomplete_subtasks
    if pending:
        raise IncompleteSubtasksError(
            task.id,
            pending_indices=[i for i, _ in pending],
            pending_titles=[s.title for _, s in pending],
        )

    now = now or utc_now()
    scoring = resolve_scoring(task_type)
    updated = task.evolve(
        status=TaskStatus.COMPLETED,
        completed_at=now,
        points_earned=scoring.reward_on_done,
        reflection=reflection,
        snoozed_until=None,
    )
    event = TaskLifecycleEvent(
        event_type=TASK_COMPLETED_EVENT_TYPE,
        task_id=task.id,
        occurred_at=now,
        payload={
            "points_earned": updated.points_earned,
            "cumulative_postpone_penalty": updated.cumulative_postpone_penalty,
            "net_points": updated.net_points,
            "task_kind": task.task_kind.value,
        },
    )
    return TransitionResult(
        task=updated,
        previous=task,
        event=event,
        offer_next_instance=task.is_routine,
    )


def mark_not_done(
    task: TaskRecord,
    reason: str,
    task_type: TaskType | None = None,
    *,
    now: datetime | None = None,
) -> TransitionResult:
    """Mark an open task as not done and apply the skip penalty.

    Raises:
        InvalidStateTransitionError: If the task is already resolved.
        InvalidReasonError: If ``reason`` is blank.
    """
    _require_open(task, "mark not done")
    reason = _require_reason(task, reason, "mark not done")

    now = now or utc_now()
    scoring = resolve_scoring(task_type)
    updated = task.evolve(
        status=TaskStatus.NOT_DONE,
        not_done_reason=reason,
        points_earned=scoring.penalty_not_done,
        snoozed_until=None,
    )
    event = TaskLifecycleEvent(
        event_type=TASK_NOT_DONE_EVENT_TYPE,
        task_id=task.id,
        occurred_at=now,
        payload={"reason": reason, "points_earned": updated.points_earned},
    )
    return TransitionResult(task=updated, previous=task, event=event)


def postpone(
    task: TaskRecord,
    new_due: datetime,
    reason: str,
    *,
    penalty: int | None = None,
    task_type: TaskType | None = None,
    new_due_time: time | None = None,
    now: datetime | None = None,
    default_postpone_penalty: int = DEFAULT_POSTPONE_PENALTY,
) -> TransitionResult:
    """Move an open task to a new due date and record the postpone.

    The penalty defaults to the task type's postpone penalty. Positive
    penalties are recorded as 0. Whether ``new_due`` lies in the future is
    left to the caller.

    Raises:
        InvalidStateTransitionError: If the task is already resolved.
        InvalidReasonError: If ``reason`` is blank.
    """
    _require_open(task, "postpone")
    reason = _require_reason(task, reason, "postpone")

    now = now or utc_now()
    if penalty is None:
        penalty = resolve_scoring(task_type, default_postpone_penalty).penalty_postpone
    entry = PostponeEntry(
        from_date=task.due_date,
        from_time=task.due_time,
        to_date=new_due,
        reason=reason,
        postponed_at=now,
        penalty_applied=min(penalty, 0),
    )
    history = append_postpone(task.postpone_history, entry)
    updated = task.evolve(
        status=TaskStatus.POSTPONED,
        due_date=new_due,
        due_time=new_due_time if new_due_time is not None else task.due_time,
        postpone_history=history,
        original_due_date=task.original_due_date or task.due_date,
        postpone_reason=reason,
        postponed_at=now,
        snoozed_until=None,
    )
    event = TaskLifecycleEvent(
        event_type=TASK_POSTPONED_EVENT_TYPE,
        task_id=task.id,
        occurred_at=now,
        payload={
            "from": entry.from_date.isoformat(),
            "to": entry.to_date.isoformat(),
            "reason": reason,
            "penalty_applied": entry.penalty_applied,
            "postpone_count": updated.postpone_count,
            "cumulative_postpone_penalty": updated.cumulative_postpone_penalty,
        },
    )
    return TransitionResult(task=updated, previous=task, event=event)


def snooze(
    task: TaskRecord,
    minutes: int,
    source: str,
    *,
    now: datetime | None = None,
    max_minutes: int = MAX_SNOOZE_MINUTES,
) -> TransitionResult:
    """Snooze an open task's reminder. The status does not change.

    Raises:
        InvalidStateTransitionError: If the task is already resolved.
        InvalidDurationError: If ``minutes`` is outside ``1..max_minutes``.
    """
    _require_open(task, "snooze")
    validate_snooze_minutes(minutes, max_minutes)

    now = now or utc_now()
    until = now + timedelta(minutes=minutes)
    entry = SnoozeEntry(at=now, minutes=minutes, until=until, source=source)
    updated = task.evolve(
        snooze_history=append_snooze(task.snooze_history, entry),
        snoozed_until=until,
    )
    event = TaskLifecycleEvent(
        event_type=TASK_SNOOZED_EVENT_TYPE,
        task_id=task.id,
        occurred_at=now,
        payload={"minutes": minutes, "until": until.isoformat(), "source": source},
    )
    return TransitionResult(task=updated, previous=task, event=event)


def toggle_subtask(
    task: TaskRecord,
    index: int,
    *,
    now: datetime | None = None,
) -> TransitionResult:
    """Flip the completion flag of one subtask.

    Raises:
        TaskLockedError: If the task is completed or not done.
        SubtaskIndexError: If ``index`` does not address a subtask.
    """
    if task.status.is_terminal():
        raise TaskLockedError(task.id, task.status)
    if not 0 <= index < len(task.subtasks):
        raise SubtaskIndexError(task.id, index, len(task.subtasks))

    subtasks = list(task.subtasks)
    subtasks[index] = subtasks[index].toggled()
    updated = task.evolve(subtasks=tuple(subtasks))
    event = TaskLifecycleEvent(
        event_type=TASK_SUBTASK_TOGGLED_EVENT_TYPE,
        task_id=task.id,
        occurred_at=now or utc_now(),
        payload={"index": index, "is_completed": subtasks[index].is_completed},
    )
    return TransitionResult(task=updated, previous=task, event=event)


# =============================================================================
# Command surface
# =============================================================================


@dataclass(frozen=True)
class CompleteTask:
    task_type: TaskType | None = None
    reflection: str | None = None


@dataclass(frozen=True)
class MarkNotDone:
    reason: str
    task_type: TaskType | None = None


@dataclass(frozen=True)
class PostponeTask:
    new_due: datetime
    reason: str
    penalty: int | None = None
    task_type: TaskType | None = None
    new_due_time: time | None = None


@dataclass(frozen=True)
class SnoozeTask:
    minutes: int
    source: str = "popup"


@dataclass(frozen=True)
class ToggleSubtask:
    index: int


@dataclass(frozen=True)
class UndoLastAction:
    pass


TaskCommand = Union[
    CompleteTask, MarkNotDone, PostponeTask, SnoozeTask, ToggleSubtask, UndoLastAction
]


def apply_command(
    task: TaskRecord,
    command: TaskCommand,
    *,
    now: datetime | None = None,
    max_snooze_minutes: int = MAX_SNOOZE_MINUTES,
    default_postpone_penalty: int = DEFAULT_POSTPONE_PENALTY,
) -> TransitionResult:
    """Apply a user command to ``task``.

    Raises:
        TaskEngineError: Whatever the dispatched transition raises.
        TypeError: If ``command`` is not a known command.
    """
    if isinstance(command, CompleteTask):
        return complete(task, command.task_type, command.reflection, now=now)
    if isinstance(command, MarkNotDone):
        return mark_not_done(task, command.reason, command.task_type, now=now)
    if isinstance(command, PostponeTask):
        return postpone(
            task,
            command.new_due,
            command.reason,
            penalty=command.penalty,
            task_type=command.task_type,
            new_due_time=command.new_due_time,
            now=now,
            default_postpone_penalty=default_postpone_penalty,
        )
    if isinstance(command, SnoozeTask):
        return snooze(
            task, command.minutes, command.source, now=now, max_minutes=max_snooze_minutes
        )
    if isinstance(command, ToggleSubtask):
        return toggle_subtask(task, command.index, now=now)
    if isinstance(command, UndoLastAction):
        return undo(task, now=now)
    raise TypeError(f"Unknown task command: {type(command).__name__}")


class TaskLifecycleStateMachine:
    """Configured front for the transition functions.

    Binds the snooze ceiling, the default postpone penalty and a clock so the
    application layer does not have to thread them through every call.
    """

    def __init__(
        self,
        max_snooze_minutes: int = MAX_SNOOZE_MINUTES,
        default_postpone_penalty: int = DEFAULT_POSTPONE_PENALTY,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._max_snooze_minutes = max_snooze_minutes
        self._default_postpone_penalty = default_postpone_penalty
        self._clock = clock

    def apply(self, task: TaskRecord, command: TaskCommand) -> TransitionResult:
        return apply_command(
            task,
            command,
            now=self._clock(),
            max_snooze_minutes=self._max_snooze_minutes,
            default_postpone_penalty=self._default_postpone_penalty,
        )
