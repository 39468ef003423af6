"""TaskRecord domain model.

The TaskRecord is the central entity of the engine. It is an immutable value
type: every lifecycle transition returns a new record and leaves its input
untouched.

Status machine:
    PENDING   -> COMPLETED | NOT_DONE | POSTPONED
    POSTPONED -> COMPLETED | NOT_DONE | POSTPONED | PENDING (last postpone undone)
    COMPLETED -> PENDING (undo)
    NOT_DONE  -> PENDING (undo)

PENDING and POSTPONED are both "open": the task is still in the pending
workflow, POSTPONED only flags that at least one postpone is on record.
Snoozing is an overlay on open tasks and never changes the status.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from enum import Enum
from uuid import uuid4

from task_engine.domain.models.history_entry import PostponeEntry, SnoozeEntry
from task_engine.domain.models.recurrence_rule import RecurrenceRule
from task_engine.domain.models.subtask import Subtask

# Due time assumed when a task only has a due date.
END_OF_DAY: time = time(23, 59)


class TaskKind(Enum):
    """How a task was created and how it repeats."""

    NORMAL = "normal"
    RECURRING = "recurring"
    ROUTINE = "routine"


class TaskStatus(Enum):
    """Lifecycle status of a task."""

    PENDING = "pending"
    COMPLETED = "completed"
    NOT_DONE = "not_done"
    POSTPONED = "postponed"

    def is_terminal(self) -> bool:
        """Completed and not-done tasks are resolved; only undo reopens them."""
        return self in TERMINAL_STATUSES

    def is_open(self) -> bool:
        return self in OPEN_STATUSES

    def valid_transitions(self) -> frozenset[TaskStatus]:
        return STATUS_TRANSITIONS.get(self, frozenset())


TERMINAL_STATUSES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.COMPLETED, TaskStatus.NOT_DONE}
)

OPEN_STATUSES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.PENDING, TaskStatus.POSTPONED}
)

STATUS_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.PENDING: frozenset(
        {TaskStatus.COMPLETED, TaskStatus.NOT_DONE, TaskStatus.POSTPONED}
    ),
    TaskStatus.POSTPONED: frozenset(
        {
            TaskStatus.COMPLETED,
            TaskStatus.NOT_DONE,
            TaskStatus.POSTPONED,
            TaskStatus.PENDING,
        }
    ),
    # Terminal statuses only reopen through undo
    TaskStatus.COMPLETED: frozenset({TaskStatus.PENDING}),
    TaskStatus.NOT_DONE: frozenset({TaskStatus.PENDING}),
}


def determine_task_kind(
    *,
    is_routine: bool = False,
    routine_group_id: str | None = None,
    recurrence_rule: RecurrenceRule | None = None,
    recurrence_group_id: str | None = None,
) -> TaskKind:
    """Derive a task's kind from its linkage. Routine wins over recurring."""
    if is_routine or routine_group_id is not None:
        return TaskKind.ROUTINE
    if recurrence_rule is not None or recurrence_group_id is not None:
        return TaskKind.RECURRING
    return TaskKind.NORMAL


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class TaskRecord:
    """A single task and everything the engine tracks about it.

    ``postpone_count`` and ``cumulative_postpone_penalty`` are derived from
    ``postpone_history`` so they can never drift from the audit trail.

    Attributes:
        id: Unique identifier, immutable once created.
        title: Task title.
        due_date: When the task is due (date, possibly with a time component).
        due_time: Optional explicit time of day.
        task_kind: NORMAL, RECURRING or ROUTINE.
        status: Lifecycle status.
        task_type_id: Reference to a TaskType for the points system.
        points_earned: Final points once resolved (reward or skip penalty).
        postpone_history: Append-only postpone audit trail.
        snooze_history: Append-only snooze audit trail.
        snoozed_until: End of the current snooze, if any.
        subtasks: Ordered checklist.
        recurrence_rule: Repeat pattern for RECURRING tasks.
        recurrence_group_id: Groups instances of a recurring series.
        routine_group_id: Groups instances of a routine.
        recurrence_index: Position of this task in its series.
        original_due_date: First due date before any postpone.
        progress_start_date: Routine countdown anchor.
        not_done_reason: Why the task was skipped.
        postpone_reason: Reason of the latest postpone.
        postponed_at: When the latest postpone happened.
        completed_at: When the task was completed.
        reflection: Note written on completion.
        description: Free-form description.
        created_at: Creation timestamp.
    """

    id: str
    title: str
    due_date: datetime
    due_time: time | None = None
    task_kind: TaskKind = TaskKind.NORMAL
    status: TaskStatus = TaskStatus.PENDING
    task_type_id: str | None = None
    points_earned: int = 0
    postpone_history: tuple[PostponeEntry, ...] = ()
    snooze_history: tuple[SnoozeEntry, ...] = ()
    snoozed_until: datetime | None = None
    subtasks: tuple[Subtask, ...] = ()
    recurrence_rule: RecurrenceRule | None = None
    recurrence_group_id: str | None = None
    routine_group_id: str | None = None
    recurrence_index: int = 0
    original_due_date: datetime | None = None
    progress_start_date: datetime | None = None
    not_done_reason: str | None = None
    postpone_reason: str | None = None
    postponed_at: datetime | None = None
    completed_at: datetime | None = None
    reflection: str | None = None
    description: str | None = None
    created_at: datetime = field(default_factory=_utc_now)

    def __post_init__(self) -> None:
        """Validate record invariants."""
        if self.recurrence_index < 0:
            raise ValueError(
                f"recurrence_index must be >= 0, got {self.recurrence_index}"
            )
        if self.snoozed_until is not None and not self.status.is_open():
            raise ValueError(
                f"snoozed_until can only be set on open tasks, status is {self.status.value}"
            )

    @classmethod
    def create(
        cls,
        title: str,
        due_date: datetime,
        *,
        due_time: time | None = None,
        task_type_id: str | None = None,
        subtasks: tuple[Subtask, ...] = (),
        recurrence_rule: RecurrenceRule | None = None,
        recurrence_group_id: str | None = None,
        is_routine: bool = False,
        description: str | None = None,
        created_at: datetime | None = None,
    ) -> TaskRecord:
        """Create a new pending task with a fresh id and derived kind.

        A recurring task without a group id starts its own group. A routine
        created here is the first instance of its group, so its group id is
        left unset and resolves to the task's own id.
        """
        task_id = str(uuid4())
        if recurrence_rule is not None and recurrence_group_id is None:
            recurrence_group_id = task_id
        created = created_at or _utc_now()
        return cls(
            id=task_id,
            title=title,
            due_date=due_date,
            due_time=due_time,
            task_kind=determine_task_kind(
                is_routine=is_routine,
                recurrence_rule=recurrence_rule,
                recurrence_group_id=recurrence_group_id,
            ),
            task_type_id=task_type_id,
            subtasks=tuple(subtasks),
            recurrence_rule=recurrence_rule,
            recurrence_group_id=recurrence_group_id,
            progress_start_date=created if is_routine else None,
            description=description,
            created_at=created,
        )

    def evolve(self, **changes: object) -> TaskRecord:
        """Return a copy with ``changes`` applied (invariants re-checked)."""
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    @property
    def postpone_count(self) -> int:
        return len(self.postpone_history)

    @property
    def cumulative_postpone_penalty(self) -> int:
        return sum(entry.penalty_applied for entry in self.postpone_history)

    @property
    def net_points(self) -> int:
        """Points earned plus the (non-positive) postpone penalty."""
        return self.points_earned + self.cumulative_postpone_penalty

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal()

    @property
    def is_open(self) -> bool:
        return self.status.is_open()

    @property
    def is_routine(self) -> bool:
        return self.task_kind is TaskKind.ROUTINE or self.routine_group_id is not None

    @property
    def effective_routine_group_id(self) -> str:
        """The routine group, which is the task's own id for a first instance."""
        return self.routine_group_id or self.id

    @property
    def due_datetime(self) -> datetime:
        """Due date combined with due time (23:59 when no time is set)."""
        return datetime.combine(
            self.due_date.date(),
            self.due_time or END_OF_DAY,
            tzinfo=self.due_date.tzinfo,
        )

    @property
    def effective_progress_start_date(self) -> datetime:
        return self.progress_start_date or self.created_at

    @property
    def incomplete_subtasks(self) -> list[tuple[int, Subtask]]:
        return [(i, s) for i, s in enumerate(self.subtasks) if not s.is_completed]

    @property
    def subtask_progress(self) -> float:
        if not self.subtasks:
            return 0.0
        done = sum(1 for s in self.subtasks if s.is_completed)
        return done / len(self.subtasks)

    def is_snoozed(self, now: datetime | None = None) -> bool:
        """Whether the latest snooze is still running at ``now``."""
        if self.snoozed_until is None:
            return False
        return self.snoozed_until > (now or _utc_now())

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Open tasks past their due datetime are overdue."""
        if self.status is not TaskStatus.PENDING:
            return False
        return self.due_datetime < (now or _utc_now())
