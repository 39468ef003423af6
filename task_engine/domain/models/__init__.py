"""Domain models for the task engine.

Contains the TaskRecord entity and the value objects it is built from. These
models are immutable and contain no infrastructure dependencies.
"""

from task_engine.domain.models.history_entry import (
    LEGACY_POSTPONE_PENALTY,
    PostponeEntry,
    SnoozeEntry,
)
from task_engine.domain.models.recurrence_rule import (
    EndCondition,
    RecurrenceRule,
    RecurrenceType,
    RecurrenceUnit,
)
from task_engine.domain.models.subtask import Subtask
from task_engine.domain.models.task_record import (
    OPEN_STATUSES,
    TERMINAL_STATUSES,
    TaskKind,
    TaskRecord,
    TaskStatus,
    determine_task_kind,
)
from task_engine.domain.models.task_type import TaskType
from task_engine.domain.models.transition import (
    TransitionResult,
    UndoClassification,
    UndoType,
)

__all__: list[str] = [
    "EndCondition",
    "LEGACY_POSTPONE_PENALTY",
    "OPEN_STATUSES",
    "PostponeEntry",
    "RecurrenceRule",
    "RecurrenceType",
    "RecurrenceUnit",
    "SnoozeEntry",
    "Subtask",
    "TERMINAL_STATUSES",
    "TaskKind",
    "TaskRecord",
    "TaskStatus",
    "TaskType",
    "TransitionResult",
    "UndoClassification",
    "UndoType",
    "determine_task_kind",
]
