"""Domain services for the task engine.

Domain services contain business logic that doesn't naturally fit in the
TaskRecord entity. They are pure: no I/O, no clocks except an injectable
``now``, no infrastructure dependencies.

Available services:
- scoring_policy: resolves reward/penalty values from a TaskType
- penalty_ledger: aggregates postpone penalties
- history_log: append-only postpone/snooze trails and their codec
- task_lifecycle: the transition functions and command surface
- undo_coordinator: classifies and reverses the last transition
- routine_recurrence: next routine instance and progress fraction
- recurrence_engine: occurrence generation for recurring series
- task_codec: TaskRecord persistence codec
"""

from task_engine.domain.services.duration_validator import (
    MAX_SNOOZE_MINUTES,
    MIN_SNOOZE_MINUTES,
    validate_snooze_minutes,
)
from task_engine.domain.services.penalty_ledger import (
    cumulative_penalty,
    net_points,
    projected_points,
)
from task_engine.domain.services.routine_recurrence import (
    create_next_instance,
    progress_fraction,
)
from task_engine.domain.services.scoring_policy import (
    DEFAULT_POSTPONE_PENALTY,
    ScoringValues,
    resolve_scoring,
)
from task_engine.domain.services.task_lifecycle import (
    CompleteTask,
    MarkNotDone,
    PostponeTask,
    SnoozeTask,
    TaskCommand,
    TaskLifecycleStateMachine,
    ToggleSubtask,
    UndoLastAction,
    apply_command,
)
from task_engine.domain.services.undo_coordinator import (
    classify_undo,
    find_spawned_instances,
    undo,
)

__all__ = [
    "CompleteTask",
    "DEFAULT_POSTPONE_PENALTY",
    "MAX_SNOOZE_MINUTES",
    "MIN_SNOOZE_MINUTES",
    "MarkNotDone",
    "PostponeTask",
    "ScoringValues",
    "SnoozeTask",
    "TaskCommand",
    "TaskLifecycleStateMachine",
    "ToggleSubtask",
    "UndoLastAction",
    "apply_command",
    "classify_undo",
    "create_next_instance",
    "cumulative_penalty",
    "find_spawned_instances",
    "net_points",
    "progress_fraction",
    "projected_points",
    "resolve_scoring",
    "undo",
    "validate_snooze_minutes",
]
