"""
Domain events for the task engine.

Events are immutable, timestamped descriptions of lifecycle changes. They are
published on the task event channel after the change has been persisted.
"""

from task_engine.domain.events.task_lifecycle import (
    RECURRING_INSTANCES_GENERATED_EVENT_TYPE,
    ROUTINE_INSTANCE_CREATED_EVENT_TYPE,
    SERIES_DELETED_EVENT_TYPE,
    TASK_COMPLETED_EVENT_TYPE,
    TASK_LIFECYCLE_EVENT_SCHEMA_VERSION,
    TASK_LIFECYCLE_EVENT_TYPES,
    TASK_NOT_DONE_EVENT_TYPE,
    TASK_POSTPONED_EVENT_TYPE,
    TASK_SNOOZED_EVENT_TYPE,
    TASK_SUBTASK_TOGGLED_EVENT_TYPE,
    TASK_UNDONE_EVENT_TYPE,
    TaskLifecycleEvent,
    utc_now,
)

__all__: list[str] = [
    "RECURRING_INSTANCES_GENERATED_EVENT_TYPE",
    "ROUTINE_INSTANCE_CREATED_EVENT_TYPE",
    "SERIES_DELETED_EVENT_TYPE",
    "TASK_COMPLETED_EVENT_TYPE",
    "TASK_LIFECYCLE_EVENT_SCHEMA_VERSION",
    "TASK_LIFECYCLE_EVENT_TYPES",
    "TASK_NOT_DONE_EVENT_TYPE",
    "TASK_POSTPONED_EVENT_TYPE",
    "TASK_SNOOZED_EVENT_TYPE",
    "TASK_SUBTASK_TOGGLED_EVENT_TYPE",
    "TASK_UNDONE_EVENT_TYPE",
    "TaskLifecycleEvent",
    "utc_now",
]
