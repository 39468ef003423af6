"""Task lifecycle events.

Every successful transition produces one of these events. The application
service publishes them on the task event channel after the new record has
been persisted, so UI layers and schedulers can react without reaching into
global state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from uuid6 import uuid7

# =============================================================================
# Event Type Constants
# =============================================================================

TASK_COMPLETED_EVENT_TYPE: str = "task.completed"
TASK_NOT_DONE_EVENT_TYPE: str = "task.not_done"
TASK_POSTPONED_EVENT_TYPE: str = "task.postponed"
TASK_SNOOZED_EVENT_TYPE: str = "task.snoozed"
TASK_SUBTASK_TOGGLED_EVENT_TYPE: str = "task.subtask_toggled"
TASK_UNDONE_EVENT_TYPE: str = "task.undone"

# Emitted by the application service, not by a single-record transition
ROUTINE_INSTANCE_CREATED_EVENT_TYPE: str = "routine.instance_created"
RECURRING_INSTANCES_GENERATED_EVENT_TYPE: str = "recurring.instances_generated"
SERIES_DELETED_EVENT_TYPE: str = "series.deleted"

TASK_LIFECYCLE_EVENT_TYPES: frozenset[str] = frozenset(
    {
        TASK_COMPLETED_EVENT_TYPE,
        TASK_NOT_DONE_EVENT_TYPE,
        TASK_POSTPONED_EVENT_TYPE,
        TASK_SNOOZED_EVENT_TYPE,
        TASK_SUBTASK_TOGGLED_EVENT_TYPE,
        TASK_UNDONE_EVENT_TYPE,
        ROUTINE_INSTANCE_CREATED_EVENT_TYPE,
        RECURRING_INSTANCES_GENERATED_EVENT_TYPE,
        SERIES_DELETED_EVENT_TYPE,
    }
)

TASK_LIFECYCLE_EVENT_SCHEMA_VERSION: int = 1


@dataclass(frozen=True, eq=True)
class TaskLifecycleEvent:
    """A change to one task (or one task series).

    Attributes:
        event_type: One of the ``*_EVENT_TYPE`` constants.
        task_id: The task the event is about.
        occurred_at: When the change happened (the transition's ``now``).
        payload: Event-specific details, JSON-safe.
        event_id: UUIDv7 for this event.
        schema_version: Event schema version.
    """

    event_type: str
    task_id: str
    occurred_at: datetime
    payload: dict[str, Any] = field(default_factory=dict)
    event_id: UUID = field(default_factory=uuid7)
    schema_version: int = field(default=TASK_LIFECYCLE_EVENT_SCHEMA_VERSION)

    def __post_init__(self) -> None:
        """Validate event invariants.

        Raises:
            ValueError: If the event type is unknown.
        """
        if self.event_type not in TASK_LIFECYCLE_EVENT_TYPES:
            raise ValueError(f"Unknown task event type: {self.event_type}")

    def __hash__(self) -> int:
        return hash(self.event_id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "event_id": str(self.event_id),
            "event_type": self.event_type,
            "task_id": self.task_id,
            "occurred_at": self.occurred_at.isoformat(),
            "payload": dict(self.payload),
            "schema_version": self.schema_version,
        }


def utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)
