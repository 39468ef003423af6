"""Unit tests for TaskLifecycleEvent."""

from __future__ import annotations

from uuid import UUID

import pytest

from task_engine.domain.events import (
    TASK_COMPLETED_EVENT_TYPE,
    TASK_LIFECYCLE_EVENT_SCHEMA_VERSION,
    TaskLifecycleEvent,
)


class TestTaskLifecycleEvent:
    """TaskLifecycleEvent"""

    def test_defaults(self, now) -> None:
        event = TaskLifecycleEvent(TASK_COMPLETED_EVENT_TYPE, "task-1", now)

        assert isinstance(event.event_id, UUID)
        assert event.event_id.version == 7
        assert event.schema_version == TASK_LIFECYCLE_EVENT_SCHEMA_VERSION
        assert event.payload == {}

    def test_unknown_type_rejected(self, now) -> None:
        with pytest.raises(ValueError, match="Unknown task event type"):
            TaskLifecycleEvent("task.exploded", "task-1", now)

    def test_to_dict(self, now) -> None:
        event = TaskLifecycleEvent(
            TASK_COMPLETED_EVENT_TYPE, "task-1", now, payload={"net_points": 5}
        )

        data = event.to_dict()

        assert data["event_id"] == str(event.event_id)
        assert data["occurred_at"] == now.isoformat()
        assert data["payload"] == {"net_points": 5}

    def test_hashable(self, now) -> None:
        event = TaskLifecycleEvent(TASK_COMPLETED_EVENT_TYPE, "task-1", now)

        assert event in {event}
