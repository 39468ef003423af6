"""
Pytest configuration and shared fixtures for task engine tests.

Testing Standards:
- Async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Use AsyncMock for async collaborators that must fail
- Unit tests go in tests/unit/
- Time is fixed: every test works from the ``now`` fixture
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import pytest

from task_engine.domain.models.subtask import Subtask
from task_engine.domain.models.task_record import TaskKind, TaskRecord
from task_engine.domain.models.task_type import TaskType

FIXED_NOW = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed current time (Tuesday 2026-03-10 09:00 UTC)."""
    return FIXED_NOW


@pytest.fixture
def make_task(now: datetime) -> Callable[..., TaskRecord]:
    """Factory for pending tasks due tomorrow; keyword overrides any field."""

    def _make(**overrides: Any) -> TaskRecord:
        fields: dict[str, Any] = {
            "id": str(uuid4()),
            "title": "Water the plants",
            "due_date": now + timedelta(days=1),
            "created_at": now - timedelta(days=1),
        }
        fields.update(overrides)
        return TaskRecord(**fields)

    return _make


@pytest.fixture
def make_routine(make_task: Callable[..., TaskRecord]) -> Callable[..., TaskRecord]:
    """Factory for first-instance routine tasks."""

    def _make(**overrides: Any) -> TaskRecord:
        overrides.setdefault("task_kind", TaskKind.ROUTINE)
        return make_task(**overrides)

    return _make


@pytest.fixture
def chore_type() -> TaskType:
    """TaskType rewarding 10, skip -10, postpone -5."""
    return TaskType(
        id="chore",
        name="Chore",
        reward_on_done=10,
        penalty_not_done=-10,
        penalty_postpone=-5,
    )


@pytest.fixture
def three_subtasks() -> tuple[Subtask, ...]:
    """Three subtasks, the first two done."""
    return (
        Subtask("Fill the can", is_completed=True),
        Subtask("Kitchen plants", is_completed=True),
        Subtask("Balcony plants"),
    )
