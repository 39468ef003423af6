"""Task type repository stub implementation."""

from __future__ import annotations

from task_engine.application.ports.task_type_repository import (
    TaskTypeRepositoryProtocol,
)
from task_engine.domain.models.task_type import TaskType


class TaskTypeRepositoryStub(TaskTypeRepositoryProtocol):
    """In-memory stub for TaskType lookup (testing only)."""

    def __init__(self, task_types: list[TaskType] | None = None) -> None:
        self._task_types: dict[str, TaskType] = {t.id: t for t in task_types or []}

    def add(self, task_type: TaskType) -> None:
        self._task_types[task_type.id] = task_type

    def clear(self) -> None:
        self._task_types.clear()

    async def get(self, type_id: str) -> TaskType | None:
        return self._task_types.get(type_id)
