"""Task repository port.

Protocol defining the persistence interface for TaskRecords. The storage
engine itself is out of scope; adapters translate records with the task
codec and store them however they like.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Callable
from typing import Protocol

from task_engine.domain.models.task_record import TaskRecord

TaskPredicate = Callable[[TaskRecord], bool]


class TaskRepositoryProtocol(Protocol):
    """Protocol for TaskRecord persistence."""

    @abstractmethod
    async def get(self, task_id: str) -> TaskRecord | None:
        """Load a task by id.

        Args:
            task_id: The task id.

        Returns:
            The stored record, or None if no task has that id.
        """
        ...

    @abstractmethod
    async def save(self, task: TaskRecord) -> None:
        """Insert or replace a task (keyed by ``task.id``)."""
        ...

    @abstractmethod
    async def delete(self, task_id: str) -> bool:
        """Delete a task.

        Returns:
            True if a task was deleted, False if it did not exist.
        """
        ...

    @abstractmethod
    async def query(self, predicate: TaskPredicate) -> list[TaskRecord]:
        """Return every stored task matching ``predicate``."""
        ...
