"""Task repository stub implementation.

In-memory implementation of TaskRepositoryProtocol for testing and
development. Records are stored in their persisted form, so every save and
load goes through the task codec exactly like a real storage adapter.
"""

from __future__ import annotations

from typing import Any

from task_engine.application.ports.error_reporter import ErrorReporterProtocol
from task_engine.application.ports.task_repository import (
    TaskPredicate,
    TaskRepositoryProtocol,
)
from task_engine.domain.models.task_record import TaskRecord
from task_engine.domain.services.task_codec import task_from_dict, task_to_dict


class TaskRepositoryStub(TaskRepositoryProtocol):
    """In-memory stub for task storage (testing only).

    Attributes:
        save_count: Number of ``save`` calls, for assertions.
    """

    def __init__(self, error_reporter: ErrorReporterProtocol | None = None) -> None:
        """Initialize the stub with empty storage.

        Args:
            error_reporter: Receives history decode failures on load.
        """
        self._records: dict[str, dict[str, Any]] = {}
        self._error_reporter = error_reporter
        self.save_count = 0

    def clear(self) -> None:
        """Clear all stored tasks (for test cleanup)."""
        self._records.clear()
        self.save_count = 0

    def put_raw(self, record: dict[str, Any]) -> None:
        """Store a raw persisted record, bypassing the codec on write."""
        self._records[str(record["id"])] = dict(record)

    def get_raw(self, task_id: str) -> dict[str, Any] | None:
        """Return the persisted form of a task."""
        record = self._records.get(task_id)
        return dict(record) if record is not None else None

    def __len__(self) -> int:
        return len(self._records)

    def _load(self, record: dict[str, Any]) -> TaskRecord:
        return task_from_dict(record, self._error_reporter)

    async def get(self, task_id: str) -> TaskRecord | None:
        record = self._records.get(task_id)
        if record is None:
            return None
        return self._load(record)

    async def save(self, task: TaskRecord) -> None:
        self._records[task.id] = task_to_dict(task)
        self.save_count += 1

    async def delete(self, task_id: str) -> bool:
        return self._records.pop(task_id, None) is not None

    async def query(self, predicate: TaskPredicate) -> list[TaskRecord]:
        tasks = [self._load(record) for record in self._records.values()]
        return [task for task in tasks if predicate(task)]
