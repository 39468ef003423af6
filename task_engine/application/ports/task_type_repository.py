"""Task type repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from task_engine.domain.models.task_type import TaskType


class TaskTypeRepositoryProtocol(Protocol):
    """Read access to user-configured TaskTypes.

    The engine never creates or edits TaskTypes.
    """

    @abstractmethod
    async def get(self, type_id: str) -> TaskType | None:
        """Load a TaskType by id, or None if unknown."""
        ...
