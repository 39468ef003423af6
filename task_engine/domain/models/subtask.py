"""Subtask value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, eq=True)
class Subtask:
    """One checklist item of a task.

    A task with subtasks can only be completed once every subtask is done.

    Attributes:
        title: Text of the checklist item.
        is_completed: Whether the item has been ticked off.
    """

    title: str
    is_completed: bool = False

    def toggled(self) -> Subtask:
        """Return a copy with ``is_completed`` flipped."""
        return Subtask(title=self.title, is_completed=not self.is_completed)

    def reset(self) -> Subtask:
        """Return an uncompleted copy (used for new occurrences and undo)."""
        return Subtask(title=self.title, is_completed=False)

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "isCompleted": self.is_completed}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Subtask:
        return cls(title=str(data["title"]), is_completed=bool(data.get("isCompleted", False)))
