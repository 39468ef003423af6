"""TaskType configuration entity.

A TaskType is configured by the user (e.g. "Chore", "Work") and referenced
from a TaskRecord by ``task_type_id``. The engine never creates TaskTypes; it
only reads their point values through the scoring policy, which also
tolerates values stored with the wrong sign.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, eq=True)
class TaskType:
    """Point values attached to a category of task.

    Attributes:
        id: Unique identifier referenced by ``TaskRecord.task_type_id``.
        name: Display name.
        reward_on_done: Points earned on completion (expected >= 0).
        penalty_not_done: Points applied when skipped (expected <= 0).
        penalty_postpone: Points applied per postpone (expected <= 0).
    """

    id: str
    name: str
    reward_on_done: int = 0
    penalty_not_done: int = 0
    penalty_postpone: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "rewardOnDone": self.reward_on_done,
            "penaltyNotDone": self.penalty_not_done,
            "penaltyPostpone": self.penalty_postpone,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskType:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            reward_on_done=int(data.get("rewardOnDone", 0)),
            penalty_not_done=int(data.get("penaltyNotDone", 0)),
            penalty_postpone=int(data.get("penaltyPostpone", 0)),
        )
