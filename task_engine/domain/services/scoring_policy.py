"""Scoring policy domain service.

Resolves the point values a task earns or loses from its TaskType. TaskType
values are user-configured and may be stored with the wrong sign, so the
policy coerces them instead of failing:

- Rewards are never negative (negative rewards clamp to 0).
- Penalties are never positive (positive penalties are negated).

When a task has no TaskType the defaults apply: no reward, no skip penalty,
and the default postpone penalty.
"""

from __future__ import annotations

from dataclasses import dataclass

from task_engine.domain.models.task_type import TaskType

# Points applied per postpone when a task has no TaskType
DEFAULT_POSTPONE_PENALTY: int = -5


@dataclass(frozen=True, eq=True)
class ScoringValues:
    """Resolved point values for one task.

    Attributes:
        reward_on_done: Points earned on completion (>= 0).
        penalty_not_done: Points applied when skipped (<= 0).
        penalty_postpone: Points applied per postpone (<= 0).
    """

    reward_on_done: int = 0
    penalty_not_done: int = 0
    penalty_postpone: int = DEFAULT_POSTPONE_PENALTY


def normalize_penalty(value: int) -> int:
    """Return ``value`` as a non-positive penalty."""
    return -abs(value)


def normalize_reward(value: int) -> int:
    """Return ``value`` as a non-negative reward."""
    return max(value, 0)


def resolve_scoring(
    task_type: TaskType | None,
    default_postpone_penalty: int = DEFAULT_POSTPONE_PENALTY,
) -> ScoringValues:
    """Resolve the scoring values for a task.

    Args:
        task_type: The task's TaskType, or None when the task has none.
        default_postpone_penalty: Postpone penalty used without a TaskType.

    Returns:
        ScoringValues with rewards >= 0 and penalties <= 0.
    """
    if task_type is None:
        return ScoringValues(
            reward_on_done=0,
            penalty_not_done=0,
            penalty_postpone=normalize_penalty(default_postpone_penalty),
        )

    return ScoringValues(
        reward_on_done=normalize_reward(task_type.reward_on_done),
        penalty_not_done=normalize_penalty(task_type.penalty_not_done),
        penalty_postpone=normalize_penalty(task_type.penalty_postpone),
    )
