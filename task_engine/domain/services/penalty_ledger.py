"""Penalty ledger domain service.

Aggregates postpone penalties from a task's postpone history. The ledger is
the only place that sums penalties, so cumulative values always equal the
sum of the per-entry ``penalty_applied`` values.
"""

from __future__ import annotations

from collections.abc import Iterable

from task_engine.domain.models.history_entry import PostponeEntry
from task_engine.domain.models.task_record import TaskRecord
from task_engine.domain.models.task_type import TaskType
from task_engine.domain.services.scoring_policy import resolve_scoring


def cumulative_penalty(history: Iterable[PostponeEntry]) -> int:
    """Sum of ``penalty_applied`` over ``history`` (0 for an empty history)."""
    return sum(entry.penalty_applied for entry in history)


def net_points(task: TaskRecord) -> int:
    """Points earned plus the cumulative postpone penalty."""
    return task.points_earned + cumulative_penalty(task.postpone_history)


def projected_points(task: TaskRecord, task_type: TaskType | None) -> int:
    """Net points the task would be worth if completed now."""
    scoring = resolve_scoring(task_type)
    return scoring.reward_on_done + cumulative_penalty(task.postpone_history)
