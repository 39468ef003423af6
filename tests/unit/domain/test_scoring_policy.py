"""Unit tests for the scoring policy and penalty ledger."""

from __future__ import annotations

from datetime import timedelta

import pytest

from task_engine.domain.models.history_entry import PostponeEntry
from task_engine.domain.models.task_type import TaskType
from task_engine.domain.services.penalty_ledger import (
    cumulative_penalty,
    net_points,
    projected_points,
)
from task_engine.domain.services.scoring_policy import (
    DEFAULT_POSTPONE_PENALTY,
    ScoringValues,
    resolve_scoring,
)


class TestResolveScoring:
    """resolve_scoring() defaults and sign coercion."""

    def test_defaults_without_task_type(self) -> None:
        assert resolve_scoring(None) == ScoringValues(0, 0, DEFAULT_POSTPONE_PENALTY)
        assert DEFAULT_POSTPONE_PENALTY == -5

    def test_uses_task_type_values(self, chore_type) -> None:
        assert resolve_scoring(chore_type) == ScoringValues(10, -10, -5)

    def test_coerces_wrong_signs(self) -> None:
        task_type = TaskType("odd", "Odd", reward_on_done=-3, penalty_not_done=7, penalty_postpone=4)

        scoring = resolve_scoring(task_type)

        assert scoring == ScoringValues(reward_on_done=0, penalty_not_done=-7, penalty_postpone=-4)

    @pytest.mark.parametrize("configured", [-2, 2])
    def test_configurable_default_postpone_penalty(self, configured) -> None:
        assert resolve_scoring(None, configured).penalty_postpone == -2


class TestPenaltyLedger:
    """Aggregation over postpone history."""

    def _history(self, now, *penalties: int) -> tuple[PostponeEntry, ...]:
        return tuple(
            PostponeEntry(
                from_date=now + timedelta(days=i),
                to_date=now + timedelta(days=i + 1),
                reason="later",
                postponed_at=now,
                penalty_applied=p,
            )
            for i, p in enumerate(penalties)
        )

    def test_empty_history_is_zero(self) -> None:
        assert cumulative_penalty(()) == 0

    def test_sums_entries(self, now) -> None:
        assert cumulative_penalty(self._history(now, -5, -5, 0)) == -10

    def test_net_points(self, make_task, now) -> None:
        task = make_task(points_earned=10, postpone_history=self._history(now, -5, -5))

        assert net_points(task) == 0
        assert net_points(task) == task.net_points

    def test_projected_points(self, make_task, now, chore_type) -> None:
        task = make_task(postpone_history=self._history(now, -5))

        assert projected_points(task, chore_type) == 5
        assert projected_points(task, None) == -5
