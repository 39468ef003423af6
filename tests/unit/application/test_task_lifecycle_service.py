"""Unit tests for TaskLifecycleService.

Tests cover:
- Load, transition, save, then notify and publish for every action
- Rolling-window generation on recurring completion and its undo
- Post-save failures are reported without undoing the save
- Per-task serialization of concurrent actions and lock release
- Routine next-instance planning and series deletion
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime, time, timedelta
from unittest.mock import AsyncMock

import pytest
from structlog.testing import capture_logs

from task_engine.application.services.task_lifecycle_service import (
    TaskLifecycleService,
)
from task_engine.config.engine_config import TEST_ENGINE_CONFIG
from task_engine.config.task_settings import TaskSettings
from task_engine.domain.errors import (
    AlreadyCompletedError,
    EmptyHistoryError,
    InvalidDurationError,
    NotRoutineTaskError,
    TaskNotFoundError,
)
from task_engine.domain.events.task_lifecycle import (
    RECURRING_INSTANCES_GENERATED_EVENT_TYPE,
    ROUTINE_INSTANCE_CREATED_EVENT_TYPE,
    SERIES_DELETED_EVENT_TYPE,
    TASK_COMPLETED_EVENT_TYPE,
    TASK_SNOOZED_EVENT_TYPE,
    TASK_UNDONE_EVENT_TYPE,
)
from task_engine.domain.models.recurrence_rule import RecurrenceRule
from task_engine.domain.models.task_record import TaskKind, TaskStatus
from task_engine.domain.models.transition import UndoType
from task_engine.infrastructure.stubs import (
    ErrorReporterStub,
    NotificationSchedulerStub,
    TaskEventChannelStub,
    TaskRepositoryStub,
    TaskSettingsProviderStub,
    TaskTypeRepositoryStub,
)


@pytest.fixture
def repository() -> TaskRepositoryStub:
    return TaskRepositoryStub()


@pytest.fixture
def notifications() -> NotificationSchedulerStub:
    return NotificationSchedulerStub()


@pytest.fixture
def channel() -> TaskEventChannelStub:
    return TaskEventChannelStub()


@pytest.fixture
def reporter() -> ErrorReporterStub:
    return ErrorReporterStub()


@pytest.fixture
def settings_provider() -> TaskSettingsProviderStub:
    return TaskSettingsProviderStub()


@pytest.fixture
def service(
    repository, notifications, channel, reporter, settings_provider, chore_type, now
) -> TaskLifecycleService:
    return TaskLifecycleService(
        repository=repository,
        task_types=TaskTypeRepositoryStub([chore_type]),
        notifications=notifications,
        settings_provider=settings_provider,
        event_channel=channel,
        error_reporter=reporter,
        config=TEST_ENGINE_CONFIG,
        clock=lambda: now,
    )


@pytest.fixture
def daily_task(make_task, now):
    return make_task(
        due_date=now,
        due_time=time(9, 0),
        task_kind=TaskKind.RECURRING,
        task_type_id="chore",
        recurrence_rule=RecurrenceRule.daily(date(2026, 3, 10)),
        recurrence_group_id="group-1",
    )


class TestCompleteTask:
    """complete_task()"""

    async def test_saves_cancels_and_publishes(
        self, service, repository, notifications, channel, make_task, now
    ) -> None:
        task = make_task(task_type_id="chore")
        await repository.save(task)

        result = await service.complete_task(task.id, reflection="Done early")

        stored = await repository.get(task.id)
        assert stored == result.task
        assert stored.status is TaskStatus.COMPLETED
        assert stored.points_earned == 10
        assert stored.completed_at == now
        assert notifications.cancelled == [task.id]
        assert [e.event_type for e in channel.published] == [TASK_COMPLETED_EVENT_TYPE]

    async def test_unknown_task(self, service) -> None:
        with pytest.raises(TaskNotFoundError):
            await service.complete_task("missing")

    async def test_rejected_transition_saves_nothing(
        self, service, repository, channel, make_task, now
    ) -> None:
        task = make_task(status=TaskStatus.COMPLETED, completed_at=now, points_earned=3)
        await repository.save(task)
        saves_before = repository.save_count

        with capture_logs() as logs:
            with pytest.raises(AlreadyCompletedError):
                await service.complete_task(task.id)

        assert repository.save_count == saves_before
        assert (await repository.get(task.id)).points_earned == 3
        assert channel.published == []
        rejected = [e for e in logs if e["event"] == "transition_rejected"]
        assert rejected[0]["error_type"] == "AlreadyCompletedError"
        assert rejected[0]["operation"] == "complete_task"

    async def test_concurrent_completes_are_serialized(
        self, service, repository, make_task
    ) -> None:
        task = make_task(task_type_id="chore")
        await repository.save(task)

        results = await asyncio.gather(
            service.complete_task(task.id),
            service.complete_task(task.id),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], AlreadyCompletedError)
        assert (await repository.get(task.id)).points_earned == 10

    async def test_notification_failure_keeps_save(
        self, repository, channel, reporter, settings_provider, chore_type, make_task, now
    ) -> None:
        notifications = AsyncMock()
        notifications.cancel_all_for_task.side_effect = RuntimeError("platform down")
        service = TaskLifecycleService(
            repository=repository,
            task_types=TaskTypeRepositoryStub([chore_type]),
            notifications=notifications,
            settings_provider=settings_provider,
            event_channel=channel,
            error_reporter=reporter,
            clock=lambda: now,
        )
        task = make_task()
        await repository.save(task)

        result = await service.complete_task(task.id)

        assert (await repository.get(task.id)).status is TaskStatus.COMPLETED
        assert result.task.status is TaskStatus.COMPLETED
        assert reporter.reports[0].context == {
            "task_id": task.id,
            "step": "cancel_notifications",
        }
        assert isinstance(reporter.reports[0].error, RuntimeError)
        assert len(channel.published) == 1

    async def test_routine_completion_offers_next(
        self, service, repository, make_routine
    ) -> None:
        routine = make_routine()
        await repository.save(routine)

        result = await service.complete_task(routine.id)

        assert result.offer_next_instance is True
        assert len(repository) == 1


class TestRecurringGeneration:
    """Completing a recurring task tops up its window; undo removes it."""

    async def test_complete_generates_window(
        self, service, repository, notifications, channel, daily_task
    ) -> None:
        await repository.save(daily_task)

        await service.complete_task(daily_task.id)

        instances = sorted(
            (t for t in await repository.query(lambda t: t.id != daily_task.id)),
            key=lambda t: t.recurrence_index,
        )
        # TEST_ENGINE_CONFIG caps generation at five instances
        assert [t.due_date.date() for t in instances] == [
            date(2026, 3, 11) + timedelta(days=n) for n in range(5)
        ]
        assert all(t.status is TaskStatus.PENDING for t in instances)
        assert notifications.rescheduled == [t.id for t in instances]
        generated = channel.events_of_type(RECURRING_INSTANCES_GENERATED_EVENT_TYPE)
        assert generated[0].payload["task_ids"] == [t.id for t in instances]

    async def test_undo_deletes_generated_instances(
        self, service, repository, notifications, channel, daily_task
    ) -> None:
        await repository.save(daily_task)
        await service.complete_task(daily_task.id)

        preview = await service.preview_undo(daily_task.id)
        result = await service.undo_task(daily_task.id)

        assert preview.undo_type is UndoType.COMPLETION
        assert preview.will_delete_tasks == 5
        assert len(repository) == 1
        assert result.task.status is TaskStatus.PENDING
        assert (await repository.get(daily_task.id)).points_earned == 0
        assert notifications.rescheduled[-1] == daily_task.id
        assert channel.published[-1].event_type == TASK_UNDONE_EVENT_TYPE

    async def test_undo_without_history(self, service, repository, make_task) -> None:
        task = make_task()
        await repository.save(task)

        assert (await service.preview_undo(task.id)).can_undo is False
        with pytest.raises(EmptyHistoryError):
            await service.undo_task(task.id)


class TestPostponeAndSnooze:
    """postpone_task() / snooze_task() / mark_not_done() / toggle_subtask()"""

    async def test_postpone_uses_task_type_penalty(
        self, service, repository, notifications, make_task, now
    ) -> None:
        task = make_task(task_type_id="chore")
        await repository.save(task)

        result = await service.postpone_task(
            task.id, now + timedelta(days=2), "Travelling", new_due_time=time(8, 0)
        )

        stored = await repository.get(task.id)
        assert stored.status is TaskStatus.POSTPONED
        assert stored.cumulative_postpone_penalty == -5
        assert stored.due_time == time(8, 0)
        assert result.task == stored
        assert notifications.rescheduled == [task.id]

    async def test_snooze_schedules_reminder(
        self, service, repository, notifications, channel, make_task, now
    ) -> None:
        task = make_task()
        await repository.save(task)

        await service.snooze_task(task.id, 15, source="alarm")

        reminder = notifications.scheduled[task.id][0]
        assert reminder.fire_at == now + timedelta(minutes=15)
        assert reminder.body == "Snoozed for 15 minutes"
        assert reminder.payload == {"taskId": task.id, "type": "snooze", "source": "alarm"}
        assert channel.published[0].event_type == TASK_SNOOZED_EVENT_TYPE

    async def test_snooze_defaults_to_settings(
        self, service, repository, settings_provider, make_task, now
    ) -> None:
        settings_provider.set_settings(
            TaskSettings(snooze_options=[5, 30], default_snooze_minutes=30)
        )
        task = make_task()
        await repository.save(task)

        with capture_logs() as logs:
            result = await service.snooze_task(task.id)

        assert result.task.snoozed_until == now + timedelta(minutes=30)
        applied = [e for e in logs if e["event"] == "transition_applied"][0]
        assert applied["operation"] == "snooze_task"
        assert "source" not in applied

    async def test_snooze_out_of_range(self, service, repository, make_task) -> None:
        task = make_task()
        await repository.save(task)

        with pytest.raises(InvalidDurationError):
            await service.snooze_task(task.id, 0)

    async def test_mark_not_done_and_toggle(
        self, service, repository, notifications, make_task, three_subtasks
    ) -> None:
        task = make_task(task_type_id="chore", subtasks=three_subtasks)
        await repository.save(task)

        await service.toggle_subtask(task.id, 2)
        result = await service.mark_not_done(task.id, "Rained all day")

        assert result.task.points_earned == -10
        assert all(s.is_completed for s in result.task.subtasks)
        assert notifications.cancelled == [task.id]


class TestRoutinesAndSeries:
    """plan_next_routine() and series deletion."""

    async def test_plan_next_routine(
        self, service, repository, notifications, channel, make_routine, now
    ) -> None:
        routine = make_routine(due_time=time(9, 0))
        await repository.save(routine)
        await service.complete_task(routine.id)

        instance = await service.plan_next_routine(
            routine.id, datetime(2026, 3, 12, tzinfo=now.tzinfo)
        )

        assert await repository.get(instance.id) == instance
        assert instance.routine_group_id == routine.id
        assert instance.progress_start_date == now
        assert notifications.rescheduled == [instance.id]
        created = channel.events_of_type(ROUTINE_INSTANCE_CREATED_EVENT_TYPE)
        assert created[0].payload["source_task_id"] == routine.id

    async def test_plan_next_routine_rejects_normal_task(
        self, service, repository, make_task, now
    ) -> None:
        task = make_task()
        await repository.save(task)

        with pytest.raises(NotRoutineTaskError):
            await service.plan_next_routine(task.id, now)

    async def test_delete_recurring_series(
        self, service, repository, notifications, channel, make_task, now
    ) -> None:
        done = make_task(
            recurrence_group_id="group-1",
            status=TaskStatus.COMPLETED,
            completed_at=now,
        )
        pending = make_task(recurrence_group_id="group-1", recurrence_index=1)
        other = make_task(recurrence_group_id="group-2")
        for task in (done, pending, other):
            await repository.save(task)

        deleted = await service.delete_recurring_series("group-1", keep_resolved=True)

        assert deleted == [pending.id]
        assert await repository.get(done.id) == done
        assert notifications.cancelled == [pending.id]
        event = channel.events_of_type(SERIES_DELETED_EVENT_TYPE)[0]
        assert event.payload == {"group_id": "group-1", "task_ids": [pending.id]}

    async def test_delete_routine_series_includes_first_instance(
        self, service, repository, make_routine
    ) -> None:
        first = make_routine()
        second = make_routine(routine_group_id=first.id, recurrence_index=1)
        unrelated = make_routine()
        for task in (first, second, unrelated):
            await repository.save(task)

        deleted = await service.delete_routine_series(first.id)

        assert sorted(deleted) == sorted([first.id, second.id])
        assert len(repository) == 1


class TestTaskLocks:
    """Per-task locks are released once no action holds or awaits them."""

    async def test_locks_dropped_after_actions(
        self, service, repository, make_task
    ) -> None:
        snoozed = make_task()
        completed = make_task(task_type_id="chore")
        for task in (snoozed, completed):
            await repository.save(task)

        await service.snooze_task(snoozed.id, 15)
        await asyncio.gather(
            service.complete_task(completed.id),
            service.complete_task(completed.id),
            return_exceptions=True,
        )
        with pytest.raises(TaskNotFoundError):
            await service.undo_task("missing")

        assert service._locks == {}
        assert service._lock_users == {}

    async def test_locks_dropped_after_series_delete(
        self, service, repository, make_routine
    ) -> None:
        first = make_routine()
        second = make_routine(routine_group_id=first.id, recurrence_index=1)
        for task in (first, second):
            await repository.save(task)

        await service.delete_routine_series(first.id)

        assert service._locks == {}
        assert service._lock_users == {}
