"""Unit tests for the in-memory stub adapters."""

from __future__ import annotations

from datetime import timedelta

import pytest
from structlog.testing import capture_logs

from task_engine.domain.events.task_lifecycle import (
    TASK_COMPLETED_EVENT_TYPE,
    TASK_SNOOZED_EVENT_TYPE,
    TaskLifecycleEvent,
)
from task_engine.domain.models.history_entry import PostponeEntry
from task_engine.infrastructure.stubs import (
    ErrorReporterStub,
    NotificationSchedulerStub,
    TaskEventChannelStub,
    TaskRepositoryStub,
    TaskSettingsProviderStub,
    TaskTypeRepositoryStub,
)


class TestTaskRepositoryStub:
    """TaskRepositoryStub"""

    async def test_save_get_delete(self, make_task) -> None:
        repository = TaskRepositoryStub()
        task = make_task()

        await repository.save(task)

        assert await repository.get(task.id) == task
        assert repository.save_count == 1
        assert await repository.delete(task.id) is True
        assert await repository.delete(task.id) is False
        assert await repository.get(task.id) is None

    async def test_stores_persisted_form(self, make_task, now) -> None:
        repository = TaskRepositoryStub()
        entry = PostponeEntry(now, now + timedelta(days=1), "x", now, penalty_applied=-5)
        task = make_task(postpone_history=(entry,))

        await repository.save(task)

        raw = repository.get_raw(task.id)
        assert raw["postponeCount"] == 1
        assert raw["cumulativePostponePenalty"] == -5
        assert isinstance(raw["postponeHistory"], str)

    async def test_legacy_entries_get_default_penalty(self, make_task) -> None:
        repository = TaskRepositoryStub()
        task = make_task()
        await repository.save(task)
        raw = repository.get_raw(task.id)
        raw["postponeHistory"] = (
            '[{"from": "2026-03-10T09:00:00+00:00", "to": "2026-03-11T09:00:00+00:00",'
            ' "reason": "old", "postponedAt": "2026-03-10T09:00:00+00:00"}]'
        )
        repository.put_raw(raw)

        loaded = await repository.get(task.id)

        assert loaded.postpone_count == 1
        assert loaded.cumulative_postpone_penalty == -5

    async def test_corrupt_history_is_reported(self, make_task) -> None:
        reporter = ErrorReporterStub()
        repository = TaskRepositoryStub(error_reporter=reporter)
        task = make_task()
        await repository.save(task)
        raw = repository.get_raw(task.id)
        raw["snoozeHistory"] = "not json"
        repository.put_raw(raw)

        loaded = await repository.get(task.id)

        assert loaded.snooze_history == ()
        assert reporter.reports[0].context["history"] == "snooze"

    async def test_query(self, make_task) -> None:
        repository = TaskRepositoryStub()
        tasks = [make_task(recurrence_group_id=g) for g in ("a", "b", "a")]
        for task in tasks:
            await repository.save(task)

        found = await repository.query(lambda t: t.recurrence_group_id == "a")

        assert {t.id for t in found} == {tasks[0].id, tasks[2].id}
        repository.clear()
        assert len(repository) == 0


class TestTaskEventChannelStub:
    """TaskEventChannelStub"""

    @pytest.fixture
    def event(self, now) -> TaskLifecycleEvent:
        return TaskLifecycleEvent(TASK_COMPLETED_EVENT_TYPE, "task-1", now)

    async def test_delivers_to_subscribers(self, event) -> None:
        channel = TaskEventChannelStub()
        received: list[TaskLifecycleEvent] = []

        async def listener(e: TaskLifecycleEvent) -> None:
            received.append(e)

        unsubscribe = channel.subscribe(listener)
        await channel.publish(event)
        unsubscribe()
        await channel.publish(event)

        assert received == [event]
        assert channel.published == [event, event]
        assert channel.events_of_type(TASK_SNOOZED_EVENT_TYPE) == []

    async def test_failing_subscriber_is_skipped(self, event) -> None:
        channel = TaskEventChannelStub()
        received: list[TaskLifecycleEvent] = []

        async def broken(_e: TaskLifecycleEvent) -> None:
            raise RuntimeError("listener crashed")

        async def listener(e: TaskLifecycleEvent) -> None:
            received.append(e)

        channel.subscribe(broken)
        channel.subscribe(listener)

        with capture_logs() as logs:
            await channel.publish(event)

        assert received == [event]
        assert logs[0]["event"] == "task_event_subscriber_failed"
        assert logs[0]["log_level"] == "warning"


class TestOtherStubs:
    """Scheduler, settings, task type and reporter stubs."""

    async def test_notification_scheduler_records_calls(self, make_task, now) -> None:
        scheduler = NotificationSchedulerStub()
        task = make_task()

        await scheduler.schedule_snooze(task.id, "t", "b", now, {"taskId": task.id})
        await scheduler.reschedule_for_task(task)
        await scheduler.schedule_snooze(task.id, "t", "b", now, {})
        await scheduler.cancel_all_for_task(task.id)

        assert scheduler.rescheduled == [task.id]
        assert scheduler.cancelled == [task.id]
        assert task.id not in scheduler.scheduled

    async def test_task_type_repository(self, chore_type) -> None:
        repository = TaskTypeRepositoryStub([chore_type])

        assert await repository.get("chore") == chore_type
        assert await repository.get("work") is None

    def test_settings_provider_defaults(self) -> None:
        assert TaskSettingsProviderStub().get_settings().default_snooze_minutes == 10

    def test_error_reporter_copies_context(self) -> None:
        reporter = ErrorReporterStub()
        context = {"task_id": "t1"}

        reporter.report("boom", context=context)
        context["task_id"] = "changed"

        assert reporter.reports[0].context == {"task_id": "t1"}
        assert reporter.reports[0].error is None
