"""Task lifecycle application service.

Orchestrates one user action at a time: load the latest record, apply the
pure transition, persist, then instruct the notification scheduler and
publish the lifecycle event.

Developer Golden Rules:
1. SERIALIZE PER TASK - one action per task id at a time, always on the
   freshly loaded record
2. PERSIST THEN NOTIFY - the repository write happens first; scheduler and
   event channel failures are logged and reported, never rolled back
3. FAIL LOUD ON RULES - transition errors propagate unchanged and nothing
   is saved
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime, time

import structlog

from task_engine.application.ports.error_reporter import ErrorReporterProtocol
from task_engine.application.ports.notification_scheduler import (
    NotificationSchedulerProtocol,
)
from task_engine.application.ports.task_event_channel import TaskEventChannelProtocol
from task_engine.application.ports.task_repository import TaskRepositoryProtocol
from task_engine.application.ports.task_settings_provider import (
    TaskSettingsProviderProtocol,
)
from task_engine.application.ports.task_type_repository import (
    TaskTypeRepositoryProtocol,
)
from task_engine.application.services.base import LoggingMixin
from task_engine.config.engine_config import DEFAULT_ENGINE_CONFIG, EngineConfig
from task_engine.domain.errors.lifecycle import TaskNotFoundError
from task_engine.domain.events.task_lifecycle import (
    RECURRING_INSTANCES_GENERATED_EVENT_TYPE,
    ROUTINE_INSTANCE_CREATED_EVENT_TYPE,
    SERIES_DELETED_EVENT_TYPE,
    TaskLifecycleEvent,
    utc_now,
)
from task_engine.domain.exceptions import TaskEngineError
from task_engine.domain.models.task_record import TaskKind, TaskRecord, TaskStatus
from task_engine.domain.models.task_type import TaskType
from task_engine.domain.models.transition import TransitionResult, UndoClassification
from task_engine.domain.services.recurrence_engine import plan_rolling_window
from task_engine.domain.services.routine_recurrence import create_next_instance
from task_engine.domain.services.task_lifecycle import (
    CompleteTask,
    MarkNotDone,
    PostponeTask,
    SnoozeTask,
    TaskCommand,
    TaskLifecycleStateMachine,
    ToggleSubtask,
    UndoLastAction,
)
from task_engine.domain.services.undo_coordinator import (
    classify_undo,
    find_spawned_instances,
)
from task_engine.infrastructure.observability.correlation import correlation_scope


class TaskLifecycleService(LoggingMixin):
    """Application service for task lifecycle actions.

    Every public mutation returns the TransitionResult (or the created
    records) after the new state has been saved.
    """

    def __init__(
        self,
        repository: TaskRepositoryProtocol,
        task_types: TaskTypeRepositoryProtocol,
        notifications: NotificationSchedulerProtocol,
        settings_provider: TaskSettingsProviderProtocol,
        event_channel: TaskEventChannelProtocol,
        error_reporter: ErrorReporterProtocol,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repository = repository
        self._task_types = task_types
        self._notifications = notifications
        self._settings_provider = settings_provider
        self._event_channel = event_channel
        self._error_reporter = error_reporter
        self._config = config
        self._clock = clock
        self._machine = TaskLifecycleStateMachine(
            max_snooze_minutes=config.max_snooze_minutes,
            default_postpone_penalty=config.default_postpone_penalty,
            clock=clock,
        )
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._init_logger()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @asynccontextmanager
    async def _task_lock(self, task_id: str) -> AsyncIterator[None]:
        """Serialize actions on one task; the lock is dropped once unused."""
        lock = self._locks.setdefault(task_id, asyncio.Lock())
        self._lock_users[task_id] = self._lock_users.get(task_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[task_id] -= 1
            if not self._lock_users[task_id]:
                del self._lock_users[task_id]
                del self._locks[task_id]

    async def _load(self, task_id: str) -> TaskRecord:
        task = await self._repository.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def _task_type_for(self, task: TaskRecord) -> TaskType | None:
        if task.task_type_id is None:
            return None
        return await self._task_types.get(task.task_type_id)

    async def _after_save(
        self,
        log: structlog.BoundLogger,
        step: str,
        action: Callable[[], Awaitable[None]],
        task_id: str,
    ) -> None:
        """Run a post-save side effect; failures are logged and reported."""
        try:
            await action()
        except Exception as exc:
            log.warning("post_save_step_failed", step=step, error=str(exc))
            self._error_reporter.report(
                f"{step} failed after save",
                error=exc,
                context={"task_id": task_id, "step": step},
            )

    async def _publish(self, log: structlog.BoundLogger, event: TaskLifecycleEvent) -> None:
        await self._after_save(
            log,
            "publish_event",
            lambda: self._event_channel.publish(event),
            event.task_id,
        )

    async def _transition(
        self,
        operation: str,
        task_id: str,
        build_command: Callable[[TaskRecord, TaskType | None], TaskCommand],
        **context: object,
    ) -> tuple[TransitionResult, structlog.BoundLogger]:
        """Load, apply and save. Caller must hold the task's lock."""
        log = self._log_operation(operation, task_id=task_id, **context)
        task = await self._load(task_id)
        task_type = await self._task_type_for(task)
        try:
            result = self._machine.apply(task, build_command(task, task_type))
        except TaskEngineError as exc:
            self._log_rejection(log, exc)
            raise
        await self._repository.save(result.task)
        log.info(
            "transition_applied",
            event_type=result.event.event_type,
            from_status=task.status.value,
            to_status=result.task.status.value,
        )
        return result, log

    # -------------------------------------------------------------------------
    # Lifecycle actions
    # -------------------------------------------------------------------------

    async def complete_task(
        self, task_id: str, reflection: str | None = None
    ) -> TransitionResult:
        """Complete a task.

        Completing a recurring task tops up its rolling window of pending
        instances. Completing a routine sets ``offer_next_instance``; the
        next instance is only created through ``plan_next_routine``.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TaskEngineError: If the transition is rejected.
        """
        async with self._task_lock(task_id):
            with correlation_scope():
                result, log = await self._transition(
                    "complete_task",
                    task_id,
                    lambda _task, task_type: CompleteTask(task_type, reflection),
                )
                completed = result.task
                if completed.task_kind is TaskKind.RECURRING:
                    await self._generate_instances(completed, log)
                await self._after_save(
                    log,
                    "cancel_notifications",
                    lambda: self._notifications.cancel_all_for_task(task_id),
                    task_id,
                )
                await self._publish(log, result.event)
                return result

    async def _generate_instances(
        self, completed: TaskRecord, log: structlog.BoundLogger
    ) -> list[TaskRecord]:
        group_id = completed.recurrence_group_id
        if group_id is None or completed.completed_at is None:
            return []
        group = await self._repository.query(
            lambda t: t.recurrence_group_id == group_id
        )
        instances = plan_rolling_window(
            completed,
            group,
            now=completed.completed_at,
            window_days=self._config.planning_window_days,
            max_occurrences=self._config.max_generated_occurrences,
        )
        for instance in instances:
            await self._repository.save(instance)
            await self._after_save(
                log,
                "schedule_notifications",
                lambda instance=instance: self._notifications.reschedule_for_task(
                    instance
                ),
                instance.id,
            )
        if instances:
            log.info("recurring_instances_generated", count=len(instances))
            await self._publish(
                log,
                TaskLifecycleEvent(
                    event_type=RECURRING_INSTANCES_GENERATED_EVENT_TYPE,
                    task_id=completed.id,
                    occurred_at=completed.completed_at,
                    payload={
                        "recurrence_group_id": group_id,
                        "task_ids": [i.id for i in instances],
                    },
                ),
            )
        return instances

    async def mark_not_done(self, task_id: str, reason: str) -> TransitionResult:
        """Mark a task not done with a reason.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TaskEngineError: If the transition is rejected.
        """
        async with self._task_lock(task_id):
            with correlation_scope():
                result, log = await self._transition(
                    "mark_not_done",
                    task_id,
                    lambda _task, task_type: MarkNotDone(reason, task_type),
                )
                await self._after_save(
                    log,
                    "cancel_notifications",
                    lambda: self._notifications.cancel_all_for_task(task_id),
                    task_id,
                )
                await self._publish(log, result.event)
                return result

    async def postpone_task(
        self,
        task_id: str,
        new_due: datetime,
        reason: str,
        *,
        new_due_time: time | None = None,
        penalty: int | None = None,
    ) -> TransitionResult:
        """Postpone a task to ``new_due``.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TaskEngineError: If the transition is rejected.
        """
        async with self._task_lock(task_id):
            with correlation_scope():
                result, log = await self._transition(
                    "postpone_task",
                    task_id,
                    lambda _task, task_type: PostponeTask(
                        new_due=new_due,
                        reason=reason,
                        penalty=penalty,
                        task_type=task_type,
                        new_due_time=new_due_time,
                    ),
                    new_due=new_due.isoformat(),
                )
                await self._after_save(
                    log,
                    "reschedule_notifications",
                    lambda: self._notifications.reschedule_for_task(result.task),
                    task_id,
                )
                await self._publish(log, result.event)
                return result

    async def snooze_task(
        self,
        task_id: str,
        minutes: int | None = None,
        source: str = "popup",
    ) -> TransitionResult:
        """Snooze a task's reminder.

        Args:
            task_id: The task to snooze.
            minutes: Snooze length; the settings' default when None.
            source: Surface that issued the snooze.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TaskEngineError: If the transition is rejected.
        """
        if minutes is None:
            minutes = self._settings_provider.get_settings().default_snooze_minutes
        snooze_minutes = minutes
        async with self._task_lock(task_id):
            with correlation_scope():
                result, log = await self._transition(
                    "snooze_task",
                    task_id,
                    lambda _task, _type: SnoozeTask(snooze_minutes, source),
                    minutes=snooze_minutes,
                    source=source,
                )
                snoozed = result.task
                until = snoozed.snoozed_until
                if until is not None:
                    await self._after_save(
                        log,
                        "schedule_snooze",
                        lambda: self._notifications.schedule_snooze(
                            task_id,
                            snoozed.title,
                            f"Snoozed for {snooze_minutes} minutes",
                            until,
                            {"taskId": task_id, "type": "snooze", "source": source},
                        ),
                        task_id,
                    )
                await self._publish(log, result.event)
                return result

    async def toggle_subtask(self, task_id: str, index: int) -> TransitionResult:
        """Flip one subtask of a task.

        Raises:
            TaskNotFoundError: If the task does not exist.
            TaskEngineError: If the transition is rejected.
        """
        async with self._task_lock(task_id):
            with correlation_scope():
                result, log = await self._transition(
                    "toggle_subtask",
                    task_id,
                    lambda _task, _type: ToggleSubtask(index),
                    index=index,
                )
                await self._publish(log, result.event)
                return result

    # -------------------------------------------------------------------------
    # Undo
    # -------------------------------------------------------------------------

    async def _spawned_instances(self, task: TaskRecord) -> list[TaskRecord]:
        if task.status is not TaskStatus.COMPLETED or task.recurrence_group_id is None:
            return []
        group_id = task.recurrence_group_id
        group = await self._repository.query(lambda t: t.recurrence_group_id == group_id)
        return find_spawned_instances(task, group, self._config.spawn_detection_buffer)

    async def preview_undo(self, task_id: str) -> UndoClassification:
        """Describe what ``undo_task`` would do, for confirmation messaging.

        Raises:
            TaskNotFoundError: If the task does not exist.
        """
        task = await self._load(task_id)
        spawned = await self._spawned_instances(task)
        return classify_undo(task, len(spawned))

    async def undo_task(self, task_id: str) -> TransitionResult:
        """Undo the last transition of a task.

        Undoing a recurring completion also deletes the instances that
        completion generated.

        Raises:
            TaskNotFoundError: If the task does not exist.
            EmptyHistoryError: If there is nothing to undo.
        """
        async with self._task_lock(task_id):
            with correlation_scope():
                spawned = await self._spawned_instances(await self._load(task_id))
                result, log = await self._transition(
                    "undo_task", task_id, lambda _task, _type: UndoLastAction()
                )
                for instance in spawned:
                    await self._repository.delete(instance.id)
                    await self._after_save(
                        log,
                        "cancel_notifications",
                        lambda instance_id=instance.id: (
                            self._notifications.cancel_all_for_task(instance_id)
                        ),
                        instance.id,
                    )
                if spawned:
                    log.info("spawned_instances_deleted", count=len(spawned))
                await self._after_save(
                    log,
                    "reschedule_notifications",
                    lambda: self._notifications.reschedule_for_task(result.task),
                    task_id,
                )
                await self._publish(log, result.event)
                return result

    # -------------------------------------------------------------------------
    # Routines and series
    # -------------------------------------------------------------------------

    async def plan_next_routine(
        self,
        task_id: str,
        new_due_date: datetime,
        new_due_time: time | None = None,
        progress_start_date: datetime | None = None,
    ) -> TaskRecord:
        """Create and save the next instance of a routine.

        Raises:
            TaskNotFoundError: If the source task does not exist.
            NotRoutineTaskError: If the source is not a routine.
        """
        with correlation_scope():
            log = self._log_operation("plan_next_routine", task_id=task_id)
            source = await self._load(task_id)
            now = self._clock()
            instance = create_next_instance(
                source,
                new_due_date,
                new_due_time,
                progress_start_date,
                now=now,
            )
            await self._repository.save(instance)
            log.info(
                "routine_instance_created",
                new_task_id=instance.id,
                routine_group_id=instance.routine_group_id,
                recurrence_index=instance.recurrence_index,
            )
            await self._after_save(
                log,
                "schedule_notifications",
                lambda: self._notifications.reschedule_for_task(instance),
                instance.id,
            )
            await self._publish(
                log,
                TaskLifecycleEvent(
                    event_type=ROUTINE_INSTANCE_CREATED_EVENT_TYPE,
                    task_id=instance.id,
                    occurred_at=now,
                    payload={
                        "source_task_id": source.id,
                        "routine_group_id": instance.routine_group_id,
                        "due_date": instance.due_date.isoformat(),
                    },
                ),
            )
            return instance

    async def _delete_series(
        self,
        operation: str,
        group_id: str,
        predicate: Callable[[TaskRecord], bool],
        keep_resolved: bool,
    ) -> list[str]:
        with correlation_scope():
            log = self._log_operation(operation, group_id=group_id)
            members = await self._repository.query(predicate)
            if keep_resolved:
                members = [t for t in members if not t.is_terminal]
            deleted: list[str] = []
            for member in members:
                async with self._task_lock(member.id):
                    if await self._repository.delete(member.id):
                        deleted.append(member.id)
                await self._after_save(
                    log,
                    "cancel_notifications",
                    lambda member_id=member.id: (
                        self._notifications.cancel_all_for_task(member_id)
                    ),
                    member.id,
                )
            log.info("series_deleted", count=len(deleted), keep_resolved=keep_resolved)
            await self._publish(
                log,
                TaskLifecycleEvent(
                    event_type=SERIES_DELETED_EVENT_TYPE,
                    task_id=group_id,
                    occurred_at=self._clock(),
                    payload={"group_id": group_id, "task_ids": deleted},
                ),
            )
            return deleted

    async def delete_recurring_series(
        self, recurrence_group_id: str, *, keep_resolved: bool = False
    ) -> list[str]:
        """Delete every task of a recurring series.

        Args:
            recurrence_group_id: The series to delete.
            keep_resolved: Keep completed and not-done instances as history.

        Returns:
            Ids of the deleted tasks.
        """
        return await self._delete_series(
            "delete_recurring_series",
            recurrence_group_id,
            lambda t: t.recurrence_group_id == recurrence_group_id,
            keep_resolved,
        )

    async def delete_routine_series(
        self, routine_group_id: str, *, keep_resolved: bool = False
    ) -> list[str]:
        """Delete every instance of a routine, including its first instance.

        Returns:
            Ids of the deleted tasks.
        """
        return await self._delete_series(
            "delete_routine_series",
            routine_group_id,
            lambda t: t.is_routine and t.effective_routine_group_id == routine_group_id,
            keep_resolved,
        )
