"""Recurrence engine domain service.

Generates occurrence dates from a RecurrenceRule and plans the rolling window
of pending instances a recurring series keeps ahead of the user. Completing
one instance tops the window back up; nothing is generated past the rule's
end condition.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from uuid import uuid4

from task_engine.domain.models.recurrence_rule import EndCondition, RecurrenceRule
from task_engine.domain.models.task_record import TaskKind, TaskRecord, TaskStatus

# Upper bound on the day-by-day scan for the next occurrence
MAX_SCAN_DAYS: int = 400

DEFAULT_PLANNING_WINDOW_DAYS: int = 14
DEFAULT_MAX_OCCURRENCES: int = 10


def generate_next_occurrences(
    rule: RecurrenceRule,
    after: date,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
    *,
    until: date | None = None,
    existing_count: int = 0,
) -> list[date]:
    """Occurrence dates strictly after ``after``.

    Args:
        rule: The recurrence rule.
        after: Exclusive lower bound.
        max_occurrences: Maximum number of dates returned.
        until: Optional inclusive upper bound.
        existing_count: Occurrences already in the series, counted against
            an ``after_occurrences`` end condition.
    """
    limit = max_occurrences
    if rule.end_condition is EndCondition.AFTER_OCCURRENCES and rule.occurrences:
        limit = min(limit, rule.occurrences - existing_count)
    if limit <= 0:
        return []

    occurrences: list[date] = []
    day = max(after + timedelta(days=1), rule.start_date)
    last_day = after + timedelta(days=MAX_SCAN_DAYS)
    if until is not None:
        last_day = min(last_day, until)

    while day <= last_day and len(occurrences) < limit:
        if rule.has_ended(day):
            break
        if rule.is_due_on(day):
            occurrences.append(day)
        day += timedelta(days=1)
    return occurrences


def next_occurrence(
    rule: RecurrenceRule, after: date, *, existing_count: int = 0
) -> date | None:
    """The first occurrence strictly after ``after``, if any."""
    dates = generate_next_occurrences(rule, after, 1, existing_count=existing_count)
    return dates[0] if dates else None


def plan_rolling_window(
    task: TaskRecord,
    group_tasks: Iterable[TaskRecord],
    now: datetime,
    window_days: int = DEFAULT_PLANNING_WINDOW_DAYS,
    max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
) -> list[TaskRecord]:
    """New pending instances that keep ``task``'s series filled ahead.

    Instances are generated after the latest due date in the group up to
    ``now + window_days``. When the group would otherwise have no open
    instance, the next occurrence is generated even past the window.

    Args:
        task: The recurring task that was just completed.
        group_tasks: All known tasks of the series (may include ``task``).
        now: Generation time, also the new instances' ``created_at``.
        window_days: Planning horizon in days.
        max_occurrences: Cap on instances generated per call.

    Returns:
        The new records, unsaved, in due-date order.
    """
    rule = task.recurrence_rule
    if rule is None or task.recurrence_group_id is None:
        return []

    group = {t.id: t for t in group_tasks if t.recurrence_group_id == task.recurrence_group_id}
    group[task.id] = task

    has_open = any(t.status.is_open() for t in group.values())
    last_due = max(t.due_date.date() for t in group.values())
    last_index = max(t.recurrence_index for t in group.values())
    horizon = now.date() + timedelta(days=window_days)

    dates = generate_next_occurrences(
        rule,
        last_due,
        max_occurrences,
        until=horizon,
        existing_count=len(group),
    )
    if not dates and not has_open:
        following = next_occurrence(rule, last_due, existing_count=len(group))
        if following is not None:
            dates = [following]

    instances: list[TaskRecord] = []
    for day in dates:
        last_index += 1
        instances.append(
            TaskRecord(
                id=str(uuid4()),
                title=task.title,
                description=task.description,
                due_date=datetime.combine(day, task.due_date.timetz()),
                due_time=task.due_time,
                task_kind=TaskKind.RECURRING,
                status=TaskStatus.PENDING,
                task_type_id=task.task_type_id,
                subtasks=tuple(s.reset() for s in task.subtasks),
                recurrence_rule=rule,
                recurrence_group_id=task.recurrence_group_id,
                recurrence_index=last_index,
                created_at=now,
            )
        )
    return instances
