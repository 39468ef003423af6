"""TaskRecord persistence codec.

Converts a TaskRecord to and from the flat, JSON-safe mapping handed to the
storage engine. Keys are camelCase to match the stored record format. The
two history trails are nested JSON strings produced by the history log.
"""

from __future__ import annotations

import json
from datetime import datetime, time
from typing import Any

from task_engine.domain.models.recurrence_rule import RecurrenceRule
from task_engine.domain.models.subtask import Subtask
from task_engine.domain.models.task_record import (
    TaskKind,
    TaskRecord,
    TaskStatus,
    determine_task_kind,
)
from task_engine.domain.services.history_log import (
    DecodeFailureReporter,
    decode_postpone_history,
    decode_snooze_history,
    encode_postpone_history,
    encode_snooze_history,
)


def _dt(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def task_to_dict(task: TaskRecord) -> dict[str, Any]:
    """Encode ``task`` to its persisted form."""
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "dueDate": task.due_date.isoformat(),
        "dueTime": task.due_time.isoformat() if task.due_time is not None else None,
        "taskKind": task.task_kind.value,
        "status": task.status.value,
        "taskTypeId": task.task_type_id,
        "pointsEarned": task.points_earned,
        "postponeCount": task.postpone_count,
        "cumulativePostponePenalty": task.cumulative_postpone_penalty,
        "postponeHistory": encode_postpone_history(task.postpone_history),
        "snoozeHistory": encode_snooze_history(task.snooze_history),
        "snoozedUntil": _dt(task.snoozed_until),
        "subtasks": (
            json.dumps([s.to_dict() for s in task.subtasks]) if task.subtasks else None
        ),
        "recurrenceRule": task.recurrence_rule.to_json() if task.recurrence_rule else None,
        "recurrenceGroupId": task.recurrence_group_id,
        "routineGroupId": task.routine_group_id,
        "recurrenceIndex": task.recurrence_index,
        "originalDueDate": _dt(task.original_due_date),
        "progressStartDate": _dt(task.progress_start_date),
        "notDoneReason": task.not_done_reason,
        "postponeReason": task.postpone_reason,
        "postponedAt": _dt(task.postponed_at),
        "completedAt": _dt(task.completed_at),
        "reflection": task.reflection,
        "createdAt": task.created_at.isoformat(),
    }


def task_from_dict(
    data: dict[str, Any],
    reporter: DecodeFailureReporter | None = None,
) -> TaskRecord:
    """Decode a persisted record.

    ``postponeCount`` and ``cumulativePostponePenalty`` are ignored on read:
    both are derived from the decoded postpone history. A missing
    ``taskKind`` is derived from the record's recurrence linkage.

    Raises:
        KeyError, ValueError: If required scalar fields are missing or
            malformed. History fields never raise.
    """
    task_id = str(data["id"])
    rule_raw = data.get("recurrenceRule")
    recurrence_rule = RecurrenceRule.from_json(rule_raw) if rule_raw else None
    subtasks_raw = data.get("subtasks")
    kind_raw = data.get("taskKind")
    if kind_raw:
        task_kind = TaskKind(kind_raw)
    else:
        task_kind = determine_task_kind(
            routine_group_id=data.get("routineGroupId"),
            recurrence_rule=recurrence_rule,
            recurrence_group_id=data.get("recurrenceGroupId"),
        )
    due_time_raw = data.get("dueTime")

    return TaskRecord(
        id=task_id,
        title=str(data.get("title", "")),
        description=data.get("description"),
        due_date=datetime.fromisoformat(data["dueDate"]),
        due_time=time.fromisoformat(due_time_raw) if due_time_raw else None,
        task_kind=task_kind,
        status=TaskStatus(data.get("status") or TaskStatus.PENDING.value),
        task_type_id=data.get("taskTypeId"),
        points_earned=int(data.get("pointsEarned") or 0),
        postpone_history=decode_postpone_history(
            data.get("postponeHistory"), reporter, task_id=task_id
        ),
        snooze_history=decode_snooze_history(
            data.get("snoozeHistory"), reporter, task_id=task_id
        ),
        snoozed_until=_parse_dt(data.get("snoozedUntil")),
        subtasks=(
            tuple(Subtask.from_dict(s) for s in json.loads(subtasks_raw))
            if subtasks_raw
            else ()
        ),
        recurrence_rule=recurrence_rule,
        recurrence_group_id=data.get("recurrenceGroupId"),
        routine_group_id=data.get("routineGroupId"),
        recurrence_index=int(data.get("recurrenceIndex") or 0),
        original_due_date=_parse_dt(data.get("originalDueDate")),
        progress_start_date=_parse_dt(data.get("progressStartDate")),
        not_done_reason=data.get("notDoneReason"),
        postpone_reason=data.get("postponeReason"),
        postponed_at=_parse_dt(data.get("postponedAt")),
        completed_at=_parse_dt(data.get("completedAt")),
        reflection=data.get("reflection"),
        created_at=datetime.fromisoformat(data["createdAt"]),
    )
