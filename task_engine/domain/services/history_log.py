"""History log domain service.

Owns the two append-only audit trails of a task: postpone history and snooze
history. Appends return new tuples; only the undo coordinator pops, and only
the last entry.

Persisted form: each history is stored as a JSON string holding a list of
flat records (see ``PostponeEntry.to_dict`` / ``SnoozeEntry.to_dict``). An
empty history is stored as ``None``.

Decoding never raises. Malformed stored history degrades to an empty history;
the failure is logged and handed to the optional reporter so it can be
surfaced without blocking the user.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from typing import Any, Protocol, TypeVar

import structlog

from task_engine.domain.errors.history import (
    EmptyHistoryError,
    InvalidHistoryEntryError,
)
from task_engine.domain.models.history_entry import PostponeEntry, SnoozeEntry

logger = structlog.get_logger(__name__)

_E = TypeVar("_E", PostponeEntry, SnoozeEntry)


class DecodeFailureReporter(Protocol):
    """Anything with the error-reporter ``report`` signature."""

    def report(
        self,
        message: str,
        *,
        error: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None: ...


def _check_postpone_entry(entry: PostponeEntry) -> None:
    if entry.penalty_applied > 0:
        raise InvalidHistoryEntryError(
            f"Postpone penalty must be <= 0, got {entry.penalty_applied}"
        )


def _check_snooze_entry(entry: SnoozeEntry) -> None:
    if entry.minutes <= 0:
        raise InvalidHistoryEntryError(
            f"Snooze minutes must be > 0, got {entry.minutes}"
        )


def append_postpone(
    history: Sequence[PostponeEntry], entry: PostponeEntry
) -> tuple[PostponeEntry, ...]:
    """Return ``history`` with ``entry`` appended.

    Raises:
        InvalidHistoryEntryError: If ``entry.penalty_applied`` is positive.
    """
    _check_postpone_entry(entry)
    return (*history, entry)


def append_snooze(
    history: Sequence[SnoozeEntry], entry: SnoozeEntry
) -> tuple[SnoozeEntry, ...]:
    """Return ``history`` with ``entry`` appended.

    Raises:
        InvalidHistoryEntryError: If ``entry.minutes`` is not positive.
    """
    _check_snooze_entry(entry)
    return (*history, entry)


def pop_last(history: Sequence[_E]) -> tuple[_E, tuple[_E, ...]]:
    """Split off the last entry.

    Returns:
        ``(last_entry, remaining_history)``.

    Raises:
        EmptyHistoryError: If ``history`` is empty.
    """
    if not history:
        raise EmptyHistoryError()
    return history[-1], tuple(history[:-1])


def _encode(history: Sequence[PostponeEntry] | Sequence[SnoozeEntry]) -> str | None:
    if not history:
        return None
    return json.dumps([entry.to_dict() for entry in history])


def encode_postpone_history(history: Sequence[PostponeEntry]) -> str | None:
    """Encode postpone history to its persisted JSON form."""
    return _encode(history)


def encode_snooze_history(history: Sequence[SnoozeEntry]) -> str | None:
    """Encode snooze history to its persisted JSON form."""
    return _encode(history)


def _decode(
    raw: str | None,
    *,
    kind: str,
    parse: Callable[[dict[str, Any]], _E],
    check: Callable[[_E], None],
    reporter: DecodeFailureReporter | None,
    task_id: str | None,
) -> tuple[_E, ...]:
    if not raw:
        return ()
    try:
        records = json.loads(raw)
        if not isinstance(records, list):
            raise TypeError(f"expected a JSON list, got {type(records).__name__}")
        for record in records:
            if not isinstance(record, dict):
                raise TypeError(
                    f"expected a JSON object per entry, got {type(record).__name__}"
                )
        entries = tuple(parse(record) for record in records)
        for entry in entries:
            check(entry)
    except (ValueError, TypeError, KeyError, InvalidHistoryEntryError) as exc:
        logger.warning(
            "history_decode_failed",
            history=kind,
            task_id=task_id,
            error=str(exc),
        )
        if reporter is not None:
            reporter.report(
                f"Failed to decode {kind} history",
                error=exc,
                context={"task_id": task_id, "history": kind},
            )
        return ()
    return entries


def decode_postpone_history(
    raw: str | None,
    reporter: DecodeFailureReporter | None = None,
    *,
    task_id: str | None = None,
) -> tuple[PostponeEntry, ...]:
    """Decode persisted postpone history.

    Legacy records without ``penaltyApplied`` decode with the legacy default
    penalty. Malformed input yields an empty history.
    """
    return _decode(
        raw,
        kind="postpone",
        parse=PostponeEntry.from_dict,
        check=_check_postpone_entry,
        reporter=reporter,
        task_id=task_id,
    )


def decode_snooze_history(
    raw: str | None,
    reporter: DecodeFailureReporter | None = None,
    *,
    task_id: str | None = None,
) -> tuple[SnoozeEntry, ...]:
    """Decode persisted snooze history. Malformed input yields an empty history."""
    return _decode(
        raw,
        kind="snooze",
        parse=SnoozeEntry.from_dict,
        check=_check_snooze_entry,
        reporter=reporter,
        task_id=task_id,
    )
