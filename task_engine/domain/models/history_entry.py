"""Postpone and snooze history entries.

Both entry types are immutable once appended to a task's history. Their
``to_dict`` form is the persisted flat-record format used by the history log
codec, so the key names are part of the storage contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Any

# Penalty assumed for legacy postpone records stored before penalties were
# tracked per entry.
LEGACY_POSTPONE_PENALTY: int = -5


@dataclass(frozen=True, eq=True)
class PostponeEntry:
    """A single postpone event.

    Attributes:
        from_date: Due date the task had before the move.
        to_date: New due date.
        reason: User-supplied reason.
        postponed_at: When the postpone happened.
        penalty_applied: Points applied for this postpone (<= 0).
        from_time: Due time-of-day the task had before the move, if any.
    """

    from_date: datetime
    to_date: datetime
    reason: str
    postponed_at: datetime
    penalty_applied: int = 0
    from_time: time | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_date.isoformat(),
            "fromTime": self.from_time.isoformat() if self.from_time is not None else None,
            "to": self.to_date.isoformat(),
            "reason": self.reason,
            "postponedAt": self.postponed_at.isoformat(),
            "penaltyApplied": self.penalty_applied,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PostponeEntry:
        """Build an entry from its persisted form.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed.
        """
        raw_time = data.get("fromTime")
        raw_penalty = data.get("penaltyApplied")
        return cls(
            from_date=datetime.fromisoformat(data["from"]),
            to_date=datetime.fromisoformat(data["to"]),
            reason=str(data.get("reason") or ""),
            postponed_at=datetime.fromisoformat(data["postponedAt"]),
            penalty_applied=(
                LEGACY_POSTPONE_PENALTY if raw_penalty is None else int(raw_penalty)
            ),
            from_time=time.fromisoformat(raw_time) if raw_time else None,
        )


@dataclass(frozen=True, eq=True)
class SnoozeEntry:
    """A single snooze event.

    Attributes:
        at: When the snooze was requested.
        minutes: Snooze length in minutes (> 0).
        until: ``at + minutes``.
        source: Surface that issued the snooze (e.g. ``"popup"``, ``"alarm"``).
    """

    at: datetime
    minutes: int
    until: datetime
    source: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "at": self.at.isoformat(),
            "minutes": self.minutes,
            "until": self.until.isoformat(),
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnoozeEntry:
        """Build an entry from its persisted form.

        Raises:
            KeyError, TypeError, ValueError: If the record is malformed.
        """
        return cls(
            at=datetime.fromisoformat(data["at"]),
            minutes=int(data["minutes"]),
            until=datetime.fromisoformat(data["until"]),
            source=str(data.get("source") or ""),
        )
