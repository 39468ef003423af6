"""Recurrence rule value object.

Describes when a recurring task repeats. Supported patterns:
- daily, every N days (optionally skipping weekends)
- weekly on specific days of the week, every N weeks
- monthly on specific days of the month, every N months
- yearly on a specific month/day, every N years
- custom: every N days, weeks, months or years from the start date

Days of the week use 0=Sunday .. 6=Saturday.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any


class RecurrenceType(Enum):
    """Recurrence pattern."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    CUSTOM = "custom"


class EndCondition(Enum):
    """How a recurrence ends."""

    NEVER = "never"
    ON_DATE = "on_date"
    AFTER_OCCURRENCES = "after_occurrences"


class RecurrenceUnit(Enum):
    """Unit for CUSTOM recurrences."""

    DAYS = "days"
    WEEKS = "weeks"
    MONTHS = "months"
    YEARS = "years"


def _sunday_based_weekday(day: date) -> int:
    # date.weekday(): Monday=0 .. Sunday=6
    return (day.weekday() + 1) % 7


def _months_between(start: date, day: date) -> int:
    return (day.year - start.year) * 12 + (day.month - start.month)


@dataclass(frozen=True, eq=True)
class RecurrenceRule:
    """When a recurring task repeats.

    Attributes:
        type: Pattern type.
        start_date: First day the rule can fire.
        interval: Repeat every N units (>= 1).
        days_of_week: WEEKLY: days to fire on (0=Sunday).
        days_of_month: MONTHLY: days of the month to fire on (1-31).
        day_of_year: YEARLY: ``(month, day)``.
        unit: CUSTOM: unit the interval counts in.
        end_condition: How the series ends.
        end_date: Last day (inclusive) for ON_DATE.
        occurrences: Series length for AFTER_OCCURRENCES.
        skip_weekends: Never fire on Saturday or Sunday.
    """

    type: RecurrenceType
    start_date: date
    interval: int = 1
    days_of_week: tuple[int, ...] = ()
    days_of_month: tuple[int, ...] = ()
    day_of_year: tuple[int, int] | None = None
    unit: RecurrenceUnit | None = None
    end_condition: EndCondition = EndCondition.NEVER
    end_date: date | None = None
    occurrences: int | None = None
    skip_weekends: bool = False

    def __post_init__(self) -> None:
        """Validate rule fields."""
        if self.interval < 1:
            raise ValueError(f"interval must be >= 1, got {self.interval}")
        if any(not 0 <= d <= 6 for d in self.days_of_week):
            raise ValueError("days_of_week values must be between 0 and 6")
        if any(not 1 <= d <= 31 for d in self.days_of_month):
            raise ValueError("days_of_month values must be between 1 and 31")
        if self.end_condition is EndCondition.ON_DATE and self.end_date is None:
            raise ValueError("end_date is required when end_condition is on_date")
        if self.end_condition is EndCondition.AFTER_OCCURRENCES and (
            self.occurrences is None or self.occurrences < 1
        ):
            raise ValueError(
                "occurrences must be >= 1 when end_condition is after_occurrences"
            )

    @classmethod
    def daily(cls, start_date: date, interval: int = 1, **kwargs: Any) -> RecurrenceRule:
        return cls(type=RecurrenceType.DAILY, start_date=start_date, interval=interval, **kwargs)

    @classmethod
    def weekly(
        cls,
        start_date: date,
        days_of_week: tuple[int, ...] | None = None,
        interval: int = 1,
        **kwargs: Any,
    ) -> RecurrenceRule:
        """Weekly rule; defaults to the start date's weekday."""
        return cls(
            type=RecurrenceType.WEEKLY,
            start_date=start_date,
            interval=interval,
            days_of_week=days_of_week or (_sunday_based_weekday(start_date),),
            **kwargs,
        )

    @classmethod
    def monthly(
        cls,
        start_date: date,
        days_of_month: tuple[int, ...] | None = None,
        interval: int = 1,
        **kwargs: Any,
    ) -> RecurrenceRule:
        """Monthly rule; defaults to the start date's day of month."""
        return cls(
            type=RecurrenceType.MONTHLY,
            start_date=start_date,
            interval=interval,
            days_of_month=days_of_month or (start_date.day,),
            **kwargs,
        )

    @classmethod
    def yearly(cls, start_date: date, interval: int = 1, **kwargs: Any) -> RecurrenceRule:
        return cls(
            type=RecurrenceType.YEARLY,
            start_date=start_date,
            interval=interval,
            day_of_year=(start_date.month, start_date.day),
            **kwargs,
        )

    def has_ended(self, day: date) -> bool:
        """Whether the series has ended by ``day``.

        AFTER_OCCURRENCES cannot be decided from a date alone; the
        recurrence engine counts occurrences for that condition.
        """
        if self.end_condition is EndCondition.ON_DATE:
            return self.end_date is not None and day > self.end_date
        return False

    def is_due_on(self, day: date) -> bool:
        """Whether the rule fires on ``day``.

        Custom week and month intervals are anchored to the start date: they
        fire on its weekday or day of the month only.
        """
        if day < self.start_date or self.has_ended(day):
            return False
        if self.skip_weekends and day.weekday() >= 5:
            return False

        days_since_start = (day - self.start_date).days

        if self.type is RecurrenceType.DAILY:
            return days_since_start % self.interval == 0

        if self.type is RecurrenceType.WEEKLY:
            if _sunday_based_weekday(day) not in self.days_of_week:
                return False
            return (days_since_start // 7) % self.interval == 0

        if self.type is RecurrenceType.MONTHLY:
            if day.day not in self.days_of_month:
                return False
            return _months_between(self.start_date, day) % self.interval == 0

        if self.type is RecurrenceType.YEARLY:
            if self.day_of_year is None or (day.month, day.day) != self.day_of_year:
                return False
            return (day.year - self.start_date.year) % self.interval == 0

        # CUSTOM
        if self.unit is RecurrenceUnit.DAYS:
            return days_since_start % self.interval == 0
        if self.unit is RecurrenceUnit.WEEKS:
            return days_since_start % (7 * self.interval) == 0
        if self.unit is RecurrenceUnit.MONTHS:
            return (
                day.day == self.start_date.day
                and _months_between(self.start_date, day) % self.interval == 0
            )
        if self.unit is RecurrenceUnit.YEARS:
            return (
                (day.month, day.day) == (self.start_date.month, self.start_date.day)
                and (day.year - self.start_date.year) % self.interval == 0
            )
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "interval": self.interval,
            "daysOfWeek": list(self.days_of_week) or None,
            "daysOfMonth": list(self.days_of_month) or None,
            "dayOfYear": (
                {"month": self.day_of_year[0], "day": self.day_of_year[1]}
                if self.day_of_year
                else None
            ),
            "startDate": self.start_date.isoformat(),
            "endCondition": self.end_condition.value,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "unit": self.unit.value if self.unit else None,
            "occurrences": self.occurrences,
            "skipWeekends": self.skip_weekends,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecurrenceRule:
        day_of_year = data.get("dayOfYear")
        return cls(
            type=RecurrenceType(data["type"]),
            start_date=date.fromisoformat(data["startDate"][:10]),
            interval=int(data.get("interval") or 1),
            days_of_week=tuple(data.get("daysOfWeek") or ()),
            days_of_month=tuple(data.get("daysOfMonth") or ()),
            day_of_year=(
                (int(day_of_year["month"]), int(day_of_year["day"]))
                if day_of_year
                else None
            ),
            unit=RecurrenceUnit(data["unit"]) if data.get("unit") else None,
            end_condition=EndCondition(data.get("endCondition") or "never"),
            end_date=(
                date.fromisoformat(data["endDate"][:10]) if data.get("endDate") else None
            ),
            occurrences=data.get("occurrences"),
            skip_weekends=bool(data.get("skipWeekends", False)),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> RecurrenceRule:
        return cls.from_dict(json.loads(raw))
