"""Snooze duration validation domain service.

Snoozes are bounded: a zero or negative snooze would never fire, and the
ceiling keeps a reminder from disappearing for longer than a day.

Duration Constraints:
- Minimum: 1 minute
- Maximum: ``max_minutes`` (1440 minutes / 24 hours by default)
"""

from __future__ import annotations

from task_engine.domain.errors.duration import InvalidDurationError

MIN_SNOOZE_MINUTES: int = 1
MAX_SNOOZE_MINUTES: int = 1440  # 24 * 60


def validate_snooze_minutes(minutes: int, max_minutes: int = MAX_SNOOZE_MINUTES) -> None:
    """Validate a snooze duration is within allowed bounds.

    Args:
        minutes: Requested snooze length in minutes.
        max_minutes: Inclusive ceiling.

    Raises:
        InvalidDurationError: If ``minutes`` is not in ``1..max_minutes``.
    """
    if minutes < MIN_SNOOZE_MINUTES or minutes > max_minutes:
        raise InvalidDurationError(minutes=minutes, max_minutes=max_minutes)
