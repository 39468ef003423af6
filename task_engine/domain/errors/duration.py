"""Duration validation errors."""

from __future__ import annotations

from task_engine.domain.exceptions import TaskEngineError


class InvalidDurationError(TaskEngineError):
    """Raised when a snooze duration is non-positive or exceeds the ceiling.

    Attributes:
        minutes: The rejected duration in minutes.
        max_minutes: The configured ceiling.
    """

    def __init__(self, minutes: int, max_minutes: int) -> None:
        self.minutes = minutes
        self.max_minutes = max_minutes
        super().__init__(
            f"Duration must be between 1 and {max_minutes} minutes, got {minutes}"
        )
