"""Task engine configuration.

This module defines the tunable limits of the lifecycle engine with
environment variable overrides.

Environment Variables:
- TASK_MAX_SNOOZE_MINUTES: Snooze ceiling in minutes (default: 1440)
- TASK_DEFAULT_POSTPONE_PENALTY: Postpone penalty without a TaskType (default: -5)
- TASK_PLANNING_WINDOW_DAYS: Rolling window for recurring tasks (default: 14)
- TASK_MAX_GENERATED_OCCURRENCES: Instances generated per completion (default: 10)
- TASK_SPAWN_DETECTION_BUFFER_SECONDS: Undo spawn-detection tolerance (default: 5)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class EngineConfig:
    """Limits and defaults of the lifecycle engine.

    Attributes:
        max_snooze_minutes: Longest allowed snooze (1..1440).
        default_postpone_penalty: Penalty per postpone for tasks without a
            TaskType (<= 0).
        planning_window_days: How far ahead recurring instances are kept
            generated (1..365).
        max_generated_occurrences: Cap on instances generated per completion
            (1..100).
        spawn_detection_buffer_seconds: Tolerance before ``completed_at`` when
            looking for instances generated by a completion (0..300).
    """

    max_snooze_minutes: int = 1440
    default_postpone_penalty: int = -5
    planning_window_days: int = 14
    max_generated_occurrences: int = 10
    spawn_detection_buffer_seconds: int = 5

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not 1 <= self.max_snooze_minutes <= 1440:
            raise ValueError(
                f"max_snooze_minutes must be between 1 and 1440, got {self.max_snooze_minutes}"
            )
        if self.default_postpone_penalty > 0:
            raise ValueError(
                "default_postpone_penalty must be <= 0, "
                f"got {self.default_postpone_penalty}"
            )
        if not 1 <= self.planning_window_days <= 365:
            raise ValueError(
                "planning_window_days must be between 1 and 365, "
                f"got {self.planning_window_days}"
            )
        if not 1 <= self.max_generated_occurrences <= 100:
            raise ValueError(
                "max_generated_occurrences must be between 1 and 100, "
                f"got {self.max_generated_occurrences}"
            )
        if not 0 <= self.spawn_detection_buffer_seconds <= 300:
            raise ValueError(
                "spawn_detection_buffer_seconds must be between 0 and 300, "
                f"got {self.spawn_detection_buffer_seconds}"
            )

    @property
    def spawn_detection_buffer(self) -> timedelta:
        return timedelta(seconds=self.spawn_detection_buffer_seconds)

    @classmethod
    def from_environment(cls) -> EngineConfig:
        """Create config from environment variables with defaults.

        Returns:
            EngineConfig with values from environment or defaults.

        Raises:
            ValueError: If an override is out of range.
        """
        return cls(
            max_snooze_minutes=_get_int_env("TASK_MAX_SNOOZE_MINUTES", 1440),
            default_postpone_penalty=_get_int_env("TASK_DEFAULT_POSTPONE_PENALTY", -5),
            planning_window_days=_get_int_env("TASK_PLANNING_WINDOW_DAYS", 14),
            max_generated_occurrences=_get_int_env("TASK_MAX_GENERATED_OCCURRENCES", 10),
            spawn_detection_buffer_seconds=_get_int_env(
                "TASK_SPAWN_DETECTION_BUFFER_SECONDS", 5
            ),
        )


# Default production config
DEFAULT_ENGINE_CONFIG = EngineConfig()

# Testing config with a short planning window
TEST_ENGINE_CONFIG = EngineConfig(
    planning_window_days=7,
    max_generated_occurrences=5,
)
