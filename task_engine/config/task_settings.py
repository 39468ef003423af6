"""User-facing task settings.

The reason lists shown when skipping or postponing a task, and the snooze
durations offered by reminder popups. Settings come from a settings provider
port; this model validates whatever the provider hands over.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from task_engine.domain.services.duration_validator import MAX_SNOOZE_MINUTES

DEFAULT_NOT_DONE_REASONS: tuple[str, ...] = (
    "Not enough time",
    "Too tired",
    "Forgot",
    "No longer needed",
)
DEFAULT_POSTPONE_REASONS: tuple[str, ...] = (
    "Busy with something else",
    "Waiting on someone",
    "Not feeling well",
)
DEFAULT_SNOOZE_OPTIONS: tuple[int, ...] = (5, 10, 15, 30, 60)
DEFAULT_SNOOZE_MINUTES: int = 10


def _dedupe_reasons(values: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        text = value.strip()
        if text and text.casefold() not in seen:
            seen.add(text.casefold())
            result.append(text)
    return result


class TaskSettings(BaseModel):
    """Reasons and snooze choices offered to the user."""

    model_config = ConfigDict(frozen=True)

    not_done_reasons: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_NOT_DONE_REASONS),
            description="Reasons offered when marking a task not done",
        ),
    ]
    postpone_reasons: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(DEFAULT_POSTPONE_REASONS),
            description="Reasons offered when postponing a task",
        ),
    ]
    default_snooze_minutes: Annotated[
        int,
        Field(
            default=DEFAULT_SNOOZE_MINUTES,
            ge=1,
            le=MAX_SNOOZE_MINUTES,
            description="Snooze length used when the user does not pick one",
        ),
    ]
    snooze_options: Annotated[
        list[int],
        Field(
            default_factory=lambda: list(DEFAULT_SNOOZE_OPTIONS),
            min_length=1,
            description="Snooze lengths offered in minutes, ascending",
        ),
    ]

    @field_validator("not_done_reasons", "postpone_reasons")
    @classmethod
    def clean_reasons(cls, v: list[str]) -> list[str]:
        """Strip, drop blanks and case-insensitive duplicates, keep order."""
        return _dedupe_reasons(v)

    @field_validator("snooze_options")
    @classmethod
    def clean_snooze_options(cls, v: list[int]) -> list[int]:
        """De-duplicate and sort; every option must be a valid snooze."""
        options = sorted(set(v))
        for minutes in options:
            if not 1 <= minutes <= MAX_SNOOZE_MINUTES:
                raise ValueError(
                    f"snooze option must be between 1 and {MAX_SNOOZE_MINUTES}, got {minutes}"
                )
        return options

    @model_validator(mode="after")
    def default_in_options(self) -> TaskSettings:
        """The default snooze must be one of the offered options."""
        if self.default_snooze_minutes not in self.snooze_options:
            raise ValueError(
                f"default_snooze_minutes ({self.default_snooze_minutes}) "
                f"must be one of snooze_options {self.snooze_options}"
            )
        return self
