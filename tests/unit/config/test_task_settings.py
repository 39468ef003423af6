"""Unit tests for the TaskSettings model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from task_engine.config.task_settings import (
    DEFAULT_NOT_DONE_REASONS,
    DEFAULT_SNOOZE_MINUTES,
    DEFAULT_SNOOZE_OPTIONS,
    TaskSettings,
)


class TestTaskSettings:
    """TaskSettings"""

    def test_defaults(self) -> None:
        settings = TaskSettings()

        assert settings.not_done_reasons == list(DEFAULT_NOT_DONE_REASONS)
        assert settings.snooze_options == list(DEFAULT_SNOOZE_OPTIONS)
        assert settings.default_snooze_minutes == DEFAULT_SNOOZE_MINUTES

    def test_reasons_are_cleaned(self) -> None:
        settings = TaskSettings(postpone_reasons=[" Rain ", "", "rain", "Travel", "   "])

        assert settings.postpone_reasons == ["Rain", "Travel"]

    def test_snooze_options_sorted_and_unique(self) -> None:
        settings = TaskSettings(snooze_options=[30, 5, 30, 10], default_snooze_minutes=5)

        assert settings.snooze_options == [5, 10, 30]

    @pytest.mark.parametrize("options", [[], [0, 10], [10, 1441]])
    def test_invalid_snooze_options(self, options: list[int]) -> None:
        with pytest.raises(ValidationError):
            TaskSettings(snooze_options=options)

    def test_default_must_be_offered(self) -> None:
        with pytest.raises(ValidationError, match="must be one of snooze_options"):
            TaskSettings(default_snooze_minutes=7)

    def test_frozen(self) -> None:
        settings = TaskSettings()

        with pytest.raises(ValidationError):
            settings.default_snooze_minutes = 5  # type: ignore[misc]

    def test_from_mapping(self) -> None:
        settings = TaskSettings.model_validate(
            {"snooze_options": [15, 45], "default_snooze_minutes": 45}
        )

        assert settings.default_snooze_minutes == 45
