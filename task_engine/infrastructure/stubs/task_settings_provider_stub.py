"""Task settings provider stub implementation."""

from __future__ import annotations

from task_engine.application.ports.task_settings_provider import (
    TaskSettingsProviderProtocol,
)
from task_engine.config.task_settings import TaskSettings


class TaskSettingsProviderStub(TaskSettingsProviderProtocol):
    """Serves a fixed TaskSettings instance (testing only)."""

    def __init__(self, settings: TaskSettings | None = None) -> None:
        self._settings = settings or TaskSettings()

    def set_settings(self, settings: TaskSettings) -> None:
        self._settings = settings

    def get_settings(self) -> TaskSettings:
        return self._settings
