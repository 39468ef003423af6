"""Task settings provider port."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from task_engine.config.task_settings import TaskSettings


class TaskSettingsProviderProtocol(Protocol):
    """Source of the user's task settings (reasons, snooze options)."""

    @abstractmethod
    def get_settings(self) -> TaskSettings:
        """Return the current settings."""
        ...
