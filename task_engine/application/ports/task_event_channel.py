"""Task event channel port.

Lifecycle events are published here after they have been persisted. UI
layers subscribe to this channel instead of looking up global application
state.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from task_engine.domain.events.task_lifecycle import TaskLifecycleEvent


class TaskEventChannelProtocol(Protocol):
    """Protocol for publishing task lifecycle events."""

    @abstractmethod
    async def publish(self, event: TaskLifecycleEvent) -> None:
        """Publish one event to all subscribers."""
        ...
