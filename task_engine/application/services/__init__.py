"""Application services for the task engine."""

from task_engine.application.services.base import LoggingMixin
from task_engine.application.services.task_lifecycle_service import (
    TaskLifecycleService,
)

__all__: list[str] = [
    "LoggingMixin",
    "TaskLifecycleService",
]
