"""Application ports for the task engine.

Ports are ``typing.Protocol`` interfaces the application services depend on.
Adapters live in the infrastructure layer.
"""

from task_engine.application.ports.error_reporter import ErrorReporterProtocol
from task_engine.application.ports.notification_scheduler import (
    NotificationSchedulerProtocol,
)
from task_engine.application.ports.task_event_channel import TaskEventChannelProtocol
from task_engine.application.ports.task_repository import (
    TaskPredicate,
    TaskRepositoryProtocol,
)
from task_engine.application.ports.task_settings_provider import (
    TaskSettingsProviderProtocol,
)
from task_engine.application.ports.task_type_repository import (
    TaskTypeRepositoryProtocol,
)

__all__: list[str] = [
    "ErrorReporterProtocol",
    "NotificationSchedulerProtocol",
    "TaskEventChannelProtocol",
    "TaskPredicate",
    "TaskRepositoryProtocol",
    "TaskSettingsProviderProtocol",
    "TaskTypeRepositoryProtocol",
]
