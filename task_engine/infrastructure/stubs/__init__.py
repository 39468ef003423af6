"""In-memory stub adapters for every application port.

Used by tests and by the development wiring in ``task_engine.bootstrap``.
"""

from task_engine.infrastructure.stubs.error_reporter_stub import (
    ErrorReporterStub,
    ReportedError,
)
from task_engine.infrastructure.stubs.notification_scheduler_stub import (
    NotificationSchedulerStub,
    ScheduledSnooze,
)
from task_engine.infrastructure.stubs.task_event_channel_stub import (
    TaskEventChannelStub,
)
from task_engine.infrastructure.stubs.task_repository_stub import TaskRepositoryStub
from task_engine.infrastructure.stubs.task_settings_provider_stub import (
    TaskSettingsProviderStub,
)
from task_engine.infrastructure.stubs.task_type_repository_stub import (
    TaskTypeRepositoryStub,
)

__all__ = [
    "ErrorReporterStub",
    "NotificationSchedulerStub",
    "ReportedError",
    "ScheduledSnooze",
    "TaskEventChannelStub",
    "TaskRepositoryStub",
    "TaskSettingsProviderStub",
    "TaskTypeRepositoryStub",
]
