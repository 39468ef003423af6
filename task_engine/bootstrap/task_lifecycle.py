"""Bootstrap wiring for task lifecycle dependencies.

Loads ``.env`` once, reads the engine configuration from the environment and
wires the lifecycle service to the in-memory adapters. Hosts embedding the
engine replace individual adapters with the ``set_*`` functions before the
first ``get_task_lifecycle_service()`` call.
"""

from __future__ import annotations

from dotenv import load_dotenv
from structlog import get_logger

from task_engine.application.ports.error_reporter import ErrorReporterProtocol
from task_engine.application.ports.notification_scheduler import (
    NotificationSchedulerProtocol,
)
from task_engine.application.ports.task_event_channel import TaskEventChannelProtocol
from task_engine.application.ports.task_repository import TaskRepositoryProtocol
from task_engine.application.ports.task_settings_provider import (
    TaskSettingsProviderProtocol,
)
from task_engine.application.ports.task_type_repository import (
    TaskTypeRepositoryProtocol,
)
from task_engine.application.services.task_lifecycle_service import (
    TaskLifecycleService,
)
from task_engine.config.engine_config import EngineConfig
from task_engine.infrastructure.observability.error_reporter import (
    StructlogErrorReporter,
)
from task_engine.infrastructure.stubs.notification_scheduler_stub import (
    NotificationSchedulerStub,
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

logger = get_logger()

_env_loaded: bool = False
_engine_config: EngineConfig | None = None
_error_reporter: ErrorReporterProtocol | None = None
_task_repository: TaskRepositoryProtocol | None = None
_task_type_repository: TaskTypeRepositoryProtocol | None = None
_notification_scheduler: NotificationSchedulerProtocol | None = None
_settings_provider: TaskSettingsProviderProtocol | None = None
_event_channel: TaskEventChannelProtocol | None = None
_task_lifecycle_service: TaskLifecycleService | None = None


def _ensure_env_loaded() -> None:
    global _env_loaded
    if not _env_loaded:
        load_dotenv()
        _env_loaded = True


def get_engine_config() -> EngineConfig:
    """Get engine configuration (environment overrides applied)."""
    global _engine_config
    if _engine_config is None:
        _ensure_env_loaded()
        _engine_config = EngineConfig.from_environment()
        logger.info(
            "engine_config_loaded",
            max_snooze_minutes=_engine_config.max_snooze_minutes,
            default_postpone_penalty=_engine_config.default_postpone_penalty,
            planning_window_days=_engine_config.planning_window_days,
        )
    return _engine_config


def get_error_reporter() -> ErrorReporterProtocol:
    """Get error reporter instance."""
    global _error_reporter
    if _error_reporter is None:
        _error_reporter = StructlogErrorReporter()
    return _error_reporter


def get_task_repository() -> TaskRepositoryProtocol:
    """Get task repository instance (in-memory unless one was set)."""
    global _task_repository
    if _task_repository is None:
        logger.warning(
            "task_repository_initialized",
            repository_type="in-memory stub",
            message="No task repository configured, records are not persisted",
        )
        _task_repository = TaskRepositoryStub(error_reporter=get_error_reporter())
    return _task_repository


def get_task_type_repository() -> TaskTypeRepositoryProtocol:
    """Get task type repository instance."""
    global _task_type_repository
    if _task_type_repository is None:
        _task_type_repository = TaskTypeRepositoryStub()
    return _task_type_repository


def get_notification_scheduler() -> NotificationSchedulerProtocol:
    """Get notification scheduler instance."""
    global _notification_scheduler
    if _notification_scheduler is None:
        _notification_scheduler = NotificationSchedulerStub()
    return _notification_scheduler


def get_settings_provider() -> TaskSettingsProviderProtocol:
    """Get task settings provider instance."""
    global _settings_provider
    if _settings_provider is None:
        _settings_provider = TaskSettingsProviderStub()
    return _settings_provider


def get_event_channel() -> TaskEventChannelProtocol:
    """Get task event channel instance."""
    global _event_channel
    if _event_channel is None:
        _event_channel = TaskEventChannelStub()
    return _event_channel


def get_task_lifecycle_service() -> TaskLifecycleService:
    """Get the wired task lifecycle service."""
    global _task_lifecycle_service
    if _task_lifecycle_service is None:
        _task_lifecycle_service = TaskLifecycleService(
            repository=get_task_repository(),
            task_types=get_task_type_repository(),
            notifications=get_notification_scheduler(),
            settings_provider=get_settings_provider(),
            event_channel=get_event_channel(),
            error_reporter=get_error_reporter(),
            config=get_engine_config(),
        )
    return _task_lifecycle_service


def reset_task_lifecycle_dependencies() -> None:
    """Reset all singletons (for testing)."""
    global _env_loaded
    global _engine_config
    global _error_reporter
    global _task_repository
    global _task_type_repository
    global _notification_scheduler
    global _settings_provider
    global _event_channel
    global _task_lifecycle_service
    _env_loaded = False
    _engine_config = None
    _error_reporter = None
    _task_repository = None
    _task_type_repository = None
    _notification_scheduler = None
    _settings_provider = None
    _event_channel = None
    _task_lifecycle_service = None


def set_engine_config(config: EngineConfig) -> None:
    """Set engine configuration (for testing or embedding)."""
    global _engine_config, _task_lifecycle_service
    _engine_config = config
    _task_lifecycle_service = None


def set_task_repository(repository: TaskRepositoryProtocol) -> None:
    """Set task repository (for testing or embedding)."""
    global _task_repository, _task_lifecycle_service
    _task_repository = repository
    _task_lifecycle_service = None


def set_task_type_repository(repository: TaskTypeRepositoryProtocol) -> None:
    """Set task type repository."""
    global _task_type_repository, _task_lifecycle_service
    _task_type_repository = repository
    _task_lifecycle_service = None


def set_notification_scheduler(scheduler: NotificationSchedulerProtocol) -> None:
    """Set notification scheduler."""
    global _notification_scheduler, _task_lifecycle_service
    _notification_scheduler = scheduler
    _task_lifecycle_service = None


def set_settings_provider(provider: TaskSettingsProviderProtocol) -> None:
    """Set task settings provider."""
    global _settings_provider, _task_lifecycle_service
    _settings_provider = provider
    _task_lifecycle_service = None


def set_event_channel(channel: TaskEventChannelProtocol) -> None:
    """Set task event channel."""
    global _event_channel, _task_lifecycle_service
    _event_channel = channel
    _task_lifecycle_service = None


def set_error_reporter(reporter: ErrorReporterProtocol) -> None:
    """Set error reporter."""
    global _error_reporter, _task_lifecycle_service
    _error_reporter = reporter
    _task_lifecycle_service = None
