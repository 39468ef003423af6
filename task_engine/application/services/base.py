"""Structured logging shared by the engine's application services.

Every service logger carries the service class name. Each lifecycle action
binds an operation logger with the ambient correlation id, so all log lines
of one user action (load, transition, save, side effects) can be joined.
"""

import structlog

from task_engine.domain.exceptions import TaskEngineError
from task_engine.infrastructure.observability.correlation import get_correlation_id


class LoggingMixin:
    """Mixin giving services a bound structlog logger.

    Attributes:
        _log: Logger bound with ``service`` and ``component``.
    """

    _log: structlog.BoundLogger

    def _init_logger(self, component: str = "task_engine") -> None:
        """Bind the service logger. Call at the end of ``__init__``."""
        self._log = structlog.get_logger().bind(
            service=self.__class__.__name__,
            component=component,
        )

    def _log_operation(
        self,
        operation: str,
        **context: object,
    ) -> structlog.BoundLogger:
        """Bind a logger for one action.

        Context values that are ``None`` are left out, so optional
        arguments (a missing reflection, an unset source) do not clutter
        every line.
        """
        return self._log.bind(
            operation=operation,
            correlation_id=get_correlation_id(),
            **{key: value for key, value in context.items() if value is not None},
        )

    @staticmethod
    def _log_rejection(log: structlog.BoundLogger, exc: TaskEngineError) -> None:
        """Record a transition refused by a lifecycle rule.

        Rejections are expected outcomes of user input, so they are logged
        at info level and never sent to the error reporter.
        """
        log.info("transition_rejected", error_type=type(exc).__name__, error=str(exc))
