"""Error reporter that writes non-fatal failures to the structured log."""

from __future__ import annotations

from typing import Any

import structlog

from task_engine.infrastructure.observability.logging import get_logger_for_service


class StructlogErrorReporter:
    """ErrorReporterProtocol implementation backed by structlog.

    Reports are logged at error level with the exception attached, so the
    JSON renderer in production carries the traceback.
    """

    def __init__(self, logger: structlog.BoundLogger | None = None) -> None:
        self._log = logger or get_logger_for_service(
            self.__class__.__name__, component="observability"
        )

    def report(
        self,
        message: str,
        *,
        error: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self._log.error(
            "error_reported",
            message=message,
            error_type=type(error).__name__ if error is not None else None,
            error=str(error) if error is not None else None,
            exc_info=error,
            **(context or {}),
        )
