"""Error reporter stub implementation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from task_engine.application.ports.error_reporter import ErrorReporterProtocol


@dataclass(frozen=True)
class ReportedError:
    """One captured report."""

    message: str
    error: BaseException | None = None
    context: dict[str, Any] = field(default_factory=dict)


class ErrorReporterStub(ErrorReporterProtocol):
    """Captures reports in memory (testing only)."""

    def __init__(self) -> None:
        self.reports: list[ReportedError] = []

    def clear(self) -> None:
        self.reports.clear()

    def report(
        self,
        message: str,
        *,
        error: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.reports.append(ReportedError(message, error, dict(context or {})))
