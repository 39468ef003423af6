"""Error reporter port.

Non-fatal failures (malformed stored history, notification scheduling
errors) are handed to a reporter instead of being raised, so they can be
surfaced to the user or a crash service without blocking the action.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol


class ErrorReporterProtocol(Protocol):
    """Protocol for reporting non-fatal errors."""

    @abstractmethod
    def report(
        self,
        message: str,
        *,
        error: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Report a non-fatal error.

        Must not raise.

        Args:
            message: Short description of what failed.
            error: The underlying exception, if any.
            context: Structured details (task id, operation...).
        """
        ...
