"""Base exception classes for the task engine domain layer."""


class TaskEngineError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class so callers
    can surface any engine failure as a non-destructive message with a
    single ``except`` clause.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
