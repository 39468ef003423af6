"""Domain errors for the task engine.

Provides specific exception classes for each failure scenario of the
lifecycle engine. All exceptions inherit from TaskEngineError.
"""

from task_engine.domain.errors.duration import InvalidDurationError
from task_engine.domain.errors.history import (
    EmptyHistoryError,
    InvalidHistoryEntryError,
)
from task_engine.domain.errors.lifecycle import (
    AlreadyCompletedError,
    IncompleteSubtasksError,
    InvalidReasonError,
    InvalidStateTransitionError,
    SubtaskIndexError,
    TaskLockedError,
    TaskNotFoundError,
)
from task_engine.domain.errors.routine import NotRoutineTaskError

__all__: list[str] = [
    "AlreadyCompletedError",
    "EmptyHistoryError",
    "IncompleteSubtasksError",
    "InvalidDurationError",
    "InvalidHistoryEntryError",
    "InvalidReasonError",
    "InvalidStateTransitionError",
    "NotRoutineTaskError",
    "SubtaskIndexError",
    "TaskLockedError",
    "TaskNotFoundError",
]
