"""
Domain layer - Pure business logic for the task engine.

This layer contains:
- The TaskRecord entity and its value objects
- Lifecycle events
- Pure domain services (state machine, ledgers, undo, recurrence)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or
bootstrap.
"""

from task_engine.domain.exceptions import TaskEngineError
from task_engine.domain.models import TaskRecord, TaskStatus

__all__: list[str] = [
    "TaskEngineError",
    "TaskRecord",
    "TaskStatus",
]
