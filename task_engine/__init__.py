"""
Task Engine - Task Lifecycle & Scoring Engine

The core of a personal task manager: the state machine and ledgers that
govern how a task moves between pending, completed, not-done and postponed
states, how points are earned and penalized, how postpone and snooze actions
are recorded as append-only audit trails, and how completing a routine
spawns its next occurrence.

Layers:
- domain: pure transitions over immutable TaskRecords
- application: ports and async orchestration services
- infrastructure: observability and in-memory collaborators
- config / bootstrap: configuration and wiring
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
