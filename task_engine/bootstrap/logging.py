"""Bootstrap wiring for logging configuration.

The output mode comes from ``TASK_ENGINE_ENV`` (``.env`` is honoured) unless
the host passes one explicitly. Hosts call ``configure_logging()`` once
before ``get_task_lifecycle_service()``.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv
from structlog import get_logger

from task_engine.infrastructure.observability import configure_structlog

ENVIRONMENT_ENV = "TASK_ENGINE_ENV"
DEFAULT_ENVIRONMENT = "production"


def configure_logging(environment: str | None = None) -> str:
    """Configure structlog and return the environment that was applied."""
    if environment is None:
        load_dotenv()
        environment = os.getenv(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT).strip().lower()
    configure_structlog(environment=environment)
    get_logger().info("logging_configured", environment=environment)
    return environment


__all__ = ["DEFAULT_ENVIRONMENT", "ENVIRONMENT_ENV", "configure_logging"]
