"""Configuration for the task engine."""

from task_engine.config.engine_config import (
    DEFAULT_ENGINE_CONFIG,
    TEST_ENGINE_CONFIG,
    EngineConfig,
)
from task_engine.config.task_settings import TaskSettings

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "TEST_ENGINE_CONFIG",
    "TaskSettings",
]
