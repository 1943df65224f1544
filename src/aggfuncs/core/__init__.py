"""Core infrastructure: configuration and logging."""

from aggfuncs.core.config import (
    AggfuncsSettings,
    ExecutionSettings,
    LoggingSettings,
    dump_settings,
    load_settings,
    resolve_config,
)
from aggfuncs.core.logging import configure_logging, get_logger

__all__ = [
    "AggfuncsSettings",
    "ExecutionSettings",
    "LoggingSettings",
    "configure_logging",
    "dump_settings",
    "get_logger",
    "load_settings",
    "resolve_config",
]
