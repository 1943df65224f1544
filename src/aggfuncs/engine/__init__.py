"""Execution layer: drives registered functions over column data."""

from aggfuncs.engine.executors import AggregateExecutor, ScalarExecutor

__all__ = [
    "AggregateExecutor",
    "ScalarExecutor",
]
