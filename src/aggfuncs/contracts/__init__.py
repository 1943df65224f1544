"""Shared contracts: types, vectors, enums, and errors.

This package is the leaf of the import graph - it imports nothing else from
aggfuncs, so functions, executors, and the CLI can all depend on it.
"""

from aggfuncs.contracts.enums import FunctionKind, LogicalType, NullHandling, OrderDependence
from aggfuncs.contracts.errors import (
    AggfuncsError,
    ExecutionInvariantError,
    FunctionNotFoundError,
    InvalidInputError,
)
from aggfuncs.contracts.types import (
    BIGINT_MAX,
    BIGINT_MIN,
    INTEGER_MAX,
    INTEGER_MIN,
    FunctionSignature,
    Interval,
    validate_value,
)
from aggfuncs.contracts.vectors import ConstantVector, DataChunk, FlatVector, Vector, as_vector

__all__ = [
    "BIGINT_MAX",
    "BIGINT_MIN",
    "INTEGER_MAX",
    "INTEGER_MIN",
    "AggfuncsError",
    "ConstantVector",
    "DataChunk",
    "ExecutionInvariantError",
    "FlatVector",
    "FunctionKind",
    "FunctionNotFoundError",
    "FunctionSignature",
    "Interval",
    "InvalidInputError",
    "LogicalType",
    "NullHandling",
    "OrderDependence",
    "Vector",
    "as_vector",
    "validate_value",
]
