"""Value types shared by functions and executors."""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, NamedTuple

from aggfuncs.contracts.enums import LogicalType
from aggfuncs.contracts.errors import InvalidInputError

BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1
INTEGER_MIN = -(2**31)
INTEGER_MAX = 2**31 - 1

_INTEGER_BOUNDS: dict[LogicalType, tuple[int, int]] = {
    LogicalType.BIGINT: (BIGINT_MIN, BIGINT_MAX),
    LogicalType.INTEGER: (INTEGER_MIN, INTEGER_MAX),
}


class Interval(NamedTuple):
    """Closed integer interval [start, end]. Stored only when start <= end."""

    start: int
    end: int


@dataclass(frozen=True)
class FunctionSignature:
    """Argument and return types of one function overload."""

    arguments: tuple[LogicalType, ...]
    return_type: LogicalType

    def describe(self, name: str) -> str:
        """Render as ``name(arg, ...) -> ret`` for listings and error messages."""
        args = ", ".join(str(arg) for arg in self.arguments)
        return f"{name}({args}) -> {self.return_type}"


def validate_value(value: Any, logical_type: LogicalType) -> None:
    """Check that a non-NULL value is a valid carrier for its logical type.

    Args:
        value: Column value (caller has already excluded None)
        logical_type: Declared type of the column

    Raises:
        InvalidInputError: If the value has the wrong Python type or an
            integer lies outside the declared width.
    """
    if logical_type in _INTEGER_BOUNDS:
        # bool is an int subclass but never a valid integer column value
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidInputError(f"Expected {logical_type} value, got {type(value).__name__}: {value!r}")
        low, high = _INTEGER_BOUNDS[logical_type]
        if not low <= value <= high:
            raise InvalidInputError(f"Value {value} is out of range for {logical_type} [{low}, {high}]")
        return

    if logical_type == LogicalType.TIMESTAMP:
        valid = isinstance(value, datetime)
    elif logical_type == LogicalType.DATE:
        valid = isinstance(value, date) and not isinstance(value, datetime)
    else:
        valid = isinstance(value, time)
    if not valid:
        raise InvalidInputError(f"Expected {logical_type} value, got {type(value).__name__}: {value!r}")
