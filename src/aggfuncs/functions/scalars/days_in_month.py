"""days_in_month scalar function set.

Overloads:
    days_in_month(INTEGER year, INTEGER month) -> INTEGER
    days_in_month(DATE) -> INTEGER
    days_in_month(TIMESTAMP) -> INTEGER
    days_in_month(TIME) -> INTEGER   # always raises InvalidInputError

Leap years follow the proleptic Gregorian calendar for every integer year,
including year 0 and negative years.
"""

import calendar
from datetime import date, datetime

from aggfuncs.contracts import (
    DataChunk,
    FunctionSignature,
    InvalidInputError,
    LogicalType,
)
from aggfuncs.functions.base import BaseScalarFunction

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

TIME_NOT_SUPPORTED = "days_in_month cannot be used with TIME type - TIME does not contain date information"


def month_days(year: int, month: int) -> int:
    """Number of days in ``month`` of ``year``.

    Raises:
        InvalidInputError: If month is not in 1..12
    """
    if not 1 <= month <= 12:
        raise InvalidInputError(f"days_in_month: month must be between 1 and 12, got {month}")
    if month == 2 and calendar.isleap(year):
        return 29
    return _MONTH_DAYS[month - 1]


class DaysInMonthYearMonth(BaseScalarFunction):
    """Days in the month given as separate year and month integers."""

    name = "days_in_month"
    signature = FunctionSignature(
        arguments=(LogicalType.INTEGER, LogicalType.INTEGER),
        return_type=LogicalType.INTEGER,
    )

    def evaluate(self, year: int, month: int) -> int:  # type: ignore[override]
        return month_days(year, month)


class DaysInMonthDate(BaseScalarFunction):
    """Days in the month containing a date."""

    name = "days_in_month"
    signature = FunctionSignature(arguments=(LogicalType.DATE,), return_type=LogicalType.INTEGER)

    def evaluate(self, value: date) -> int:  # type: ignore[override]
        return month_days(value.year, value.month)


class DaysInMonthTimestamp(BaseScalarFunction):
    """Days in the month containing a timestamp's date part."""

    name = "days_in_month"
    signature = FunctionSignature(arguments=(LogicalType.TIMESTAMP,), return_type=LogicalType.INTEGER)

    def evaluate(self, value: datetime) -> int:  # type: ignore[override]
        return month_days(value.year, value.month)


class DaysInMonthTime(BaseScalarFunction):
    """TIME arguments bind to this overload and fail at evaluation."""

    name = "days_in_month"
    signature = FunctionSignature(arguments=(LogicalType.TIME,), return_type=LogicalType.INTEGER)

    def execute(self, chunk: DataChunk) -> list[int]:
        raise InvalidInputError(TIME_NOT_SUPPORTED)

    def evaluate(self, *args: object) -> int:
        raise InvalidInputError(TIME_NOT_SUPPORTED)
