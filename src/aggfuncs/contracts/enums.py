"""Logical types and function property flags shared across subsystems.

CRITICAL: Every function MUST declare its order dependence and null handling
at registration. Both are read by the executors, never inferred.
"""

from enum import StrEnum


class LogicalType(StrEnum):
    """Logical column type of a function argument or result.

    Python carriers:
    - BIGINT, INTEGER: int (range-checked against the declared width)
    - DATE: datetime.date
    - TIMESTAMP: datetime.datetime
    - TIME: datetime.time
    """

    BIGINT = "bigint"
    INTEGER = "integer"
    DATE = "date"
    TIMESTAMP = "timestamp"
    TIME = "time"


class FunctionKind(StrEnum):
    """Kind of registered function."""

    AGGREGATE = "aggregate"
    SCALAR = "scalar"


class OrderDependence(StrEnum):
    """Whether an aggregate's result depends on input row order.

    NOT_ORDER_DEPENDENT aggregates may receive rows in any order and may be
    split across workers and merged in any order.
    """

    ORDER_DEPENDENT = "order_dependent"
    NOT_ORDER_DEPENDENT = "not_order_dependent"


class NullHandling(StrEnum):
    """How the executor treats NULL arguments.

    - DEFAULT: a row with any NULL argument yields NULL (scalars) and is never
      passed to the function body.
    - SPECIAL_HANDLING: the function declares its own NULL policy. For
      aggregates this means rows with any NULL argument are dropped before
      accumulation, and a group made only of such rows still finalizes.
    """

    DEFAULT = "default"
    SPECIAL_HANDLING = "special_handling"
