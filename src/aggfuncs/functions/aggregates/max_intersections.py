"""Maximum intersecting intervals aggregate.

Computes, per group, the largest number of closed integer intervals
[start, end] that cover any single point. Intervals are buffered during
accumulation and resolved at finalize with a sweep over boundary events.

Example:
    SELECT max_intersections(start_ts, end_ts) FROM bookings GROUP BY room

    rows (1, 5), (5, 10), (6, 10) -> 2   # [1,5] and [5,10] share point 5
"""

from collections.abc import Hashable

from aggfuncs.contracts import (
    FunctionSignature,
    Interval,
    LogicalType,
    NullHandling,
    OrderDependence,
)
from aggfuncs.functions.base import BaseAggregate

OPEN = 1
CLOSE = -1


class IntervalBuffer:
    """Accumulation state for one group: the valid intervals seen so far."""

    __slots__ = ("group", "intervals")

    def __init__(self, group: Hashable | None = None) -> None:
        self.group = group
        self.intervals: list[Interval] = []

    def __len__(self) -> int:
        return len(self.intervals)

    def __repr__(self) -> str:
        return f"IntervalBuffer(group={self.group!r}, size={len(self.intervals)})"


def _event_order(event: tuple[int, int]) -> tuple[int, int]:
    # Closes (-1) sort before opens (+1) at the same position, so [1,5] and
    # [6,10] never count as overlapping.
    position, delta = event
    return position, 0 if delta == CLOSE else 1


def max_overlap(intervals: list[Interval]) -> int:
    """Sweep-line peak of simultaneously open intervals.

    Each closed interval [start, end] covers the half-open range
    [start, end + 1). end + 1 is computed on Python ints and cannot wrap.
    """
    if not intervals:
        return 0
    if len(intervals) == 1:
        return 1

    events: list[tuple[int, int]] = []
    for start, end in intervals:
        events.append((start, OPEN))
        events.append((end + 1, CLOSE))
    events.sort(key=_event_order)

    current = 0
    peak = 0
    for _, delta in events:
        current += delta
        if current > peak:
            peak = current
    return peak


class MaxIntersections(BaseAggregate[IntervalBuffer]):
    """Maximum number of intervals overlapping at any single point.

    Arguments are (start, end) BIGINT columns, result is BIGINT.
    Rows with start > end are dropped without error. Rows with a NULL in
    either column are filtered out by the executor before accumulate().
    An empty or all-NULL group finalizes to 0.
    """

    name = "max_intersections"
    signature = FunctionSignature(
        arguments=(LogicalType.BIGINT, LogicalType.BIGINT),
        return_type=LogicalType.BIGINT,
    )
    # The sweep re-sorts internally, so input order is irrelevant
    order_dependence = OrderDependence.NOT_ORDER_DEPENDENT
    null_handling = NullHandling.SPECIAL_HANDLING

    def initialize(self, group: Hashable | None = None) -> IntervalBuffer:
        return IntervalBuffer(group)

    def accumulate(self, state: IntervalBuffer, start: int, end: int) -> None:  # type: ignore[override]
        if start <= end:
            state.intervals.append(Interval(start, end))

    def accumulate_constant(self, state: IntervalBuffer, start: int, end: int, *, count: int) -> None:  # type: ignore[override]
        """Append ``count`` copies of the interval, or nothing if it is malformed."""
        if start <= end and count > 0:
            state.intervals.extend([Interval(start, end)] * count)

    def merge(self, source: IntervalBuffer, target: IntervalBuffer) -> None:
        if not source.intervals:
            return
        target.intervals.extend(source.intervals)
        source.intervals = []

    def finalize(self, state: IntervalBuffer) -> int:
        return max_overlap(state.intervals)
