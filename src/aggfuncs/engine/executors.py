# src/aggfuncs/engine/executors.py
"""Executors - drive function implementations over column data.

AggregateExecutor owns the caller side of the aggregate protocol:

1. Split the input into ``chunk_size`` slices
2. Give each slice private per-group states (one worker per slice)
3. Drop NULL rows and validate values before accumulate()
4. Fold the partial states together with merge(), in slice order
5. finalize() each group exactly once

Aggregates themselves take no locks. Workers never share a state object, and
merge() only runs on the calling thread after every worker has returned.
"""

from collections.abc import Hashable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from aggfuncs.contracts import (
    ConstantVector,
    DataChunk,
    ExecutionInvariantError,
    NullHandling,
    Vector,
    as_vector,
    validate_value,
)
from aggfuncs.core.config import ExecutionSettings
from aggfuncs.core.logging import get_logger
from aggfuncs.functions.base import BaseAggregate, BaseScalarFunction

slog = get_logger(__name__)

# Per-slice partial result: group -> (state, non-NULL row seen)
_Partial = dict[Hashable, tuple[Any, bool]]


class AggregateExecutor:
    """Executes one aggregate over a chunk, optionally grouped.

    Example:
        executor = AggregateExecutor(MaxIntersections(), ExecutionSettings(max_workers=4))
        chunk = DataChunk.from_columns([1, 5, 6], [5, 10, 10])
        executor.execute(chunk)                       # {None: 2}
        executor.execute(chunk, groups=["a", "a", "b"])  # {"a": 2, "b": 1}
    """

    def __init__(self, aggregate: BaseAggregate[Any], settings: ExecutionSettings | None = None) -> None:
        self._aggregate = aggregate
        self._settings = settings if settings is not None else ExecutionSettings()
        self._arg_types = aggregate.signature.arguments

    @property
    def aggregate(self) -> BaseAggregate[Any]:
        return self._aggregate

    def execute(
        self,
        chunk: DataChunk,
        groups: Vector | Sequence[Hashable] | None = None,
    ) -> dict[Hashable, Any]:
        """Aggregate one chunk, returning one result per group.

        Args:
            chunk: Argument columns, one per declared argument type
            groups: Group key per row. None aggregates everything into the
                single group ``None``, which is always present in the result.

        Returns:
            Group key -> result, in order of first appearance.

        Raises:
            ExecutionInvariantError: Wrong argument count or group column length
            InvalidInputError: A non-NULL value does not fit its declared type
        """
        return self.execute_stream([(chunk, groups)], grouped=groups is not None)

    def execute_ungrouped(self, *chunks: DataChunk) -> Any:
        """Aggregate all chunks as one group and return its result."""
        return self.execute_stream([(chunk, None) for chunk in chunks], grouped=False)[None]

    def execute_stream(
        self,
        batches: Iterable[tuple[DataChunk, Vector | Sequence[Hashable] | None]],
        *,
        grouped: bool = True,
    ) -> dict[Hashable, Any]:
        """Aggregate a sequence of (chunk, groups) batches into shared groups.

        Every batch is split into ``chunk_size`` slices and each slice is
        accumulated into private states, on the worker pool when
        ``max_workers > 1``. Partials are merged in input order.

        Args:
            batches: (chunk, groups) pairs; groups None means group ``None``
            grouped: False guarantees a ``None`` entry even with no rows

        Returns:
            Group key -> result, in order of first appearance.
        """
        work: list[tuple[DataChunk, Vector]] = []
        rows = 0
        for chunk, groups in batches:
            if chunk.column_count != len(self._arg_types):
                raise ExecutionInvariantError(
                    f"{self._aggregate.name} expects {len(self._arg_types)} argument columns, got {chunk.column_count}"
                )
            group_vector = ConstantVector(None, chunk.size) if groups is None else as_vector(groups)
            if len(group_vector) != chunk.size:
                raise ExecutionInvariantError(f"Group column has {len(group_vector)} rows but the chunk has {chunk.size}")
            rows += chunk.size
            work.extend((chunk.slice(start, stop), group_vector.slice(start, stop)) for start, stop in self._slice_bounds(chunk.size))

        log = slog.bind(function=self._aggregate.name, rows=rows, slices=len(work))

        if self._settings.max_workers > 1 and len(work) > 1:
            log.debug("aggregate_fan_out", max_workers=self._settings.max_workers)
            with ThreadPoolExecutor(max_workers=self._settings.max_workers) as pool:
                futures = [pool.submit(self._accumulate_slice, chunk, groups) for chunk, groups in work]
                # result() re-raises worker exceptions on this thread
                partials = [future.result() for future in futures]
        else:
            partials = [self._accumulate_slice(chunk, groups) for chunk, groups in work]

        merged = self._merge_partials(partials)
        if not grouped and None not in merged:
            merged[None] = (self._aggregate.initialize(None), False)

        results: dict[Hashable, Any] = {}
        for group, (state, seen) in merged.items():
            results[group] = self._finalize(state, seen)
        log.debug("aggregate_finalized", groups=len(results))
        return results

    def _slice_bounds(self, size: int) -> list[tuple[int, int]]:
        step = self._settings.chunk_size
        return [(start, min(start + step, size)) for start in range(0, size, step)]

    def _accumulate_slice(self, chunk: DataChunk, groups: Vector) -> _Partial:
        """Build private states for one slice. Runs on a worker thread."""
        aggregate = self._aggregate
        partial: _Partial = {}

        if chunk.all_constant and isinstance(groups, ConstantVector):
            group = groups.value
            state = aggregate.initialize(group)
            partial[group] = (state, False)
            values = tuple(column.value for column in chunk.columns)  # type: ignore[union-attr]
            if chunk.size and not any(value is None for value in values):
                self._validate(values)
                aggregate.accumulate_constant(state, *values, count=chunk.size)
                partial[group] = (state, True)
            return partial

        for group, row in zip(groups, chunk.rows(), strict=True):
            if group not in partial:
                partial[group] = (aggregate.initialize(group), False)
            if any(value is None for value in row):
                continue
            self._validate(row)
            state, _ = partial[group]
            aggregate.accumulate(state, *row)
            partial[group] = (state, True)
        return partial

    def _merge_partials(self, partials: list[_Partial]) -> _Partial:
        if not partials:
            return {}
        target = partials[0]
        for source in partials[1:]:
            for group, (state, seen) in source.items():
                if group in target:
                    target_state, target_seen = target[group]
                    self._aggregate.merge(state, target_state)
                    target[group] = (target_state, target_seen or seen)
                else:
                    target[group] = (state, seen)
        return target

    def _finalize(self, state: Any, seen: bool) -> Any:
        # DEFAULT aggregates yield NULL for a group with no non-NULL rows;
        # SPECIAL_HANDLING aggregates decide for themselves.
        if not seen and self._aggregate.null_handling == NullHandling.DEFAULT:
            return None
        return self._aggregate.finalize(state)

    def _validate(self, values: Sequence[Any]) -> None:
        for value, logical_type in zip(values, self._arg_types, strict=True):
            validate_value(value, logical_type)


class ScalarExecutor:
    """Executes one scalar overload over a chunk.

    Constant chunks are evaluated once and the result repeated.
    """

    def __init__(self, function: BaseScalarFunction) -> None:
        self._function = function
        self._arg_types = function.signature.arguments

    @property
    def function(self) -> BaseScalarFunction:
        return self._function

    def execute(self, chunk: DataChunk) -> list[Any]:
        """Evaluate the overload for every row.

        Raises:
            ExecutionInvariantError: Wrong argument count
            InvalidInputError: A value does not fit its declared type, or the
                function rejects it
        """
        if chunk.column_count != len(self._arg_types):
            raise ExecutionInvariantError(
                f"{self._function.name} expects {len(self._arg_types)} argument columns, got {chunk.column_count}"
            )
        if chunk.all_constant:
            rows: Iterable[tuple[Any, ...]] = [tuple(column.value for column in chunk.columns)]  # type: ignore[union-attr]
        else:
            rows = chunk.rows()
        for row in rows:
            for value, logical_type in zip(row, self._arg_types, strict=True):
                if value is not None:
                    validate_value(value, logical_type)

        if chunk.all_constant and chunk.size > 1:
            (value,) = self._function.execute(chunk.slice(0, 1))
            return [value] * chunk.size
        return self._function.execute(chunk)
