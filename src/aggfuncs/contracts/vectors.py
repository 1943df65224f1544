"""Column vectors and data chunks passed to function implementations.

A vector is either flat (one value per row) or constant (one value repeated
for every row). ``None`` is SQL NULL in both.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from aggfuncs.contracts.errors import ExecutionInvariantError


@dataclass(frozen=True)
class FlatVector:
    """One value per row."""

    values: Sequence[Any]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.values)

    def slice(self, start: int, stop: int) -> "FlatVector":
        return FlatVector(self.values[start:stop])


@dataclass(frozen=True)
class ConstantVector:
    """A single value repeated ``count`` times."""

    value: Any
    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ExecutionInvariantError(f"ConstantVector count must be >= 0, got {self.count}")

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[Any]:
        for _ in range(self.count):
            yield self.value

    def slice(self, start: int, stop: int) -> "ConstantVector":
        start = max(0, min(start, self.count))
        stop = max(start, min(stop, self.count))
        return ConstantVector(self.value, stop - start)


Vector = FlatVector | ConstantVector


def as_vector(column: Vector | Sequence[Any]) -> Vector:
    """Wrap a plain sequence as a FlatVector; pass vectors through."""
    if isinstance(column, (FlatVector, ConstantVector)):
        return column
    return FlatVector(column)


@dataclass(frozen=True)
class DataChunk:
    """Argument columns of one function call. All columns share one length."""

    columns: tuple[Vector, ...]

    def __post_init__(self) -> None:
        lengths = {len(column) for column in self.columns}
        if len(lengths) > 1:
            raise ExecutionInvariantError(f"All columns in a DataChunk must have the same length, got lengths {sorted(lengths)}")

    @classmethod
    def from_columns(cls, *columns: Vector | Sequence[Any]) -> "DataChunk":
        return cls(tuple(as_vector(column) for column in columns))

    @property
    def size(self) -> int:
        """Number of rows (0 for a chunk with no columns)."""
        if not self.columns:
            return 0
        return len(self.columns[0])

    @property
    def column_count(self) -> int:
        return len(self.columns)

    @property
    def all_constant(self) -> bool:
        """True when every column is a ConstantVector."""
        return bool(self.columns) and all(isinstance(column, ConstantVector) for column in self.columns)

    def slice(self, start: int, stop: int) -> "DataChunk":
        return DataChunk(tuple(column.slice(start, stop) for column in self.columns))

    def rows(self) -> Iterator[tuple[Any, ...]]:
        """Iterate row tuples across all columns."""
        return zip(*self.columns, strict=True)
