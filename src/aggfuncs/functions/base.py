# src/aggfuncs/functions/base.py
"""Base classes for function implementations.

Functions MUST subclass these base classes (BaseAggregate, BaseScalarFunction).
Discovery uses issubclass() checks against them, so a Protocol is not enough.

Aggregate lifecycle (driven by AggregateExecutor, never by the function itself):
    initialize(group) -> accumulate*/accumulate_constant* -> merge* -> finalize

- initialize: One fresh state per group per worker.
- accumulate: One row of non-NULL arguments (NULL filtering is the executor's job
  for SPECIAL_HANDLING aggregates).
- accumulate_constant: The same row repeated ``count`` times.
- merge: Fold a worker's partial state into another worker's state for the same
  group. The source state is consumed and must not be finalized afterwards.
- finalize: Single-shot, after every merge for the group has completed.

Function objects are stateless: all mutable data lives in the state objects,
so one instance can be shared by every worker thread.
"""

from abc import ABC, abstractmethod
from collections.abc import Hashable
from typing import Any, ClassVar, Generic, TypeVar

from aggfuncs.contracts import (
    DataChunk,
    FunctionKind,
    FunctionSignature,
    NullHandling,
    OrderDependence,
)

StateT = TypeVar("StateT")


class BaseAggregate(ABC, Generic[StateT]):
    """Base class for all aggregate functions.

    Subclasses declare:
        name: Registration name
        signature: Argument and return types
        order_dependence: Whether row order affects the result
        null_handling: DEFAULT or SPECIAL_HANDLING
    """

    kind: ClassVar[FunctionKind] = FunctionKind.AGGREGATE

    name: str
    signature: FunctionSignature
    order_dependence: OrderDependence
    null_handling: NullHandling = NullHandling.DEFAULT

    @abstractmethod
    def initialize(self, group: Hashable | None = None) -> StateT:
        """Create an empty state for a newly seen group."""
        ...

    @abstractmethod
    def accumulate(self, state: StateT, *args: Any) -> None:
        """Fold one row of arguments into the state."""
        ...

    def accumulate_constant(self, state: StateT, *args: Any, count: int) -> None:
        """Fold the same row of arguments into the state ``count`` times.

        Default implementation loops over accumulate(); override when the state
        can absorb a repeated row more cheaply.
        """
        for _ in range(count):
            self.accumulate(state, *args)

    @abstractmethod
    def merge(self, source: StateT, target: StateT) -> None:
        """Move everything in ``source`` into ``target``."""
        ...

    @abstractmethod
    def finalize(self, state: StateT) -> Any:
        """Produce the group's result."""
        ...


class BaseScalarFunction(ABC):
    """Base class for one overload of a scalar function.

    Several classes may share a ``name``; together they form the function's
    overload set and the registry resolves between them by ``signature``.

    The default execute() maps evaluate() over the rows of a chunk, returning
    None for any row with a NULL argument. Overloads that must fail regardless
    of the input override execute() directly.
    """

    kind: ClassVar[FunctionKind] = FunctionKind.SCALAR

    name: str
    signature: FunctionSignature
    null_handling: NullHandling = NullHandling.DEFAULT

    def execute(self, chunk: DataChunk) -> list[Any]:
        """Evaluate the function over every row of the chunk."""
        results: list[Any] = []
        for row in chunk.rows():
            if any(value is None for value in row):
                results.append(None)
            else:
                results.append(self.evaluate(*row))
        return results

    @abstractmethod
    def evaluate(self, *args: Any) -> Any:
        """Evaluate one row of non-NULL arguments."""
        ...
