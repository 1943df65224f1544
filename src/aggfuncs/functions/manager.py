# src/aggfuncs/functions/manager.py
"""Function manager for discovery, registration, and lookup.

Uses pluggy for hook-based function registration.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pluggy

from aggfuncs.contracts import (
    FunctionKind,
    FunctionNotFoundError,
    FunctionSignature,
    LogicalType,
    NullHandling,
    OrderDependence,
)
from aggfuncs.functions.base import BaseAggregate, BaseScalarFunction
from aggfuncs.functions.hookspecs import PROJECT_NAME, AggregateSpec, ScalarSpec


@dataclass(frozen=True)
class FunctionSpec:
    """Registration record for one function overload.

    Frozen - specs describe classes and never change after creation.
    """

    name: str
    kind: FunctionKind
    signature: FunctionSignature
    null_handling: NullHandling
    order_dependence: OrderDependence | None = None

    @classmethod
    def from_function(cls, function_cls: type[BaseAggregate[Any]] | type[BaseScalarFunction]) -> "FunctionSpec":
        """Create spec from a function class."""
        order_dependence = function_cls.order_dependence if issubclass(function_cls, BaseAggregate) else None
        return cls(
            name=function_cls.name,
            kind=function_cls.kind,
            signature=function_cls.signature,
            null_handling=function_cls.null_handling,
            order_dependence=order_dependence,
        )

    def describe(self) -> str:
        return self.signature.describe(self.name)


class FunctionManager:
    """Manages function discovery, registration, and lookup.

    Usage:
        manager = FunctionManager()
        manager.register_builtin_functions()

        aggregate = manager.get_aggregate("max_intersections", [LogicalType.BIGINT, LogicalType.BIGINT])
        overload = manager.get_scalar("days_in_month", [LogicalType.DATE])
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)

        self._pm.add_hookspecs(AggregateSpec)
        self._pm.add_hookspecs(ScalarSpec)

        # name -> overload classes, in registration order
        self._aggregates: dict[str, list[type[BaseAggregate[Any]]]] = {}
        self._scalars: dict[str, list[type[BaseScalarFunction]]] = {}

    def register_builtin_functions(self) -> None:
        """Discover and register all built-in functions.

        Call this once at startup to make built-in functions resolvable.
        """
        from aggfuncs.functions.discovery import create_dynamic_hookimpl, discover_all_functions

        discovered = discover_all_functions()

        self.register(create_dynamic_hookimpl(discovered["aggregates"], "aggfuncs_get_aggregates"))
        self.register(create_dynamic_hookimpl(discovered["scalars"], "aggfuncs_get_scalars"))

    def register(self, provider: Any) -> None:
        """Register a provider object implementing one or more hooks.

        Raises:
            ValueError: If two classes register the same name with the same
                argument types. The provider is unregistered again.
        """
        self._pm.register(provider)
        try:
            self._refresh_caches()
        except ValueError:
            self._pm.unregister(provider)
            self._refresh_caches()
            raise

    def _refresh_caches(self) -> None:
        new_aggregates: dict[str, list[type[BaseAggregate[Any]]]] = {}
        new_scalars: dict[str, list[type[BaseScalarFunction]]] = {}

        for aggregates in self._pm.hook.aggfuncs_get_aggregates():
            for cls in aggregates:
                _add_overload(new_aggregates, cls)

        for scalars in self._pm.hook.aggfuncs_get_scalars():
            for cls in scalars:
                _add_overload(new_scalars, cls)

        self._aggregates = new_aggregates
        self._scalars = new_scalars

    def get_aggregates(self) -> list[type[BaseAggregate[Any]]]:
        """Get all registered aggregate classes."""
        return [cls for overloads in self._aggregates.values() for cls in overloads]

    def get_scalars(self) -> list[type[BaseScalarFunction]]:
        """Get all registered scalar overload classes."""
        return [cls for overloads in self._scalars.values() for cls in overloads]

    def get_aggregate(self, name: str, arg_types: Sequence[LogicalType]) -> type[BaseAggregate[Any]]:
        """Resolve an aggregate overload by name and exact argument types.

        Raises:
            FunctionNotFoundError: If the name is unknown or no overload matches
        """
        return _resolve(self._aggregates, name, arg_types)

    def get_scalar(self, name: str, arg_types: Sequence[LogicalType]) -> type[BaseScalarFunction]:
        """Resolve a scalar overload by name and exact argument types.

        Raises:
            FunctionNotFoundError: If the name is unknown or no overload matches
        """
        return _resolve(self._scalars, name, arg_types)

    def get_function_specs(self) -> list[FunctionSpec]:
        """Get specs for every registered overload, aggregates first."""
        return [FunctionSpec.from_function(cls) for cls in [*self.get_aggregates(), *self.get_scalars()]]


def _add_overload(registry: dict[str, list[Any]], cls: Any) -> None:
    overloads = registry.setdefault(cls.name, [])
    for existing in overloads:
        if existing.signature.arguments == cls.signature.arguments:
            raise ValueError(
                f"Duplicate function overload: '{cls.signature.describe(cls.name)}'. "
                f"Already registered by {existing.__name__}"
            )
    overloads.append(cls)


def _resolve(registry: dict[str, list[Any]], name: str, arg_types: Sequence[LogicalType]) -> Any:
    if name not in registry:
        raise FunctionNotFoundError(name)
    wanted = tuple(arg_types)
    for cls in registry[name]:
        if cls.signature.arguments == wanted:
            return cls
    raise FunctionNotFoundError(name, [cls.signature.describe(name) for cls in registry[name]])
