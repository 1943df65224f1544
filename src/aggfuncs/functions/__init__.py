"""Function system: aggregates and scalar overloads via pluggy.

- Base classes: BaseAggregate, BaseScalarFunction
- Hookspecs: pluggy hook definitions for function providers
- Manager: discovery, registration, and overload resolution
"""

from aggfuncs.functions.base import BaseAggregate, BaseScalarFunction
from aggfuncs.functions.hookspecs import hookimpl, hookspec
from aggfuncs.functions.manager import FunctionManager, FunctionSpec

__all__ = [
    "BaseAggregate",
    "BaseScalarFunction",
    "FunctionManager",
    "FunctionSpec",
    "hookimpl",
    "hookspec",
]
