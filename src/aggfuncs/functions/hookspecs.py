# src/aggfuncs/functions/hookspecs.py
"""pluggy hook specifications for aggfuncs function providers.

Providers implement these hooks to contribute function classes to the
FunctionManager.

Usage (implementing a provider):
    from aggfuncs.functions.hookspecs import hookimpl

    class MyFunctions:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def aggfuncs_get_aggregates(self):
            return [MyAggregate]

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks provider implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from aggfuncs.functions.base import BaseAggregate, BaseScalarFunction

# Project name for pluggy
PROJECT_NAME = "aggfuncs"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class AggregateSpec:
    """Hook specifications for aggregate functions."""

    @hookspec
    def aggfuncs_get_aggregates(self) -> list[type["BaseAggregate"]]:  # type: ignore[empty-body]
        """Return aggregate function classes (not instances)."""


class ScalarSpec:
    """Hook specifications for scalar functions."""

    @hookspec
    def aggfuncs_get_scalars(self) -> list[type["BaseScalarFunction"]]:  # type: ignore[empty-body]
        """Return scalar overload classes.

        Several classes may share a name; each one is an overload.
        """
