"""Dynamic function discovery by folder scanning.

Scans function directories for classes that:
1. Inherit from a base class (BaseAggregate, BaseScalarFunction)
2. Have a `name` class attribute
3. Are not abstract (no @abstractmethod methods without implementation)
"""

import importlib
import inspect
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

EXCLUDED_FILES: frozenset[str] = frozenset({"__init__.py"})


def discover_functions_in_directory(directory: Path, base_class: type) -> list[type]:
    """Discover function classes in a directory (non-recursive).

    Args:
        directory: Package directory under aggfuncs.functions to scan
        base_class: Base class that functions must inherit from

    Returns:
        Discovered classes, in file then definition order
    """
    discovered: list[type] = []

    if not directory.exists():
        logger.warning("Function directory does not exist: %s", directory)
        return discovered

    for py_file in sorted(directory.glob("*.py")):
        if py_file.name in EXCLUDED_FILES:
            continue
        # Function modules are package code; import errors are bugs and propagate.
        discovered.extend(_discover_in_module(f"aggfuncs.functions.{directory.name}.{py_file.stem}", base_class))

    return discovered


def _discover_in_module(module_name: str, base_class: type) -> list[type]:
    module = importlib.import_module(module_name)

    # Module namespace preserves definition order, so overloads list stably
    members = [obj for obj in vars(module).values() if inspect.isclass(obj) and obj.__module__ == module.__name__]

    discovered: list[type] = []
    for obj in members:
        if not issubclass(obj, base_class) or obj is base_class:
            continue
        if inspect.isabstract(obj):
            continue

        # getattr at a discovery trust boundary: any class in the file may lack `name`
        function_name = getattr(obj, "name", None)
        if not function_name:
            logger.warning(
                "Class %s in %s inherits from %s but has no/empty 'name' attribute - skipping",
                obj.__name__,
                module_name,
                base_class.__name__,
            )
            continue

        discovered.append(obj)

    return discovered


def _get_base_classes() -> dict[str, type]:
    """Get base classes for function discovery (deferred import)."""
    from aggfuncs.functions.base import BaseAggregate, BaseScalarFunction

    return {
        "aggregates": BaseAggregate,
        "scalars": BaseScalarFunction,
    }


def discover_all_functions() -> dict[str, list[type]]:
    """Discover all built-in functions.

    Returns:
        {"aggregates": [MaxIntersections, ...], "scalars": [DaysInMonthYearMonth, ...]}
    """
    functions_root = Path(__file__).parent
    return {
        function_type: discover_functions_in_directory(functions_root / function_type, base_class)
        for function_type, base_class in _get_base_classes().items()
    }


def create_dynamic_hookimpl(function_classes: list[type], hook_method_name: str) -> object:
    """Create a pluggy hookimpl object returning the given classes.

    Args:
        function_classes: Classes to register
        hook_method_name: Hook to implement (e.g., "aggfuncs_get_aggregates")

    Returns:
        Object instance with the decorated hook method
    """
    from aggfuncs.functions.hookspecs import hookimpl

    class DynamicHookImpl:
        """Dynamically generated hook implementer."""

        pass

    def hook_method(self: Any) -> list[type]:
        return function_classes

    setattr(DynamicHookImpl, hook_method_name, hookimpl(hook_method))

    return DynamicHookImpl()
