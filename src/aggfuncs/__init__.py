"""
aggfuncs: SQL-style aggregate and scalar functions for columnar execution.

Ships the ``max_intersections`` interval-overlap aggregate and the
``days_in_month`` calendar scalar, plus the registry and executors that
drive them.
"""

__version__ = "0.1.0"
