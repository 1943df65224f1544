"""Tests for FunctionManager registration and overload resolution."""

from typing import Any

import pytest

from aggfuncs.contracts import (
    FunctionKind,
    FunctionNotFoundError,
    FunctionSignature,
    LogicalType,
    NullHandling,
    OrderDependence,
)
from aggfuncs.functions.aggregates.max_intersections import MaxIntersections
from aggfuncs.functions.base import BaseAggregate
from aggfuncs.functions.hookspecs import hookimpl
from aggfuncs.functions.manager import FunctionManager, FunctionSpec
from aggfuncs.functions.scalars.days_in_month import (
    DaysInMonthDate,
    DaysInMonthTime,
    DaysInMonthTimestamp,
    DaysInMonthYearMonth,
)

BIGINT_PAIR = [LogicalType.BIGINT, LogicalType.BIGINT]


class _CountRows(BaseAggregate[list[int]]):
    name = "count_rows"
    signature = FunctionSignature(arguments=(LogicalType.BIGINT,), return_type=LogicalType.BIGINT)
    order_dependence = OrderDependence.NOT_ORDER_DEPENDENT

    def initialize(self, group: Any = None) -> list[int]:
        return [0]

    def accumulate(self, state: list[int], *args: Any) -> None:
        state[0] += 1

    def merge(self, source: list[int], target: list[int]) -> None:
        target[0] += source[0]
        source[0] = 0

    def finalize(self, state: list[int]) -> int:
        return state[0]


class _ShadowMaxIntersections(_CountRows):
    name = "max_intersections"
    signature = FunctionSignature(arguments=(LogicalType.BIGINT, LogicalType.BIGINT), return_type=LogicalType.BIGINT)


class _Provider:
    def __init__(self, *aggregates: type) -> None:
        self._aggregates = list(aggregates)

    @hookimpl
    def aggfuncs_get_aggregates(self) -> list[type]:
        return self._aggregates


class TestBuiltinRegistration:
    def test_builtin_aggregates(self, function_manager: FunctionManager) -> None:
        assert function_manager.get_aggregates() == [MaxIntersections]

    def test_builtin_scalars_in_definition_order(self, function_manager: FunctionManager) -> None:
        assert function_manager.get_scalars() == [
            DaysInMonthYearMonth,
            DaysInMonthDate,
            DaysInMonthTimestamp,
            DaysInMonthTime,
        ]

    def test_empty_manager_has_nothing(self) -> None:
        manager = FunctionManager()

        assert manager.get_aggregates() == []
        assert manager.get_scalars() == []


class TestResolution:
    def test_resolves_aggregate(self, function_manager: FunctionManager) -> None:
        assert function_manager.get_aggregate("max_intersections", BIGINT_PAIR) is MaxIntersections

    @pytest.mark.parametrize(
        ("arg_types", "expected"),
        [
            ([LogicalType.INTEGER, LogicalType.INTEGER], DaysInMonthYearMonth),
            ([LogicalType.DATE], DaysInMonthDate),
            ([LogicalType.TIMESTAMP], DaysInMonthTimestamp),
            ([LogicalType.TIME], DaysInMonthTime),
        ],
    )
    def test_resolves_each_scalar_overload(
        self, function_manager: FunctionManager, arg_types: list[LogicalType], expected: type
    ) -> None:
        assert function_manager.get_scalar("days_in_month", arg_types) is expected

    def test_unknown_name(self, function_manager: FunctionManager) -> None:
        with pytest.raises(FunctionNotFoundError, match="Unknown function: 'nope'") as exc_info:
            function_manager.get_aggregate("nope", BIGINT_PAIR)

        assert exc_info.value.candidates == []

    def test_no_matching_overload_lists_candidates(self, function_manager: FunctionManager) -> None:
        with pytest.raises(FunctionNotFoundError) as exc_info:
            function_manager.get_scalar("days_in_month", [LogicalType.BIGINT])

        assert "days_in_month(date) -> integer" in exc_info.value.candidates
        assert len(exc_info.value.candidates) == 4

    def test_not_found_is_a_lookup_error(self, function_manager: FunctionManager) -> None:
        with pytest.raises(LookupError):
            function_manager.get_aggregate("max_intersections", [LogicalType.INTEGER, LogicalType.INTEGER])

    def test_aggregate_and_scalar_namespaces_are_separate(self, function_manager: FunctionManager) -> None:
        with pytest.raises(FunctionNotFoundError):
            function_manager.get_scalar("max_intersections", BIGINT_PAIR)


class TestRegistration:
    def test_register_custom_provider(self, function_manager: FunctionManager) -> None:
        function_manager.register(_Provider(_CountRows))

        assert function_manager.get_aggregate("count_rows", [LogicalType.BIGINT]) is _CountRows
        assert function_manager.get_aggregate("max_intersections", BIGINT_PAIR) is MaxIntersections

    def test_duplicate_overload_rejected(self, function_manager: FunctionManager) -> None:
        with pytest.raises(ValueError, match="Duplicate function overload"):
            function_manager.register(_Provider(_ShadowMaxIntersections))

    def test_rejected_provider_is_unregistered(self, function_manager: FunctionManager) -> None:
        with pytest.raises(ValueError):
            function_manager.register(_Provider(_ShadowMaxIntersections))

        # Manager remains usable with the original registration
        assert function_manager.get_aggregate("max_intersections", BIGINT_PAIR) is MaxIntersections
        function_manager.register(_Provider(_CountRows))
        assert function_manager.get_aggregate("count_rows", [LogicalType.BIGINT]) is _CountRows


class TestFunctionSpec:
    def test_aggregate_spec(self) -> None:
        spec = FunctionSpec.from_function(MaxIntersections)

        assert spec.name == "max_intersections"
        assert spec.kind == FunctionKind.AGGREGATE
        assert spec.order_dependence == OrderDependence.NOT_ORDER_DEPENDENT
        assert spec.null_handling == NullHandling.SPECIAL_HANDLING
        assert spec.describe() == "max_intersections(bigint, bigint) -> bigint"

    def test_scalar_spec_has_no_order_dependence(self) -> None:
        spec = FunctionSpec.from_function(DaysInMonthTime)

        assert spec.kind == FunctionKind.SCALAR
        assert spec.order_dependence is None
        assert spec.describe() == "days_in_month(time) -> integer"

    def test_specs_list_aggregates_first(self, function_manager: FunctionManager) -> None:
        specs = function_manager.get_function_specs()

        assert [spec.kind for spec in specs] == [FunctionKind.AGGREGATE] + [FunctionKind.SCALAR] * 4

    def test_spec_is_frozen(self) -> None:
        spec = FunctionSpec.from_function(MaxIntersections)

        with pytest.raises(AttributeError):
            spec.name = "other"  # type: ignore[misc]
