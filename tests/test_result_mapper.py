"""Tests for result row -> metric mapping."""

import logging
from decimal import Decimal

import pytest

from import_stats.exceptions import MissingColumnError
from import_stats.query_builder import expected_columns
from import_stats.result_mapper import coerce_value, map_result
from import_stats.targets import parse_targets


class TestMapResult:

    def test_mixed_float_and_int(self, scenario_targets):
        metrics = map_result({"orders_delay": 120.0, "events_delay": 5}, scenario_targets)
        assert metrics == {"orders_delay": 120.0, "events_delay": 5.0}
        assert all(type(v) is float for v in metrics.values())

    def test_round_trip_with_count(self):
        targets = parse_targets([f"s.t{i}:c:integer" for i in range(4)])
        columns = expected_columns(targets, include_count=True)
        row = {c: float(i) * 1.5 for i, c in enumerate(columns)}

        metrics = map_result(row, targets, include_count=True)

        assert list(metrics) == columns
        for key, value in row.items():
            assert metrics[key] == pytest.approx(value)

    def test_output_order_independent_of_row_order(self, scenario_targets):
        row = {"events_delay": 1, "orders_delay": 2}
        assert list(map_result(row, scenario_targets)) == ["orders_delay", "events_delay"]

    def test_missing_column(self, scenario_targets):
        with pytest.raises(MissingColumnError) as exc:
            map_result({"orders_delay": 1.0}, scenario_targets)
        assert exc.value.column == "events_delay"

    def test_missing_count_column(self, scenario_targets):
        row = {"orders_delay": 1.0, "events_delay": 2.0, "orders_count": 3}
        with pytest.raises(MissingColumnError) as exc:
            map_result(row, scenario_targets, include_count=True)
        assert exc.value.column == "events_count"

    def test_mixed_case_table_maps_folded_column(self):
        targets = parse_targets(["Public.Orders:ts:integer"])
        assert map_result({"public_orders_delay": 12}, targets) == {"public_orders_delay": 12.0}

    def test_extra_columns_ignored(self, scenario_targets):
        row = {"orders_delay": 1.0, "events_delay": 2.0, "stray": "x"}
        assert map_result(row, scenario_targets) == {"orders_delay": 1.0, "events_delay": 2.0}


class TestCoerceValue:

    def test_decimal(self):
        assert coerce_value("c", Decimal("12.5")) == 12.5

    @pytest.mark.parametrize("value", [None, "12", True, object()])
    def test_unexpected_types_become_zero(self, value, caplog):
        with caplog.at_level(logging.WARNING, logger="import_stats.result_mapper"):
            assert coerce_value("orders_delay", value) == 0.0
        assert "orders_delay" in caplog.text
