"""Tests for card, gauge, slicer, treemap and table summaries."""

from __future__ import annotations

import pytest

from analysis.dto import WidgetBinding
from analysis.widgets import card_value, format_grouped, gauge_value, slicer_options, table_columns, treemap_data

pytestmark = pytest.mark.unit


def test_card_value_defaults_to_row_count(sales_rows) -> None:
    """Without an aggregation the card shows the number of rows."""

    assert card_value(sales_rows, "amount", None) == "5"


def test_card_value_sum_uses_thousands_separators() -> None:
    """Sums ignore non-numeric cells and group thousands."""

    rows = [{"amount": 1200}, {"amount": "300.5"}, {"amount": "n/a"}]
    assert card_value(rows, "amount", "sum") == "1,500.5"


def test_card_value_first_and_last_show_raw_values(sales_rows) -> None:
    """First/last show the boundary row's raw value, "0" when missing."""

    assert card_value(sales_rows, "product", "first") == "Widget"
    assert card_value(sales_rows, "amount", "last") == "7"
    assert card_value([{"amount": None}], "amount", "first") == "0"


def test_card_value_percentage_renders_mean_times_hundred() -> None:
    """Percentage cards show the mean scaled by 100 with one decimal."""

    rows = [{"rate": 0.25}, {"rate": 0.5}]
    assert card_value(rows, "rate", "percentage") == "37.5%"


def test_card_value_is_zero_without_field_rows_or_known_aggregation(sales_rows) -> None:
    """Degrade to "0" instead of raising."""

    assert card_value(sales_rows, None, "sum") == "0"
    assert card_value([], "amount", "sum") == "0"
    assert card_value(sales_rows, "amount", "median") == "0"


def test_format_grouped_trims_trailing_zeros() -> None:
    """Whole numbers print without decimals."""

    assert format_grouped(1234567) == "1,234,567"
    assert format_grouped(0.1239) == "0.124"
    assert format_grouped(0) == "0"


def test_gauge_value_caps_at_hundred_unless_percentage() -> None:
    """Gauges read the first row and clamp to 100."""

    rows = [{"score": "250"}, {"score": 10}]
    assert gauge_value(rows, "score", "sum") == 100
    assert gauge_value(rows, "score", "percentage") == 250
    assert gauge_value([{"score": "x"}], "score", None) == 0
    assert gauge_value([], "score", None) == 0


def test_slicer_options_are_distinct_in_first_seen_order(sales_rows) -> None:
    """Slicer buttons list each value once."""

    assert slicer_options(sales_rows, "region") == ["North", "South", "East"]
    assert slicer_options(sales_rows, None) == []


def test_treemap_data_uses_aggregated_series(sales_rows) -> None:
    """Treemap tiles come from the grouped series."""

    tiles = treemap_data(sales_rows, WidgetBinding(x_axis="region", y_axis="amount"))
    assert tiles == [
        {"name": "North", "value": 12.5},
        {"name": "South", "value": 12},
        {"name": "East", "value": 0},
    ]
    assert treemap_data(sales_rows, WidgetBinding(x_axis="region")) == []


def test_table_columns_come_from_first_row(sales_rows) -> None:
    """Table headers mirror the first row's keys."""

    assert table_columns(sales_rows) == ["region", "product", "amount", "order_date"]
    assert table_columns([]) == []
