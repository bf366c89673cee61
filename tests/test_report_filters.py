"""Tests for the viewer's report-level filters."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from analysis.report_filters import (
    apply_global_filters,
    in_date_range,
    infer_date_column,
    infer_region_column,
    parse_date,
    region_options,
)

pytestmark = pytest.mark.unit

TODAY = date(2026, 10, 17)


def test_parse_date_accepts_dates_epochs_and_strings() -> None:
    """Recognize the date shapes seen in uploaded datasets."""

    assert parse_date(date(2026, 1, 2)) == date(2026, 1, 2)
    assert parse_date(datetime(2026, 1, 2, 15, 0, tzinfo=timezone.utc)) == date(2026, 1, 2)
    assert parse_date("2026-01-02") == date(2026, 1, 2)
    assert parse_date("2026-01-02T10:00:00Z") == date(2026, 1, 2)
    assert parse_date("01/02/2026") == date(2026, 1, 2)
    assert parse_date(1767312000) == date(2026, 1, 2)
    assert parse_date(1767312000000) == date(2026, 1, 2)
    assert parse_date(42) is None
    assert parse_date("soon") is None
    assert parse_date(None) is None


def test_infer_columns_prefer_named_candidates(sales_rows) -> None:
    """Date and region columns are found by name and content."""

    assert infer_date_column(sales_rows) == "order_date"
    assert infer_region_column(sales_rows) == "region"
    assert infer_region_column([{"amount": 1}]) is None
    assert infer_date_column([]) is None


def test_infer_date_column_falls_back_to_content() -> None:
    """Unnamed columns qualify when enough sampled values parse as dates."""

    rows = [{"label": "a", "when": "2026-01-01"}, {"label": "b", "when": "2026-02-01"}]
    assert infer_date_column(rows) == "when"


def test_in_date_range_named_ranges() -> None:
    """Relative ranges are inclusive of both ends."""

    assert in_date_range(date(2026, 10, 10), "last-7-days", today=TODAY) is True
    assert in_date_range(date(2026, 10, 9), "last-7-days", today=TODAY) is False
    assert in_date_range(date(2026, 1, 1), "this-year", today=TODAY) is True
    assert in_date_range(date(2020, 1, 1), "custom", today=TODAY) is True


def test_apply_global_filters_search_is_case_insensitive(sales_rows) -> None:
    """Search matches any cell."""

    out = apply_global_filters(sales_rows, search="GADGET", today=TODAY)
    assert [row["region"] for row in out] == ["South", "North"]


def test_apply_global_filters_date_ranges(sales_rows) -> None:
    """Date ranges filter on the inferred date column."""

    assert [row["order_date"] for row in apply_global_filters(sales_rows, date_range="last-7-days", today=TODAY)] == [
        "2026-10-15"
    ]
    last_30 = apply_global_filters(sales_rows, date_range="last-30-days", today=TODAY)
    assert [row["order_date"] for row in last_30] == ["2026-10-01", "2026-09-20", "2026-10-15"]
    assert len(apply_global_filters(sales_rows, date_range="this-year", today=TODAY)) == 4
    assert len(apply_global_filters(sales_rows, date_range="custom", today=TODAY)) == 5


def test_apply_global_filters_region_and_combination(sales_rows) -> None:
    """Region matching is case-insensitive; `all` disables it; filters combine."""

    assert len(apply_global_filters(sales_rows, region="south", today=TODAY)) == 2
    assert len(apply_global_filters(sales_rows, region="all", today=TODAY)) == 5
    combined = apply_global_filters(sales_rows, search="widget", region="North", today=TODAY)
    assert combined == [sales_rows[0]]


def test_apply_global_filters_returns_a_new_list(sales_rows) -> None:
    """The input sequence is never mutated."""

    out = apply_global_filters(sales_rows, today=TODAY)
    assert out == sales_rows
    assert out is not sales_rows


def test_region_options_lists_all_then_sorted_values(sales_rows) -> None:
    """The dropdown starts with All Regions."""

    assert region_options(sales_rows) == [
        {"value": "all", "label": "All Regions"},
        {"value": "East", "label": "East"},
        {"value": "North", "label": "North"},
        {"value": "South", "label": "South"},
    ]
    assert region_options([{"amount": 1}]) == [{"value": "all", "label": "All Regions"}]


def test_apply_global_filters_skips_null_rows() -> None:
    """Null entries never match the date or region filters."""

    rows = [{"region": "North", "order_date": "2026-10-16"}, None]
    assert apply_global_filters(rows, region="North", today=TODAY) == [rows[0]]
    assert apply_global_filters(rows, date_range="last-7-days", today=TODAY) == [rows[0]]


def test_parse_date_converts_offset_timestamps_to_utc() -> None:
    """Offset-aware strings land on their UTC calendar date."""

    assert parse_date("2026-01-02T23:30:00-05:00") == date(2026, 1, 3)
    assert parse_date("2026-01-02T01:00:00+02:00") == date(2026, 1, 1)
    assert parse_date("2026-01-02T23:30:00") == date(2026, 1, 2)
