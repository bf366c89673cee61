"""Single-value and list summaries for non-series widgets.

Cards, KPIs, gauges, slicers, treemaps and tables do not use the long/wide
series shapes directly; these helpers derive their payloads from raw rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .aggregations import MISSING, cell_value, number_or_zero
from .dto import Row, WidgetBinding
from .pivot import build_aggregated_series, to_label
from .roles import AggregationKind


def card_value(rows: Sequence[Row], field: str | None, aggregation: AggregationKind | str | None) -> str:
    """Return the display string for a card or KPI widget.

    Args:
        rows: Dataset rows.
        field: Bound field name.
        aggregation: Requested aggregation; None means "count".

    Returns:
        `"0"` when no field is bound, no rows exist, or the aggregation is
        unrecognized. Otherwise the row count, the thousands-separated sum, the
        raw first/last value, or the mean expressed as a percentage.
    """

    kind = aggregation or AggregationKind.count
    if not field or not rows:
        return "0"
    if kind == AggregationKind.count:
        return str(len(rows))
    if kind == AggregationKind.sum:
        return format_grouped(sum(number_or_zero(cell_value(row, field)) for row in rows))
    if kind in (AggregationKind.first, AggregationKind.last):
        row = rows[0] if kind == AggregationKind.first else rows[-1]
        value = cell_value(row, field)
        return "0" if value is MISSING or value is None else to_label(value)
    if kind == AggregationKind.percentage:
        total = sum(number_or_zero(cell_value(row, field)) for row in rows)
        return f"{total / len(rows) * 100:.1f}%"
    return "0"


def format_grouped(value: float) -> str:
    """Format a number with thousands separators and at most three decimals."""

    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def gauge_value(rows: Sequence[Row], field: str | None, aggregation: AggregationKind | str | None) -> float:
    """Return the gauge reading from the first row.

    The value is capped at 100 unless the aggregation is `percentage`, in which
    case it is shown as-is.
    """

    if not rows or not field:
        return 0
    value = number_or_zero(cell_value(rows[0], field))
    if aggregation == AggregationKind.percentage:
        return value
    return min(100, value)


def slicer_options(rows: Sequence[Row], filter_field: str | None) -> list[str]:
    """Return the distinct values of the slicer field in first-seen order."""

    if not filter_field:
        return []
    seen: dict[str, None] = {}
    for row in rows:
        seen.setdefault(to_label(cell_value(row, filter_field)), None)
    return list(seen)


def treemap_data(rows: Sequence[Row], binding: WidgetBinding) -> list[dict[str, Any]]:
    """Return `{name, value}` tiles for a treemap from the aggregated series."""

    name_key = binding.x_axis or binding.legend
    value_key = binding.value_field
    if not name_key or not value_key:
        return []

    tiles: list[dict[str, Any]] = []
    for idx, row in enumerate(build_aggregated_series(rows, binding)):
        name = cell_value(row, name_key)
        tiles.append(
            {
                "name": f"Item {idx + 1}" if name is MISSING or name is None else to_label(name),
                "value": number_or_zero(cell_value(row, value_key)),
            }
        )
    return tiles


def table_columns(rows: Sequence[Row]) -> list[str]:
    """Return the column names of a table widget (taken from the first row)."""

    if not rows or rows[0] is None:
        return []
    return [str(key) for key in rows[0].keys()]
