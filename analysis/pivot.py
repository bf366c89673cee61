"""Grouping and pivoting of raw rows into chart-ready series.

Both the builder preview and the viewer call into this module so a widget
renders identically in each. Every function here is pure: inputs are never
mutated and each call allocates fresh outputs.

Grouping rules:
- If an axis field is bound, rows are grouped by the axis label and the value
  field is aggregated per group (long form).
- If a legend field is also bound, rows are grouped by (axis, legend) and
  spread into one column per legend label (wide form, zero-filled).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from .aggregations import MISSING, aggregate, cell_value, finite_number, infer_is_numeric_field, number_or_zero
from .dto import PieDonutItem, PivotedRow, Row, SeriesPoint, WidgetBinding
from .roles import DEFAULT_AGGREGATION, AggregationKind


def to_label(value: Any) -> str:
    """Coerce a raw cell into a group label.

    Args:
        value: Raw cell value (None and `MISSING` become the empty string).

    Returns:
        A string label. Booleans render as `true`/`false` and integral floats
        render without a trailing `.0`, so `1` and `1.0` share a label. Floats
        from 1e21 up keep exponent notation (`1e+21`).
    """

    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
    return str(value)


def build_aggregated_series(
    rows: Sequence[Row],
    binding: WidgetBinding,
) -> list[SeriesPoint] | list[PivotedRow] | Sequence[Row]:
    """Group rows by the axis field and aggregate the value field.

    Args:
        rows: Dataset rows (already filtered by the caller).
        binding: Widget binding naming axis, value, legend and aggregation.

    Returns:
        - `rows` unchanged when the axis or value field is unbound.
        - One SeriesPoint per axis label when no legend is bound.
        - One PivotedRow per axis label when a legend is bound; each row holds
          every legend label seen anywhere in `rows`, 0 where a combination
          never occurs.

        Groups are emitted in first-seen order of their axis label.
    """

    x_key = binding.x_axis
    y_key = binding.value_field
    legend_key = binding.legend or None
    if not x_key or not y_key:
        return rows

    numeric = infer_is_numeric_field(rows, y_key)
    effective = (binding.aggregation or DEFAULT_AGGREGATION) if numeric else AggregationKind.count

    buckets: dict[tuple[str, str], list[float]] = {}
    for row in rows:
        x_label = to_label(cell_value(row, x_key))
        legend_label = to_label(cell_value(row, legend_key)) if legend_key else ""
        contribution = number_or_zero(cell_value(row, y_key)) if numeric else 1
        buckets.setdefault((x_label, legend_label), []).append(contribution)

    if not legend_key:
        return [
            {x_key: x_label, y_key: aggregate(values, effective)}
            for (x_label, _), values in buckets.items()
        ]

    legend_labels: dict[str, None] = {}
    by_axis: dict[str, dict[str, float]] = {}
    for (x_label, legend_label), values in buckets.items():
        legend_labels.setdefault(legend_label, None)
        by_axis.setdefault(x_label, {})[legend_label] = aggregate(values, effective)

    pivoted: list[PivotedRow] = []
    for x_label, observed in by_axis.items():
        row_out: PivotedRow = {x_key: x_label}
        for legend_label in legend_labels:
            row_out[legend_label] = observed.get(legend_label, 0)
        pivoted.append(row_out)
    return pivoted


def get_pie_donut_data(rows: Sequence[Row], binding: WidgetBinding) -> list[PieDonutItem]:
    """Sum values by name for pie, donut and funnel charts.

    Args:
        rows: Dataset rows.
        binding: Widget binding; the name comes from the legend (falling back
            to the axis) and the value from `y_axis` (falling back to `field`).

    Returns:
        One PieDonutItem per distinct name, in first-seen order. Values that do
        not parse to a finite number count as 1. Empty when either field is
        unbound.
    """

    name_key = binding.name_field
    value_key = binding.value_field
    if not name_key or not value_key:
        return []

    items: dict[str, PieDonutItem] = {}
    for row in rows:
        name = to_label(cell_value(row, name_key))
        number = finite_number(cell_value(row, value_key))
        value = 1 if number is None else number
        item = items.get(name)
        if item is None:
            items[name] = PieDonutItem(name=name, value=value)
        else:
            item.value += value
    return list(items.values())
