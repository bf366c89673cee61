"""Generic rendering of WidgetConfig entries into chart-ready payloads.

The payload is the renderer-agnostic data a chart library needs (series rows,
name/value slices, a card string, ...). Drawing is left to the client.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypedDict

from analysis.chart_registry import ChartTypeRegistry
from analysis.dto import Row, WidgetBinding
from analysis.pivot import build_aggregated_series, get_pie_donut_data
from analysis.roles import AggregationKind
from analysis.widgets import card_value, gauge_value, slicer_options, table_columns, treemap_data

from .schema import (
    NAME_VALUE_CHART_TYPES,
    SERIES_CHART_TYPES,
    STACKABLE_CHART_TYPES,
    PayloadKind,
    WidgetConfig,
)

NO_DATA_MESSAGE = "No data available"
NO_SOURCE_MESSAGE = "Select a data source and assign columns"


class WidgetPayload(TypedDict, total=False):
    """Chart-ready data for one widget."""

    message: str
    rows: list[dict[str, Any]]
    xKey: str | None
    seriesKeys: list[str]
    stacked: bool
    orientation: str
    items: list[dict[str, Any]]
    donut: bool
    value: str | float
    label: str
    aggregation: str
    columns: list[str]
    field: str | None
    options: list[str]
    selected: list[str]


@dataclass(frozen=True, slots=True)
class RenderedWidget:
    """A rendered widget produced from a WidgetConfig."""

    config: WidgetConfig
    chart_type: str
    label: str
    kind: PayloadKind
    data: WidgetPayload
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def render_widget(
    *,
    widget: WidgetConfig,
    rows: Sequence[Row],
    registry: ChartTypeRegistry,
) -> RenderedWidget:
    """Render a single widget from already-filtered rows.

    Args:
        widget: WidgetConfig to render.
        rows: Dataset rows (already scoped for the caller).
        registry: ChartTypeRegistry used for alias resolution and validation.

    Returns:
        RenderedWidget. Binding problems are reported in `errors`; rendering
        still proceeds best-effort.
    """

    chart_type = registry.canonical(widget.chart_type)
    descriptor = registry.lookup(chart_type)
    errors = tuple(registry.validate(widget.chart_type, widget.binding))
    warnings: tuple[str, ...] = ()
    aggregation = widget.binding.aggregation
    if descriptor is not None and not registry.supports_aggregation(chart_type, aggregation):
        warnings = (f"Aggregation {aggregation!r} is not supported by chart type {chart_type!r}.",)

    def rendered(kind: PayloadKind, data: WidgetPayload) -> RenderedWidget:
        return RenderedWidget(
            config=widget,
            chart_type=chart_type,
            label=descriptor.label if descriptor is not None else chart_type,
            kind=kind,
            data=data,
            errors=errors,
            warnings=warnings,
        )

    empty: WidgetPayload = {"message": NO_DATA_MESSAGE if widget.dataset_id else NO_SOURCE_MESSAGE}
    if not rows:
        return rendered("empty", empty)
    if descriptor is None:
        return rendered("unknown", {"message": "Unknown chart type"})

    binding = widget.binding
    if chart_type in SERIES_CHART_TYPES:
        series = [dict(row) for row in build_aggregated_series(rows, binding)]
        if not series:
            return rendered("empty", empty)
        return rendered("series", _series_payload(chart_type, series, binding))

    if chart_type in NAME_VALUE_CHART_TYPES:
        items = [item.as_json() for item in get_pie_donut_data(rows, binding)]
        if not items:
            return rendered("empty", empty)
        return rendered("pie", {"items": items, "donut": bool(descriptor.config_schema.get("donut"))})

    if chart_type == "treemap":
        tiles = treemap_data(rows, binding)
        if not tiles:
            return rendered("empty", empty)
        return rendered("treemap", {"items": tiles})

    if chart_type in ("card", "kpi"):
        return rendered(
            "card",
            {
                "value": card_value(rows, binding.field, binding.aggregation),
                "label": binding.field or "Value",
                "aggregation": str(binding.aggregation or AggregationKind.count),
            },
        )

    if chart_type == "gauge":
        return rendered(
            "gauge",
            {"value": gauge_value(rows, binding.field, binding.aggregation), "label": binding.field or "Value"},
        )

    if chart_type in ("table", "matrix"):
        return rendered("table", {"columns": table_columns(rows), "rows": [dict(row) for row in rows]})

    if chart_type == "slicer":
        return rendered(
            "slicer",
            {
                "field": binding.filter_field,
                "options": slicer_options(rows, binding.filter_field),
                "selected": list(widget.selected_filters),
            },
        )

    return rendered("placeholder", {"label": descriptor.label})


def _series_payload(chart_type: str, series: list[dict[str, Any]], binding: WidgetBinding) -> WidgetPayload:
    x_key = binding.x_axis
    y_key = binding.value_field
    payload: WidgetPayload = {"rows": series, "xKey": x_key, "seriesKeys": [y_key] if y_key else []}
    if chart_type in STACKABLE_CHART_TYPES:
        payload["orientation"] = "horizontal" if chart_type in ("bar", "stacked-bar") else "vertical"
        if chart_type == "stacked-bar" or binding.legend:
            keys = _stack_keys(series[0], x_key)
            if keys:
                payload["stacked"] = True
                payload["seriesKeys"] = keys
    elif binding.legend and x_key and y_key:
        payload["seriesKeys"] = _stack_keys(series[0], x_key)
    return payload


def _stack_keys(first_row: dict[str, Any], x_key: str | None) -> list[str]:
    # Rows passed through unaggregated may carry a literal "undefined" column
    # written by the browser builder; it is never a series.
    return [key for key in first_row if key != x_key and key != "undefined"]
