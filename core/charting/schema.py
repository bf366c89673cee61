"""Schema types for declarative widget configuration.

Dashboards are driven by widget configuration objects (WidgetConfig) rather
than bespoke rendering logic per page. The builder preview and the viewer both
render from the same WidgetConfig so a widget looks identical in each.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from analysis.dto import WidgetBinding

PayloadKind = Literal[
    "empty",
    "series",
    "pie",
    "treemap",
    "card",
    "gauge",
    "table",
    "slicer",
    "placeholder",
    "unknown",
]

SERIES_CHART_TYPES: frozenset[str] = frozenset(
    {"bar", "column", "stacked-bar", "line", "area", "scatter", "bubble", "waterfall", "combo"}
)
STACKABLE_CHART_TYPES: frozenset[str] = frozenset({"bar", "column", "stacked-bar"})
NAME_VALUE_CHART_TYPES: frozenset[str] = frozenset({"pie", "donut", "funnel"})


@dataclass(frozen=True, slots=True)
class WidgetConfig:
    """Declarative widget definition as stored by the builder.

    Args:
        id: Stable widget identifier.
        chart_type: Chart type tag or legacy alias (e.g. `filter`).
        title: Widget title displayed above the chart.
        binding: Field bindings and aggregation choice.
        selected_filters: Slicer values currently selected.
        dataset_id: Optional id of the dataset feeding the widget.
    """

    id: str
    chart_type: str
    title: str
    binding: WidgetBinding
    selected_filters: tuple[str, ...] = ()
    dataset_id: int | None = None


@dataclass(frozen=True, slots=True)
class ReportFilters:
    """Dashboard-wide viewer filters applied before any widget renders.

    Args:
        search: Case-insensitive search term.
        date_range: Relative date range name (e.g. `last-30-days`).
        region: Region value, or `all`.
    """

    search: str | None = None
    date_range: str | None = None
    region: str | None = None

    @property
    def active(self) -> bool:
        """Return whether any filter would change the dataset."""

        if self.search:
            return True
        if self.date_range and self.date_range != "custom":
            return True
        return bool(self.region and self.region != "all")
