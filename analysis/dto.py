"""DTO types consumed and returned by the widget data pipeline.

DTOs are plain data containers used to transport widget bindings and
chart-ready series to the renderers. They intentionally avoid any Django
dependencies.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from .roles import AggregationKind

Row: TypeAlias = Mapping[str, Any]
SeriesPoint: TypeAlias = dict[str, Any]
PivotedRow: TypeAlias = dict[str, Any]

# Binding keys as stored on widgets by the builder, with snake_case aliases.
_BINDING_KEYS: dict[str, tuple[str, ...]] = {
    "x_axis": ("xAxis", "x_axis"),
    "y_axis": ("yAxis", "y_axis"),
    "legend": ("legend",),
    "field": ("field",),
    "filter_field": ("filterField", "filter_field"),
}


@dataclass(frozen=True, slots=True)
class WidgetBinding:
    """User-chosen mapping from field roles to dataset field names.

    Attributes:
        x_axis: Axis field name.
        y_axis: Value field name.
        legend: Optional legend field name used to split series.
        field: Single field name (card/KPI/gauge), also a value fallback.
        filter_field: Field name driving a slicer.
        aggregation: Requested aggregation; None means "sum".
    """

    x_axis: str | None = None
    y_axis: str | None = None
    legend: str | None = None
    field: str | None = None
    filter_field: str | None = None
    aggregation: AggregationKind | str | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "WidgetBinding":
        """Build a binding from a widget-style mapping.

        Args:
            raw: Mapping using either the widget keys (`xAxis`, `yAxis`,
                `legend`, `field`, `filterField`) or snake_case names.

        Returns:
            WidgetBinding with blank or non-string names treated as absent.
        """

        values: dict[str, str | None] = {}
        for attr, keys in _BINDING_KEYS.items():
            values[attr] = None
            for key in keys:
                candidate = raw.get(key)
                if isinstance(candidate, str) and candidate:
                    values[attr] = candidate
                    break
        aggregation = raw.get("aggregation")
        return cls(
            aggregation=aggregation if isinstance(aggregation, str) and aggregation else None,
            **values,
        )

    @property
    def value_field(self) -> str | None:
        """Return the value field name, falling back to the single field."""

        return self.y_axis or self.field or None

    @property
    def name_field(self) -> str | None:
        """Return the slice-name field for name/value shapes (legend first)."""

        return self.legend or self.x_axis or None


@dataclass(slots=True)
class PieDonutItem:
    """One slice of a pie/donut/funnel chart.

    Attributes:
        name: Distinct name label.
        value: Summed value across all rows sharing `name`.
    """

    name: str
    value: float

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation."""

        return {"name": self.name, "value": self.value}
