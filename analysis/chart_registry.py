"""Chart capability registry used by the widget builder and renderers.

The registry describes which chart types exist, which field roles each one
requires or accepts, and which aggregations it supports. It is built once at
import time and exposes read operations only.

Validation messages are user-facing strings rather than structured codes; the
builder shows them verbatim before allowing a widget to be saved.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Final

from .dto import WidgetBinding
from .roles import AggregationKind, FieldRole


@dataclass(frozen=True, slots=True)
class ChartTypeDescriptor:
    """Describe one chart type's binding capabilities.

    Args:
        chart_type: Stable chart type tag stored on widgets.
        label: Human-friendly label for the chart picker.
        required_roles: Roles that must be bound for a valid widget.
        optional_roles: Roles the chart type accepts but does not need.
        supported_aggregations: Aggregations meaningful for this chart type.
        config_schema: Extra per-type settings (e.g. `stacked`, `donut`).
    """

    chart_type: str
    label: str
    required_roles: frozenset[FieldRole]
    optional_roles: frozenset[FieldRole]
    supported_aggregations: frozenset[AggregationKind]
    config_schema: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def as_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation for the chart picker."""

        return {
            "chartType": self.chart_type,
            "label": self.label,
            "requiredFields": [str(role) for role in FieldRole if role in self.required_roles],
            "optionalFields": [str(role) for role in FieldRole if role in self.optional_roles],
            "supportedAggregations": [
                str(kind) for kind in AggregationKind if kind in self.supported_aggregations
            ],
            "configSchema": dict(self.config_schema),
        }


# Widget binding keys as the builder names them, mapped to their roles.
WIDGET_FIELD_ROLES: Final[Mapping[str, FieldRole]] = MappingProxyType(
    {
        "xAxis": FieldRole.axis,
        "yAxis": FieldRole.values,
        "legend": FieldRole.legend,
        "field": FieldRole.field,
        "filterField": FieldRole.filter,
    }
)


def widget_field_to_role(key: str) -> FieldRole:
    """Map a widget binding key (`xAxis`, `yAxis`, ...) to its field role.

    Unrecognized keys map to `FieldRole.category`.
    """

    return WIDGET_FIELD_ROLES.get(key, FieldRole.category)


class ChartTypeRegistry:
    """Lookup and validation helpers for chart type descriptors."""

    def __init__(
        self,
        descriptors: Iterable[ChartTypeDescriptor],
        *,
        aliases: Mapping[str, str] | None = None,
        builder_order: Iterable[str] | None = None,
    ) -> None:
        """Initialize a registry from descriptors and legacy aliases.

        Args:
            descriptors: Descriptors in registration order.
            aliases: Legacy tag -> canonical tag substitutions.
            builder_order: Chart types shown in the builder picker. Defaults to
                every registered chart type in registration order.

        Raises:
            ValueError: On duplicate chart types or aliases/picker entries that
                reference unregistered chart types.
        """

        self._descriptors: dict[str, ChartTypeDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.chart_type in self._descriptors:
                raise ValueError(f"Duplicate ChartTypeDescriptor chart_type: {descriptor.chart_type!r}")
            self._descriptors[descriptor.chart_type] = descriptor

        self._aliases: dict[str, str] = dict(aliases or {})
        for alias, target in self._aliases.items():
            if target not in self._descriptors:
                raise ValueError(f"Alias {alias!r} targets unknown chart_type {target!r}.")

        order = tuple(builder_order) if builder_order is not None else tuple(self._descriptors)
        unknown = [tag for tag in order if tag not in self._descriptors]
        if unknown:
            raise ValueError(f"Builder chart types are not registered: {unknown}.")
        self._builder_order = order

    def canonical(self, tag: str) -> str:
        """Return the canonical chart type for a tag (resolving legacy aliases)."""

        return self._aliases.get(tag, tag)

    def lookup(self, tag: str) -> ChartTypeDescriptor | None:
        """Return the descriptor for a chart type or legacy alias, or None when unknown."""

        return self._descriptors.get(self.canonical(tag))

    def list_all(self) -> tuple[ChartTypeDescriptor, ...]:
        """Return all descriptors in registration order."""

        return tuple(self._descriptors.values())

    def builder_chart_types(self) -> tuple[ChartTypeDescriptor, ...]:
        """Return the descriptors offered by the builder picker (no aliases)."""

        return tuple(self._descriptors[tag] for tag in self._builder_order)

    def supports_aggregation(self, tag: str, kind: AggregationKind | str | None) -> bool:
        """Return whether a chart type lists an aggregation as supported.

        Unknown chart types support nothing; a missing kind is always accepted.
        """

        descriptor = self.lookup(tag)
        if descriptor is None:
            return False
        if not kind:
            return True
        return kind in descriptor.supported_aggregations

    def validate(self, tag: str, binding: WidgetBinding | Mapping[str, Any]) -> list[str]:
        """Validate a widget's field bindings against its chart type.

        Args:
            tag: Chart type or legacy alias stored on the widget.
            binding: WidgetBinding or widget-style mapping of field names.

        Returns:
            Ordered human-readable errors; empty when the binding is valid.
        """

        descriptor = self.lookup(tag)
        if descriptor is None:
            return [f"Unknown chart type: {tag}"]

        if not isinstance(binding, WidgetBinding):
            binding = WidgetBinding.from_mapping(binding)

        has_axis = bool(binding.x_axis or binding.legend)
        has_values = bool(binding.y_axis or binding.field)
        has_category = bool(binding.x_axis or binding.legend)
        has_field = bool(binding.field)
        has_filter = bool(binding.filter_field)

        required = descriptor.required_roles
        errors: list[str] = []
        if FieldRole.axis in required and not has_axis:
            errors.append("Axis (X-axis or Legend) is required.")
        if FieldRole.values in required and not has_values:
            errors.append("Values (Y-axis or Field) is required.")
        if FieldRole.category in required and not has_category:
            errors.append("Category (X-axis or Legend) is required.")
        if FieldRole.field in required and not has_field:
            errors.append("Field is required.")
        if FieldRole.filter in required and not has_filter:
            errors.append("Filter field is required.")
        return errors


_A = AggregationKind
_R = FieldRole

_ALL_AGGREGATIONS: Final[frozenset[AggregationKind]] = frozenset(AggregationKind)
_SUM_COUNT: Final[frozenset[AggregationKind]] = frozenset({_A.sum, _A.count})
_NO_PERCENTAGE: Final[frozenset[AggregationKind]] = frozenset({_A.sum, _A.count, _A.first, _A.last})

_AXIS_VALUES: Final[frozenset[FieldRole]] = frozenset({_R.axis, _R.values})
_CATEGORY_VALUES: Final[frozenset[FieldRole]] = frozenset({_R.category, _R.values})
_LEGEND_TOOLTIPS: Final[frozenset[FieldRole]] = frozenset({_R.legend, _R.tooltips})
_LEGEND: Final[frozenset[FieldRole]] = frozenset({_R.legend})
_FIELD: Final[frozenset[FieldRole]] = frozenset({_R.field})
_NONE: Final[frozenset[FieldRole]] = frozenset()


def _descriptor(
    chart_type: str,
    label: str,
    required: frozenset[FieldRole],
    optional: frozenset[FieldRole],
    aggregations: frozenset[AggregationKind],
    **config: Any,
) -> ChartTypeDescriptor:
    return ChartTypeDescriptor(
        chart_type=chart_type,
        label=label,
        required_roles=required,
        optional_roles=optional,
        supported_aggregations=aggregations,
        config_schema=MappingProxyType(config),
    )


CHART_TYPE_DESCRIPTORS: Final[tuple[ChartTypeDescriptor, ...]] = (
    _descriptor("bar", "Bar", _AXIS_VALUES, _LEGEND_TOOLTIPS, _ALL_AGGREGATIONS),
    _descriptor("column", "Column", _AXIS_VALUES, _LEGEND_TOOLTIPS, _ALL_AGGREGATIONS),
    _descriptor("stacked-bar", "Stacked Bar", _AXIS_VALUES, _LEGEND_TOOLTIPS, _ALL_AGGREGATIONS, stacked=True),
    _descriptor("line", "Line", _AXIS_VALUES, _LEGEND_TOOLTIPS, _ALL_AGGREGATIONS),
    _descriptor("area", "Area", _AXIS_VALUES, _LEGEND_TOOLTIPS, _ALL_AGGREGATIONS),
    _descriptor("pie", "Pie", _CATEGORY_VALUES, _LEGEND, _SUM_COUNT),
    _descriptor("donut", "Donut", _CATEGORY_VALUES, _LEGEND, _SUM_COUNT, donut=True),
    _descriptor("table", "Table", _NONE, frozenset({_R.axis, _R.values, _R.category}), frozenset()),
    _descriptor("matrix", "Matrix", _NONE, frozenset({_R.axis, _R.values, _R.legend, _R.category}), _SUM_COUNT),
    _descriptor("card", "Card", _FIELD, _NONE, _ALL_AGGREGATIONS),
    _descriptor("kpi", "KPI", _FIELD, _NONE, _ALL_AGGREGATIONS),
    _descriptor("slicer", "Slicer", frozenset({_R.filter}), _NONE, frozenset()),
    _descriptor("scatter", "Scatter", _AXIS_VALUES, _LEGEND_TOOLTIPS, _NO_PERCENTAGE),
    _descriptor("bubble", "Bubble", _AXIS_VALUES, _LEGEND_TOOLTIPS, _NO_PERCENTAGE),
    _descriptor("waterfall", "Waterfall", _AXIS_VALUES, _LEGEND, frozenset({_A.sum, _A.first, _A.last})),
    _descriptor("funnel", "Funnel", _CATEGORY_VALUES, _LEGEND, _SUM_COUNT),
    _descriptor("treemap", "Treemap", _CATEGORY_VALUES, _LEGEND, _SUM_COUNT),
    _descriptor("combo", "Combo (Line + Column)", _AXIS_VALUES, _LEGEND_TOOLTIPS, _ALL_AGGREGATIONS),
    _descriptor("gauge", "Gauge", _FIELD, _NONE, _ALL_AGGREGATIONS),
    _descriptor("maps", "Maps", frozenset({_R.category}), frozenset({_R.values, _R.legend}), _SUM_COUNT),
    _descriptor("decomposition-tree", "Decomposition Tree", _CATEGORY_VALUES, _LEGEND, _SUM_COUNT),
    _descriptor(
        "key-influencers",
        "Key Influencers",
        frozenset({_R.field, _R.values}),
        frozenset({_R.category}),
        _SUM_COUNT,
    ),
)

LEGACY_ALIASES: Final[Mapping[str, str]] = MappingProxyType({"filter": "slicer"})

BUILDER_CHART_TYPES: Final[tuple[str, ...]] = (
    "bar",
    "stacked-bar",
    "column",
    "line",
    "area",
    "pie",
    "donut",
    "table",
    "matrix",
    "card",
    "kpi",
    "slicer",
    "scatter",
    "bubble",
    "waterfall",
    "funnel",
    "treemap",
    "combo",
    "gauge",
    "maps",
    "decomposition-tree",
    "key-influencers",
)


DEFAULT_REGISTRY: Final[ChartTypeRegistry] = ChartTypeRegistry(
    CHART_TYPE_DESCRIPTORS,
    aliases=LEGACY_ALIASES,
    builder_order=BUILDER_CHART_TYPES,
)
