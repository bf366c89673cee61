"""Shared field-role and aggregation identifiers.

FieldRole is a classification (not a runtime object) used by chart type
descriptors and by the widget-key-to-role mapping. AggregationKind names the
reduction strategies a widget may request.
"""

from __future__ import annotations

from enum import StrEnum


class FieldRole(StrEnum):
    """Binding slot a chart type requires or accepts.

    Values are stable identifiers shared with the builder UI.
    """

    axis = "axis"
    values = "values"
    legend = "legend"
    tooltips = "tooltips"
    category = "category"
    field = "field"
    filter = "filter"


class AggregationKind(StrEnum):
    """Reduction strategy applied to one group of numbers."""

    count = "count"
    sum = "sum"
    first = "first"
    last = "last"
    percentage = "percentage"


DEFAULT_AGGREGATION = AggregationKind.sum
