"""Pure widget-data package for dashboardStudio.

This package contains deterministic, testable computations that turn raw rows
and widget bindings into chart-ready series. It must not import Django or
perform any I/O.
"""

from .aggregations import aggregate
from .chart_registry import DEFAULT_REGISTRY
from .pivot import build_aggregated_series, get_pie_donut_data

__all__ = ["DEFAULT_REGISTRY", "aggregate", "build_aggregated_series", "get_pie_donut_data"]
