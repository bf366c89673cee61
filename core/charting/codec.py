"""Encoding/decoding helpers for widget JSON payloads."""

from __future__ import annotations

import math
from typing import Any, cast

from analysis.dto import WidgetBinding

from .render import RenderedWidget
from .schema import ReportFilters, WidgetConfig


def decode_widget(payload: dict[str, Any]) -> WidgetConfig:
    """Decode a WidgetConfig from a builder/viewer widget payload.

    Args:
        payload: Widget dictionary using the builder keys (`type`, `xAxis`,
            `yAxis`, `legend`, `field`, `filterField`, `aggregation`,
            `selectedFilters`, `datasetId`).

    Returns:
        WidgetConfig instance. Non-string field names are ignored.

    Raises:
        ValueError: When `payload` is not an object or has no chart type.
    """

    if not isinstance(payload, dict):
        raise ValueError("Widget payload must be a JSON object.")
    chart_type = payload.get("type")
    if not isinstance(chart_type, str) or not chart_type.strip():
        raise ValueError("Widget payload requires a non-empty 'type'.")

    selected_raw = payload.get("selectedFilters")
    selected = tuple(str(x) for x in selected_raw) if isinstance(selected_raw, list) else ()
    return WidgetConfig(
        id=str(payload.get("id") or ""),
        chart_type=chart_type.strip(),
        title=str(payload.get("title") or ""),
        binding=WidgetBinding.from_mapping(payload),
        selected_filters=selected,
        dataset_id=_parse_int(payload.get("datasetId")),
    )


def decode_rows(raw: Any) -> list[dict[str, Any]]:
    """Decode a list of dataset rows, dropping entries that are not objects.

    Raises:
        ValueError: When `raw` is present but not a list.
    """

    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError("'rows' must be a JSON array of objects.")
    return [cast(dict[str, Any], row) for row in raw if isinstance(row, dict)]


def decode_report_filters(raw: Any) -> ReportFilters:
    """Decode the viewer's report-level filters (`search`, `dateRange`, `region`).

    Raises:
        ValueError: When `raw` is present but not an object.
    """

    if raw is None:
        return ReportFilters()
    if not isinstance(raw, dict):
        raise ValueError("'filters' must be a JSON object.")
    return ReportFilters(
        search=_parse_str(raw.get("search")),
        date_range=_parse_str(raw.get("dateRange")),
        region=_parse_str(raw.get("region")),
    )


def encode_rendered_widget(rendered: RenderedWidget) -> dict[str, Any]:
    """Encode a RenderedWidget into a JSON-serializable dictionary.

    Non-finite numbers (a cell reading `Infinity`, say) have no strict JSON
    form and are encoded as null.
    """

    return {
        "id": rendered.config.id,
        "title": rendered.config.title,
        "chartType": rendered.chart_type,
        "label": rendered.label,
        "kind": rendered.kind,
        "data": _json_safe(dict(rendered.data)),
        "errors": list(rendered.errors),
        "warnings": list(rendered.warnings),
    }


def _json_safe(value: Any) -> Any:
    """Return `value` with non-finite floats replaced by None, recursively."""

    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def _parse_int(value: object) -> int | None:
    """Best-effort int parsing for widget payloads."""

    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(str(value))
    except ValueError:
        return None


def _parse_str(value: object) -> str | None:
    """Return a stripped non-empty string, or None."""

    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()
