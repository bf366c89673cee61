"""JSON views backing the dashboard builder preview and the viewer.

Every endpoint is stateless: the caller is already authorized and posts the
(pre-filtered) dataset rows alongside the widget definition. Nothing is
persisted here.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from analysis.chart_registry import DEFAULT_REGISTRY, LEGACY_ALIASES
from analysis.report_filters import apply_global_filters, region_options
from core.charting.codec import decode_report_filters, decode_rows, decode_widget, encode_rendered_widget
from core.charting.render import render_widget

logger = logging.getLogger(__name__)


def _json_body(request: HttpRequest) -> dict[str, Any]:
    """Parse a JSON object request body.

    Raises:
        ValueError: When the body is not valid JSON or not an object.
    """

    try:
        payload = json.loads(request.body or b"{}")
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError(f"Request body is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object.")
    return payload


def _bad_request(request: HttpRequest, exc: ValueError) -> JsonResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.path, exc)
    return JsonResponse({"error": str(exc)}, status=400)


@require_GET
def chart_types_api(request: HttpRequest) -> JsonResponse:
    """Return the chart types offered by the builder's visualization picker."""

    return JsonResponse(
        {
            "chartTypes": [descriptor.as_json() for descriptor in DEFAULT_REGISTRY.builder_chart_types()],
            "aliases": dict(LEGACY_ALIASES),
        }
    )


@require_POST
def validate_widget_api(request: HttpRequest) -> JsonResponse:
    """Validate a widget's field bindings before it is saved.

    Body: `{"widget": {...}}`. Returns `{"valid": bool, "errors": [str]}`.
    """

    try:
        widget = decode_widget(_json_body(request).get("widget"))
    except ValueError as exc:
        return _bad_request(request, exc)

    errors = DEFAULT_REGISTRY.validate(widget.chart_type, widget.binding)
    return JsonResponse({"valid": not errors, "errors": errors})


@require_POST
def render_widget_api(request: HttpRequest) -> JsonResponse:
    """Render one widget into its chart-ready payload.

    Body: `{"widget": {...}, "rows": [...], "filters": {...}}`. `filters` is
    optional and applies the viewer's report-level filters before rendering.
    """

    try:
        payload = _json_body(request)
        widget = decode_widget(payload.get("widget"))
        rows = decode_rows(payload.get("rows"))
        filters = decode_report_filters(payload.get("filters"))
    except ValueError as exc:
        return _bad_request(request, exc)

    if filters.active:
        rows = apply_global_filters(
            rows,
            search=filters.search,
            date_range=filters.date_range,
            region=filters.region,
        )

    rendered = render_widget(widget=widget, rows=rows, registry=DEFAULT_REGISTRY)
    if rendered.errors:
        logger.info("Widget %r rendered with binding errors: %s", widget.id, list(rendered.errors))
    body = encode_rendered_widget(rendered)
    body["rowCount"] = len(rows)
    return JsonResponse(body, json_dumps_params={"allow_nan": False})


@require_POST
def region_options_api(request: HttpRequest) -> JsonResponse:
    """Return the viewer's region dropdown options for the posted rows.

    Body: `{"rows": [...]}`.
    """

    try:
        rows = decode_rows(_json_body(request).get("rows"))
    except ValueError as exc:
        return _bad_request(request, exc)

    return JsonResponse({"options": region_options(rows)})
