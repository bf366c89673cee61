"""Integration tests for the widget JSON endpoints."""

from __future__ import annotations

import json

import pytest
from django.urls import reverse

pytestmark = pytest.mark.integration


def _post(client, name: str, payload: object):
    return client.post(reverse(name), data=json.dumps(payload), content_type="application/json")


def test_chart_types_api_lists_picker_entries(client) -> None:
    """The picker endpoint returns every canonical chart type and the legacy aliases."""

    response = client.get(reverse("core:chart_types_api"))
    assert response.status_code == 200
    payload = response.json()
    tags = [row["chartType"] for row in payload["chartTypes"]]
    assert len(tags) == 22
    assert tags[0] == "bar"
    assert payload["aliases"] == {"filter": "slicer"}
    bar = payload["chartTypes"][0]
    assert bar["requiredFields"] == ["axis", "values"]


def test_chart_types_api_rejects_post(client) -> None:
    """The catalog is read-only."""

    response = client.post(reverse("core:chart_types_api"))
    assert response.status_code == 405


def test_validate_widget_api_returns_error_strings(client) -> None:
    """Validation errors are plain user-facing messages."""

    response = _post(client, "core:validate_widget_api", {"widget": {"type": "pie", "xAxis": "region"}})
    assert response.status_code == 200
    assert response.json() == {"valid": False, "errors": ["Values (Y-axis or Field) is required."]}

    response = _post(client, "core:validate_widget_api", {"widget": {"type": "radar"}})
    assert response.json() == {"valid": False, "errors": ["Unknown chart type: radar"]}

    response = _post(client, "core:validate_widget_api", {"widget": {"type": "card", "field": "amount"}})
    assert response.json() == {"valid": True, "errors": []}


def test_render_widget_api_returns_pivoted_series(client, sales_rows) -> None:
    """Rendering posts rows and returns the chart-ready payload."""

    response = _post(
        client,
        "core:render_widget_api",
        {
            "widget": {"id": "w", "type": "column", "xAxis": "region", "yAxis": "amount", "legend": "product"},
            "rows": sales_rows,
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["kind"] == "series"
    assert payload["rowCount"] == 5
    assert payload["data"]["seriesKeys"] == ["Widget", "Gadget"]
    assert payload["data"]["rows"] == [
        {"region": "North", "Widget": 10, "Gadget": 2.5},
        {"region": "South", "Widget": 7, "Gadget": 5},
        {"region": "East", "Widget": 0, "Gadget": 0},
    ]


def test_render_widget_api_applies_report_filters(client, sales_rows) -> None:
    """Report-level filters narrow the rows before rendering."""

    response = _post(
        client,
        "core:render_widget_api",
        {
            "widget": {"type": "card", "field": "amount", "aggregation": "count"},
            "rows": sales_rows,
            "filters": {"region": "North"},
        },
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["rowCount"] == 2
    assert payload["data"]["value"] == "2"


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        json.dumps([1, 2]),
        json.dumps({"widget": {"xAxis": "a"}}),
        json.dumps({"widget": {"type": "bar"}, "rows": {"a": 1}}),
        json.dumps({"widget": {"type": "bar"}, "filters": "north"}),
    ],
)
def test_render_widget_api_rejects_malformed_payloads(client, body: str) -> None:
    """Malformed requests get a 400 with an error message."""

    response = client.post(reverse("core:render_widget_api"), data=body, content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"]


def test_region_options_api(client, sales_rows) -> None:
    """Region options are derived from the posted rows."""

    response = _post(client, "core:region_options_api", {"rows": sales_rows})
    assert response.status_code == 200
    values = [option["value"] for option in response.json()["options"]]
    assert values == ["all", "East", "North", "South"]


def _reject_constant(token: str) -> None:
    raise ValueError(f"non-standard JSON constant {token}")


def test_render_widget_api_encodes_non_finite_values_as_null(client) -> None:
    """A cell reading `Infinity` still yields strictly valid JSON."""

    response = _post(
        client,
        "core:render_widget_api",
        {
            "widget": {"type": "column", "xAxis": "x", "yAxis": "v"},
            "rows": [{"x": "a", "v": 1}, {"x": "a", "v": "Infinity"}],
        },
    )
    assert response.status_code == 200
    payload = json.loads(response.content, parse_constant=_reject_constant)
    assert payload["data"]["rows"] == [{"x": "a", "v": None}]
