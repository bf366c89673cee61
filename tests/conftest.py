"""Pytest fixtures shared across widget pipeline tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest


@pytest.fixture
def sales_rows() -> list[dict[str, object]]:
    """Return a small sales dataset with region, product and amount columns."""

    return [
        {"region": "North", "product": "Widget", "amount": 10, "order_date": "2026-10-01"},
        {"region": "South", "product": "Gadget", "amount": "5", "order_date": "2026-09-20"},
        {"region": "North", "product": "Gadget", "amount": 2.5, "order_date": "2026-06-01"},
        {"region": "East", "product": "Widget", "amount": None, "order_date": "2025-12-31"},
        {"region": "South", "product": "Widget", "amount": 7, "order_date": "2026-10-15"},
    ]


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    The suite is runnable by intent:
    - `unit`: pure, fast tests over the analysis and charting layers.
    - `integration`: tests touching Django views, management commands, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
