"""Aggregation helpers for widget data.

This module provides deterministic, reusable reductions used by both the
builder preview and the viewer without introducing Django dependencies.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import Any, Final

from .dto import Row
from .roles import AggregationKind

NUMERIC_SAMPLE_SIZE: Final[int] = 50

MISSING: Final[Any] = object()

_NUMERIC_LITERAL = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INFINITY_LITERAL = re.compile(r"^[+-]?Infinity$")


def aggregate(values: Sequence[float], kind: AggregationKind | str | None = None) -> float:
    """Reduce a group of numbers to one number.

    Args:
        values: Per-row contributions of one group.
        kind: Aggregation strategy. None and unrecognized strings fall back to
            summation.

    Returns:
        The reduced value; 0 for an empty group regardless of `kind`.

    Notes:
        `percentage` returns the arithmetic mean of the group. Renderers rely on
        this value, so it is not a share of the grand total.
    """

    if not values:
        return 0
    if kind == AggregationKind.count:
        return len(values)
    if kind == AggregationKind.first:
        return values[0]
    if kind == AggregationKind.last:
        return values[-1]
    if kind == AggregationKind.percentage:
        return sum(values) / len(values)
    return sum(values)


def to_number(value: Any) -> float | None:
    """Coerce a raw cell into a number, the way spreadsheet exports expect.

    Args:
        value: Raw cell value. `MISSING` marks an absent key.

    Returns:
        The numeric value, or None when the value does not represent a number.
        Numbers pass through unchanged (including non-finite floats), booleans
        map to 0/1, None and blank strings map to 0.
    """

    if value is MISSING:
        return None
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if _NUMERIC_LITERAL.match(text):
            return float(text)
        if _INFINITY_LITERAL.match(text):
            return -math.inf if text.startswith("-") else math.inf
        return None
    return None


def finite_number(value: Any) -> float | None:
    """Return `to_number(value)` when it is finite, else None."""

    number = to_number(value)
    if number is None or not math.isfinite(number):
        return None
    return number


def number_or_zero(value: Any) -> float:
    """Return the numeric value of a cell, or 0 when it does not parse."""

    number = to_number(value)
    if number is None or math.isnan(number):
        return 0
    return number


def infer_is_numeric_field(rows: Sequence[Row], field: str | None) -> bool:
    """Decide whether a field holds numbers by sampling the leading rows.

    Args:
        rows: Dataset rows in delivery order.
        field: Field name to inspect.

    Returns:
        True when the first non-blank value among the first
        `NUMERIC_SAMPLE_SIZE` rows is numeric. The first non-blank value
        decides; later rows are not consulted even if they would parse.
    """

    if not field:
        return False
    for row in rows[:NUMERIC_SAMPLE_SIZE]:
        value = cell_value(row, field)
        if value is MISSING or value is None or value == "":
            continue
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return True
        return finite_number(value) is not None
    return False


def cell_value(row: Row | None, field: str) -> Any:
    """Return a row's value for `field`, or `MISSING` when the key is absent."""

    if row is None:
        return MISSING
    return row.get(field, MISSING)
