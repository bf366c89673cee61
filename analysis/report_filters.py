"""Report-level filters applied by the viewer before widgets render.

The viewer offers three dashboard-wide filters that work on any dataset
without configuration:

- Search: keep rows where any cell contains the term (case-insensitive).
- Date range: filter on a discovered date column.
- Region: filter on a discovered region/country column.

Column discovery is heuristic and best-effort: when no suitable column exists
the corresponding filter is a no-op.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timedelta, timezone
from typing import Any, Final

from .dto import Row
from .pivot import to_label

DATE_COLUMN_CANDIDATES: Final[tuple[str, ...]] = (
    "date",
    "created_at",
    "order_date",
    "timestamp",
    "time",
    "created",
    "updated_at",
    "start_date",
    "end_date",
    "_date",
    "sale_date",
    "transaction_date",
    "period",
)

REGION_COLUMN_CANDIDATES: Final[tuple[str, ...]] = (
    "region",
    "region_name",
    "country",
    "country_name",
    "area",
    "geographic",
    "location",
    "territory",
    "zone",
    "market",
    "geo",
)

DATE_RANGE_DAYS: Final[dict[str, int]] = {
    "last-7-days": 7,
    "last-30-days": 30,
    "last-90-days": 90,
}

ALL_REGIONS: Final[str] = "all"

_DATE_SAMPLE_SIZE: Final[int] = 50
_DATE_COLUMN_MIN_RATIO: Final[float] = 0.3
_EPOCH_MILLISECONDS_THRESHOLD: Final[float] = 1e12
_EPOCH_SECONDS_THRESHOLD: Final[float] = 1e9
_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %b %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def parse_date(value: Any) -> date | None:
    """Parse a cell into a calendar date.

    Args:
        value: A date/datetime, an epoch timestamp (milliseconds above 1e12,
            seconds above 1e9), or an ISO-like string.

    Returns:
        The parsed date, or None when the value is not recognizably a date.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        if value > _EPOCH_MILLISECONDS_THRESHOLD:
            return _from_epoch(value / 1000)
        if value > _EPOCH_SECONDS_THRESHOLD:
            return _from_epoch(value)
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    else:
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc)
        return parsed.date()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def _from_epoch(seconds: float) -> date | None:
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError):
        return None


def _looks_like_date_column(rows: Sequence[Row], key: str) -> bool:
    sample = [row.get(key) if row is not None else None for row in rows[:_DATE_SAMPLE_SIZE]]
    parsed = sum(1 for value in sample if value not in (None, "") and parse_date(value) is not None)
    return parsed >= max(1, len(sample) * _DATE_COLUMN_MIN_RATIO)


def _first_row_keys(rows: Sequence[Row]) -> list[str]:
    if not rows or rows[0] is None:
        return []
    return [str(key) for key in rows[0].keys()]


def infer_date_column(rows: Sequence[Row]) -> str | None:
    """Return the most plausible date column, preferring date-like names."""

    keys = _first_row_keys(rows)
    for key in keys:
        lower = key.lower()
        if any(candidate in lower for candidate in DATE_COLUMN_CANDIDATES) and _looks_like_date_column(rows, key):
            return key
    for key in keys:
        if _looks_like_date_column(rows, key):
            return key
    return None


def infer_region_column(rows: Sequence[Row]) -> str | None:
    """Return the first column whose name looks like a region/country column."""

    keys = _first_row_keys(rows)
    lower_keys = [key.lower() for key in keys]
    for candidate in REGION_COLUMN_CANDIDATES:
        for key, lower in zip(keys, lower_keys):
            if candidate in lower:
                return key
    return None


def in_date_range(value: date, date_range: str, *, today: date) -> bool:
    """Return whether a date falls inside a named relative range.

    Unknown ranges (including `custom`, which has no picker) match everything.
    """

    days = DATE_RANGE_DAYS.get(date_range)
    if days is not None:
        return today - timedelta(days=days) <= value <= today
    if date_range == "this-year":
        return value.year == today.year
    return True


def apply_global_filters(
    rows: Sequence[Row],
    *,
    search: str | None = None,
    date_range: str | None = None,
    region: str | None = None,
    today: date | None = None,
) -> list[Row]:
    """Apply the viewer's report-level filters to a dataset.

    Args:
        rows: Dataset rows.
        search: Case-insensitive term matched against every cell.
        date_range: One of `last-7-days`, `last-30-days`, `last-90-days`,
            `this-year`; `custom` or None disables date filtering.
        region: Region value to keep; `all` or None disables region filtering.
        today: Reference date for relative ranges (defaults to the current date).

    Returns:
        A new list containing the rows that pass every active filter.
    """

    out = list(rows)
    if not out:
        return out

    term = (search or "").strip().lower()
    if term:
        out = [
            row
            for row in out
            if row is not None and any(term in to_label(value).lower() for value in row.values())
        ]

    if date_range and date_range != "custom":
        date_column = infer_date_column(out)
        if date_column is not None:
            reference = today or date.today()
            kept: list[Row] = []
            for row in out:
                if row is None:
                    continue
                parsed = parse_date(row.get(date_column))
                if parsed is not None and in_date_range(parsed, date_range, today=reference):
                    kept.append(row)
            out = kept

    if region and region != ALL_REGIONS:
        region_column = infer_region_column(out)
        if region_column is not None:
            wanted = region.lower()
            out = [
                row
                for row in out
                if row is not None and wanted in to_label(row.get(region_column)).lower()
            ]

    return out


def region_options(rows: Sequence[Row]) -> list[dict[str, str]]:
    """Return region dropdown options: "All Regions" then sorted distinct values."""

    options = [{"value": ALL_REGIONS, "label": "All Regions"}]
    region_column = infer_region_column(rows)
    if region_column is None:
        return options
    values = {
        to_label(row.get(region_column)).strip()
        for row in rows
        if row is not None
    }
    values.discard("")
    return options + [{"value": value, "label": value} for value in sorted(values, key=str.lower)]
