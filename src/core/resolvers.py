"""Resolution helpers for caller-supplied date windows.

Pure functions that turn loose user input (ISO strings, day counts) into
calendar dates. Dates are naive UTC calendar dates throughout; no
time-of-day or timezone component is carried.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone


class ResolverError(Exception):
    """Raised when a date window cannot be resolved from the given input."""

    def __init__(self, field_name: str, value: str, reason: str | None = None):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        detail = f"Invalid {field_name} '{value}'."
        if reason:
            detail += f" {reason}"
        super().__init__(detail)


def utc_today() -> date:
    """Current calendar date in UTC."""
    return datetime.now(timezone.utc).date()


def add_months(start: date, months: int) -> date:
    """Advance *start* by whole calendar months, clamping the day to month end.

    ``add_months(date(2025, 1, 31), 1)`` is ``date(2025, 2, 28)``.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def parse_date(value: str, field_name: str = "date") -> date:
    """Parse a ``YYYY-MM-DD`` string.

    Raises :class:`ResolverError` if the string is not a valid ISO date.
    """
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError as e:
        raise ResolverError(field_name, value, "Expected YYYY-MM-DD.") from e


def resolve_date_window(
    start_date: str | None = None,
    end_date: str | None = None,
    days: int | None = None,
    reference_date: date | None = None,
) -> tuple[date, date]:
    """Resolve an inclusive ``(start, end)`` window.

    *end* defaults to today. When *start_date* is omitted the window
    reaches back *days* days, or one calendar month when *days* is also
    omitted.

    Raises :class:`ResolverError` for unparseable dates or a reversed window.
    """
    end = parse_date(end_date, "end_date") if end_date else (reference_date or utc_today())

    if start_date:
        start = parse_date(start_date, "start_date")
    elif days:
        start = end - timedelta(days=days)
    else:
        start = add_months(end, -1)

    if start > end:
        raise ResolverError(
            "start_date",
            start.isoformat(),
            f"Window start must not be after end ({end.isoformat()}).",
        )
    return start, end
