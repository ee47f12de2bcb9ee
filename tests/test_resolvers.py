"""Tests for date window resolution helpers."""

from datetime import date

import pytest

from tests.conftest import REFERENCE_DATE
from src.core.resolvers import ResolverError, add_months, parse_date, resolve_date_window


class TestAddMonths:
    def test_simple(self):
        assert add_months(date(2025, 3, 15), 12) == date(2026, 3, 15)

    def test_crosses_year_backwards(self):
        assert add_months(date(2025, 1, 10), -1) == date(2024, 12, 10)

    def test_clamps_day(self):
        assert add_months(date(2025, 3, 31), -1) == date(2025, 2, 28)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_zero(self):
        assert add_months(REFERENCE_DATE, 0) == REFERENCE_DATE


class TestParseDate:
    def test_iso_date(self):
        assert parse_date("2025-03-01") == date(2025, 3, 1)

    def test_ignores_time_component(self):
        assert parse_date("2025-03-01T12:30:00Z") == date(2025, 3, 1)

    def test_invalid(self):
        with pytest.raises(ResolverError) as exc_info:
            parse_date("03/01/2025", "start_date")
        assert exc_info.value.field_name == "start_date"
        assert "YYYY-MM-DD" in str(exc_info.value)


class TestResolveDateWindow:
    def test_defaults_to_last_month(self):
        assert resolve_date_window(reference_date=REFERENCE_DATE) == (
            date(2025, 2, 15), REFERENCE_DATE,
        )

    def test_days(self):
        assert resolve_date_window(days=30, reference_date=REFERENCE_DATE) == (
            date(2025, 2, 13), REFERENCE_DATE,
        )

    def test_explicit_dates(self):
        assert resolve_date_window("2025-01-01", "2025-01-31") == (
            date(2025, 1, 1), date(2025, 1, 31),
        )

    def test_start_date_wins_over_days(self):
        start, _ = resolve_date_window("2025-03-01", days=90, reference_date=REFERENCE_DATE)
        assert start == date(2025, 3, 1)

    def test_single_day_window(self):
        assert resolve_date_window("2025-03-15", "2025-03-15") == (REFERENCE_DATE, REFERENCE_DATE)

    def test_reversed_window_raises(self):
        with pytest.raises(ResolverError, match="must not be after"):
            resolve_date_window("2025-04-01", "2025-03-01")

    def test_invalid_end_date(self):
        with pytest.raises(ResolverError) as exc_info:
            resolve_date_window(end_date="yesterday")
        assert exc_info.value.field_name == "end_date"
