"""Tests for date parser."""
from datetime import date

import pytest
from statement_categoriser.utils.date_parser import parse_date, to_iso_date


class TestParseDate:
    """Test date parsing."""

    def test_parse_iso(self):
        """Test parsing ISO dates."""
        assert parse_date("2024-12-01") == date(2024, 12, 1)
        assert parse_date("2024-1-5") == date(2024, 1, 5)

    @pytest.mark.parametrize("value", ["01/12/2024", "01-12-2024", "01.12.2024", "1/12/2024"])
    def test_parse_day_month_year(self, value):
        """Test parsing UK day-first dates with a four-digit year."""
        assert parse_date(value) == date(2024, 12, 1)

    def test_parse_two_digit_year(self):
        """Test two-digit years pivot at 50."""
        assert parse_date("01/12/24") == date(2024, 12, 1)
        assert parse_date("01/12/50") == date(2050, 12, 1)
        assert parse_date("01/12/99") == date(1999, 12, 1)

    @pytest.mark.parametrize("value", ["01 Dec 2024", "01-Dec-2024", "1 dec 2024", "01 DEC 2024"])
    def test_parse_month_name(self, value):
        """Test parsing dates with abbreviated month names."""
        assert parse_date(value) == date(2024, 12, 1)

    def test_day_first_not_month_first(self):
        """Test that ambiguous dates are read day first."""
        assert parse_date("02/03/2024") == date(2024, 3, 2)

    def test_parse_invalid_calendar_date(self):
        """Test that impossible dates are rejected."""
        assert parse_date("31/02/2024") is None
        assert parse_date("2024-13-01") is None

    def test_parse_unknown_format(self):
        """Test unsupported formats return None."""
        assert parse_date("2024/12/01") is None
        assert parse_date("01 Foo 2024") is None
        assert parse_date("December 1, 2024") is None
        assert parse_date("01/12/2024 10:30") is None

    def test_parse_empty(self):
        """Test empty and None input."""
        assert parse_date("") is None
        assert parse_date("   ") is None
        assert parse_date(None) is None

    def test_parse_strips_whitespace(self):
        """Test surrounding whitespace is ignored."""
        assert parse_date("  01/12/2024 ") == date(2024, 12, 1)


class TestToIsoDate:
    """Test ISO conversion."""

    def test_to_iso_date(self):
        """Test conversion to YYYY-MM-DD."""
        assert to_iso_date("5 Jan 2024") == "2024-01-05"

    def test_to_iso_date_invalid(self):
        """Test invalid dates give None."""
        assert to_iso_date("not a date") is None
