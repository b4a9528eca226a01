"""Tests for currency parser."""
import pytest
from statement_categoriser.utils.currency_parser import parse_currency, format_currency


class TestParseCurrency:
    """Test currency parsing."""

    def test_parse_basic_amount(self):
        """Test parsing basic numeric amount."""
        assert parse_currency("1234.56") == 1234.56

    def test_parse_with_pound_symbol(self):
        """Test parsing with £ symbol."""
        assert parse_currency("£1,234.56") == 1234.56

    def test_parse_with_other_symbols(self):
        """Test parsing with $ and € symbols."""
        assert parse_currency("$1,234.56") == 1234.56
        assert parse_currency("€1,234.56") == 1234.56

    def test_parse_with_thousands_separator(self):
        """Test parsing with comma thousands separator."""
        assert parse_currency("1,234,567.89") == 1234567.89

    def test_parse_negative_parentheses(self):
        """Test parsing negative amount with parentheses."""
        assert parse_currency("(45.50)") == -45.50
        assert parse_currency("(£1,234.56)") == -1234.56

    def test_parse_signed_amounts(self):
        """Test parsing explicit signs."""
        assert parse_currency("-45.50") == -45.50
        assert parse_currency("+20.00") == 20.00

    def test_parse_currency_code_dropped(self):
        """Test that currency codes are ignored."""
        assert parse_currency("45.50 GBP") == 45.50

    def test_parse_leading_decimal_point(self):
        """Test parsing amount without leading digit."""
        assert parse_currency(".99") == 0.99

    def test_parse_empty_string(self):
        """Test parsing empty string."""
        assert parse_currency("") is None
        assert parse_currency("   ") is None

    def test_parse_placeholder_dashes(self):
        """Test that dash placeholders mean no value."""
        assert parse_currency("-") is None
        assert parse_currency("--") is None

    def test_parse_none(self):
        """Test parsing None."""
        assert parse_currency(None) is None

    def test_parse_invalid_format(self):
        """Test parsing invalid format."""
        assert parse_currency("abc") is None
        assert parse_currency("£££") is None
        assert parse_currency("12.34.56") is None
        assert parse_currency("1-2") is None

    def test_parse_with_whitespace(self):
        """Test parsing with surrounding whitespace."""
        assert parse_currency("  45.50  ") == 45.50


class TestFormatCurrency:
    """Test currency formatting."""

    def test_format_positive_amount(self):
        """Test formatting positive amount."""
        assert format_currency(1234.56) == "£1,234.56"

    def test_format_negative_amount(self):
        """Test formatting negative amount."""
        assert format_currency(-45.5) == "-£45.50"

    def test_format_other_currency(self):
        """Test formatting with a different currency code."""
        assert format_currency(10, "USD") == "$10.00"

    def test_format_unknown_currency_defaults_to_pound(self):
        """Test unknown currency codes fall back to £."""
        assert format_currency(10, "XYZ") == "£10.00"
