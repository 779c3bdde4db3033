"""
Tests for amount and date normalization helpers.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from statement_ledger.utils.formatting import (
    DateFormat,
    format_amount,
    generate_id,
    generate_reference,
    normalize_description,
    parse_amount,
    parse_balance,
    parse_date,
)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestParseAmount:
    """Tests for money text to minor units."""

    def test_thousands_separator(self):
        """Test that 50,000.00 becomes 5,000,000 kobo."""
        assert parse_amount("50,000.00") == 5000000

    def test_small_amount(self):
        """Test that 100.00 becomes 10,000 kobo."""
        assert parse_amount("100.00") == 10000

    def test_currency_markers(self):
        """Test that naira symbols and codes are ignored."""
        assert parse_amount("₦1,234.56") == 123456
        assert parse_amount("NGN 1,000.00") == 100000

    def test_explicit_signs(self):
        """Test that explicit signs are kept."""
        assert parse_amount("-1,000.00") == -100000
        assert parse_amount("+12.50") == 1250

    def test_rounds_half_up(self):
        """Test that sub-kobo values round half up."""
        assert parse_amount("1.005") == 101

    def test_rounds_to_zero(self):
        """Test that an amount below half a kobo counts as zero."""
        assert parse_amount("0.001") is None

    @pytest.mark.parametrize("text", [None, "", "-", "--", "0.00", "abc", "  ", "1e3", "1e400", "NaN", "Infinity"])
    def test_unusable_amounts(self, text):
        """Test that empty, placeholder, zero and junk amounts give None."""
        assert parse_amount(text) is None


class TestParseBalance:
    """Tests for running balance parsing."""

    def test_zero_balance_is_valid(self):
        """Test that a zero balance is kept."""
        assert parse_balance("0.00") == 0

    def test_balance_is_unsigned(self):
        """Test that balances are stored as magnitudes."""
        assert parse_balance("-500.00") == 50000

    def test_placeholder(self):
        """Test that a dash balance gives None."""
        assert parse_balance("-") is None

    @pytest.mark.parametrize("text", ["1e400", "2E5", "NaN", "12.5.0"])
    def test_non_decimal_text(self, text):
        """Test that exponent and other non-decimal forms give None."""
        assert parse_balance(text) is None


class TestFormatAmount:
    """Tests for display formatting."""

    def test_negative(self):
        """Test formatting an outflow."""
        assert format_amount(-123456) == "-₦1,234.56"

    def test_positive(self):
        """Test formatting an inflow."""
        assert format_amount(5000000) == "₦50,000.00"


class TestParseDate:
    """Tests for dialect date parsing."""

    def test_day_month_name_year(self):
        """Test dd-Mon-yyyy."""
        assert parse_date("15-Nov-2025", [DateFormat.DAY_MON_YEAR]) == utc(2025, 11, 15)

    def test_short_year(self):
        """Test dd-MON-yy as used by Access Bank."""
        assert parse_date("01-JAN-25", [DateFormat.DAY_MON_SHORT_YEAR]) == utc(2025, 1, 1)

    def test_short_year_does_not_cut_full_year(self):
        """Test that a four-digit year falls through to the next format."""
        formats = [DateFormat.DAY_MON_SHORT_YEAR, DateFormat.DAY_MON_YEAR]
        assert parse_date("15-Nov-2025", formats) == utc(2025, 11, 15)

    def test_loose_wrapped_date(self):
        """Test a date broken across lines in the PDF text."""
        assert parse_date("15-Nov- 2025", [DateFormat.DAY_MON_YEAR_LOOSE]) == utc(2025, 11, 15)

    def test_date_with_time(self):
        """Test dd Mon yyyy HH:MM:SS."""
        result = parse_date("29 Nov 2025 08:12:51", [DateFormat.DAY_MON_YEAR_TIME])
        assert result == utc(2025, 11, 29, 8, 12, 51)

    def test_short_year_with_time(self):
        """Test dd/mm/yy HH:MM:SS as used by Kuda."""
        result = parse_date("22/01/23 12:46:35", [DateFormat.DMY_SHORT_TIME])
        assert result == utc(2023, 1, 22, 12, 46, 35)

    def test_meridiem(self):
        """Test 12-hour clock conversion."""
        formats = [DateFormat.MDY_TIME_MERIDIEM]
        assert parse_date("12/29/2025 06:19:00 PM", formats) == utc(2025, 12, 29, 18, 19, 0)
        assert parse_date("12/29/2025 12:05:00 AM", formats) == utc(2025, 12, 29, 0, 5, 0)

    def test_iso(self):
        """Test ISO timestamps, naive and with offset."""
        assert parse_date("2025-11-29 08:12:51", [DateFormat.ISO]) == utc(2025, 11, 29, 8, 12, 51)
        assert parse_date("2025-11-29T08:12:51+01:00", [DateFormat.ISO]) == utc(2025, 11, 29, 7, 12, 51)

    def test_result_is_aware(self):
        """Test that parsed dates always carry a timezone."""
        result = parse_date("15/11/2025", [DateFormat.DMY_SLASH])
        assert result.tzinfo is not None

    def test_impossible_calendar_date(self):
        """Test that 31 February is rejected rather than raising."""
        assert parse_date("31/02/2025", [DateFormat.DMY_SLASH]) is None

    @pytest.mark.parametrize("text", [None, "", "not a date", "Opening Balance"])
    def test_unparseable(self, text):
        """Test that unparseable text gives None."""
        assert parse_date(text, [DateFormat.DAY_MON_YEAR, DateFormat.DMY_SLASH]) is None


class TestReferencesAndIds:
    """Tests for generated references and ids."""

    def test_generate_reference(self):
        """Test the date-plus-description fallback reference."""
        assert generate_reference(utc(2025, 1, 15), "POS Purchase") == "20250115-POSPURCHA"

    def test_generate_reference_length(self):
        """Test that max_length bounds the description part."""
        ref = generate_reference(utc(2025, 1, 15), "NIP TRANSFER TO OPAY - JOHN DOE", 15)
        assert ref == "20250115-NIPTRANSFERTO"

    def test_generate_id_is_deterministic(self):
        """Test that the same content gives the same id."""
        args = ("gtb", utc(2025, 1, 15), -500000, "NIP TRANSFER", "")
        assert generate_id(*args) == generate_id(*args)

    def test_generate_id_shape(self):
        """Test the prefix and digest length."""
        tx_id = generate_id("gtb", utc(2025, 1, 15), -500000, "NIP TRANSFER", "")
        prefix, digest = tx_id.split("-")
        assert prefix == "gtb"
        assert len(digest) == 16

    def test_generate_id_depends_on_amount(self):
        """Test that different amounts give different ids."""
        a = generate_id("gtb", utc(2025, 1, 15), -500000, "NIP TRANSFER", "")
        b = generate_id("gtb", utc(2025, 1, 15), 500000, "NIP TRANSFER", "")
        assert a != b


class TestNormalizeDescription:
    """Tests for description cleanup."""

    def test_collapses_whitespace(self):
        """Test that runs of whitespace collapse to one space."""
        assert normalize_description("  NIP   TRANSFER \n TO  OPAY ") == "NIP TRANSFER TO OPAY"

    def test_empty(self):
        """Test that None gives an empty string."""
        assert normalize_description(None) == ""
