"""Tests for amount display helpers."""

from decimal import Decimal

import pytest

from ledger_engines.formatting import format_currency, format_round_off


class TestFormatCurrency:

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("0"), "0"),
            (Decimal("999"), "999"),
            (Decimal("1180"), "1,180"),
            (Decimal("123456"), "1,23,456"),
            (Decimal("1234567.50"), "12,34,567.5"),
            (Decimal("10000000.05"), "1,00,00,000.05"),
            (Decimal("-1500.25"), "-1,500.25"),
            ("1049.655", "1,049.66"),
        ],
    )
    def test_indian_grouping(self, value, expected):
        assert format_currency(value) == expected

    def test_largest_amount(self):
        assert format_currency(Decimal("99999999999999.99")) == "9,99,99,99,99,99,999.99"

    def test_out_of_range_amount_shows_zero(self):
        assert format_currency("1e30") == "0"


class TestFormatRoundOff:

    def test_positive(self):
        assert format_round_off(Decimal("0.35"), "₹") == "+₹0.35"

    def test_negative(self):
        assert format_round_off(Decimal("-0.12"), "₹") == "-₹0.12"

    def test_zero_is_suppressed(self):
        assert format_round_off(Decimal("0.00"), "₹") is None

    def test_custom_symbol(self):
        assert format_round_off(Decimal("0.5"), "Rs.") == "+Rs.0.50"

    def test_out_of_range_amount_shows_zero(self):
        assert format_round_off("1e30", "₹") is None
