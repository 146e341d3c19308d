"""
Unit tests for the rounding and coercion primitives.

Verifies:
- Two-place and whole-unit rounding
- Half-up vs half-even tie handling
- Boundary coercion of blank, NaN, negative and out-of-range input
- Rounding of values wider than the default Decimal precision
"""

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal

import pytest

from ledger_kernel.domain.values import (
    DEFAULT_ROUNDING,
    RoundingPolicy,
    MAX_INPUT_EXPONENT,
    round0,
    round2,
    to_decimal,
)


class TestRound2:
    """Tests for round2."""

    def test_exact_two_places(self):
        assert round2(Decimal("1.2")) == Decimal("1.20")
        assert str(round2(Decimal("1.2"))) == "1.20"

    def test_half_up_tie(self):
        """Ties round away from zero by default."""
        assert round2(Decimal("0.125")) == Decimal("0.13")
        assert round2(Decimal("2.675")) == Decimal("2.68")

    def test_half_up_negative_tie(self):
        assert round2(Decimal("-0.125")) == Decimal("-0.13")

    def test_half_even_tie(self):
        policy = RoundingPolicy(ROUND_HALF_EVEN)
        assert round2(Decimal("0.125"), policy) == Decimal("0.12")
        assert round2(Decimal("0.135"), policy) == Decimal("0.14")

    def test_integer_input(self):
        assert round2(5) == Decimal("5.00")

    def test_default_policy_is_half_up(self):
        assert DEFAULT_ROUNDING.mode == ROUND_HALF_UP

    def test_value_wider_than_context_precision(self):
        """1e30 needs 33 digits at two places; the default context has 28."""
        assert round2(Decimal("1e30")) == Decimal("1000000000000000000000000000000.00")

    def test_product_of_large_inputs(self):
        value = Decimal("99999999999999.99") * Decimal("99999999999999.99")
        assert round2(value).as_tuple().exponent == -2


class TestRound0:
    """Tests for whole-unit rounding."""

    def test_rounds_up_at_half(self):
        assert round0(Decimal("1049.50")) == Decimal("1050")

    def test_rounds_down_below_half(self):
        assert round0(Decimal("1049.49")) == Decimal("1049")

    def test_half_even(self):
        assert round0(Decimal("1048.50"), RoundingPolicy(ROUND_HALF_EVEN)) == Decimal("1048")

    def test_value_wider_than_context_precision(self):
        assert round0(Decimal("1e40")) == Decimal("1e40")


class TestRoundingPolicy:
    """Tests for RoundingPolicy validation."""

    def test_rejects_unknown_mode(self):
        with pytest.raises(ValueError, match="Unsupported"):
            RoundingPolicy("ROUND_CEILING")

    def test_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_ROUNDING.mode = ROUND_HALF_EVEN


class TestToDecimal:
    """Tests for boundary coercion."""

    @pytest.mark.parametrize("value", [None, "", "   ", "abc", "NaN", "Infinity", float("nan")])
    def test_invalid_becomes_zero(self, value):
        assert to_decimal(value) == Decimal("0")

    def test_negative_clamps_to_zero(self):
        assert to_decimal("-5") == Decimal("0")
        assert to_decimal(Decimal("-0.01")) == Decimal("0")

    def test_negative_allowed(self):
        assert to_decimal("-5.25", allow_negative=True) == Decimal("-5.25")

    def test_float_goes_through_str(self):
        """0.1 must not become 0.1000000000000000055511151231257827."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_thousands_separators_stripped(self):
        assert to_decimal("1,23,456.50") == Decimal("123456.50")

    def test_bool_is_not_a_number(self):
        assert to_decimal(True) == Decimal("0")

    def test_decimal_passthrough(self):
        value = Decimal("12.345")
        assert to_decimal(value) is value

    @pytest.mark.parametrize("value", ["1e30", "1e15", Decimal("1e20"), 10**18, 1e16])
    def test_out_of_range_becomes_zero(self, value):
        assert to_decimal(value) == Decimal("0")

    def test_out_of_range_negative_becomes_zero(self):
        assert to_decimal("-1e30", allow_negative=True) == Decimal("0")

    def test_largest_accepted_value(self):
        value = Decimal(10**MAX_INPUT_EXPONENT) - Decimal("0.01")
        assert to_decimal(value) == value
