"""Tests for the Order Engine (discount then GST)."""

from decimal import Decimal

import pytest

from ledger_engines.order import DiscountType, calculate_order_financials


class TestOrderFinancials:

    def test_no_discount(self):
        result = calculate_order_financials(Decimal("1000"), Decimal("10"))

        assert result.discount_amount == Decimal("0")
        assert result.discounted_total == Decimal("1000.00")
        assert result.gst_amount == Decimal("100.00")
        assert result.total_amount == Decimal("1100.00")

    def test_percentage_discount_before_gst(self):
        result = calculate_order_financials(
            Decimal("1000"), Decimal("18"), DiscountType.PERCENTAGE, Decimal("10")
        )

        assert result.discount_amount == Decimal("100.00")
        assert result.discounted_total == Decimal("900.00")
        assert result.gst_amount == Decimal("162.00")
        assert result.total_amount == Decimal("1062.00")

    def test_flat_discount(self):
        result = calculate_order_financials("999.99", "5", "flat_amount", "99.99")

        assert result.discounted_total == Decimal("900.00")
        assert result.gst_amount == Decimal("45.00")
        assert result.total_amount == Decimal("945.00")

    def test_flat_discount_capped_at_item_total(self):
        result = calculate_order_financials("100", "18", "flat_amount", "250")

        assert result.discount_amount == Decimal("100.00")
        assert result.total_amount == Decimal("0")

    def test_percentage_capped_at_hundred(self):
        result = calculate_order_financials("100", "18", "percentage", "150")

        assert result.discounted_total == Decimal("0")

    def test_unknown_discount_type_raises(self):
        with pytest.raises(ValueError):
            calculate_order_financials("100", "10", "coupon", "5")

    def test_gst_rounded_to_paisa(self):
        result = calculate_order_financials("33.33", "18")

        assert result.gst_amount == Decimal("6.00")  # 5.9994
        assert result.total_amount == Decimal("39.33")

    def test_out_of_range_total_counts_as_zero(self):
        result = calculate_order_financials("1e30", "18", "percentage", "10")

        assert result.item_total == Decimal("0")
        assert result.total_amount == Decimal("0")

    def test_largest_total(self):
        result = calculate_order_financials("999999999999999.99", "18")

        assert result.gst_amount == Decimal("180000000000000.00")
        assert result.total_amount == Decimal("1179999999999999.99")
