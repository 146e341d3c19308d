"""
Tests for the Invoice Engine.

Verifies:
- Discount before tax, spread over lines in proportion to their amounts
- CGST/SGST halves vs IGST
- Products without GST and no-tax invoices
- Per-line rounding of tax components
"""

from decimal import Decimal

import pytest

from ledger_engines.adjustment import TaxRegime
from ledger_engines.invoice import (
    InvoiceItem,
    ProductTaxType,
    calculate_invoice_totals,
)
from ledger_engines.order import DiscountType


def _shirt_and_cap():
    return [
        InvoiceItem.of("10", "100", "18", product_id="shirt"),
        InvoiceItem.of("4", "50", "12", product_id="cap"),
    ]


class TestInvoiceTotals:
    """Worked invoice previews."""

    def test_gst_without_discount(self):
        result = calculate_invoice_totals(_shirt_and_cap(), TaxRegime.GST)

        assert result.subtotal == Decimal("1200.00")
        assert result.discount_amount == Decimal("0")
        assert result.taxable_amount == Decimal("1200.00")
        assert result.total_cgst == Decimal("102.00")  # 90 + 12
        assert result.total_sgst == Decimal("102.00")
        assert result.total_igst == Decimal("0")
        assert result.grand_total == Decimal("1404.00")

    def test_percentage_discount_spread_over_lines(self):
        result = calculate_invoice_totals(
            _shirt_and_cap(), TaxRegime.GST, DiscountType.PERCENTAGE, "10"
        )

        shirt, cap = result.line_results
        assert result.discount_amount == Decimal("120.00")
        assert result.taxable_amount == Decimal("1080.00")
        assert shirt.taxable_share == Decimal("900")
        assert cap.taxable_share == Decimal("180")
        assert shirt.cgst == Decimal("81.00")
        assert cap.cgst == Decimal("10.80")
        assert result.total_tax == Decimal("183.60")
        assert result.grand_total == Decimal("1263.60")

    def test_shares_add_up_to_taxable_amount(self):
        result = calculate_invoice_totals(
            _shirt_and_cap(), TaxRegime.GST, DiscountType.PERCENTAGE, "10"
        )

        assert sum(r.taxable_share for r in result.line_results) == result.taxable_amount

    def test_igst_with_flat_discount(self):
        result = calculate_invoice_totals(
            [InvoiceItem.of("10", "100", "18")], "igst", "flat_amount", "50.50"
        )

        assert result.taxable_amount == Decimal("949.50")
        assert result.total_igst == Decimal("170.91")
        assert result.total_cgst == Decimal("0")
        assert result.grand_total == Decimal("1120.41")

    def test_product_without_gst_takes_discount_share_only(self):
        items = [
            InvoiceItem.of("10", "100", "18", product_id="shirt"),
            InvoiceItem.of("5", "100", "12", ProductTaxType.NO_TAX, product_id="book"),
        ]

        result = calculate_invoice_totals(items, TaxRegime.GST, "percentage", "20")

        shirt, book = result.line_results
        assert result.taxable_amount == Decimal("1200.00")
        assert shirt.taxable_share == Decimal("800")
        assert book.taxable_share == Decimal("400")
        assert book.gst_rate_percent == Decimal("0")
        assert book.cgst == Decimal("0")
        assert result.total_tax == Decimal("144.00")
        assert result.grand_total == Decimal("1344.00")

    def test_no_tax_invoice(self):
        result = calculate_invoice_totals(_shirt_and_cap(), TaxRegime.NO_TAX)

        assert result.total_tax == Decimal("0")
        assert result.grand_total == Decimal("1200.00")

    def test_components_rounded_per_line(self):
        """Three 0.0075 halves round to 0.01 each, not 0.0225 -> 0.02 once."""
        items = [InvoiceItem.of("1", "0.30", "5") for _ in range(3)]

        result = calculate_invoice_totals(items, TaxRegime.GST)

        assert result.total_cgst == Decimal("0.03")
        assert result.total_sgst == Decimal("0.03")

    def test_flat_discount_capped_at_subtotal(self):
        result = calculate_invoice_totals(_shirt_and_cap(), TaxRegime.GST, "flat_amount", "5000")

        assert result.discount_amount == Decimal("1200.00")
        assert result.taxable_amount == Decimal("0")
        assert result.total_tax == Decimal("0")
        assert result.grand_total == Decimal("0")


class TestInputHandling:

    def test_unselected_and_zero_quantity_lines_skipped(self):
        items = [
            InvoiceItem.of("10", "100", "18", product_id="shirt"),
            InvoiceItem.of("4", "50", "12", selected=False, product_id="cap"),
            InvoiceItem.of("0", "80", "5", product_id="fabric"),
        ]

        result = calculate_invoice_totals(items, TaxRegime.GST)

        assert [r.product_id for r in result.line_results] == ["shirt"]
        assert result.grand_total == Decimal("1180.00")

    def test_nothing_selected(self):
        result = calculate_invoice_totals([], TaxRegime.GST, "percentage", "10")

        assert result.is_empty
        assert result.grand_total == Decimal("0")

    def test_out_of_range_quantity_is_dropped(self):
        result = calculate_invoice_totals([InvoiceItem.of("1e30", "100", "18")], TaxRegime.GST)

        assert result.is_empty

    def test_unknown_regime_raises(self):
        with pytest.raises(ValueError):
            calculate_invoice_totals(_shirt_and_cap(), "vat")

    def test_emits_engine_trace(self, captured_logs):
        calculate_invoice_totals(_shirt_and_cap(), TaxRegime.IGST)

        traces = [r for r in captured_logs() if r["message"] == "LEDGER_ENGINE_TRACE"]
        assert traces[-1]["engine_name"] == "invoice"
