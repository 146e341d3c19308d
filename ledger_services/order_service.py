"""
ledger_services.order_service -- Order and invoice previews with configured defaults.

Orders without a product-specific GST rate use the configured default
order rate; both previews round with the configured policy.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ledger_config import CalculatorConfig, get_active_config
from ledger_config.bridges import build_rounding_policy
from ledger_engines.adjustment import TaxRegime
from ledger_engines.invoice import InvoiceItem, InvoiceTotals, calculate_invoice_totals
from ledger_engines.order import DiscountType, OrderFinancials, calculate_order_financials


class OrderService:
    """Preview sales/purchase order and invoice totals."""

    def __init__(self, config: CalculatorConfig | None = None):
        self._config = config or get_active_config()
        self._policy = build_rounding_policy(self._config)

    def financials(
        self,
        item_total: Any,
        discount_type: DiscountType | str = DiscountType.NONE,
        discount_value: Any = None,
        gst_rate: Any = None,
    ) -> OrderFinancials:
        """Order totals; ``gst_rate`` of None means the configured default."""
        if gst_rate is None:
            gst_rate = self._config.default_order_gst_rate
        return calculate_order_financials(
            item_total,
            gst_rate,
            discount_type,
            discount_value,
            policy=self._policy,
        )

    def invoice_totals(
        self,
        items: Sequence[InvoiceItem],
        tax_regime: TaxRegime | str,
        discount_type: DiscountType | str = DiscountType.NONE,
        discount_value: Any = None,
    ) -> InvoiceTotals:
        return calculate_invoice_totals(
            items,
            tax_regime,
            discount_type,
            discount_value,
            policy=self._policy,
        )
