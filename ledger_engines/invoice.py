"""
Invoice Engine - Review-step totals for a new sales or purchase invoice.

An invoice-level discount is taken off the subtotal first; the remaining
taxable amount is spread back over the lines in proportion to their
amounts, and GST is charged on each line's share:

    1. quantity, rate and GST rate are rounded to 2 places individually
    2. line_amount = quantity * rate, NOT rounded
    3. subtotal = round2(sum of unrounded line amounts)
    4. discount = percentage (at most 100) or flat amount, rounded to 2
       places and capped at the subtotal
    5. taxable_amount = subtotal - discount
    6. line taxable share = line_amount * taxable_amount / sum(line_amount),
       NOT rounded
    7. each tax component is computed from the share and rounded on its own
    8. each tax column = round2(sum of rounded line components)
    9. grand_total = round2(taxable_amount + total_tax)

Only lines whose product is GST-applicable are taxed, and only when the
invoice itself is not ``no_tax``; untaxed lines still take their share
of the discount. Unlike adjustment notes there is no whole-rupee
round-off here.

Usage:
    from ledger_engines.invoice import InvoiceItem, calculate_invoice_totals

    totals = calculate_invoice_totals(
        items=[InvoiceItem.of("10", "100", "18")],
        tax_regime="gst",
        discount_type="percentage",
        discount_value="10",
    )
    print(totals.taxable_amount)  # 900.00
    print(totals.grand_total)     # 1062.00
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from ledger_engines.adjustment import TaxRegime
from ledger_engines.order import DiscountType, calculate_discount
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.values import (
    DEFAULT_ROUNDING,
    HUNDRED,
    ZERO,
    RoundingPolicy,
    round2,
    to_decimal,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.invoice")

_TWO_HUNDRED = Decimal("200")


class ProductTaxType(str, Enum):
    """Whether GST applies to a product at all."""

    NO_TAX = "no_tax"
    GST = "gst"


@dataclass(frozen=True)
class InvoiceItem:
    """One product line on the invoice being created."""

    quantity: Decimal
    rate: Decimal
    gst_rate_percent: Decimal
    product_tax_type: ProductTaxType = ProductTaxType.GST
    selected: bool = True
    product_id: str | None = None

    @classmethod
    def of(
        cls,
        quantity: Any,
        rate: Any,
        gst_rate_percent: Any = None,
        product_tax_type: ProductTaxType | str = ProductTaxType.GST,
        selected: bool = True,
        product_id: str | None = None,
    ) -> InvoiceItem:
        """Build a line from raw user input, clamping blanks and negatives to 0."""
        return cls(
            quantity=to_decimal(quantity),
            rate=to_decimal(rate),
            gst_rate_percent=to_decimal(gst_rate_percent),
            product_tax_type=ProductTaxType(product_tax_type),
            selected=bool(selected),
            product_id=product_id,
        )


@dataclass(frozen=True)
class InvoiceLineResult:
    product_id: str | None
    quantity: Decimal
    rate: Decimal
    gst_rate_percent: Decimal  # 0 for untaxed lines
    line_amount: Decimal  # unrounded
    taxable_share: Decimal  # unrounded
    cgst: Decimal
    sgst: Decimal
    igst: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    line_results: tuple[InvoiceLineResult, ...]
    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    total_cgst: Decimal
    total_sgst: Decimal
    total_igst: Decimal
    total_tax: Decimal
    grand_total: Decimal
    tax_regime: TaxRegime
    discount_type: DiscountType

    @property
    def is_empty(self) -> bool:
        return not self.line_results


def _is_taxed(item: InvoiceItem, regime: TaxRegime) -> bool:
    return item.product_tax_type == ProductTaxType.GST and regime != TaxRegime.NO_TAX


@traced_engine(
    "invoice",
    "1.0",
    fingerprint_fields=("items", "tax_regime", "discount_type", "discount_value"),
)
def calculate_invoice_totals(
    items: Sequence[InvoiceItem],
    tax_regime: TaxRegime | str,
    discount_type: DiscountType | str = DiscountType.NONE,
    discount_value: Any = None,
    policy: RoundingPolicy = DEFAULT_ROUNDING,
) -> InvoiceTotals:
    """
    Calculate discount, taxable amount and GST for an invoice preview.

    Pure function. Unselected or zero-quantity lines are skipped.

    Raises:
        ValueError: if tax_regime or discount_type is not a known value.
    """
    regime = TaxRegime(tax_regime)
    kind = DiscountType(discount_type)

    included = [item for item in items if item.selected and item.quantity > ZERO]
    priced = [
        (
            item,
            round2(item.quantity, policy),
            round2(item.rate, policy),
            round2(item.gst_rate_percent, policy) if _is_taxed(item, regime) else ZERO,
        )
        for item in included
    ]
    amounts = [quantity * rate for _, quantity, rate, _ in priced]
    exact_subtotal = sum(amounts, ZERO)

    subtotal = round2(exact_subtotal, policy)
    discount = calculate_discount(subtotal, kind, discount_value, policy)
    taxable_amount = subtotal - discount

    line_results = []
    for (item, quantity, rate, gst_rate), amount in zip(priced, amounts):
        share = amount * taxable_amount / exact_subtotal if exact_subtotal > ZERO else ZERO

        cgst = sgst = igst = ZERO
        if regime == TaxRegime.GST:
            cgst = round2(share * gst_rate / _TWO_HUNDRED, policy)
            sgst = round2(share * gst_rate / _TWO_HUNDRED, policy)
        elif regime == TaxRegime.IGST:
            igst = round2(share * gst_rate / HUNDRED, policy)

        line_results.append(InvoiceLineResult(
            product_id=item.product_id,
            quantity=quantity,
            rate=rate,
            gst_rate_percent=gst_rate,
            line_amount=amount,
            taxable_share=share,
            cgst=cgst,
            sgst=sgst,
            igst=igst,
        ))

    total_cgst = round2(sum((r.cgst for r in line_results), ZERO), policy)
    total_sgst = round2(sum((r.sgst for r in line_results), ZERO), policy)
    total_igst = round2(sum((r.igst for r in line_results), ZERO), policy)
    total_tax = round2(total_cgst + total_sgst + total_igst, policy)

    result = InvoiceTotals(
        line_results=tuple(line_results),
        subtotal=subtotal,
        discount_amount=discount,
        taxable_amount=taxable_amount,
        total_cgst=total_cgst,
        total_sgst=total_sgst,
        total_igst=total_igst,
        total_tax=total_tax,
        grand_total=round2(taxable_amount + total_tax, policy),
        tax_regime=regime,
        discount_type=kind,
    )

    logger.info("invoice_totals_calculated", extra={
        "tax_regime": regime.value,
        "discount_type": kind.value,
        "line_count": len(line_results),
        "subtotal": str(subtotal),
        "discount_amount": str(discount),
        "taxable_amount": str(taxable_amount),
        "total_tax": str(total_tax),
        "grand_total": str(result.grand_total),
    })
    return result
