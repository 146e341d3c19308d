"""
Adjustment Engine - Credit/debit note totals with GST splitting.

Computes the preview totals for an adjustment note raised against an
invoice. The backend ledger function recomputes and stores the
authoritative figures; this engine must agree with it to the paisa, so
the rounding order below is fixed and no two steps are ever combined:

    1. quantity and rate are rounded to 2 places individually
    2. the tax rate is rounded to 2 places
    3. line_amount = quantity * rate, NOT rounded
    4. each tax component is computed from the unrounded line amount and
       rounded on its own
    5. line total_tax = round2(cgst + sgst + igst)
    6. subtotal = round2(sum of unrounded line amounts)
    7. each tax column = round2(sum of rounded line components)
    8. total_tax = round2(total_cgst + total_sgst + total_igst)

The grand total is rounded to whole currency units and the signed
difference is reported as ``round_off``. Payments are NOT rounded this
way; see ``ledger_engines.payment``.

Usage:
    from ledger_engines.adjustment import (
        AdjustmentDirection, TaxRegime, calculate_adjustment_totals,
    )
    from ledger_engines.selection import LineItem

    result = calculate_adjustment_totals(
        line_items=[LineItem.of("10", "100", "18")],
        tax_regime=TaxRegime.GST,
        adjustment_direction=AdjustmentDirection.CREDIT,
        invoice_outstanding=Decimal("5000"),
    )
    print(result.grand_total)      # 1180
    print(result.new_outstanding)  # 3820
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from ledger_engines.selection import LineItem, is_included
from ledger_engines.tracer import traced_engine
from ledger_kernel.domain.values import (
    DEFAULT_ROUNDING,
    HUNDRED,
    ZERO,
    RoundingPolicy,
    round0,
    round2,
    to_decimal,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.adjustment")

_TWO = Decimal("2")


class TaxRegime(str, Enum):
    """How GST applies to the invoice being adjusted."""

    NO_TAX = "no_tax"
    GST = "gst"  # Intra-state: CGST + SGST halves
    IGST = "igst"  # Inter-state: single integrated component


class AdjustmentDirection(str, Enum):
    """Credit notes reduce the amount owed, debit notes increase it."""

    CREDIT = "credit"
    DEBIT = "debit"


@dataclass(frozen=True)
class LineResult:
    """Calculated amounts for one included line."""

    product_id: str | None
    quantity: Decimal  # rounded to 2 places
    rate: Decimal  # rounded to 2 places
    tax_rate_percent: Decimal  # rounded to 2 places
    line_amount: Decimal  # quantity * rate, unrounded
    cgst: Decimal
    sgst: Decimal
    igst: Decimal
    total_tax: Decimal


@dataclass(frozen=True)
class CalculationResult:
    """
    Complete adjustment-note calculation.

    ``round_off`` is always present, zero included; callers decide whether
    to display it.
    """

    line_results: tuple[LineResult, ...]
    subtotal: Decimal
    total_cgst: Decimal
    total_sgst: Decimal
    total_igst: Decimal
    total_tax: Decimal
    round_off: Decimal
    grand_total: int
    outstanding_delta: Decimal
    invoice_outstanding: Decimal
    new_outstanding: Decimal
    tax_regime: TaxRegime
    adjustment_direction: AdjustmentDirection

    @property
    def is_empty(self) -> bool:
        return not self.line_results

    @property
    def has_round_off(self) -> bool:
        return self.round_off != ZERO

    @property
    def is_credit_note(self) -> bool:
        return self.adjustment_direction == AdjustmentDirection.CREDIT

    @property
    def exceeds_outstanding(self) -> bool:
        """True for a credit note larger than what is currently owed."""
        return self.is_credit_note and Decimal(self.grand_total) > self.invoice_outstanding


def calculate_line(
    item: LineItem,
    tax_regime: TaxRegime,
    policy: RoundingPolicy = DEFAULT_ROUNDING,
) -> LineResult:
    """
    Calculate one line.

    The tax rate is taken from the line itself, so a 0% line inside a GST
    invoice yields zero tax while its neighbours are taxed normally.
    """
    quantity = round2(item.quantity, policy)
    rate = round2(item.rate, policy)
    tax_rate = round2(item.tax_rate_percent, policy)

    line_amount = quantity * rate

    cgst = sgst = igst = ZERO
    if tax_regime == TaxRegime.GST:
        half_rate = tax_rate / _TWO
        cgst = round2(line_amount * half_rate / HUNDRED, policy)
        sgst = round2(line_amount * half_rate / HUNDRED, policy)
    elif tax_regime == TaxRegime.IGST:
        igst = round2(line_amount * tax_rate / HUNDRED, policy)

    return LineResult(
        product_id=item.product_id,
        quantity=quantity,
        rate=rate,
        tax_rate_percent=tax_rate,
        line_amount=line_amount,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
        total_tax=round2(cgst + sgst + igst, policy),
    )


def outstanding_delta(grand_total: int, direction: AdjustmentDirection) -> Decimal:
    """Signed effect of a note on the invoice outstanding."""
    amount = Decimal(grand_total)
    if direction == AdjustmentDirection.CREDIT:
        return -amount
    return amount


@traced_engine(
    "adjustment",
    "1.0",
    fingerprint_fields=(
        "line_items",
        "tax_regime",
        "adjustment_direction",
        "invoice_outstanding",
    ),
)
def calculate_adjustment_totals(
    line_items: Sequence[LineItem],
    tax_regime: TaxRegime | str,
    adjustment_direction: AdjustmentDirection | str,
    invoice_outstanding: Any,
    policy: RoundingPolicy = DEFAULT_ROUNDING,
) -> CalculationResult:
    """
    Calculate adjustment-note totals and the resulting outstanding.

    Pure function. Never raises for numeric input: a credit note larger
    than the outstanding is computed as usual and flagged through
    ``CalculationResult.exceeds_outstanding``; rejecting it is the
    caller's job.

    Args:
        line_items: Candidate lines; unselected or zero-quantity lines
            are skipped.
        tax_regime: ``TaxRegime`` or its string value.
        adjustment_direction: ``AdjustmentDirection`` or its string value.
        invoice_outstanding: Current outstanding of the adjusted invoice.
        policy: Rounding policy (defaults to half-up).

    Raises:
        ValueError: if tax_regime or adjustment_direction is not a known value.
    """
    t0 = time.monotonic()
    regime = TaxRegime(tax_regime)
    direction = AdjustmentDirection(adjustment_direction)
    outstanding = to_decimal(invoice_outstanding, allow_negative=True)

    logger.info("adjustment_calculation_started", extra={
        "line_count": len(line_items),
        "tax_regime": regime.value,
        "adjustment_direction": direction.value,
        "invoice_outstanding": str(outstanding),
    })

    line_results = tuple(
        calculate_line(item, regime, policy)
        for item in line_items
        if is_included(item)
    )

    subtotal = round2(sum((r.line_amount for r in line_results), ZERO), policy)
    total_cgst = round2(sum((r.cgst for r in line_results), ZERO), policy)
    total_sgst = round2(sum((r.sgst for r in line_results), ZERO), policy)
    total_igst = round2(sum((r.igst for r in line_results), ZERO), policy)
    total_tax = round2(total_cgst + total_sgst + total_igst, policy)

    exact_total = subtotal + total_tax
    grand_total = int(round0(exact_total, policy))
    round_off = round2(Decimal(grand_total) - exact_total, policy)

    delta = outstanding_delta(grand_total, direction)

    result = CalculationResult(
        line_results=line_results,
        subtotal=subtotal,
        total_cgst=total_cgst,
        total_sgst=total_sgst,
        total_igst=total_igst,
        total_tax=total_tax,
        round_off=round_off,
        grand_total=grand_total,
        outstanding_delta=delta,
        invoice_outstanding=outstanding,
        new_outstanding=outstanding + delta,
        tax_regime=regime,
        adjustment_direction=direction,
    )

    if result.exceeds_outstanding:
        logger.warning("credit_note_exceeds_outstanding", extra={
            "grand_total": grand_total,
            "invoice_outstanding": str(outstanding),
        })

    duration_ms = round((time.monotonic() - t0) * 1000, 2)
    logger.info("adjustment_calculation_completed", extra={
        "included_line_count": len(line_results),
        "skipped_line_count": len(line_items) - len(line_results),
        "subtotal": str(subtotal),
        "total_tax": str(total_tax),
        "round_off": str(round_off),
        "grand_total": grand_total,
        "new_outstanding": str(result.new_outstanding),
        "duration_ms": duration_ms,
    })

    return result
