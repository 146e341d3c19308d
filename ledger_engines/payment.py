"""
Payment Engine - Net amount of a payment or receipt voucher after TDS.

A voucher is either a flat advance or a set of allocations against open
invoices. TDS (tax deducted at source) is withheld from the total:

    total_amount = round2(total_amount)
    tds_rate     = round2(tds_rate_percent)      if TDS applies, else 0
    tds_amount   = round2(total * tds_rate / 100) if TDS applies and rate > 0
    net_amount   = round2(total_amount - tds_amount)

Unlike adjustment notes, vouchers keep paisa precision: ``net_amount`` is
never rounded to whole currency units.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

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

logger = get_logger("engines.payment")


class AllocationType(str, Enum):
    """How a voucher is applied."""

    ADVANCE = "advance"  # Not tied to an invoice
    AGAINST_REF = "against_ref"  # Settles specific invoices


@dataclass(frozen=True)
class PaymentAllocation:
    """Amount applied to one invoice (or to advance when invoice_id is None)."""

    amount: Decimal
    invoice_id: str | None = None
    allocation_type: AllocationType = AllocationType.AGAINST_REF

    def __post_init__(self) -> None:
        object.__setattr__(self, "allocation_type", AllocationType(self.allocation_type))


@dataclass(frozen=True)
class PaymentNetResult:
    """Voucher totals after withholding."""

    total_amount: Decimal
    tds_rate: Decimal
    tds_amount: Decimal
    net_amount: Decimal

    @property
    def has_tds(self) -> bool:
        return self.tds_amount > ZERO


def total_from_allocations(
    allocations: Sequence[PaymentAllocation],
    policy: RoundingPolicy = DEFAULT_ROUNDING,
) -> Decimal:
    """Sum allocation amounts, rounding each one before adding."""
    total = sum(
        (round2(to_decimal(a.amount), policy) for a in allocations),
        ZERO,
    )
    return round2(total, policy)


def resolve_payment_total(
    allocation_type: AllocationType | str,
    advance_amount: Any = None,
    allocations: Sequence[PaymentAllocation] = (),
    policy: RoundingPolicy = DEFAULT_ROUNDING,
) -> Decimal:
    """Voucher total: the advance amount, or the sum of invoice allocations."""
    if AllocationType(allocation_type) == AllocationType.ADVANCE:
        return round2(to_decimal(advance_amount), policy)
    return total_from_allocations(allocations, policy)


@traced_engine(
    "payment",
    "1.0",
    fingerprint_fields=("total_amount", "tds_rate_percent", "tds_applicable"),
)
def calculate_payment_net(
    total_amount: Any,
    tds_rate_percent: Any = None,
    tds_applicable: bool = False,
    policy: RoundingPolicy = DEFAULT_ROUNDING,
) -> PaymentNetResult:
    """
    Calculate TDS withholding and the net amount of a voucher.

    Pure function; blank, NaN or negative inputs count as 0.
    """
    total = round2(to_decimal(total_amount), policy)
    tds_rate = round2(to_decimal(tds_rate_percent), policy) if tds_applicable else ZERO

    tds_amount = ZERO
    if tds_applicable and tds_rate > ZERO:
        tds_amount = round2(total * tds_rate / HUNDRED, policy)

    net = round2(total - tds_amount, policy)

    logger.info("payment_net_calculated", extra={
        "total_amount": str(total),
        "tds_applicable": tds_applicable,
        "tds_rate": str(tds_rate),
        "tds_amount": str(tds_amount),
        "net_amount": str(net),
    })

    return PaymentNetResult(
        total_amount=total,
        tds_rate=round2(tds_rate, policy),
        tds_amount=round2(tds_amount, policy),
        net_amount=net,
    )
