"""
Order Engine - Discount and GST breakdown for sales and purchase orders.

GST is charged on the discounted total:

    total = (item_total - discount) + GST(item_total - discount)

Each step is rounded to two places.
"""

from __future__ import annotations

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

logger = get_logger("engines.order")


class DiscountType(str, Enum):
    NONE = "none"
    PERCENTAGE = "percentage"  # discount_value is 0-100
    FLAT_AMOUNT = "flat_amount"  # discount_value is in rupees


@dataclass(frozen=True)
class OrderFinancials:
    item_total: Decimal
    discount_amount: Decimal
    discounted_total: Decimal
    gst_amount: Decimal
    total_amount: Decimal


def calculate_discount(
    total: Decimal,
    discount_type: DiscountType | str,
    discount_value: Any,
    policy: RoundingPolicy = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Discount on an already rounded total, capped at the total.

    A percentage counts at most 100; a flat amount is rounded to two places.
    """
    kind = DiscountType(discount_type)
    value = to_decimal(discount_value)

    discount = ZERO
    if kind == DiscountType.PERCENTAGE:
        discount = round2(total * min(value, HUNDRED) / HUNDRED, policy)
    elif kind == DiscountType.FLAT_AMOUNT:
        discount = round2(value, policy)
    return min(discount, total)


@traced_engine(
    "order",
    "1.0",
    fingerprint_fields=("item_total", "gst_rate", "discount_type", "discount_value"),
)
def calculate_order_financials(
    item_total: Any,
    gst_rate: Any,
    discount_type: DiscountType | str = DiscountType.NONE,
    discount_value: Any = None,
    policy: RoundingPolicy = DEFAULT_ROUNDING,
) -> OrderFinancials:
    """
    Break an order total into discount, GST and grand total.

    ``gst_rate`` is a percentage; callers without a product-specific rate
    pass the configured order default (see ``OrderService``).

    A percentage above 100 or a flat discount above the item total is
    capped so the discounted total never goes negative.

    Raises:
        ValueError: if discount_type is not a known value.
    """
    kind = DiscountType(discount_type)
    total = round2(to_decimal(item_total), policy)
    discount = calculate_discount(total, kind, discount_value, policy)

    discounted = round2(total - discount, policy)
    gst = round2(discounted * to_decimal(gst_rate) / HUNDRED, policy)

    result = OrderFinancials(
        item_total=total,
        discount_amount=round2(discount, policy),
        discounted_total=discounted,
        gst_amount=gst,
        total_amount=round2(discounted + gst, policy),
    )

    logger.debug("order_financials_calculated", extra={
        "discount_type": kind.value,
        "item_total": str(result.item_total),
        "discount_amount": str(result.discount_amount),
        "gst_amount": str(result.gst_amount),
        "total_amount": str(result.total_amount),
    })
    return result
