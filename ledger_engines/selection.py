"""
Line Item Selection - Build calculator input from an invoice and a selection map.

An adjustment note is raised against an existing invoice. The user ticks
products and enters a quantity and rate for each; only ticked products
with a positive quantity take part in the calculation. Excluding a line is
never an error.

Quantity entry follows the product's stock type: fractional stock types
(rolls measured in metres, for example) keep two decimal places, every
other stock type is counted in whole units. The entered quantity is capped
at the quantity on the original invoice.

Usage:
    from ledger_engines.selection import (
        InvoiceLine, ProductSelection, select_line_items,
    )

    lines = [InvoiceLine("p1", Decimal("10"), Decimal("100"), Decimal("18"))]
    selections = {"p1": ProductSelection(True, Decimal("4"), Decimal("100"))}
    items = select_line_items(lines, selections)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from ledger_kernel.domain.values import ZERO, round0, round2, to_decimal
from ledger_kernel.logging_config import get_logger

logger = get_logger("engines.selection")

DEFAULT_FRACTIONAL_STOCK_TYPES: tuple[str, ...] = ("roll",)


@dataclass(frozen=True)
class LineItem:
    """
    One line of calculator input.

    Values are expected to be coerced already (see ``LineItem.of``).
    """

    quantity: Decimal
    rate: Decimal
    tax_rate_percent: Decimal
    selected: bool = True
    product_id: str | None = None

    @classmethod
    def of(
        cls,
        quantity: Any,
        rate: Any,
        tax_rate_percent: Any = None,
        selected: bool = True,
        product_id: str | None = None,
    ) -> LineItem:
        """Build a line from raw user input, clamping blanks and negatives to 0."""
        return cls(
            quantity=to_decimal(quantity),
            rate=to_decimal(rate),
            tax_rate_percent=to_decimal(tax_rate_percent),
            selected=bool(selected),
            product_id=product_id,
        )


@dataclass(frozen=True)
class ProductSelection:
    """The user's choice for one invoice product."""

    selected: bool
    quantity: Decimal
    rate: Decimal


@dataclass(frozen=True)
class InvoiceLine:
    """A line of the original invoice an adjustment note is raised against."""

    product_id: str
    quantity: Decimal
    rate: Decimal
    tax_rate_percent: Decimal | None = None
    stock_type: str | None = None


def is_included(item: LineItem) -> bool:
    """True if the line participates in the calculation."""
    return item.selected and item.quantity > ZERO


def select_line_items(
    invoice_lines: Sequence[InvoiceLine],
    selections: Mapping[str, ProductSelection],
) -> tuple[LineItem, ...]:
    """
    Join the selection map onto invoice lines, keeping invoice order.

    Lines without a selection, unselected lines and lines with a zero
    quantity are dropped. The tax rate always comes from the invoice line;
    a missing rate means 0.
    """
    items: list[LineItem] = []
    for line in invoice_lines:
        selection = selections.get(line.product_id)
        if selection is None:
            continue
        item = LineItem.of(
            quantity=selection.quantity,
            rate=selection.rate,
            tax_rate_percent=line.tax_rate_percent,
            selected=selection.selected,
            product_id=line.product_id,
        )
        if is_included(item):
            items.append(item)

    logger.debug("line_items_selected", extra={
        "invoice_line_count": len(invoice_lines),
        "selected_count": len(items),
    })
    return tuple(items)


def default_selections(invoice_lines: Sequence[InvoiceLine]) -> dict[str, ProductSelection]:
    """Initial selection map: nothing ticked, rate prefilled from the invoice."""
    return {
        line.product_id: ProductSelection(
            selected=False,
            quantity=ZERO,
            rate=to_decimal(line.rate),
        )
        for line in invoice_lines
    }


def normalize_quantity(
    quantity: Any,
    stock_type: str | None,
    ceiling: Any = None,
    fractional_stock_types: Sequence[str] = DEFAULT_FRACTIONAL_STOCK_TYPES,
) -> Decimal:
    """
    Snap an entered quantity to the stock type's granularity.

    Fractional stock types keep two decimal places; all others round to
    whole units. The result is clamped to ``[0, ceiling]`` when a ceiling
    (the invoiced quantity) is given.
    """
    value = to_decimal(quantity)
    if stock_type in fractional_stock_types:
        value = round2(value)
    else:
        value = round0(value)

    if ceiling is not None:
        value = min(value, to_decimal(ceiling))
    return value


def normalize_rate(rate: Any) -> Decimal:
    """Clamp an entered rate at zero and keep two decimal places."""
    return round2(to_decimal(rate))
