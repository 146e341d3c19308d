"""
Module: ledger_engines
Responsibility:
    Package entrypoint that re-exports all public symbols from the pure
    calculation engine sub-modules.  This is the canonical import surface
    for the caller layer (ledger_services).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel (and sibling engine modules).
    MUST NOT import ledger_services or ledger_config.

Invariants enforced:
    - Decimal-only arithmetic: all monetary amounts use ``Decimal``.
    - Determinism: identical inputs always produce identical outputs.
    - Totality: engines never raise for numeric input; invalid numbers are
      coerced to zero at the boundary.

Usage:
    from ledger_engines.adjustment import calculate_adjustment_totals
    from ledger_engines.payment import calculate_payment_net
    from ledger_engines.order import calculate_order_financials
    from ledger_engines.invoice import calculate_invoice_totals
    from ledger_engines.selection import select_line_items
"""

from ledger_kernel.logging_config import get_logger

logger = get_logger("engines")

from ledger_engines.adjustment import (  # noqa: E402
    AdjustmentDirection,
    CalculationResult,
    LineResult,
    TaxRegime,
    calculate_adjustment_totals,
    calculate_line,
    outstanding_delta,
)
from ledger_engines.formatting import format_currency, format_round_off  # noqa: E402
from ledger_engines.invoice import (  # noqa: E402
    InvoiceItem,
    InvoiceLineResult,
    InvoiceTotals,
    ProductTaxType,
    calculate_invoice_totals,
)
from ledger_engines.order import (  # noqa: E402
    DiscountType,
    OrderFinancials,
    calculate_discount,
    calculate_order_financials,
)
from ledger_engines.payment import (  # noqa: E402
    AllocationType,
    PaymentAllocation,
    PaymentNetResult,
    calculate_payment_net,
    resolve_payment_total,
    total_from_allocations,
)
from ledger_engines.selection import (  # noqa: E402
    InvoiceLine,
    LineItem,
    ProductSelection,
    default_selections,
    is_included,
    normalize_quantity,
    normalize_rate,
    select_line_items,
)

__all__ = [
    # Adjustment notes
    "AdjustmentDirection",
    "CalculationResult",
    "LineResult",
    "TaxRegime",
    "calculate_adjustment_totals",
    "calculate_line",
    "outstanding_delta",
    # Payments
    "AllocationType",
    "PaymentAllocation",
    "PaymentNetResult",
    "calculate_payment_net",
    "resolve_payment_total",
    "total_from_allocations",
    # Orders
    "DiscountType",
    "OrderFinancials",
    "calculate_discount",
    "calculate_order_financials",
    # Invoices
    "InvoiceItem",
    "InvoiceLineResult",
    "InvoiceTotals",
    "ProductTaxType",
    "calculate_invoice_totals",
    # Selection
    "InvoiceLine",
    "LineItem",
    "ProductSelection",
    "default_selections",
    "is_included",
    "normalize_quantity",
    "normalize_rate",
    "select_line_items",
    # Display
    "format_currency",
    "format_round_off",
]

logger.debug("engines_package_loaded", extra={
    "module_count": 6,
    "modules": ["adjustment", "payment", "order", "invoice", "selection", "formatting"],
})
