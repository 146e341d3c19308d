"""
ledger_services -- caller layer over the pure calculators.

Builds calculator input from invoices and user selections, previews
totals, and validates the business rules that must block submission
before a document is sent to the backend, which recomputes and stores
the authoritative figures.
"""

from ledger_services.adjustment_service import (
    AdjustmentNoteDraft,
    AdjustmentNoteItem,
    AdjustmentNoteService,
    InvoiceForAdjustment,
    counter_ledger_name,
)
from ledger_services.order_service import OrderService
from ledger_services.payment_service import (
    PaymentDraft,
    PaymentMode,
    PaymentRequest,
    PaymentService,
    VoucherType,
)

__all__ = [
    "AdjustmentNoteDraft",
    "AdjustmentNoteItem",
    "AdjustmentNoteService",
    "InvoiceForAdjustment",
    "counter_ledger_name",
    "OrderService",
    "PaymentDraft",
    "PaymentMode",
    "PaymentRequest",
    "PaymentService",
    "VoucherType",
]
