"""
ledger_services.adjustment_service -- Credit/debit note preview and validation.

Responsibility:
    Turn an invoice plus the user's product selections into calculator
    input, preview the note totals, and validate everything that must
    block submission.

Architecture position:
    Services -- orchestration over engines + kernel, no I/O of its own.
    The returned ``AdjustmentNoteDraft`` is handed to the backend RPC,
    which recomputes the totals; the preview never overrides them.

Invariants enforced:
    - Only selected items with quantity > 0 are submitted.
    - Adjusted quantity never exceeds the invoiced quantity.
    - Every submitted line has a rate above zero.
    - A credit note never exceeds the invoice outstanding (hard rule:
      the draft is refused, the total is not clamped).
    - The counter ledger (Sales Return / Purchase Return) must exist.

Failure modes:
    - NoItemsSelectedError, QuantityExceedsInvoiceError, InvalidRateError,
      InvalidTaxRateError, MissingReasonError, NotesTooLongError,
      MissingLedgerError, CreditNoteExceedsOutstandingError -- all
      ``ValidationError``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from ledger_config import CalculatorConfig, get_active_config
from ledger_config.bridges import build_rounding_policy
from ledger_engines.adjustment import (
    AdjustmentDirection,
    CalculationResult,
    TaxRegime,
    calculate_adjustment_totals,
)
from ledger_engines.formatting import format_round_off
from ledger_engines.selection import (
    InvoiceLine,
    LineItem,
    ProductSelection,
    normalize_quantity,
    normalize_rate,
    select_line_items,
)
from ledger_kernel.domain.values import HUNDRED, ZERO, to_decimal
from ledger_kernel.exceptions import (
    CreditNoteExceedsOutstandingError,
    InvalidRateError,
    InvalidTaxRateError,
    MissingLedgerError,
    MissingReasonError,
    NoItemsSelectedError,
    NotesTooLongError,
    QuantityExceedsInvoiceError,
)
from ledger_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.adjustment")

_COUNTER_LEDGERS = {
    AdjustmentDirection.CREDIT: "Sales Return",
    AdjustmentDirection.DEBIT: "Purchase Return",
}


def counter_ledger_name(direction: AdjustmentDirection | str) -> str:
    """Name of the ledger a note of this direction posts against."""
    return _COUNTER_LEDGERS[AdjustmentDirection(direction)]


@dataclass(frozen=True)
class InvoiceForAdjustment:
    """The invoice a note is raised against, as loaded by the caller."""

    invoice_id: str
    invoice_number: str
    tax_regime: TaxRegime
    outstanding_amount: Decimal | None
    lines: tuple[InvoiceLine, ...]

    def line_for(self, product_id: str) -> InvoiceLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None


@dataclass(frozen=True)
class AdjustmentNoteItem:
    product_id: str
    quantity: Decimal
    rate: Decimal
    gst_rate: Decimal


@dataclass(frozen=True)
class AdjustmentNoteDraft:
    """Validated note, ready for the backend RPC."""

    invoice_id: str
    warehouse_id: str
    counter_ledger_id: str
    adjustment_type: AdjustmentDirection
    adjustment_date: date
    reason: str
    notes: str | None
    items: tuple[AdjustmentNoteItem, ...]
    totals: CalculationResult

    def to_payload(self) -> dict[str, Any]:
        """RPC payload; Decimals are sent as strings to keep precision."""
        return {
            "invoice_id": self.invoice_id,
            "warehouse_id": self.warehouse_id,
            "counter_ledger_id": self.counter_ledger_id,
            "adjustment_type": self.adjustment_type.value,
            "adjustment_date": self.adjustment_date.isoformat(),
            "reason": self.reason,
            "notes": self.notes,
            "attachments": None,
            "items": [
                {
                    "product_id": item.product_id,
                    "quantity": str(item.quantity),
                    "rate": str(item.rate),
                    "gst_rate": str(item.gst_rate),
                }
                for item in self.items
            ],
        }


class AdjustmentNoteService:
    """
    Preview and validate credit/debit notes.

    Contract:
        Receives configuration via constructor injection; loads the active
        configuration when none is given. Holds no mutable state.
    """

    def __init__(self, config: CalculatorConfig | None = None):
        self._config = config or get_active_config()
        self._policy = build_rounding_policy(self._config)

    @property
    def config(self) -> CalculatorConfig:
        return self._config

    def update_selection(
        self,
        invoice: InvoiceForAdjustment,
        product_id: str,
        quantity: Any,
        rate: Any,
    ) -> ProductSelection:
        """
        Selection for a product after the user edits quantity and rate.

        The quantity is snapped to the stock type's granularity and capped
        at the invoiced quantity; the rate is clamped at zero.
        """
        line = invoice.line_for(product_id)
        if line is None:
            raise KeyError(f"Product {product_id} is not on invoice {invoice.invoice_number}")

        return ProductSelection(
            selected=True,
            quantity=normalize_quantity(
                quantity,
                line.stock_type,
                ceiling=line.quantity,
                fractional_stock_types=self._config.fractional_stock_types,
            ),
            rate=normalize_rate(rate),
        )

    def preview(
        self,
        invoice: InvoiceForAdjustment,
        selections: Mapping[str, ProductSelection],
        adjustment_type: AdjustmentDirection | str,
    ) -> CalculationResult:
        """Totals shown on the review step."""
        return calculate_adjustment_totals(
            select_line_items(invoice.lines, selections),
            invoice.tax_regime,
            adjustment_type,
            invoice.outstanding_amount,
            policy=self._policy,
        )

    def round_off_label(self, totals: CalculationResult) -> str | None:
        """Signed round-off in the configured currency, or None when there is none."""
        return format_round_off(totals.round_off, self._config.currency_symbol)

    def prepare(
        self,
        invoice: InvoiceForAdjustment,
        selections: Mapping[str, ProductSelection],
        adjustment_type: AdjustmentDirection | str,
        *,
        warehouse_id: str,
        ledgers: Mapping[str, str],
        adjustment_date: date,
        reason: str,
        notes: str | None = None,
    ) -> AdjustmentNoteDraft:
        """
        Validate a note and build the submission draft.

        Args:
            ledgers: Ledger name -> ledger id for the warehouse's company.

        Raises:
            ValidationError: see module docstring.
        """
        direction = AdjustmentDirection(adjustment_type)

        with LogContext.bind(document_id=invoice.invoice_id, warehouse_id=warehouse_id):
            items = select_line_items(invoice.lines, selections)
            if not items:
                logger.warning("adjustment_no_items", extra={
                    "invoice_number": invoice.invoice_number,
                })
                raise NoItemsSelectedError(invoice.invoice_number)

            self._check_items(invoice, items)
            clean_reason = self._check_reason(reason)
            clean_notes = self._check_notes(notes)

            ledger_name = counter_ledger_name(direction)
            counter_ledger_id = ledgers.get(ledger_name)
            if not counter_ledger_id:
                logger.warning("adjustment_counter_ledger_missing", extra={
                    "ledger_name": ledger_name,
                })
                raise MissingLedgerError(ledger_name)

            totals = calculate_adjustment_totals(
                items,
                invoice.tax_regime,
                direction,
                invoice.outstanding_amount,
                policy=self._policy,
            )

            if totals.exceeds_outstanding:
                logger.warning("adjustment_rejected_exceeds_outstanding", extra={
                    "grand_total": totals.grand_total,
                    "invoice_outstanding": str(totals.invoice_outstanding),
                })
                raise CreditNoteExceedsOutstandingError(
                    totals.grand_total, totals.invoice_outstanding
                )

            draft = AdjustmentNoteDraft(
                invoice_id=invoice.invoice_id,
                warehouse_id=warehouse_id,
                counter_ledger_id=counter_ledger_id,
                adjustment_type=direction,
                adjustment_date=adjustment_date,
                reason=clean_reason,
                notes=clean_notes,
                items=tuple(
                    AdjustmentNoteItem(
                        product_id=item.product_id or "",
                        quantity=item.quantity,
                        rate=item.rate,
                        gst_rate=item.tax_rate_percent,
                    )
                    for item in items
                ),
                totals=totals,
            )

            logger.info("adjustment_note_prepared", extra={
                "adjustment_type": direction.value,
                "item_count": len(draft.items),
                "grand_total": totals.grand_total,
                "new_outstanding": str(totals.new_outstanding),
            })
            return draft

    def _check_items(
        self,
        invoice: InvoiceForAdjustment,
        items: Sequence[LineItem],
    ) -> None:
        for item in items:
            line = invoice.line_for(item.product_id or "")
            invoiced = to_decimal(line.quantity) if line is not None else ZERO
            if item.quantity > invoiced:
                raise QuantityExceedsInvoiceError(
                    item.product_id or "", item.quantity, invoiced
                )
            if item.rate <= ZERO:
                raise InvalidRateError(item.product_id or "", item.rate)
            if item.tax_rate_percent > HUNDRED:
                raise InvalidTaxRateError(item.product_id or "", item.tax_rate_percent)

    def _check_reason(self, reason: str | None) -> str:
        text = (reason or "").strip()
        if not text or len(text) > self._config.max_reason_length:
            raise MissingReasonError(len(text), self._config.max_reason_length)
        return text

    def _check_notes(self, notes: str | None) -> str | None:
        text = (notes or "").strip()
        if not text:
            return None
        if len(text) > self._config.max_notes_length:
            raise NotesTooLongError(len(text), self._config.max_notes_length)
        return text
