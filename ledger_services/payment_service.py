"""
ledger_services.payment_service -- Payment/receipt voucher preview and validation.

A voucher settles invoices (``against_ref``) or records an advance. The
service resolves the voucher total, previews TDS and the net amount, and
validates the voucher before it is sent to the backend RPC.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from ledger_config import CalculatorConfig, get_active_config
from ledger_config.bridges import build_rounding_policy
from ledger_engines.payment import (
    AllocationType,
    PaymentAllocation,
    PaymentNetResult,
    calculate_payment_net,
    resolve_payment_total,
)
from ledger_kernel.domain.values import ZERO, round2, to_decimal
from ledger_kernel.exceptions import (
    InvalidAllocationError,
    InvalidTDSRateError,
    MissingLedgerError,
    NonPositiveAmountError,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("services.payment")


class VoucherType(str, Enum):
    PAYMENT = "payment"  # Money paid to a supplier
    RECEIPT = "receipt"  # Money received from a customer


class PaymentMode(str, Enum):
    CASH = "cash"
    CHEQUE = "cheque"
    DEMAND_DRAFT = "demand_draft"
    NEFT = "neft"
    RTGS = "rtgs"
    IMPS = "imps"
    UPI = "upi"
    CARD = "card"


@dataclass(frozen=True)
class PaymentRequest:
    """Voucher as entered on the payment wizard."""

    voucher_type: VoucherType
    party_ledger_id: str
    counter_ledger_id: str | None
    payment_date: date
    payment_mode: PaymentMode
    allocation_type: AllocationType
    advance_amount: Any = None
    allocations: tuple[PaymentAllocation, ...] = ()
    tds_applicable: bool = False
    tds_rate: Any = None
    tds_ledger_id: str | None = None
    reference_number: str | None = None
    reference_date: date | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        # Accept raw enum values from form data
        object.__setattr__(self, "voucher_type", VoucherType(self.voucher_type))
        object.__setattr__(self, "payment_mode", PaymentMode(self.payment_mode))
        object.__setattr__(self, "allocation_type", AllocationType(self.allocation_type))
        object.__setattr__(self, "allocations", tuple(self.allocations))


@dataclass(frozen=True)
class PaymentDraft:
    """Validated voucher, ready for the backend RPC."""

    request: PaymentRequest
    allocations: tuple[PaymentAllocation, ...]
    totals: PaymentNetResult
    attachments: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        """RPC payload; Decimals are sent as strings to keep precision."""
        request = self.request
        return {
            "voucher_type": request.voucher_type.value,
            "party_ledger_id": request.party_ledger_id,
            "counter_ledger_id": request.counter_ledger_id,
            "payment_date": request.payment_date.isoformat(),
            "payment_mode": request.payment_mode.value,
            "total_amount": str(self.totals.total_amount),
            "tds_applicable": request.tds_applicable,
            "tds_rate": str(self.totals.tds_rate) if request.tds_applicable else None,
            "tds_ledger_id": request.tds_ledger_id if request.tds_applicable else None,
            "reference_number": request.reference_number,
            "reference_date": (
                request.reference_date.isoformat() if request.reference_date else None
            ),
            "notes": request.notes,
            "allocations": [
                {
                    "allocation_type": a.allocation_type.value,
                    "invoice_id": a.invoice_id,
                    "amount_applied": str(a.amount),
                }
                for a in self.allocations
            ],
            "attachments": list(self.attachments) or None,
        }


class PaymentService:
    """Preview and validate payment and receipt vouchers."""

    def __init__(self, config: CalculatorConfig | None = None):
        self._config = config or get_active_config()
        self._policy = build_rounding_policy(self._config)

    def preview(self, request: PaymentRequest) -> PaymentNetResult:
        """Totals shown on the review step."""
        total = resolve_payment_total(
            request.allocation_type,
            advance_amount=request.advance_amount,
            allocations=request.allocations,
            policy=self._policy,
        )
        return calculate_payment_net(
            total,
            request.tds_rate,
            request.tds_applicable,
            policy=self._policy,
        )

    def prepare(self, request: PaymentRequest) -> PaymentDraft:
        """
        Validate a voucher and build the submission draft.

        Raises:
            MissingLedgerError: counter ledger missing, or TDS ledger
                missing while TDS applies.
            InvalidTDSRateError: TDS rate outside 0 to the configured maximum.
            InvalidAllocationError: allocation does not match its type.
            NonPositiveAmountError: voucher total is zero.
        """
        if not request.counter_ledger_id:
            raise MissingLedgerError("Bank/Cash")

        if request.tds_applicable:
            self._check_tds(request)

        allocations = self._build_allocations(request)
        totals = self.preview(request)
        if totals.total_amount <= ZERO:
            raise NonPositiveAmountError(totals.total_amount)

        logger.info("payment_prepared", extra={
            "voucher_type": request.voucher_type.value,
            "allocation_type": request.allocation_type.value,
            "allocation_count": len(allocations),
            "total_amount": str(totals.total_amount),
            "tds_amount": str(totals.tds_amount),
            "net_amount": str(totals.net_amount),
        })
        return PaymentDraft(request=request, allocations=allocations, totals=totals)

    def _check_tds(self, request: PaymentRequest) -> None:
        raw = to_decimal(request.tds_rate, allow_negative=True)
        if raw < ZERO or raw > self._config.max_tds_rate:
            raise InvalidTDSRateError(raw, self._config.max_tds_rate)
        if not request.tds_ledger_id:
            raise MissingLedgerError("TDS")

    def _build_allocations(self, request: PaymentRequest) -> tuple[PaymentAllocation, ...]:
        kind = AllocationType(request.allocation_type)
        if kind == AllocationType.ADVANCE:
            if request.allocations:
                raise InvalidAllocationError(
                    AllocationType.ADVANCE.value,
                    "an advance voucher cannot reference invoices",
                )
            amount = round2(to_decimal(request.advance_amount), self._policy)
            return (
                PaymentAllocation(
                    amount=amount,
                    invoice_id=None,
                    allocation_type=AllocationType.ADVANCE,
                ),
            )
        return tuple(self._check_invoice_allocation(a) for a in request.allocations)

    def _check_invoice_allocation(self, allocation: PaymentAllocation) -> PaymentAllocation:
        if allocation.allocation_type != AllocationType.AGAINST_REF:
            raise InvalidAllocationError(
                allocation.allocation_type.value,
                "advance allocations are not allowed on an against-reference voucher",
            )
        if not allocation.invoice_id:
            raise InvalidAllocationError(
                AllocationType.AGAINST_REF.value,
                "invoice is required for against reference allocation",
            )
        amount = round2(to_decimal(allocation.amount), self._policy)
        if amount <= ZERO:
            raise InvalidAllocationError(
                AllocationType.AGAINST_REF.value,
                f"amount applied to invoice {allocation.invoice_id} must be positive",
            )
        return PaymentAllocation(
            amount=amount,
            invoice_id=allocation.invoice_id,
            allocation_type=AllocationType.AGAINST_REF,
        )
