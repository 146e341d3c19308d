"""
Typed Exception Hierarchy for the Ledger Kernel.

Calculators never raise for numeric input: blank, NaN and negative values
are coerced at the boundary. Exceptions here describe business-rule
violations detected by the caller layer before a document is submitted,
and invalid calculator configuration.

Every exception has a ``code`` class attribute (machine-readable, API-safe)
and carries structured data as instance attributes, so callers catch by
type and surface fields, not message text:

    try:
        draft = service.prepare(...)
    except CreditNoteExceedsOutstandingError as e:
        show_toast(e.code, outstanding=e.invoice_outstanding)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LedgerError (base)
    |
    +-- ValidationError
    |   +-- NoItemsSelectedError
    |   +-- QuantityExceedsInvoiceError
    |   +-- CreditNoteExceedsOutstandingError
    |   +-- InvalidTaxRateError
    |   +-- InvalidRateError
    |   +-- MissingReasonError
    |   +-- NotesTooLongError
    |   +-- MissingLedgerError
    |   +-- InvalidTDSRateError
    |   +-- InvalidAllocationError
    |   +-- NonPositiveAmountError
    |
    +-- ConfigError
        +-- UnknownRoundingModeError
"""

from decimal import Decimal


class LedgerError(Exception):
    """
    Base exception for all ledger errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LEDGER_ERROR"


# Validation exceptions (raised by the caller layer, never by engines)


class ValidationError(LedgerError):
    """Base exception for business-rule violations that block submission."""

    code: str = "VALIDATION_ERROR"


class NoItemsSelectedError(ValidationError):
    """An adjustment note needs at least one selected item with quantity > 0."""

    code: str = "NO_ITEMS_SELECTED"

    def __init__(self, invoice_number: str | None = None):
        self.invoice_number = invoice_number
        super().__init__("At least one item is required")


class QuantityExceedsInvoiceError(ValidationError):
    """Adjusted quantity is larger than the quantity on the original invoice."""

    code: str = "QUANTITY_EXCEEDS_INVOICE"

    def __init__(self, product_id: str, quantity: Decimal, invoice_quantity: Decimal):
        self.product_id = product_id
        self.quantity = str(quantity)
        self.invoice_quantity = str(invoice_quantity)
        super().__init__(
            f"Quantity {quantity} for product {product_id} exceeds "
            f"invoiced quantity {invoice_quantity}"
        )


class CreditNoteExceedsOutstandingError(ValidationError):
    """
    A credit note cannot refund more than is currently owed.

    Hard rule: the submission is blocked, the total is never clamped.
    """

    code: str = "CREDIT_NOTE_EXCEEDS_OUTSTANDING"

    def __init__(self, grand_total: int, invoice_outstanding: Decimal):
        self.grand_total = grand_total
        self.invoice_outstanding = str(invoice_outstanding)
        super().__init__(
            "Credit note total cannot exceed invoice outstanding amount "
            f"({grand_total} > {invoice_outstanding})"
        )


class InvalidTaxRateError(ValidationError):
    """GST rate outside the 0-100 percent range."""

    code: str = "INVALID_TAX_RATE"

    def __init__(self, product_id: str, tax_rate_percent: Decimal):
        self.product_id = product_id
        self.tax_rate_percent = str(tax_rate_percent)
        super().__init__(
            f"GST rate {tax_rate_percent}% for product {product_id} "
            "must be between 0 and 100"
        )


class InvalidRateError(ValidationError):
    """Adjusted line has no positive rate."""

    code: str = "INVALID_RATE"

    def __init__(self, product_id: str, rate: Decimal):
        self.product_id = product_id
        self.rate = str(rate)
        super().__init__(f"Rate for product {product_id} must be greater than 0, got {rate}")


class MissingReasonError(ValidationError):
    """Adjustment reason is blank or too long."""

    code: str = "MISSING_REASON"

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        if length == 0:
            message = "Reason is required"
        else:
            message = f"Reason cannot exceed {max_length} characters"
        super().__init__(message)


class NotesTooLongError(ValidationError):
    """Free-text notes exceed the configured length."""

    code: str = "NOTES_TOO_LONG"

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(f"Notes cannot exceed {max_length} characters")


class MissingLedgerError(ValidationError):
    """A ledger required to post the document is not configured."""

    code: str = "MISSING_LEDGER"

    def __init__(self, ledger_role: str):
        self.ledger_role = ledger_role
        super().__init__(
            f"{ledger_role} ledger not found. "
            "Please ensure default ledgers are seeded."
        )


class InvalidTDSRateError(ValidationError):
    """TDS rate outside 0 to the configured maximum."""

    code: str = "INVALID_TDS_RATE"

    def __init__(self, tds_rate_percent: Decimal, max_rate: Decimal):
        self.tds_rate_percent = str(tds_rate_percent)
        self.max_rate = str(max_rate)
        super().__init__(
            f"TDS rate {tds_rate_percent}% must be between 0 and {max_rate}"
        )


class InvalidAllocationError(ValidationError):
    """Payment allocation does not match its allocation type."""

    code: str = "INVALID_ALLOCATION"

    def __init__(self, allocation_type: str, reason: str):
        self.allocation_type = allocation_type
        self.reason = reason
        super().__init__(f"Invalid {allocation_type} allocation: {reason}")


class NonPositiveAmountError(ValidationError):
    """Payment total must be greater than zero."""

    code: str = "NON_POSITIVE_AMOUNT"

    def __init__(self, amount: Decimal):
        self.amount = str(amount)
        super().__init__(f"Payment amount must be positive, got {amount}")


# Configuration exceptions


class ConfigError(LedgerError):
    """Base exception for invalid calculator configuration."""

    code: str = "CONFIG_ERROR"


class UnknownRoundingModeError(ConfigError):
    """Configured rounding mode is not supported."""

    code: str = "UNKNOWN_ROUNDING_MODE"

    def __init__(self, mode: str, supported: tuple[str, ...]):
        self.mode = mode
        self.supported = supported
        super().__init__(
            f"Unknown rounding mode {mode!r}; expected one of {', '.join(supported)}"
        )
