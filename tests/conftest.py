"""
Pytest fixtures for the ledger calculator test suite.

Provides:
- Structured logging configuration and capture
- The default calculator configuration
- Invoice builders for adjustment-note tests
"""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from ledger_config import DEFAULT_CONFIG_PATH, get_active_config
from ledger_engines.adjustment import TaxRegime
from ledger_engines.selection import InvoiceLine, ProductSelection
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ledger_services.adjustment_service import InvoiceForAdjustment

# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            calculate_payment_net(...)
            logs = captured_logs()
            assert any(r["message"] == "payment_net_calculated" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Configuration fixtures
# =============================================================================


@pytest.fixture
def default_config():
    """Calculator configuration shipped with the package."""
    return get_active_config(DEFAULT_CONFIG_PATH)


# =============================================================================
# Invoice fixtures
# =============================================================================


@pytest.fixture
def gst_invoice():
    """Intra-state invoice: two piece products and one roll product."""
    return InvoiceForAdjustment(
        invoice_id="inv-0001",
        invoice_number="INV-0001",
        tax_regime=TaxRegime.GST,
        outstanding_amount=Decimal("5000.00"),
        lines=(
            InvoiceLine("shirt", Decimal("10"), Decimal("100.00"), Decimal("18"), "piece"),
            InvoiceLine("cap", Decimal("4"), Decimal("50.00"), Decimal("12"), "piece"),
            InvoiceLine("fabric", Decimal("25.50"), Decimal("80.00"), Decimal("5"), "roll"),
        ),
    )


@pytest.fixture
def make_selections():
    """Build a selection map from ``{product_id: (quantity, rate)}``."""

    def _make(entries: dict[str, tuple[str, str]]) -> dict[str, ProductSelection]:
        return {
            product_id: ProductSelection(
                selected=True,
                quantity=Decimal(quantity),
                rate=Decimal(rate),
            )
            for product_id, (quantity, rate) in entries.items()
        }

    return _make
