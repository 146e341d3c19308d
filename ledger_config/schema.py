"""
Calculator configuration schema.

Frozen dataclasses the YAML loader parses into. Configuration is data
only; translating it into kernel inputs is done in ``bridges``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CalculatorConfig:
    """Everything the calculators and their callers read from configuration."""

    config_id: str
    version: int
    rounding_mode: str
    currency_symbol: str = "₹"
    fractional_stock_types: tuple[str, ...] = ("roll",)
    default_order_gst_rate: Decimal = Decimal("10.00")
    max_reason_length: int = 500
    max_notes_length: int = 1000
    max_tds_rate: Decimal = Decimal("100")
    checksum: str = ""
