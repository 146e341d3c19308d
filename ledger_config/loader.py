"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads a calculator YAML file and parses it into a frozen
``CalculatorConfig``.  Runtime callers go through
``ledger_config.get_active_config()``; the functions here are the
building blocks it uses and are exposed for tests and tooling.

Invariants enforced
-------------------
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``rounding_mode`` is validated at load time; an unknown mode raises
  ``UnknownRoundingModeError`` instead of surfacing at calculation time.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the raw
  YAML content for configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``config_id`` or ``rounding_mode``  -> ``KeyError`` propagates.
* Non-numeric rate values  -> ``decimal.InvalidOperation`` propagates.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import CalculatorConfig
from ledger_kernel.domain.values import SUPPORTED_ROUNDING_MODES
from ledger_kernel.exceptions import UnknownRoundingModeError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def parse_rounding_mode(value: Any) -> str:
    """Validate a rounding mode name against the supported modes."""
    mode = str(value).strip().upper()
    if mode not in SUPPORTED_ROUNDING_MODES:
        raise UnknownRoundingModeError(str(value), SUPPORTED_ROUNDING_MODES)
    return mode


def parse_calculator_config(data: dict[str, Any], checksum: str = "") -> CalculatorConfig:
    """
    Parse a ``CalculatorConfig`` from a dict.

    Preconditions:
        - ``data`` contains ``config_id`` and ``rounding_mode``.
    Raises:
        KeyError: if required keys are missing.
        UnknownRoundingModeError: if the rounding mode is unsupported.
    """
    currency = data.get("currency", {})
    stock = data.get("stock", {})
    orders = data.get("orders", {})
    notes = data.get("adjustment_notes", {})
    payments = data.get("payments", {})

    return CalculatorConfig(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        rounding_mode=parse_rounding_mode(data["rounding_mode"]),
        currency_symbol=str(currency.get("symbol", "₹")),
        fractional_stock_types=tuple(stock.get("fractional_types", ("roll",))),
        default_order_gst_rate=Decimal(str(orders.get("default_gst_rate", "10.00"))),
        max_reason_length=int(notes.get("max_reason_length", 500)),
        max_notes_length=int(notes.get("max_notes_length", 1000)),
        max_tds_rate=Decimal(str(payments.get("max_tds_rate", "100"))),
        checksum=checksum,
    )


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def load_calculator_config(path: Path) -> CalculatorConfig:
    """Load and parse a calculator YAML file, stamping its checksum."""
    data = load_yaml_file(path)
    return parse_calculator_config(data, checksum=compute_checksum(data))
