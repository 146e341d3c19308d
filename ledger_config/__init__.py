"""
ledger_config -- single public entrypoint for calculator configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Returns a frozen ``CalculatorConfig``.

Architecture position:
    Configuration -- YAML-driven.  Sits above ``ledger_kernel`` and below
    ``ledger_services``.  The kernel and the engines MUST NEVER import
    ``ledger_config``; ``bridges`` translates configuration into
    kernel inputs.

Resolution order:
    1. the ``config_path`` argument;
    2. the ``LEDGER_CALCULATOR_CONFIG`` environment variable;
    3. ``ledger_config/defaults/calculator.yaml``.

Failure modes:
    - ``FileNotFoundError`` -- the resolved file does not exist.
    - ``UnknownRoundingModeError`` -- unsupported rounding mode.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``LEDGER_CONFIG_TRACE`` log entry with the config id, version,
    checksum and rounding mode, tying every preview back to the
    configuration that produced it.
"""

from __future__ import annotations

import os
from pathlib import Path

from ledger_config.loader import load_calculator_config
from ledger_config.schema import CalculatorConfig
from ledger_kernel.logging_config import get_logger

_logger = get_logger("config")

CONFIG_ENV_VAR = "LEDGER_CALCULATOR_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "calculator.yaml"

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "CalculatorConfig",
    "get_active_config",
]


def get_active_config(config_path: Path | str | None = None) -> CalculatorConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a calculator YAML file.

    Returns:
        CalculatorConfig with its checksum stamped.

    Raises:
        FileNotFoundError: If the resolved file does not exist.
        UnknownRoundingModeError: If the rounding mode is unsupported.
    """
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    path = Path(config_path)

    config = load_calculator_config(path)

    _logger.info(
        "LEDGER_CONFIG_TRACE",
        extra={
            "trace_type": "LEDGER_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "rounding_mode": config.rounding_mode,
            "source": str(path),
        },
    )
    return config
