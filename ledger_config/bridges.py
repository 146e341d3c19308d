"""
Config -> Kernel Bridges.

Convert a ``CalculatorConfig`` into kernel inputs. These live in
ledger_config (the producer) because the kernel must never import
ledger_config.

Usage:
    from ledger_config import get_active_config
    from ledger_config.bridges import build_rounding_policy

    policy = build_rounding_policy(get_active_config())
"""

from __future__ import annotations

from ledger_config.schema import CalculatorConfig
from ledger_kernel.domain.values import RoundingPolicy


def build_rounding_policy(config: CalculatorConfig) -> RoundingPolicy:
    """Rounding policy for ``round2`` / ``round0`` from configuration."""
    return RoundingPolicy(mode=config.rounding_mode)
