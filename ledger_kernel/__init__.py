"""
Ledger Kernel

Decimal value primitives, typed exceptions and structured logging shared by
the ledger calculators:
- Two-place monetary rounding with an explicit rounding policy
- Boundary coercion of user-entered numbers
- Machine-readable error codes
"""

__version__ = "0.1.0"
