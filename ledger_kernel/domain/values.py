"""
Values -- Monetary rounding and boundary coercion primitives.

Responsibility:
    Provides the two rounding primitives every calculator uses
    (``round2`` for money, ``round0`` for whole-unit grand totals), the
    ``RoundingPolicy`` that pins the rounding mode, and ``to_decimal``
    which turns user-entered numbers into Decimals at the boundary.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by every engine. No outward dependencies.

Invariants enforced:
    - Decimal-only arithmetic: floats are converted through ``str()`` and
      never take part in a computation.
    - Rounding mode is explicit. The default is ROUND_HALF_UP (half away
      from zero), the behaviour of PostgreSQL ``round(numeric, n)`` used by
      the backend ledger functions.
    - ``to_decimal`` is total: it never raises.
    - Inputs are bounded: magnitudes of 10**MAX_INPUT_EXPONENT and above
      coerce to 0, so products of a handful of inputs stay well inside
      the Decimal context.
    - ``round2`` and ``round0`` widen the context precision to fit the
      value, so a finite Decimal always quantizes.

Failure modes:
    - None for numeric input. Invalid input coerces to ``Decimal("0")``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import (
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    Decimal,
    InvalidOperation,
    localcontext,
)
from typing import Any

TWO_PLACES = Decimal("0.01")
WHOLE_UNIT = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Largest accepted input is just under 10**15 (a thousand trillion rupees).
MAX_INPUT_EXPONENT = 15

SUPPORTED_ROUNDING_MODES: tuple[str, ...] = (ROUND_HALF_UP, ROUND_HALF_EVEN)


@dataclass(frozen=True, slots=True)
class RoundingPolicy:
    """
    Rounding mode applied by ``round2`` and ``round0``.

    Contract:
        ``mode`` is one of ``SUPPORTED_ROUNDING_MODES``.

    Guarantees:
        - Immutable and hashable.
    """

    mode: str = ROUND_HALF_UP

    def __post_init__(self) -> None:
        if self.mode not in SUPPORTED_ROUNDING_MODES:
            raise ValueError(f"Unsupported rounding mode: {self.mode}")


DEFAULT_ROUNDING = RoundingPolicy()


def to_decimal(value: Any, *, allow_negative: bool = False) -> Decimal:
    """
    Coerce a user-entered number to a finite Decimal.

    Preconditions:
        None -- any value is accepted.

    Postconditions:
        - ``None``, blank or unparsable strings, NaN and infinities return 0.
        - Negative values return 0 unless ``allow_negative`` is set.
        - Floats are converted through their ``str()`` form.
        - ``bool`` is rejected as a number and returns 0.
        - Magnitudes of ``10**MAX_INPUT_EXPONENT`` or more return 0.

    Raises:
        Nothing.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        text = str(value).strip().replace(",", "")
        if not text:
            return ZERO
        try:
            result = Decimal(text)
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not result.is_finite():
        return ZERO
    if result and result.adjusted() >= MAX_INPUT_EXPONENT:
        return ZERO
    if result < ZERO and not allow_negative:
        return ZERO
    return result


def _quantize(value: Decimal | int, quantum: Decimal, mode: str) -> Decimal:
    value = Decimal(value)
    with localcontext() as ctx:
        # quantize raises once the result needs more digits than prec
        ctx.prec = max(ctx.prec, value.adjusted() - quantum.as_tuple().exponent + 2)
        return value.quantize(quantum, rounding=mode)


def round2(value: Decimal | int, policy: RoundingPolicy = DEFAULT_ROUNDING) -> Decimal:
    """Round a monetary value to exactly two decimal places."""
    return _quantize(value, TWO_PLACES, policy.mode)


def round0(value: Decimal | int, policy: RoundingPolicy = DEFAULT_ROUNDING) -> Decimal:
    """Round to whole currency units (used only for document grand totals)."""
    return _quantize(value, WHOLE_UNIT, policy.mode)
