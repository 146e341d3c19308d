"""Display helpers for amounts shown on review screens and PDFs."""

from __future__ import annotations

from typing import Any

from ledger_kernel.domain.values import ZERO, round2, to_decimal


def _group_indian(digits: str) -> str:
    """Group an integer digit string Indian style: last three, then pairs."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_currency(value: Any) -> str:
    """
    Format an amount with Indian digit grouping and 0-2 fraction digits.

    >>> format_currency("1234567.50")
    '12,34,567.5'
    >>> format_currency(1180)
    '1,180'
    """
    amount = round2(to_decimal(value, allow_negative=True))
    sign = "-" if amount < ZERO else ""
    integer_part, _, fraction = f"{abs(amount):.2f}".partition(".")
    fraction = fraction.rstrip("0")
    text = _group_indian(integer_part)
    if fraction:
        text = f"{text}.{fraction}"
    return f"{sign}{text}"


def format_round_off(value: Any, symbol: str) -> str | None:
    """
    Signed round-off for display, e.g. ``+₹0.35`` or ``-₹0.12``.

    ``symbol`` is the configured currency symbol.

    Returns None for a zero round-off; the line is not shown.
    """
    amount = round2(to_decimal(value, allow_negative=True))
    if amount == ZERO:
        return None
    sign = "+" if amount > ZERO else "-"
    return f"{sign}{symbol}{abs(amount):.2f}"
