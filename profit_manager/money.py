"""Decimal money helpers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Iterable

from profit_manager.config import CURRENCY_SYMBOL

ZERO = Decimal("0")
_CENT = Decimal("0.01")
# Largest accepted amount, in whole currency units.
MAX_AMOUNT = Decimal("1000000000000")


def parse_money(value: object) -> Decimal:
    """Convert user input or a stored value into a Decimal amount."""
    if isinstance(value, bool):
        raise ValueError(f"Not a money value: {value!r}")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        # str() keeps 0.6 as 0.6 instead of the binary expansion.
        amount = Decimal(str(value))
    elif isinstance(value, str):
        raw = value.strip().lstrip(CURRENCY_SYMBOL).strip()
        if not raw:
            raise ValueError("Amount is required")
        try:
            amount = Decimal(raw)
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    else:
        raise ValueError(f"Not a money value: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Not a finite amount: {value!r}")
    if abs(amount) >= MAX_AMOUNT:
        raise ValueError(f"Amount is too large: {value!r}")
    return amount


def sum_money(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def round_money(amount: Decimal) -> Decimal:
    # Totals can outgrow the default precision once quantized to cents.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    """Format an amount for display, e.g. ``$7.50`` or ``-$1.20``."""
    rounded = round_money(amount)
    if rounded == 0:
        rounded = rounded.copy_abs()
    if rounded < 0:
        return f"-{CURRENCY_SYMBOL}{rounded.copy_abs()}"
    return f"{CURRENCY_SYMBOL}{rounded}"
