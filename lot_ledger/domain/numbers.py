"""Decimal rounding helpers for money, price and quantity values."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

MONEY_QUANTUM = Decimal("0.01")
QUANTITY_QUANTUM = Decimal("0.0001")
ZERO = Decimal("0")


def domain_round_money(value: Decimal) -> Decimal:
    """Round a money or price value to 2 decimals using ROUND_HALF_UP.

    Args:
        value: Unrounded decimal value.

    Returns:
        Decimal: Value quantized to cents.
    """

    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def domain_round_quantity(value: Decimal) -> Decimal:
    """Round a share quantity to 4 decimals, preserving fractional shares."""

    return value.quantize(QUANTITY_QUANTUM, rounding=ROUND_HALF_UP)
