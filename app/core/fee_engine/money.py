"""Decimal helpers shared by the fee engine."""

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")
# Balances at or below one paisa count as settled
EPSILON = Decimal("0.01")


def to_decimal(val) -> Decimal:
    if val is None:
        return ZERO
    return val if isinstance(val, Decimal) else Decimal(str(val))


def quantize_money(val) -> Decimal:
    return to_decimal(val).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def total(values) -> Decimal:
    return sum((to_decimal(v) for v in values), ZERO)
