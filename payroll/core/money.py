from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

D = Decimal

CENT = D("0.01")
ZERO = D("0")
ONE = D("1")
MONTHS_PER_YEAR = 12


def to_decimal(value: float | int | str | Decimal) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_cents(value: float | int | str | Decimal) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


__all__ = ["CENT", "MONTHS_PER_YEAR", "ONE", "ZERO", "round_cents", "to_decimal"]
