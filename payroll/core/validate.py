from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any


class InvalidSalaryError(ValueError):
    def __init__(self, value: Any, reason: str) -> None:
        super().__init__(f"Invalid monthly salary {value!r}: {reason}")
        self.value = value
        self.reason = reason


def coerce_salary(value: Any) -> Decimal:
    """Parse ``value`` into a finite, positive Decimal or raise :class:`InvalidSalaryError`."""
    if isinstance(value, bool) or value is None:
        raise InvalidSalaryError(value, "must be a number")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            raise InvalidSalaryError(value, "must be a number")
        try:
            amount = Decimal(text)
        except InvalidOperation as exc:
            raise InvalidSalaryError(value, "must be a number") from exc
    else:
        raise InvalidSalaryError(value, "must be a number")

    if not amount.is_finite():
        raise InvalidSalaryError(value, "must be finite")
    if amount <= 0:
        raise InvalidSalaryError(value, "must be greater than 0")
    return amount


__all__ = ["InvalidSalaryError", "coerce_salary"]
