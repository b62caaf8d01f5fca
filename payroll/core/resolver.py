from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from payroll.core.brackets import TaxBracket
from payroll.core.money import ONE, ZERO, round_cents, to_decimal

D = Decimal


@dataclass(frozen=True)
class Resolution:
    bracket: TaxBracket | None
    tax: D


def find_bracket(annual_income: D, brackets: Iterable[TaxBracket]) -> TaxBracket | None:
    """Return the bracket whose closed range contains ``annual_income``.

    ``brackets`` must already be sorted ascending by ``min_income``. A
    fractional income that falls between two adjacent bands (for example
    400000.50 between 400000 and 400001) stays in the lower band.
    """
    candidate: TaxBracket | None = None
    for bracket in brackets:
        if bracket.contains(annual_income):
            return bracket
        if bracket.min_income > annual_income:
            if (
                candidate is not None
                and candidate.max_income is not None
                and bracket.min_income - candidate.max_income == ONE
            ):
                return candidate
            return None
        candidate = bracket
    return None


def tax_for_bracket(annual_income: D, bracket: TaxBracket) -> D:
    if bracket.rate == ZERO:
        return bracket.base_tax
    excess = max(ZERO, annual_income - bracket.excess_base)
    return bracket.base_tax + bracket.rate * excess


def resolve(annual_income: D | float | int | str, brackets: Iterable[TaxBracket]) -> Resolution:
    """Resolve the applicable bracket and annual tax for ``annual_income``.

    An empty or non-tiling table yields zero tax with no bracket instead of
    raising; the table is configuration data the caller cannot repair.
    """
    income = to_decimal(annual_income)
    bracket = find_bracket(income, brackets)
    if bracket is None:
        return Resolution(bracket=None, tax=round_cents(ZERO))
    return Resolution(bracket=bracket, tax=round_cents(tax_for_bracket(income, bracket)))


__all__ = ["Resolution", "find_bracket", "resolve", "tax_for_bracket"]
