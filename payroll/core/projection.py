from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from payroll.core.brackets import TaxBracket
from payroll.core.money import MONTHS_PER_YEAR, round_cents
from payroll.core.resolver import resolve
from payroll.core.validate import coerce_salary

D = Decimal


@dataclass(frozen=True)
class Projection:
    monthly_salary: D
    annual_salary: D
    annual_tax: D
    net_annual_salary: D
    bracket: TaxBracket | None

    @property
    def monthly_tax(self) -> D:
        return round_cents(self.annual_tax / MONTHS_PER_YEAR)

    @property
    def net_monthly_salary(self) -> D:
        return round_cents(self.net_annual_salary / MONTHS_PER_YEAR)


def project(monthly_salary: Any, brackets: Iterable[TaxBracket]) -> Projection:
    """Derive annual salary, tax and net salary from a monthly salary.

    ``brackets`` is the current table, sorted ascending by ``min_income``.
    Raises :class:`~payroll.core.validate.InvalidSalaryError` when the salary
    is not a finite positive number.
    """
    salary = coerce_salary(monthly_salary)
    annual_salary = round_cents(salary * MONTHS_PER_YEAR)
    resolution = resolve(annual_salary, brackets)
    annual_tax = round_cents(resolution.tax)
    return Projection(
        monthly_salary=salary,
        annual_salary=annual_salary,
        annual_tax=annual_tax,
        net_annual_salary=round_cents(annual_salary - annual_tax),
        bracket=resolution.bracket,
    )


__all__ = ["Projection", "project"]
