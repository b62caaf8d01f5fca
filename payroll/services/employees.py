from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from payroll.config import Settings, get_settings
from payroll.core.money import round_cents
from payroll.core.projection import Projection, project
from payroll.core.validate import InvalidSalaryError, coerce_salary
from payroll.db.tables import EmployeeRow
from payroll.store import BracketRepository, EmployeeRepository

logger = logging.getLogger("payroll").getChild("employees")


class EmployeeNotFoundError(LookupError):
    def __init__(self, employee_id: int) -> None:
        super().__init__(f"Employee {employee_id} not found")
        self.employee_id = employee_id


class OverrideDisabledError(RuntimeError):
    pass


@dataclass(frozen=True)
class EmployeePage:
    items: list[EmployeeRow]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


@dataclass(frozen=True)
class TaxReport:
    employee: EmployeeRow
    projection: Projection


def _require_name(field: str, value: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{field} must not be empty")
    return cleaned


def salary_in_cents(value: Any) -> Decimal:
    """Parse a monthly salary and round it to cents; every entry point projects this value."""
    amount = round_cents(coerce_salary(value))
    if amount <= 0:
        raise InvalidSalaryError(value, "must be at least 0.01")
    return amount


def project_salary(session: Session, monthly_salary: Any) -> Projection:
    """Project ``monthly_salary`` against the bracket table as it is right now."""
    brackets = BracketRepository(session).list_ordered()
    projection = project(salary_in_cents(monthly_salary), brackets)
    if projection.bracket is None:
        logger.warning(
            "No bracket matched annual salary %s (%s brackets configured); tax set to zero",
            projection.annual_salary,
            len(brackets),
        )
    return projection


def apply_projection(session: Session, employee: EmployeeRow, projection: Projection) -> None:
    employee.monthly_salary = projection.monthly_salary
    employee.annual_salary = projection.annual_salary
    employee.annual_tax = projection.annual_tax
    employee.net_annual_salary = projection.net_annual_salary
    if projection.bracket is not None and projection.bracket.id is not None:
        employee.tax_bracket = BracketRepository(session).get_row(projection.bracket.id)
    else:
        employee.tax_bracket = None


def get_employee(session: Session, employee_id: int) -> EmployeeRow:
    employee = EmployeeRepository(session).get(employee_id)
    if employee is None:
        raise EmployeeNotFoundError(employee_id)
    return employee


def list_employees(session: Session, *, page: int = 1, limit: int = 10, search: str | None = None) -> EmployeePage:
    items, total = EmployeeRepository(session).paginate(page, limit, search)
    return EmployeePage(items=items, total=total, page=page, limit=limit)


def create_employee(session: Session, *, first_name: str, last_name: str, monthly_salary: Any) -> EmployeeRow:
    employee = EmployeeRow(
        first_name=_require_name("firstName", first_name),
        last_name=_require_name("lastName", last_name),
    )
    apply_projection(session, employee, project_salary(session, monthly_salary))
    EmployeeRepository(session).add(employee)
    logger.info(
        "Employee created",
        extra={"employee_id": employee.id, "tax_bracket_id": employee.tax_bracket_id},
    )
    return employee


def update_employee(
    session: Session,
    employee_id: int,
    *,
    first_name: str | None = None,
    last_name: str | None = None,
    monthly_salary: Any = None,
) -> EmployeeRow:
    employee = get_employee(session, employee_id)
    if first_name is not None:
        employee.first_name = _require_name("firstName", first_name)
    if last_name is not None:
        employee.last_name = _require_name("lastName", last_name)
    if monthly_salary is not None:
        apply_projection(session, employee, project_salary(session, monthly_salary))
    session.flush()
    logger.info(
        "Employee updated",
        extra={"employee_id": employee.id, "reprojected": monthly_salary is not None},
    )
    return employee


def delete_employee(session: Session, employee_id: int) -> None:
    if not EmployeeRepository(session).delete(employee_id):
        raise EmployeeNotFoundError(employee_id)
    logger.info("Employee deleted", extra={"employee_id": employee_id})


def calculate_for_employee(session: Session, employee_id: int) -> TaxReport:
    """Re-project the stored monthly salary without writing anything back."""
    employee = get_employee(session, employee_id)
    return TaxReport(employee=employee, projection=project_salary(session, employee.monthly_salary))


def recalculate_all(session: Session) -> int:
    brackets = BracketRepository(session).list_ordered()
    employees = EmployeeRepository(session).list_all()
    for employee in employees:
        apply_projection(session, employee, project(employee.monthly_salary, brackets))
    session.flush()
    logger.info("Re-projected %s employees against %s brackets", len(employees), len(brackets))
    return len(employees)


def override_tax_result(
    session: Session,
    employee_id: int,
    *,
    annual_salary: Decimal | None = None,
    annual_tax: Decimal | None = None,
    net_annual_salary: Decimal | None = None,
    settings: Settings | None = None,
) -> EmployeeRow:
    """Overwrite derived tax fields directly, bypassing projection.

    Only available when ``FEATURE_TAX_OVERRIDE`` is enabled. The next salary
    update re-projects and discards the override.
    """
    settings = settings or get_settings()
    if not settings.feature_tax_override:
        raise OverrideDisabledError("Manual tax override disabled")
    employee = get_employee(session, employee_id)
    if annual_salary is not None:
        employee.annual_salary = round_cents(annual_salary)
    if annual_tax is not None:
        employee.annual_tax = round_cents(annual_tax)
    if net_annual_salary is not None:
        employee.net_annual_salary = round_cents(net_annual_salary)
    session.flush()
    logger.warning(
        "Manual tax override applied",
        extra={
            "employee_id": employee.id,
            "annual_salary": str(employee.annual_salary),
            "annual_tax": str(employee.annual_tax),
            "net_annual_salary": str(employee.net_annual_salary),
        },
    )
    return employee
