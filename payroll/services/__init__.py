from payroll.services.employees import (
    EmployeeNotFoundError,
    EmployeePage,
    OverrideDisabledError,
    TaxReport,
    calculate_for_employee,
    create_employee,
    delete_employee,
    get_employee,
    list_employees,
    override_tax_result,
    project_salary,
    recalculate_all,
    salary_in_cents,
    update_employee,
)
from payroll.services.seeding import bootstrap, reseed_tax_brackets, seed_employees, seed_tax_brackets

__all__ = [
    "EmployeeNotFoundError",
    "EmployeePage",
    "OverrideDisabledError",
    "TaxReport",
    "bootstrap",
    "calculate_for_employee",
    "create_employee",
    "delete_employee",
    "get_employee",
    "list_employees",
    "override_tax_result",
    "project_salary",
    "recalculate_all",
    "reseed_tax_brackets",
    "salary_in_cents",
    "seed_employees",
    "seed_tax_brackets",
    "update_employee",
]
