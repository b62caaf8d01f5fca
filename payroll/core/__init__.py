from payroll.core.brackets import (
    PH_TAX_BRACKETS,
    BracketTableError,
    TaxBracket,
    sort_brackets,
    validate_bracket_table,
)
from payroll.core.money import round_cents, to_decimal
from payroll.core.projection import Projection, project
from payroll.core.resolver import Resolution, find_bracket, resolve
from payroll.core.validate import InvalidSalaryError, coerce_salary

__all__ = [
    "PH_TAX_BRACKETS",
    "BracketTableError",
    "InvalidSalaryError",
    "Projection",
    "Resolution",
    "TaxBracket",
    "coerce_salary",
    "find_bracket",
    "project",
    "resolve",
    "round_cents",
    "sort_brackets",
    "to_decimal",
    "validate_bracket_table",
]
