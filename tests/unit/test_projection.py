from decimal import Decimal as D

import pytest

from payroll.core.brackets import PH_TAX_BRACKETS
from payroll.core.projection import project
from payroll.core.validate import InvalidSalaryError
from tests.fixtures.brackets import FLAT_TABLE


def test_exempt_salary():
    result = project(D("20000"), PH_TAX_BRACKETS)
    assert result.annual_salary == D("240000.00")
    assert result.bracket.name == "Tax Exempt"
    assert result.annual_tax == D("0.00")
    assert result.net_annual_salary == D("240000.00")


def test_twenty_percent_bracket():
    result = project(D("50000"), PH_TAX_BRACKETS)
    assert result.annual_salary == D("600000.00")
    assert result.bracket.name == "20% Bracket"
    assert result.annual_tax == D("62500.00")
    assert result.net_annual_salary == D("537500.00")
    assert result.monthly_tax == D("5208.33")
    assert result.net_monthly_salary == D("44791.67")


def test_annual_salary_rounds_before_resolving():
    result = project(D("83333.33"), PH_TAX_BRACKETS)
    assert result.annual_salary == D("999999.96")
    assert result.bracket.name == "25% Bracket"
    assert result.annual_tax == D("152499.99")
    assert result.net_annual_salary == D("847499.97")


def test_string_and_float_salaries_are_parsed():
    assert project("45,000.50", PH_TAX_BRACKETS).annual_tax == D("50501.20")
    assert project(45000.5, PH_TAX_BRACKETS).annual_salary == D("540006.00")


def test_projection_follows_the_table_it_is_given():
    before = project(D("50000"), PH_TAX_BRACKETS)
    after = project(D("50000"), FLAT_TABLE)
    assert before.annual_tax == D("62500.00")
    assert after.bracket.name == "Flat 10%"
    assert after.annual_tax == D("50000.00")


def test_empty_table_projects_zero_tax():
    result = project(D("50000"), [])
    assert result.bracket is None
    assert result.annual_tax == D("0.00")
    assert result.net_annual_salary == result.annual_salary


@pytest.mark.parametrize("salary", [0, -1, D("-0.01"), "abc", "", None, True, float("nan"), float("inf"), D("NaN")])
def test_invalid_salaries_are_rejected(salary):
    with pytest.raises(InvalidSalaryError):
        project(salary, PH_TAX_BRACKETS)
