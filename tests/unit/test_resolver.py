from decimal import Decimal as D

import pytest

from payroll.core.brackets import PH_TAX_BRACKETS, TaxBracket
from payroll.core.resolver import find_bracket, resolve


@pytest.mark.parametrize(
    "income, bracket_name, tax",
    [
        (D("0"), "Tax Exempt", D("0.00")),
        (D("120000"), "Tax Exempt", D("0.00")),
        (D("250000"), "Tax Exempt", D("0.00")),
        (D("250001"), "15% Bracket", D("0.15")),
        (D("400000"), "15% Bracket", D("22500.00")),
        (D("400001"), "20% Bracket", D("22500.20")),
        (D("600000"), "20% Bracket", D("62500.00")),
        (D("800000"), "20% Bracket", D("102500.00")),
        (D("1000000"), "25% Bracket", D("152500.00")),
        (D("2000000"), "25% Bracket", D("402500.00")),
        (D("8000000"), "30% Bracket", D("2202500.00")),
        (D("10000000"), "35% Bracket", D("2902500.00")),
    ],
)
def test_resolve_seeded_table(income, bracket_name, tax):
    result = resolve(income, PH_TAX_BRACKETS)
    assert result.bracket is not None
    assert result.bracket.name == bracket_name
    assert result.tax == tax


def test_tax_at_published_boundary_charges_one_unit_of_excess():
    # 250001 is one peso above the 250000 threshold the rate applies from.
    assert resolve(D("250001"), PH_TAX_BRACKETS).tax == D("0.15")
    assert resolve(D("250000.99"), PH_TAX_BRACKETS).tax == D("0.00")


def test_fractional_income_between_bands_stays_in_lower_band():
    result = resolve(D("400000.50"), PH_TAX_BRACKETS)
    assert result.bracket.name == "15% Bracket"
    assert result.tax == D("22500.08")


def test_empty_table_degrades_to_zero_tax():
    result = resolve(D("500000"), [])
    assert result.bracket is None
    assert result.tax == D("0.00")


def test_non_tiling_table_returns_no_bracket():
    table = [
        TaxBracket(1, "Tax Exempt", D("0"), D("100000"), D("0"), D("0")),
        TaxBracket(2, "Upper", D("200000"), None, D("0.20"), D("0")),
    ]
    assert find_bracket(D("150000"), table) is None
    assert resolve(D("150000"), table).tax == D("0.00")
    assert resolve(D("250000"), table).tax == D("10000.20")


def test_negative_income_matches_nothing():
    assert resolve(D("-1"), PH_TAX_BRACKETS).bracket is None


def test_zero_rate_bracket_charges_base_tax_only():
    table = [
        TaxBracket(1, "Tax Exempt", D("0"), D("1000"), D("0"), D("0")),
        TaxBracket(2, "Levy", D("1001"), None, D("0"), D("150")),
    ]
    assert resolve(D("5000"), table).tax == D("150.00")


def test_rounding_is_half_up_at_final_step():
    table = [
        TaxBracket(1, "Tax Exempt", D("0"), D("0"), D("0"), D("0")),
        TaxBracket(2, "Odd", D("1"), None, D("0.125"), D("0")),
    ]
    # 0.125 * 1.8 = 0.225; banker's rounding would give 0.22
    assert resolve(D("1.8"), table).tax == D("0.23")
    assert resolve(D("1.2"), table).tax == D("0.15")


def test_resolve_accepts_plain_numbers():
    assert resolve(400000, PH_TAX_BRACKETS).tax == D("22500.00")
    assert resolve("1000000", PH_TAX_BRACKETS).tax == D("152500.00")


def test_taxed_band_starting_at_zero_charges_from_zero():
    table = [TaxBracket(1, "Flat", D("0"), None, D("0.10"), D("0"))]
    assert table[0].is_exempt
    assert table[0].excess_base == D("0")
    assert resolve(D("1000"), table).tax == D("100.00")
