from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from payroll.core.money import ONE, ZERO

D = Decimal

EXEMPT_BRACKET_NAME = "Tax Exempt"


class BracketTableError(ValueError):
    pass


@dataclass(frozen=True)
class TaxBracket:
    """One income band of the bracket table.

    ``min_income`` is the first income unit belonging to the band as
    published (e.g. 250001); ``max_income`` is inclusive and ``None`` marks
    the unbounded top bracket.
    """

    id: int | None
    name: str
    min_income: D
    max_income: D | None
    rate: D
    base_tax: D = ZERO

    @property
    def is_top(self) -> bool:
        return self.max_income is None

    @property
    def is_exempt(self) -> bool:
        return self.min_income == ZERO or self.name == EXEMPT_BRACKET_NAME

    @property
    def excess_base(self) -> D:
        # Marginal rate applies above the band's true threshold, one unit
        # below the published minimum.
        if self.is_exempt:
            return ZERO
        return self.min_income - ONE

    def contains(self, income: D) -> bool:
        if income < self.min_income:
            return False
        return self.max_income is None or income <= self.max_income


PH_TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(1, EXEMPT_BRACKET_NAME, D("0"), D("250000"), D("0.00"), D("0")),
    TaxBracket(2, "15% Bracket", D("250001"), D("400000"), D("0.15"), D("0")),
    TaxBracket(3, "20% Bracket", D("400001"), D("800000"), D("0.20"), D("22500")),
    TaxBracket(4, "25% Bracket", D("800001"), D("2000000"), D("0.25"), D("102500")),
    TaxBracket(5, "30% Bracket", D("2000001"), D("8000000"), D("0.30"), D("402500")),
    TaxBracket(6, "35% Bracket", D("8000001"), None, D("0.35"), D("2202500")),
)


def sort_brackets(brackets: Iterable[TaxBracket]) -> list[TaxBracket]:
    return sorted(brackets, key=lambda bracket: bracket.min_income)


def validate_bracket_table(brackets: Sequence[TaxBracket]) -> None:
    """Raise :class:`BracketTableError` unless ``brackets`` tile ``[0, inf)``.

    The table must be sorted ascending by ``min_income``, start at zero,
    have each ``min_income`` equal to the previous ``max_income + 1`` and end
    with exactly one unbounded bracket.
    """
    if not brackets:
        raise BracketTableError("Bracket table is empty")

    for bracket in brackets:
        if not ZERO <= bracket.rate <= ONE:
            raise BracketTableError(f"{bracket.name}: rate {bracket.rate} outside [0, 1]")
        if bracket.base_tax < ZERO:
            raise BracketTableError(f"{bracket.name}: base tax must not be negative")
        if bracket.max_income is not None and bracket.max_income < bracket.min_income:
            raise BracketTableError(f"{bracket.name}: max income below min income")

    if brackets[0].min_income != ZERO:
        raise BracketTableError(f"{brackets[0].name}: table must start at 0, got {brackets[0].min_income}")

    unbounded = [bracket for bracket in brackets if bracket.is_top]
    if len(unbounded) != 1:
        raise BracketTableError(f"Expected exactly one unbounded bracket, found {len(unbounded)}")
    if not brackets[-1].is_top:
        raise BracketTableError(f"{unbounded[0].name}: unbounded bracket must be last")

    for previous, current in zip(brackets, brackets[1:]):
        if current.min_income < previous.min_income:
            raise BracketTableError(f"{current.name}: brackets not sorted by min income")
        expected = previous.max_income + ONE  # type: ignore[operator]
        if current.min_income > expected:
            raise BracketTableError(
                f"Gap between {previous.name} and {current.name}: {previous.max_income} -> {current.min_income}"
            )
        if current.min_income < expected:
            raise BracketTableError(f"{previous.name} overlaps {current.name}")


__all__ = [
    "EXEMPT_BRACKET_NAME",
    "PH_TAX_BRACKETS",
    "BracketTableError",
    "TaxBracket",
    "sort_brackets",
    "validate_bracket_table",
]
