from __future__ import annotations

from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from payroll.core.brackets import TaxBracket
from payroll.db.base import Base, TimestampMixin


class TaxBracketRow(Base):
    __tablename__ = "tax_brackets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bracket_name: Mapped[str] = mapped_column(String(100), nullable=False)
    min_income: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, index=True)
    max_income: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    rate: Mapped[Decimal] = mapped_column(Numeric(5, 4), nullable=False)
    base_tax: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    def to_domain(self) -> TaxBracket:
        return TaxBracket(
            id=self.id,
            name=self.bracket_name,
            min_income=Decimal(self.min_income),
            max_income=Decimal(self.max_income) if self.max_income is not None else None,
            rate=Decimal(self.rate),
            base_tax=Decimal(self.base_tax),
        )

    @classmethod
    def from_domain(cls, bracket: TaxBracket) -> "TaxBracketRow":
        return cls(
            id=bracket.id,
            bracket_name=bracket.name,
            min_income=bracket.min_income,
            max_income=bracket.max_income,
            rate=bracket.rate,
            base_tax=bracket.base_tax,
        )


class EmployeeRow(TimestampMixin, Base):
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    monthly_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    annual_salary: Mapped[Decimal | None] = mapped_column(nullable=True)
    annual_tax: Mapped[Decimal | None] = mapped_column(nullable=True)
    net_annual_salary: Mapped[Decimal | None] = mapped_column(nullable=True)
    tax_bracket_id: Mapped[int | None] = mapped_column(
        ForeignKey("tax_brackets.id", ondelete="SET NULL"),
        nullable=True,
    )

    tax_bracket: Mapped[TaxBracketRow | None] = relationship(lazy="joined")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
