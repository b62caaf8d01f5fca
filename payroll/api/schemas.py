from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from payroll.core.brackets import TaxBracket
from payroll.core.projection import Projection
from payroll.db.tables import EmployeeRow
from payroll.services.employees import EmployeePage, TaxReport

# Money leaves the API as a JSON number; inside it stays a Decimal.
JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmployeeCreate(CamelModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    monthly_salary: Decimal = Field(..., gt=0, decimal_places=2, allow_inf_nan=False)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class EmployeeUpdate(CamelModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    monthly_salary: Decimal | None = Field(default=None, gt=0, decimal_places=2, allow_inf_nan=False)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class SalaryInput(CamelModel):
    monthly_salary: Decimal = Field(..., gt=0, decimal_places=2, allow_inf_nan=False)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class TaxOverrideRequest(CamelModel):
    annual_salary: Decimal | None = Field(default=None, ge=0, decimal_places=2, allow_inf_nan=False)
    annual_tax: Decimal | None = Field(default=None, ge=0, decimal_places=2, allow_inf_nan=False)
    net_annual_salary: Decimal | None = Field(default=None, decimal_places=2, allow_inf_nan=False)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class BracketOut(CamelModel):
    id: int | None
    bracket_name: str
    min_income: JsonDecimal
    max_income: JsonDecimal | None
    rate: JsonDecimal
    base_tax: JsonDecimal

    @classmethod
    def from_bracket(cls, bracket: TaxBracket) -> "BracketOut":
        return cls(
            id=bracket.id,
            bracket_name=bracket.name,
            min_income=bracket.min_income,
            max_income=bracket.max_income,
            rate=bracket.rate,
            base_tax=bracket.base_tax,
        )


class EmployeeOut(CamelModel):
    id: int
    first_name: str
    last_name: str
    monthly_salary: JsonDecimal
    annual_salary: JsonDecimal | None = None
    annual_tax: JsonDecimal | None = None
    net_annual_salary: JsonDecimal | None = None
    tax_bracket: str | None = None
    tax_bracket_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: EmployeeRow) -> "EmployeeOut":
        return cls(
            id=row.id,
            first_name=row.first_name,
            last_name=row.last_name,
            monthly_salary=row.monthly_salary,
            annual_salary=row.annual_salary,
            annual_tax=row.annual_tax,
            net_annual_salary=row.net_annual_salary,
            tax_bracket=row.tax_bracket.bracket_name if row.tax_bracket is not None else None,
            tax_bracket_id=row.tax_bracket_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class EmployeePageOut(CamelModel):
    items: list[EmployeeOut]
    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def from_page(cls, page: EmployeePage) -> "EmployeePageOut":
        return cls(
            items=[EmployeeOut.from_row(row) for row in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
            pages=page.pages,
        )


class ProjectionOut(CamelModel):
    monthly_salary: JsonDecimal
    annual_salary: JsonDecimal
    annual_tax: JsonDecimal
    monthly_tax: JsonDecimal
    net_annual_salary: JsonDecimal
    net_monthly_salary: JsonDecimal
    tax_bracket: str | None = None
    bracket_details: BracketOut | None = None

    @classmethod
    def projection_fields(cls, projection: Projection) -> dict:
        bracket = projection.bracket
        return {
            "monthly_salary": projection.monthly_salary,
            "annual_salary": projection.annual_salary,
            "annual_tax": projection.annual_tax,
            "monthly_tax": projection.monthly_tax,
            "net_annual_salary": projection.net_annual_salary,
            "net_monthly_salary": projection.net_monthly_salary,
            "tax_bracket": bracket.name if bracket is not None else None,
            "bracket_details": BracketOut.from_bracket(bracket) if bracket is not None else None,
        }

    @classmethod
    def from_projection(cls, projection: Projection) -> "ProjectionOut":
        return cls(**cls.projection_fields(projection))


class EmployeeSummary(CamelModel):
    id: int
    first_name: str
    last_name: str
    monthly_salary: JsonDecimal


class TaxReportOut(ProjectionOut):
    employee: EmployeeSummary

    @classmethod
    def from_report(cls, report: TaxReport) -> "TaxReportOut":
        row = report.employee
        return cls(
            employee=EmployeeSummary(
                id=row.id,
                first_name=row.first_name,
                last_name=row.last_name,
                monthly_salary=row.monthly_salary,
            ),
            **cls.projection_fields(report.projection),
        )
