from __future__ import annotations

from typing import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from payroll.core.brackets import TaxBracket
from payroll.db.tables import EmployeeRow, TaxBracketRow


class BracketRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_rows(self) -> list[TaxBracketRow]:
        stmt = select(TaxBracketRow).order_by(TaxBracketRow.min_income.asc())
        return list(self.session.scalars(stmt))

    def list_ordered(self) -> list[TaxBracket]:
        """Current bracket table, ascending by ``min_income``."""
        return [row.to_domain() for row in self.list_rows()]

    def get_row(self, bracket_id: int) -> TaxBracketRow | None:
        return self.session.get(TaxBracketRow, bracket_id)

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(TaxBracketRow)) or 0

    def add_all(self, brackets: Iterable[TaxBracket]) -> int:
        rows = [TaxBracketRow.from_domain(bracket) for bracket in brackets]
        self.session.add_all(rows)
        self.session.flush()
        return len(rows)

    def replace_all(self, brackets: Iterable[TaxBracket]) -> int:
        self.session.execute(update(EmployeeRow).values(tax_bracket_id=None))
        self.session.expire_all()
        for row in self.list_rows():
            self.session.delete(row)
        self.session.flush()
        return self.add_all(brackets)
