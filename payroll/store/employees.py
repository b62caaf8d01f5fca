from __future__ import annotations

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from payroll.db.tables import EmployeeRow


def _apply_search(stmt: Select, search: str | None) -> Select:
    term = (search or "").strip().lower()
    if not term:
        return stmt
    # Literal substring: LIKE wildcards in the term match only themselves.
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    full_name = func.lower(EmployeeRow.first_name + " " + EmployeeRow.last_name)
    return stmt.where(
        or_(
            func.lower(EmployeeRow.first_name).like(pattern, escape="\\"),
            func.lower(EmployeeRow.last_name).like(pattern, escape="\\"),
            full_name.like(pattern, escape="\\"),
        )
    )


class EmployeeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, employee_id: int) -> EmployeeRow | None:
        return self.session.get(EmployeeRow, employee_id)

    def add(self, employee: EmployeeRow) -> EmployeeRow:
        self.session.add(employee)
        self.session.flush()
        return employee

    def add_all(self, employees: list[EmployeeRow]) -> int:
        self.session.add_all(employees)
        self.session.flush()
        return len(employees)

    def delete(self, employee_id: int) -> bool:
        result = self.session.execute(delete(EmployeeRow).where(EmployeeRow.id == employee_id))
        return bool(result.rowcount)

    def count(self, search: str | None = None) -> int:
        stmt = _apply_search(select(func.count()).select_from(EmployeeRow), search)
        return self.session.scalar(stmt) or 0

    def clear(self) -> int:
        result = self.session.execute(delete(EmployeeRow))
        self.session.expire_all()
        return result.rowcount or 0

    def list_all(self) -> list[EmployeeRow]:
        return list(self.session.scalars(select(EmployeeRow).order_by(EmployeeRow.id.asc())).unique())

    def paginate(self, page: int, limit: int, search: str | None = None) -> tuple[list[EmployeeRow], int]:
        """Return one page of employees (ascending id) and the total match count."""
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")
        stmt = (
            _apply_search(select(EmployeeRow), search)
            .order_by(EmployeeRow.id.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        items = list(self.session.scalars(stmt).unique())
        return items, self.count(search)
