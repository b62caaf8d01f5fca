from payroll.db.base import Base
from payroll.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from payroll.db.tables import EmployeeRow, TaxBracketRow

__all__ = [
    "Base",
    "EmployeeRow",
    "TaxBracketRow",
    "create_tables",
    "drop_tables",
    "get_engine",
    "get_session_factory",
    "init_engine_from_url",
    "reset_engine",
    "session_scope",
]
