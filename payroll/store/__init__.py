from payroll.store.brackets import BracketRepository
from payroll.store.employees import EmployeeRepository

__all__ = ["BracketRepository", "EmployeeRepository"]
