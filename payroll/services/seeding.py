"""Explicit, idempotent bootstrap of reference and sample data.

Nothing here runs on import. :func:`bootstrap` is invoked once by the
application lifespan (or the ``payroll seed`` command) and is a no-op unless
``SEED_ON_STARTUP`` is enabled.
"""
from __future__ import annotations

import logging
import random
from decimal import Decimal
from typing import Sequence

from sqlalchemy.orm import Session, sessionmaker

from payroll.config import Settings
from payroll.core.brackets import PH_TAX_BRACKETS, TaxBracket, validate_bracket_table
from payroll.core.money import round_cents
from payroll.core.projection import project
from payroll.db.engine import session_scope
from payroll.db.tables import EmployeeRow
from payroll.services.employees import apply_projection, recalculate_all
from payroll.store import BracketRepository, EmployeeRepository

logger = logging.getLogger("payroll").getChild("seeding")

FIRST_NAMES = (
    "Alex", "Sam", "Jordan", "Taylor", "Morgan", "Casey", "Jamie", "Riley",
    "Avery", "Quinn", "Cameron", "Drew", "Reese", "Parker", "Rowan",
)
LAST_NAMES = (
    "Garcia", "Nguyen", "Lopez", "Johnson", "Smith", "Brown", "Martinez", "Davis",
    "Miller", "Wilson", "Anderson", "Taylor", "Thomas", "Hernandez", "Moore",
)
SALARY_MIN = 20_000
SALARY_MAX = 200_000
DEFAULT_EMPLOYEE_TARGET = 50


def seed_tax_brackets(session: Session, brackets: Sequence[TaxBracket] = PH_TAX_BRACKETS) -> int:
    repo = BracketRepository(session)
    existing = repo.count()
    if existing:
        logger.info("Tax brackets already seeded (%s rows)", existing)
        return 0
    validate_bracket_table(brackets)
    inserted = repo.add_all(brackets)
    logger.info("Seeded %s tax brackets", inserted)
    return inserted


def reseed_tax_brackets(session: Session, brackets: Sequence[TaxBracket] = PH_TAX_BRACKETS) -> int:
    """Replace the bracket table and re-project every employee against it."""
    validate_bracket_table(brackets)
    inserted = BracketRepository(session).replace_all(brackets)
    updated = recalculate_all(session)
    logger.info("Reseeded %s tax brackets; re-projected %s employees", inserted, updated)
    return inserted


def _random_salary(rng: random.Random) -> Decimal:
    return round_cents(Decimal(str(rng.uniform(SALARY_MIN, SALARY_MAX))))


def seed_employees(
    session: Session,
    target: int = DEFAULT_EMPLOYEE_TARGET,
    *,
    force: bool = False,
    rng: random.Random | None = None,
) -> int:
    """Top the employee table up to ``target`` rows of random sample data.

    ``force`` clears existing employees first. Each sample is projected
    against the current bracket table before insert.
    """
    rng = rng or random.Random()
    repo = EmployeeRepository(session)
    if force:
        cleared = repo.clear()
        logger.info("Force seeding: cleared %s employees", cleared)
        existing = 0
    else:
        existing = repo.count()

    to_create = max(0, target - existing)
    if not to_create:
        logger.info("Employee records already >= %s; set FORCE_SEED_EMPLOYEES=true to reseed", target)
        return 0

    brackets = BracketRepository(session).list_ordered()
    employees: list[EmployeeRow] = []
    for _ in range(to_create):
        employee = EmployeeRow(first_name=rng.choice(FIRST_NAMES), last_name=rng.choice(LAST_NAMES))
        apply_projection(session, employee, project(_random_salary(rng), brackets))
        employees.append(employee)
    repo.add_all(employees)
    logger.info("Seeded %s employees (existing=%s target=%s)", len(employees), existing, target)
    return len(employees)


def bootstrap(session_factory: sessionmaker[Session], settings: Settings) -> dict[str, int]:
    if not settings.seed_on_startup:
        logger.debug("SEED_ON_STARTUP disabled; skipping bootstrap")
        return {"brackets": 0, "employees": 0}

    with session_scope(session_factory) as session:
        brackets = seed_tax_brackets(session)
    employees = 0
    if settings.seed_employees:
        rng = random.Random(settings.seed_random_seed)
        with session_scope(session_factory) as session:
            employees = seed_employees(
                session,
                settings.seed_employee_target,
                force=settings.force_seed_employees,
                rng=rng,
            )
    return {"brackets": brackets, "employees": employees}
