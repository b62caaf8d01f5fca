import pytest

from payroll.core.brackets import PH_TAX_BRACKETS
from payroll.services import employees as employee_service
from payroll.store import BracketRepository, EmployeeRepository

PEOPLE = [("Ana", "Cruz"), ("Ben", "Santos"), ("Carla", "Cruz-Reyes"), ("Dan", "Lim")]


@pytest.fixture
def staffed_session(seeded_session):
    for first, last in PEOPLE:
        employee_service.create_employee(seeded_session, first_name=first, last_name=last, monthly_salary=30000)
    seeded_session.commit()
    return seeded_session


def test_brackets_come_back_in_ascending_order(seeded_session):
    brackets = BracketRepository(seeded_session).list_ordered()
    assert [b.name for b in brackets] == [b.name for b in PH_TAX_BRACKETS]
    assert [b.min_income for b in brackets] == [b.min_income for b in PH_TAX_BRACKETS]
    assert brackets[-1].max_income is None


def test_paginate_orders_by_id(staffed_session):
    repo = EmployeeRepository(staffed_session)
    first_page, total = repo.paginate(1, 2)
    second_page, _ = repo.paginate(2, 2)
    assert total == 4
    assert [e.first_name for e in first_page] == ["Ana", "Ben"]
    assert [e.first_name for e in second_page] == ["Carla", "Dan"]


def test_page_past_the_end_is_empty(staffed_session):
    items, total = EmployeeRepository(staffed_session).paginate(3, 2)
    assert items == []
    assert total == 4


@pytest.mark.parametrize(
    "search, expected",
    [
        ("cruz", ["Ana", "Carla"]),
        ("CRUZ", ["Ana", "Carla"]),
        ("ana cruz", ["Ana"]),
        ("lim", ["Dan"]),
        ("  ", ["Ana", "Ben", "Carla", "Dan"]),
        ("nobody", []),
    ],
)
def test_search_matches_first_last_and_full_name(staffed_session, search, expected):
    repo = EmployeeRepository(staffed_session)
    items, total = repo.paginate(1, 10, search)
    assert [e.first_name for e in items] == expected
    assert total == len(expected)
    assert repo.count(search) == len(expected)


def test_paginate_rejects_non_positive_arguments(session):
    repo = EmployeeRepository(session)
    with pytest.raises(ValueError):
        repo.paginate(0, 10)
    with pytest.raises(ValueError):
        repo.paginate(1, 0)


def test_delete_reports_whether_a_row_was_removed(staffed_session):
    repo = EmployeeRepository(staffed_session)
    target = repo.list_all()[0]
    assert repo.delete(target.id) is True
    assert repo.delete(target.id) is False
    assert repo.count() == 3


@pytest.mark.parametrize("search", ["%", "_", "\\"])
def test_like_wildcards_in_search_are_literal(staffed_session, search):
    items, total = EmployeeRepository(staffed_session).paginate(1, 10, search)
    assert items == []
    assert total == 0


def test_search_matches_literal_percent(staffed_session):
    employee_service.create_employee(staffed_session, first_name="Ed", last_name="100%_Lee", monthly_salary=30000)
    items, total = EmployeeRepository(staffed_session).paginate(1, 10, "0%_l")
    assert total == 1
    assert items[0].first_name == "Ed"
