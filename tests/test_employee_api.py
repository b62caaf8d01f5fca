import logging

import pytest

ANA = {"firstName": "Ana", "lastName": "Cruz", "monthlySalary": 50000}


def _create(client, **overrides):
    response = client.post("/employees", json={**ANA, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def test_create_returns_projected_employee(client):
    body = _create(client)
    assert body["id"] >= 1
    assert body["firstName"] == "Ana"
    assert body["monthlySalary"] == 50000.0
    assert body["annualSalary"] == 600000.0
    assert body["annualTax"] == 62500.0
    assert body["netAnnualSalary"] == 537500.0
    assert body["taxBracket"] == "20% Bracket"
    assert body["taxBracketId"] is not None


def test_get_returns_stored_employee(client):
    created = _create(client)
    response = client.get(f"/employees/{created['id']}")
    assert response.status_code == 200
    assert response.json()["annualTax"] == 62500.0


@pytest.mark.parametrize(
    "payload",
    [
        {**ANA, "annualTax": 1},
        {**ANA, "monthlySalary": 0},
        {**ANA, "monthlySalary": -100},
        {**ANA, "monthlySalary": "abc"},
        {**ANA, "firstName": "   "},
        {"firstName": "Ana", "lastName": "Cruz"},
    ],
)
def test_create_rejects_invalid_payloads(client, payload):
    assert client.post("/employees", json=payload).status_code == 422


def test_salary_update_reprojects(client):
    created = _create(client)
    response = client.put(f"/employees/{created['id']}", json={"monthlySalary": 20000})
    assert response.status_code == 200
    body = response.json()
    assert body["annualSalary"] == 240000.0
    assert body["annualTax"] == 0.0
    assert body["taxBracket"] == "Tax Exempt"


def test_name_update_keeps_tax(client):
    created = _create(client)
    response = client.put(f"/employees/{created['id']}", json={"lastName": "Reyes"})
    assert response.status_code == 200
    assert response.json()["lastName"] == "Reyes"
    assert response.json()["annualTax"] == 62500.0


def test_update_rejects_derived_fields(client):
    created = _create(client)
    response = client.put(f"/employees/{created['id']}", json={"annualTax": 0})
    assert response.status_code == 422
    assert client.get(f"/employees/{created['id']}").json()["annualTax"] == 62500.0


def test_delete_then_missing(client):
    created = _create(client)
    response = client.delete(f"/employees/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Employee deleted successfully"}
    assert client.get(f"/employees/{created['id']}").status_code == 404
    assert client.delete(f"/employees/{created['id']}").status_code == 404


def test_missing_employee_is_404(client):
    response = client.get("/employees/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Employee not found"
    assert client.put("/employees/999", json={"firstName": "X"}).status_code == 404


def test_list_paginates_and_searches(client):
    for first, last in [("Ana", "Cruz"), ("Ben", "Santos"), ("Carla", "Cruz")]:
        _create(client, firstName=first, lastName=last)

    body = client.get("/employees", params={"limit": 2}).json()
    assert body["total"] == 3
    assert body["pages"] == 2
    assert body["page"] == 1
    assert [item["firstName"] for item in body["items"]] == ["Ana", "Ben"]

    second = client.get("/employees", params={"limit": 2, "page": 2}).json()
    assert [item["firstName"] for item in second["items"]] == ["Carla"]

    found = client.get("/employees", params={"search": "cruz"}).json()
    assert found["total"] == 2
    assert found["limit"] == 10


@pytest.mark.parametrize("params", [{"limit": 101}, {"limit": 0}, {"page": 0}])
def test_list_rejects_bad_paging(client, params):
    assert client.get("/employees", params=params).status_code == 422


def test_not_found_is_not_logged_as_a_failure(client, caplog):
    with caplog.at_level(logging.DEBUG, logger="payroll"):
        assert client.get("/employees/999").status_code == 404
        assert client.put("/employees/999", json={"firstName": "X"}).status_code == 404
    assert not [record for record in caplog.records if record.exc_info or record.levelno >= logging.WARNING]
