"""
Tests for budget setup and lookup.
"""
from decimal import Decimal


def _budget_payload(total=2000, month=5, year=2026):
    return {
        "month": month,
        "year": year,
        "total_amount": total,
        "categories": [
            {"name": "Food", "icon": "🍔", "color": "#ff0000", "budget_amount": 800},
            {"name": "Home", "icon": "🏠", "color": "#00ff00", "budget_amount": 700},
        ]
    }


def test_get_budget_absent_returns_null(client, auth_headers):
    response = client.get("/api/budget?month=5&year=2026", headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"budget": None}


def test_create_budget(client, auth_headers, user):
    response = client.post("/api/budget", json=_budget_payload(), headers=auth_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == user.id
    assert Decimal(data["total_amount"]) == Decimal("2000")
    assert sorted(c["name"] for c in data["categories"]) == ["Food", "Home"]


def test_get_budget_with_spent(client, auth_headers):
    budget = client.post("/api/budget", json=_budget_payload(), headers=auth_headers).json()
    food = [c for c in budget["categories"] if c["name"] == "Food"][0]
    
    for amount, type in [(100, "EXPENSE"), (50, "EXPENSE"), (30, "INCOME")]:
        response = client.post(
            "/api/transactions",
            json={"category_id": food["id"], "amount": amount, "type": type},
            headers=auth_headers
        )
        assert response.status_code == 201
    
    data = client.get("/api/budget?month=5&year=2026", headers=auth_headers).json()["budget"]
    categories = {c["name"]: c for c in data["categories"]}
    assert Decimal(categories["Food"]["spent"]) == Decimal("120")
    assert Decimal(categories["Food"]["remaining"]) == Decimal("680")
    assert categories["Food"]["percentage"] == 15
    assert Decimal(categories["Home"]["spent"]) == Decimal("0")
    assert Decimal(data["total_spent"]) == Decimal("120")
    assert Decimal(data["total_planned"]) == Decimal("1500")
    assert Decimal(data["remaining"]) == Decimal("1880")


def test_create_budget_replaces_existing(client, auth_headers):
    first = client.post("/api/budget", json=_budget_payload(total=2000), headers=auth_headers).json()
    food = [c for c in first["categories"] if c["name"] == "Food"][0]
    client.post(
        "/api/transactions",
        json={"category_id": food["id"], "amount": 40, "type": "EXPENSE"},
        headers=auth_headers
    )
    
    payload = _budget_payload(total=3000)
    payload["categories"] = payload["categories"][:1]
    second = client.post("/api/budget", json=payload, headers=auth_headers).json()
    
    assert second["id"] != first["id"]
    data = client.get("/api/budget?month=5&year=2026", headers=auth_headers).json()["budget"]
    assert data["id"] == second["id"]
    assert Decimal(data["total_amount"]) == Decimal("3000")
    assert len(data["categories"]) == 1
    
    # the old transaction survives, uncategorized
    transactions = client.get("/api/transactions", headers=auth_headers).json()
    assert len(transactions) == 1
    assert transactions[0]["category_id"] is None


def test_budgets_are_per_user(client, auth_headers, other_auth_headers):
    client.post("/api/budget", json=_budget_payload(), headers=auth_headers)
    response = client.get("/api/budget?month=5&year=2026", headers=other_auth_headers)
    assert response.json() == {"budget": None}


def test_create_budget_validation(client, auth_headers):
    assert client.post("/api/budget", json=_budget_payload(total=0), headers=auth_headers).status_code == 422
    assert client.post("/api/budget", json=_budget_payload(month=13), headers=auth_headers).status_code == 422
    assert client.get("/api/budget?month=0&year=2026", headers=auth_headers).status_code == 422


def test_update_total_amount(client, auth_headers, other_auth_headers):
    budget = client.post("/api/budget", json=_budget_payload(), headers=auth_headers).json()
    
    payload = {"budget_id": budget["id"], "total_amount": 2500}
    assert client.patch("/api/budget/total", json=payload, headers=other_auth_headers).status_code == 404
    
    response = client.patch("/api/budget/total", json=payload, headers=auth_headers)
    assert response.status_code == 200
    assert Decimal(response.json()["total_amount"]) == Decimal("2500")
