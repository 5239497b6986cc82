from collections.abc import Generator
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from finance_tracker.app import create_app
from finance_tracker.domain.timefmt import month_name
from finance_tracker.integration.store import JsonDocumentStore


@pytest.fixture
def client(tmp_path: Path) -> Generator[TestClient, None, None]:
    app = create_app(store=JsonDocumentStore(data_dir=str(tmp_path), name="test"))
    with TestClient(app) as test_client:
        yield test_client


def add_transaction(client: TestClient, amount: float, tx_type: str = "expense", category: str | None = None) -> dict:
    payload = {
        "amount": amount,
        "date": date.today().isoformat(),
        "description": f"{tx_type} {amount}",
        "type": tx_type,
    }
    if category:
        payload["category"] = category
    response = client.post("/api/transactions", json=payload)
    assert response.status_code == 201
    return response.json()


def test_create_and_list_transactions(client: TestClient) -> None:
    created = add_transaction(client, 25)

    assert created["category"] == "Other"
    assert "createdAt" in created and "updatedAt" in created

    response = client.get("/api/transactions")
    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == [created["id"]]


def test_invalid_transaction_returns_details(client: TestClient) -> None:
    response = client.post(
        "/api/transactions",
        json={"amount": -4, "date": "yesterday", "description": "", "type": "expense"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert body["details"] == [
        "Amount must be greater than 0",
        "Invalid date format",
        "Description is required",
    ]


def test_update_and_delete_transaction(client: TestClient) -> None:
    created = add_transaction(client, 10, category="Travel")

    response = client.put(
        f"/api/transactions/{created['id']}",
        json={"amount": 15, "date": "2024-01-02", "description": "Train", "type": "expense", "category": "Travel"},
    )
    assert response.status_code == 200
    assert response.json()["amount"] == 15
    assert response.json()["date"] == "2024-01-02"

    response = client.delete(f"/api/transactions/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Transaction deleted successfully"}

    response = client.delete(f"/api/transactions/{created['id']}")
    assert response.status_code == 404
    assert "not found" in response.json()["error"]


def test_duplicate_budget_conflict(client: TestClient) -> None:
    payload = {"category": "Shopping", "amount": 300, "month": "May", "year": 2024}
    first = client.post("/api/budgets", json=payload)
    assert first.status_code == 201

    second = client.post("/api/budgets", json={**payload, "amount": 999})
    assert second.status_code == 409

    listed = client.get("/api/budgets", params={"month": "May", "year": 2024}).json()
    assert len(listed) == 1
    assert listed[0]["amount"] == 300


def test_budget_update_and_delete(client: TestClient) -> None:
    budget = client.post(
        "/api/budgets", json={"category": "Travel", "amount": 100, "month": "June", "year": 2024}
    ).json()

    response = client.put(f"/api/budgets/{budget['id']}", json={"amount": 250})
    assert response.status_code == 200
    assert response.json()["amount"] == 250

    assert client.delete(f"/api/budgets/{budget['id']}").json() == {"success": True}
    assert client.delete(f"/api/budgets/{budget['id']}").status_code == 404


def test_invalid_budget(client: TestClient) -> None:
    response = client.post("/api/budgets", json={"category": "Food & Dining", "amount": 0, "month": "June", "year": 2024})

    assert response.status_code == 400
    assert response.json()["details"] == ["Amount must be greater than 0"]


def test_analytics(client: TestClient) -> None:
    add_transaction(client, 100, category="Food & Dining")
    add_transaction(client, 50, category="Travel")
    add_transaction(client, 200, tx_type="income")

    response = client.get("/api/analytics")

    assert response.status_code == 200
    data = response.json()
    assert data["totalTransactions"] == 3
    assert data["totalExpenses"] == 150
    assert data["totalIncome"] == 200
    assert len(data["monthlyExpenses"]) == 6
    assert data["monthlyExpenses"][-1]["amount"] == 150
    assert data["categoryBreakdown"] == [
        {"category": "Food & Dining", "amount": 100, "percentage": 67},
        {"category": "Travel", "amount": 50, "percentage": 33},
    ]
    assert len(data["recentTransactions"]) == 3


def test_budget_progress_and_overview(client: TestClient) -> None:
    today = date.today()
    add_transaction(client, 100, category="Food & Dining")
    add_transaction(client, 50, category="Food & Dining")
    add_transaction(client, 200, tx_type="income", category="Food & Dining")
    budget = client.post(
        "/api/budgets",
        json={"category": "Food & Dining", "amount": 120, "month": month_name(today.month), "year": today.year},
    ).json()

    progress = client.get("/api/budgets/progress").json()
    assert progress == {budget["id"]: {"spent": 150, "percentage": 125}}

    overview = client.get("/api/budgets/overview").json()
    assert overview["totalBudget"] == 120
    assert overview["totalSpent"] == 150
    assert overview["status"] == "danger"
    assert overview["items"][0]["remaining"] == 0


def test_categories(client: TestClient) -> None:
    categories = client.get("/api/categories").json()

    assert len(categories) == 13
    assert categories[-1] == "Other"


def test_dashboard_page(client: TestClient) -> None:
    add_transaction(client, 75, category="Shopping")

    response = client.get("/")

    assert response.status_code == 200
    assert "Finance Tracker" in response.text
    assert "Shopping" in response.text


def test_store_failure_returns_500(client: TestClient, tmp_path: Path) -> None:
    (tmp_path / "test.transactions.json").write_text("[broken", encoding="utf-8")

    response = client.get("/api/analytics")

    assert response.status_code == 500
    assert "error" in response.json()


def test_non_finite_amounts_keep_analytics_available(client: TestClient) -> None:
    response = client.post(
        "/api/transactions",
        json={"amount": "1e999", "date": date.today().isoformat(), "description": "x", "type": "expense"},
    )
    assert response.status_code == 400
    assert response.json()["details"] == ["Amount must be greater than 0"]

    add_transaction(client, 1e308, category="Travel")
    add_transaction(client, 1e308, category="Travel")

    response = client.get("/api/analytics")
    assert response.status_code == 200
    assert response.json()["categoryBreakdown"][0]["percentage"] == 0
    assert client.get("/").status_code == 200
