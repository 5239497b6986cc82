import asyncio
from datetime import date, datetime
from pathlib import Path

import pytest

from finance_tracker.domain.errors import ConflictError, NotFoundError, ValidationError
from finance_tracker.integration.store import JsonDocumentStore
from finance_tracker.services.budgeting import BudgetService
from finance_tracker.services.ledger import TransactionService
from finance_tracker.services.reporting import ReportingService

NOW = datetime(2024, 3, 15)


@pytest.fixture
async def store(tmp_path: Path) -> JsonDocumentStore:
    document_store = JsonDocumentStore(data_dir=str(tmp_path), name="test")
    await document_store.connect()
    return document_store


@pytest.fixture
def transactions(store: JsonDocumentStore) -> TransactionService:
    return TransactionService(store)


@pytest.fixture
def budgets(store: JsonDocumentStore) -> BudgetService:
    return BudgetService(store)


def food_budget(**overrides: object) -> dict[str, object]:
    return {"category": "Food & Dining", "amount": 120, "month": "March", "year": 2024, **overrides}


@pytest.mark.anyio
async def test_create_transaction_sets_defaults(transactions: TransactionService) -> None:
    created = await transactions.create(
        {"amount": "42.5", "date": "2024-03-05", "description": "Groceries", "type": "expense"}
    )

    assert created.id
    assert created.amount == 42.5
    assert created.category == "Other"
    assert created.created_at is not None
    assert created.created_at == created.updated_at


@pytest.mark.anyio
async def test_transactions_listed_newest_first(transactions: TransactionService) -> None:
    for day in (3, 20, 11):
        await transactions.create(
            {"amount": day, "date": f"2024-03-{day:02d}", "description": f"day {day}", "type": "expense"}
        )

    listed = await transactions.get_all()

    assert [t.date for t in listed] == [date(2024, 3, 20), date(2024, 3, 11), date(2024, 3, 3)]


@pytest.mark.anyio
async def test_update_and_delete_unknown_transaction(transactions: TransactionService) -> None:
    payload = {"amount": 1, "date": "2024-03-05", "description": "x", "type": "income"}

    with pytest.raises(NotFoundError):
        await transactions.update("missing", payload)
    with pytest.raises(NotFoundError):
        await transactions.delete("missing")


@pytest.mark.anyio
async def test_update_transaction_revalidates(transactions: TransactionService) -> None:
    created = await transactions.create(
        {"amount": 10, "date": "2024-03-05", "description": "Bus", "type": "expense", "category": "Transportation"}
    )

    with pytest.raises(ValidationError):
        await transactions.update(created.id, {"amount": -3, "date": "2024-03-05", "description": "Bus", "type": "expense"})

    updated = await transactions.update(
        created.id, {"amount": 12, "date": "2024-03-06", "description": "Bus", "type": "expense"}
    )
    assert updated.amount == 12
    assert updated.category == "Other"
    assert updated.created_at == created.created_at


@pytest.mark.anyio
async def test_duplicate_budget_is_rejected(budgets: BudgetService) -> None:
    original = await budgets.create(food_budget())

    with pytest.raises(ConflictError):
        await budgets.create(food_budget(amount=500, month="march"))

    stored = await budgets.get_all()
    assert len(stored) == 1
    assert stored[0].amount == 120
    assert stored[0].updated_at == original.updated_at


@pytest.mark.anyio
async def test_budget_list_filter_needs_month_and_year(budgets: BudgetService) -> None:
    await budgets.create(food_budget())
    await budgets.create(food_budget(month="April"))
    await budgets.create(food_budget(year=2025))

    assert len(await budgets.get_all(month="March", year=2024)) == 1
    assert len(await budgets.get_all(month="march", year=2024)) == 1
    assert len(await budgets.get_all(month="March")) == 3


@pytest.mark.anyio
async def test_budget_partial_update(budgets: BudgetService) -> None:
    created = await budgets.create(food_budget())

    updated = await budgets.update(created.id, {"amount": 300})

    assert updated.amount == 300
    assert updated.month == "March"
    assert updated.category == "Food & Dining"


@pytest.mark.anyio
async def test_budget_update_cannot_collide(budgets: BudgetService) -> None:
    await budgets.create(food_budget())
    travel = await budgets.create(food_budget(category="Travel"))

    with pytest.raises(ConflictError):
        await budgets.update(travel.id, {"category": "Food & Dining"})

    # Same triple as itself is fine
    assert (await budgets.update(travel.id, {"category": "Travel", "amount": 10})).amount == 10

    with pytest.raises(NotFoundError):
        await budgets.update("missing", {"amount": 10})


@pytest.mark.anyio
async def test_concurrent_duplicate_budgets_keep_one(budgets: BudgetService) -> None:
    results = await asyncio.gather(
        budgets.create(food_budget()),
        budgets.create(food_budget(amount=500, month="march")),
        return_exceptions=True,
    )

    assert sorted(type(result).__name__ for result in results) == ["Budget", "ConflictError"]
    assert len(await budgets.get_all()) == 1


@pytest.mark.anyio
async def test_budgets_listed_by_period_then_category(budgets: BudgetService) -> None:
    await budgets.create(food_budget(category="Travel", month="April"))
    await budgets.create(food_budget(year=2025, month="January"))
    await budgets.create(food_budget(month="April"))
    await budgets.create(food_budget(category="Travel"))

    listed = [(b.year, b.month, b.category) for b in await budgets.get_all()]

    assert listed == [
        (2024, "March", "Travel"),
        (2024, "April", "Food & Dining"),
        (2024, "April", "Travel"),
        (2025, "January", "Food & Dining"),
    ]


@pytest.mark.anyio
async def test_reporting_budget_progress(transactions: TransactionService, budgets: BudgetService) -> None:
    for amount, tx_type in ((100, "expense"), (50, "expense"), (200, "income")):
        await transactions.create(
            {
                "amount": amount,
                "date": "2024-03-05",
                "description": "entry",
                "type": tx_type,
                "category": "Food & Dining",
            }
        )
    budget = await budgets.create(food_budget())
    await budgets.create(food_budget(month="April"))
    reporting = ReportingService(transactions, budgets)

    progress = await reporting.get_budget_progress(now=NOW)
    overview = await reporting.get_budget_overview(now=NOW)
    analytics = await reporting.get_analytics(now=NOW)

    assert progress == {budget.id: {"spent": 150, "percentage": 125}}
    assert overview.total_budget == 120
    assert overview.items[0].remaining == 0
    assert overview.status == "danger"
    assert analytics.total_income == 200
    assert analytics.monthly_expenses[-1].amount == 150
