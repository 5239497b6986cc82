from typing import Any

from finance_tracker.domain import errors
from finance_tracker.domain.budgets import build_budget_fields
from finance_tracker.domain.timefmt import month_name, month_number
from finance_tracker.integration.store import BUDGETS, DocumentStore
from finance_tracker.logger import get_logger
from finance_tracker.models import Budget
from finance_tracker.services.ledger import utcnow_iso

logger = get_logger(__name__)

_UPDATABLE_FIELDS = ("category", "amount", "month", "year")

# One budget per category per month
BUDGET_KEY = ("category", "month", "year")


def _budget_sort_key(budget: Budget) -> tuple[int, int, str]:
    return budget.year, month_number(budget.month) or 0, budget.category


def period_query(month: str | None, year: int | None) -> dict[str, Any] | None:
    # A filter needs both parts; a month alone matches every budget
    if not month or year is None:
        return None
    number = month_number(month)
    return {"month": month_name(number) if number else month, "year": year}


class BudgetService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    async def get_all(self, month: str | None = None, year: int | None = None) -> list[Budget]:
        documents = await self.store.find(BUDGETS, period_query(month, year))
        budgets = [Budget.model_validate(doc) for doc in documents]
        budgets.sort(key=_budget_sort_key)
        return budgets

    def _conflict(self, fields: dict[str, Any]) -> errors.ConflictError:
        logger.warning(
            "[BUDGET] Rejected duplicate %s %s %s", fields["category"], fields["month"], fields["year"]
        )
        return errors.ConflictError(
            errors.duplicate_budget(fields["category"], fields["month"], fields["year"])
        )

    async def create(self, payload: dict[str, Any]) -> Budget:
        fields = build_budget_fields(payload)
        now = utcnow_iso()
        try:
            document = await self.store.insert(
                BUDGETS,
                {**fields, "createdAt": now, "updatedAt": now},
                unique_on=BUDGET_KEY,
            )
        except errors.ConflictError as exc:
            raise self._conflict(fields) from exc
        logger.info(
            "[BUDGET] Created %s: %s %.2f for %s %s",
            document["id"],
            fields["category"],
            fields["amount"],
            fields["month"],
            fields["year"],
        )
        return Budget.model_validate(document)

    async def update(self, budget_id: str, payload: dict[str, Any]) -> Budget:
        existing = await self.store.find_one(BUDGETS, {"id": budget_id})
        if existing is None:
            raise errors.NotFoundError(errors.budget_not_found(budget_id))

        merged = {key: existing.get(key) for key in _UPDATABLE_FIELDS}
        for key in _UPDATABLE_FIELDS:
            if payload.get(key) is not None:
                merged[key] = payload[key]
        fields = build_budget_fields(merged)

        try:
            document = await self.store.update(
                BUDGETS,
                budget_id,
                {**fields, "updatedAt": utcnow_iso()},
                unique_on=BUDGET_KEY,
            )
        except errors.ConflictError as exc:
            raise self._conflict(fields) from exc
        if document is None:
            raise errors.NotFoundError(errors.budget_not_found(budget_id))
        logger.info("[BUDGET] Updated %s", budget_id)
        return Budget.model_validate(document)

    async def delete(self, budget_id: str) -> None:
        if not await self.store.delete(BUDGETS, budget_id):
            raise errors.NotFoundError(errors.budget_not_found(budget_id))
        logger.info("[BUDGET] Deleted %s", budget_id)
