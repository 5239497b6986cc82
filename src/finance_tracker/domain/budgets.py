from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from finance_tracker.domain.errors import ValidationError
from finance_tracker.domain.timefmt import month_name, month_number
from finance_tracker.domain.transactions import parse_amount
from finance_tracker.models import (
    CATEGORIES,
    Budget,
    BudgetOverview,
    BudgetProgress,
    BudgetStatus,
    Transaction,
)

WARNING_THRESHOLD = 80.0
DANGER_THRESHOLD = 100.0

MIN_YEAR = 1900
MAX_YEAR = 9999

MONTH_ERROR = "Month must be a full month name, e.g. January"


def _parse_year(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _canonical_month(value: Any) -> str | None:
    number = month_number(value) if isinstance(value, str) else None
    return month_name(number) if number else None


def validate_budget(payload: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    if payload.get("category") not in CATEGORIES:
        errors.append("Category must be one of: " + ", ".join(CATEGORIES))

    amount = parse_amount(payload.get("amount"))
    if amount is None or amount <= 0:
        errors.append("Amount must be greater than 0")

    if _canonical_month(payload.get("month")) is None:
        errors.append(MONTH_ERROR)

    year = _parse_year(payload.get("year"))
    if year is None or not MIN_YEAR <= year <= MAX_YEAR:
        errors.append(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")

    return errors


def build_budget_fields(payload: dict[str, Any]) -> dict[str, Any]:
    errors = validate_budget(payload)
    if errors:
        raise ValidationError(errors)
    # "march" and "March" must collide on the uniqueness key
    month = _canonical_month(payload["month"])
    if month is None:
        raise ValidationError([MONTH_ERROR])
    return {
        "category": payload["category"],
        "amount": float(payload["amount"]),
        "month": month,
        "year": _parse_year(payload["year"]),
    }


def classify_status(percentage: float) -> BudgetStatus:
    if percentage >= DANGER_THRESHOLD:
        return "danger"
    if percentage >= WARNING_THRESHOLD:
        return "warning"
    return "success"


def _percentage(spent: float, limit: float) -> float:
    if limit <= 0 or not math.isfinite(limit):
        return 0.0
    if not math.isfinite(spent):
        return math.inf
    return spent / limit * 100


def spent_for_budget(
    budget: Budget,
    transactions: Sequence[Transaction],
    now: datetime | None = None,
) -> float:
    """Expenses in the budget's category for the current month of ``budget.year``.

    The month comes from the wall clock, not from ``budget.month``. Callers
    normally ask for the current month's budgets, where the two agree.
    """
    now = now or datetime.now()
    return sum(
        (
            t.amount
            for t in transactions
            if t.type == "expense"
            and t.category == budget.category
            and t.date.month == now.month
            and t.date.year == budget.year
        ),
        0.0,
    )


def calculate_budget_progress(
    budget: Budget,
    transactions: Sequence[Transaction],
    now: datetime | None = None,
) -> BudgetProgress:
    spent = spent_for_budget(budget, transactions, now=now)
    percentage = _percentage(spent, budget.amount)
    return BudgetProgress(
        budget_id=budget.id,
        category=budget.category,
        budget=budget.amount,
        spent=spent,
        remaining=max(0.0, budget.amount - spent),
        percentage=percentage,
        status=classify_status(percentage),
    )


def budget_progress_map(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction],
    now: datetime | None = None,
) -> dict[str, dict[str, float]]:
    result: dict[str, dict[str, float]] = {}
    for budget in budgets:
        progress = calculate_budget_progress(budget, transactions, now=now)
        result[budget.id] = {"spent": progress.spent, "percentage": progress.percentage}
    return result


def summarize_budgets(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction],
    now: datetime | None = None,
    *,
    month: str | None = None,
    year: int | None = None,
) -> BudgetOverview:
    now = now or datetime.now()
    items = [calculate_budget_progress(budget, transactions, now=now) for budget in budgets]
    total_budget = sum((budget.amount for budget in budgets), 0.0)
    total_spent = sum((item.spent for item in items), 0.0)
    percentage = _percentage(total_spent, total_budget)
    return BudgetOverview(
        month=month or month_name(now.month),
        year=year if year is not None else now.year,
        items=items,
        total_budget=total_budget,
        total_spent=total_spent,
        percentage=percentage,
        status=classify_status(percentage),
    )
