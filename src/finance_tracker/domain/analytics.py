"""Analytics over the full transaction set.

Everything here is a pure function of the transactions passed in plus the
wall-clock ``now`` used to anchor the monthly series. Callers pass
transactions that went through ``transaction_from_document`` so categories
are already normalised.
"""
from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from finance_tracker.domain.timefmt import month_label, trailing_months
from finance_tracker.models import (
    DEFAULT_CATEGORY,
    Analytics,
    CategoryExpense,
    MonthlyExpense,
    Transaction,
)

TRAILING_MONTHS = 6
RECENT_TRANSACTIONS_LIMIT = 5


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _share(amount: float, total: float) -> int:
    # Sums can overflow to inf even when every amount is finite
    if total <= 0 or not math.isfinite(total):
        return 0
    return round_half_up(amount / total * 100)


def _expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.type == "expense"]


def total_by_type(transactions: Iterable[Transaction], tx_type: str) -> float:
    return sum((t.amount for t in transactions if t.type == tx_type), 0.0)


def monthly_expenses(
    transactions: Sequence[Transaction],
    now: datetime | None = None,
    months: int = TRAILING_MONTHS,
) -> list[MonthlyExpense]:
    now = now or datetime.now()
    totals: dict[tuple[int, int], float] = {}
    for t in _expenses(transactions):
        key = (t.date.year, t.date.month)
        totals[key] = totals.get(key, 0.0) + t.amount

    return [
        MonthlyExpense(month=month_label(year, month), amount=totals.get((year, month), 0.0))
        for year, month in trailing_months(now, months)
    ]


def category_breakdown(transactions: Sequence[Transaction]) -> list[CategoryExpense]:
    expenses = _expenses(transactions)
    total = sum((t.amount for t in expenses), 0.0)

    # dicts keep first-seen order, which the stable sort below relies on
    grouped: dict[str, float] = {}
    for t in expenses:
        category = t.category or DEFAULT_CATEGORY
        grouped[category] = grouped.get(category, 0.0) + t.amount

    breakdown = [
        CategoryExpense(
            category=category,
            amount=amount,
            percentage=_share(amount, total),
        )
        for category, amount in grouped.items()
    ]
    breakdown.sort(key=lambda item: item.amount, reverse=True)
    return breakdown


def recent_transactions(
    transactions: Sequence[Transaction],
    limit: int = RECENT_TRANSACTIONS_LIMIT,
) -> list[Transaction]:
    return sorted(transactions, key=lambda t: t.date, reverse=True)[:limit]


def build_analytics(transactions: Sequence[Transaction], now: datetime | None = None) -> Analytics:
    return Analytics(
        monthly_expenses=monthly_expenses(transactions, now=now),
        category_breakdown=category_breakdown(transactions),
        recent_transactions=recent_transactions(transactions),
        total_transactions=len(transactions),
        total_expenses=total_by_type(transactions, "expense"),
        total_income=total_by_type(transactions, "income"),
    )
