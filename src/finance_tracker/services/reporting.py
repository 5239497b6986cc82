from datetime import datetime

from finance_tracker.domain.analytics import build_analytics
from finance_tracker.domain.budgets import budget_progress_map, summarize_budgets
from finance_tracker.domain.timefmt import month_name, month_number
from finance_tracker.logger import get_logger
from finance_tracker.models import Analytics, BudgetOverview
from finance_tracker.services.budgeting import BudgetService
from finance_tracker.services.ledger import TransactionService

logger = get_logger(__name__)


def resolve_period(month: str | None, year: int | None, now: datetime) -> tuple[str, int]:
    """Requested month/year, defaulting each part to the current one."""
    number = month_number(month) if month else now.month
    resolved_month = month_name(number) if number else str(month)
    return resolved_month, year if year is not None else now.year


class ReportingService:
    """Fetches fresh data for every call and hands it to the pure aggregators."""

    def __init__(self, transactions: TransactionService, budgets: BudgetService) -> None:
        self.transactions = transactions
        self.budgets = budgets

    async def get_analytics(self, now: datetime | None = None) -> Analytics:
        now = now or datetime.now()
        transactions = await self.transactions.get_all()
        analytics = build_analytics(transactions, now=now)
        logger.debug(
            "[ANALYTICS] %d transactions, expenses=%.2f income=%.2f",
            analytics.total_transactions,
            analytics.total_expenses,
            analytics.total_income,
        )
        return analytics

    async def get_budget_progress(
        self,
        month: str | None = None,
        year: int | None = None,
        now: datetime | None = None,
    ) -> dict[str, dict[str, float]]:
        now = now or datetime.now()
        month, year = resolve_period(month, year, now)
        budgets = await self.budgets.get_all(month=month, year=year)
        transactions = await self.transactions.get_all()
        return budget_progress_map(budgets, transactions, now=now)

    async def get_budget_overview(
        self,
        month: str | None = None,
        year: int | None = None,
        now: datetime | None = None,
    ) -> BudgetOverview:
        now = now or datetime.now()
        month, year = resolve_period(month, year, now)
        budgets = await self.budgets.get_all(month=month, year=year)
        transactions = await self.transactions.get_all()
        overview = summarize_budgets(budgets, transactions, now=now, month=month, year=year)
        logger.debug(
            "[ANALYTICS] Budget overview %s %s: %.2f of %.2f (%s)",
            month,
            year,
            overview.total_spent,
            overview.total_budget,
            overview.status,
        )
        return overview
