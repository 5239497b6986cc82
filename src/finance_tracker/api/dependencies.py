from fastapi import HTTPException, Request

from finance_tracker.services.budgeting import BudgetService
from finance_tracker.services.ledger import TransactionService
from finance_tracker.services.reporting import ReportingService


def get_transaction_service(request: Request) -> TransactionService:
    service = getattr(request.app.state, "transactions", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service


def get_budget_service(request: Request) -> BudgetService:
    service = getattr(request.app.state, "budgets", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service


def get_reporting_service(request: Request) -> ReportingService:
    service = getattr(request.app.state, "reporting", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service
