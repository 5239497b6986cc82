from typing import Annotated

from fastapi import APIRouter, Depends

from finance_tracker.api.dependencies import get_budget_service, get_reporting_service
from finance_tracker.api.schemas import BudgetPayload
from finance_tracker.models import Budget, BudgetOverview
from finance_tracker.services.budgeting import BudgetService
from finance_tracker.services.reporting import ReportingService

router = APIRouter(prefix="/api/budgets", tags=["budgets"])


@router.get("", response_model=list[Budget])
async def list_budgets(
    service: Annotated[BudgetService, Depends(get_budget_service)],
    month: str | None = None,
    year: int | None = None,
) -> list[Budget]:
    return await service.get_all(month=month, year=year)


@router.post("", response_model=Budget, status_code=201)
async def create_budget(
    payload: BudgetPayload,
    service: Annotated[BudgetService, Depends(get_budget_service)],
) -> Budget:
    return await service.create(payload.model_dump())


@router.get("/progress")
async def budget_progress(
    reporting: Annotated[ReportingService, Depends(get_reporting_service)],
    month: str | None = None,
    year: int | None = None,
) -> dict[str, dict[str, float]]:
    return await reporting.get_budget_progress(month=month, year=year)


@router.get("/overview", response_model=BudgetOverview)
async def budget_overview(
    reporting: Annotated[ReportingService, Depends(get_reporting_service)],
    month: str | None = None,
    year: int | None = None,
) -> BudgetOverview:
    return await reporting.get_budget_overview(month=month, year=year)


@router.put("/{budget_id}", response_model=Budget)
async def update_budget(
    budget_id: str,
    payload: BudgetPayload,
    service: Annotated[BudgetService, Depends(get_budget_service)],
) -> Budget:
    return await service.update(budget_id, payload.model_dump())


@router.delete("/{budget_id}")
async def delete_budget(
    budget_id: str,
    service: Annotated[BudgetService, Depends(get_budget_service)],
) -> dict[str, bool]:
    await service.delete(budget_id)
    return {"success": True}
