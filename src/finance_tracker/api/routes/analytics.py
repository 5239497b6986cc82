from typing import Annotated

from fastapi import APIRouter, Depends

from finance_tracker.api.dependencies import get_reporting_service
from finance_tracker.models import CATEGORIES, Analytics
from finance_tracker.services.reporting import ReportingService

router = APIRouter(prefix="/api", tags=["analytics"])


@router.get("/analytics", response_model=Analytics)
async def get_analytics(
    reporting: Annotated[ReportingService, Depends(get_reporting_service)],
) -> Analytics:
    return await reporting.get_analytics()


@router.get("/categories")
async def get_categories() -> list[str]:
    return list(CATEGORIES)
