import os
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from finance_tracker.api.dependencies import get_reporting_service
from finance_tracker.core import settings
from finance_tracker.domain.timefmt import format_currency, format_date
from finance_tracker.services.reporting import ReportingService

router = APIRouter()

templates_dir = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "web", "templates")
)
templates = Jinja2Templates(directory=templates_dir)
templates.env.filters["currency"] = lambda amount: format_currency(amount, settings.CURRENCY_CODE)
templates.env.filters["display_date"] = format_date


@router.get("/", response_class=HTMLResponse)
async def dashboard(
    request: Request,
    reporting: Annotated[ReportingService, Depends(get_reporting_service)],
) -> HTMLResponse:
    now = datetime.now()
    analytics = await reporting.get_analytics(now=now)
    overview = await reporting.get_budget_overview(now=now)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "analytics": analytics,
            "overview": overview,
            "balance": analytics.total_income - analytics.total_expenses,
        },
    )
