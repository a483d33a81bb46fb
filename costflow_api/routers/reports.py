"""
Reporting endpoints.
All monetary values are rounded to 2 decimals.
"""

from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from costflow_api.services.domain import ReportService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.schemas import (
    CostTrendOutput,
    DashboardOutput,
    MonthlySummaryOutput,
    ProfitabilityRowOutput,
)


router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/menu-profitability", response_model=list[ProfitabilityRowOutput])
def get_menu_profitability(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    db: Session = Depends(get_db),
) -> list[ProfitabilityRowOutput]:
    """Items that sold in the range, most profitable first."""
    rows = ReportService(db).menu_profitability(start_date, end_date)
    return [ProfitabilityRowOutput(**row.rounded()) for row in rows]


@router.get("/monthly-summary", response_model=MonthlySummaryOutput)
def get_monthly_summary(
    month: int | None = None,
    year: int | None = None,
    db: Session = Depends(get_db),
) -> MonthlySummaryOutput:
    """Revenue, cost components and profit for one calendar month (UTC)."""
    summary = ReportService(db).monthly_summary(month, year)
    return MonthlySummaryOutput(**summary.rounded())


@router.get("/cost-trends", response_model=list[CostTrendOutput])
def get_cost_trends(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    menu_item_id: int | None = None,
    db: Session = Depends(get_db),
) -> list[CostTrendOutput]:
    points = ReportService(db).cost_trends(start_date, end_date, menu_item_id)
    return [CostTrendOutput(**p.rounded()) for p in points]


@router.get("/dashboard", response_model=DashboardOutput)
def get_dashboard(db: Session = Depends(get_db)) -> DashboardOutput:
    return ReportService(db).dashboard()
