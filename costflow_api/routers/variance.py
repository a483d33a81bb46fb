"""
Variance analysis endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from costflow_api.services.domain import VarianceService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.money import round_money
from costflow_shared.utils.schemas import (
    VarianceAnalysisOutput,
    VarianceCalculationOutput,
    VarianceRecordOutput,
    VarianceSummaryOutput,
)


router = APIRouter(prefix="/api/variance-analysis", tags=["variance-analysis"])


@router.post(
    "/calculate/{production_log_id}",
    response_model=VarianceCalculationOutput,
    status_code=status.HTTP_201_CREATED,
)
def calculate_variance(
    production_log_id: int,
    db: Session = Depends(get_db),
) -> VarianceCalculationOutput:
    """
    Compare a production run with its menu item's current cost standard.
    Positive variance means the run cost more than standard (unfavorable).
    """
    record, breakdown = VarianceService(db).calculate(production_log_id)
    return VarianceCalculationOutput(
        variance_record=VarianceRecordOutput.model_validate(record),
        analysis=VarianceAnalysisOutput(**breakdown.rounded()),
    )


# Must be declared before /{menu_item_id}
@router.get("/summary", response_model=VarianceSummaryOutput)
def get_variance_summary(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    db: Session = Depends(get_db),
) -> VarianceSummaryOutput:
    """Totals over the range plus the most recent records."""
    summary = VarianceService(db).summary(start_date, end_date)
    return VarianceSummaryOutput(
        total_variance=round_money(summary.total_variance),
        average_variance_percentage=round_money(summary.average_variance_percentage),
        favorable_count=summary.favorable_count,
        unfavorable_count=summary.unfavorable_count,
        total_records=summary.total_records,
        variances=[VarianceRecordOutput.model_validate(r) for r in summary.recent],
    )


@router.get("/{menu_item_id}", response_model=list[VarianceRecordOutput])
def get_variance_history(
    menu_item_id: int,
    db: Session = Depends(get_db),
) -> list[VarianceRecordOutput]:
    return [
        VarianceRecordOutput.model_validate(r)
        for r in VarianceService(db).history(menu_item_id)
    ]
