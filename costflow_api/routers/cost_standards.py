"""
Cost standard endpoints.

Calculating appends a new standard; the current one is the latest by
effective date. Overhead policy lives here because every calculation reads it.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from costflow_api.services.domain import CostStandardService, OverheadPolicyService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.schemas import (
    CostBreakdownOutput,
    CostCalculationOutput,
    CostStandardOutput,
    CurrentCostStandardOutput,
    OverheadConfigCreate,
    OverheadConfigOutput,
)


router = APIRouter(prefix="/api/cost-standards", tags=["cost-standards"])


# =============================================================================
# Overhead policy (declared before /{menu_item_id})
# =============================================================================


@router.get("/overhead/config", response_model=OverheadConfigOutput | None)
def get_overhead_config(db: Session = Depends(get_db)) -> OverheadConfigOutput | None:
    """Current overhead policy, or null when none was configured."""
    return OverheadPolicyService(db).get_current()


@router.post(
    "/overhead/config",
    response_model=OverheadConfigOutput,
    status_code=status.HTTP_201_CREATED,
)
def create_overhead_config(
    body: OverheadConfigCreate,
    db: Session = Depends(get_db),
) -> OverheadConfigOutput:
    """Record a new overhead policy effective now."""
    return OverheadPolicyService(db).create(body.model_dump())


# =============================================================================
# Cost standards
# =============================================================================


@router.post(
    "/calculate/{menu_item_id}",
    response_model=CostCalculationOutput,
    status_code=status.HTTP_201_CREATED,
)
def calculate_cost_standard(
    menu_item_id: int,
    db: Session = Depends(get_db),
) -> CostCalculationOutput:
    """
    Compute the menu item's cost from its recipe, current material prices,
    labor rate and overhead policy, and store it as the new standard.
    """
    standard, breakdown = CostStandardService(db).calculate(menu_item_id)
    return CostCalculationOutput(
        cost_standard=CostStandardOutput.model_validate(standard),
        breakdown=CostBreakdownOutput(**breakdown.rounded()),
    )


@router.get("/{menu_item_id}", response_model=CurrentCostStandardOutput)
def get_current_cost_standard(
    menu_item_id: int,
    db: Session = Depends(get_db),
) -> CurrentCostStandardOutput:
    return CurrentCostStandardOutput.model_validate(CostStandardService(db).current(menu_item_id))


@router.get("/{menu_item_id}/history", response_model=list[CostStandardOutput])
def get_cost_standard_history(
    menu_item_id: int,
    db: Session = Depends(get_db),
) -> list[CostStandardOutput]:
    """Most recent standards first."""
    return [
        CostStandardOutput.model_validate(s)
        for s in CostStandardService(db).history(menu_item_id)
    ]
