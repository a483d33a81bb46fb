"""
Production log endpoints.
A log records one production run; its details record the material consumed.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from costflow_api.routers._common import PaginatedResponse, Pagination, get_pagination
from costflow_api.services.domain import ProductionLogService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.schemas import (
    DeleteOutput,
    MessageOutput,
    ProductionDetailCreate,
    ProductionDetailOutput,
    ProductionDetailUpdate,
    ProductionLogCreate,
    ProductionLogDetailOutput,
    ProductionLogOutput,
    ProductionLogUpdate,
)


router = APIRouter(prefix="/api/production-logs", tags=["production-logs"])


@router.get("")
def list_production_logs(
    menu_item_id: int | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict:
    items, total = ProductionLogService(db).list_logs(
        menu_item_id=menu_item_id,
        start_date=start_date,
        end_date=end_date,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return PaginatedResponse(items=items, pagination=pagination, total=total).to_dict()


@router.get("/{log_id}", response_model=ProductionLogDetailOutput)
def get_production_log(log_id: int, db: Session = Depends(get_db)) -> ProductionLogDetailOutput:
    """Production run with its material usage."""
    return ProductionLogService(db).get_detail(log_id)


@router.post("", response_model=ProductionLogOutput, status_code=status.HTTP_201_CREATED)
def create_production_log(
    body: ProductionLogCreate,
    db: Session = Depends(get_db),
) -> ProductionLogOutput:
    return ProductionLogService(db).create(body.model_dump())


@router.put("/{log_id}", response_model=ProductionLogOutput)
def update_production_log(
    log_id: int,
    body: ProductionLogUpdate,
    db: Session = Depends(get_db),
) -> ProductionLogOutput:
    return ProductionLogService(db).update(log_id, body.model_dump(exclude_unset=True))


@router.delete("/{log_id}", response_model=DeleteOutput)
def delete_production_log(log_id: int, db: Session = Depends(get_db)) -> DeleteOutput:
    """Delete a run together with its details and variance records."""
    outcome = ProductionLogService(db).delete(log_id)
    return DeleteOutput(message="Production log deleted", outcome=outcome)


# =============================================================================
# Material usage
# =============================================================================


@router.post(
    "/{log_id}/details",
    response_model=ProductionDetailOutput,
    status_code=status.HTTP_201_CREATED,
)
def add_detail(
    log_id: int,
    body: ProductionDetailCreate,
    db: Session = Depends(get_db),
) -> ProductionDetailOutput:
    return ProductionLogService(db).add_detail(log_id, body.model_dump())


@router.put("/{log_id}/details/{detail_id}", response_model=ProductionDetailOutput)
def update_detail(
    log_id: int,
    detail_id: int,
    body: ProductionDetailUpdate,
    db: Session = Depends(get_db),
) -> ProductionDetailOutput:
    return ProductionLogService(db).update_detail(
        log_id, detail_id, body.model_dump(exclude_unset=True)
    )


@router.delete("/{log_id}/details/{detail_id}", response_model=MessageOutput)
def delete_detail(log_id: int, detail_id: int, db: Session = Depends(get_db)) -> MessageOutput:
    ProductionLogService(db).delete_detail(log_id, detail_id)
    return MessageOutput(message="Production log detail deleted")
