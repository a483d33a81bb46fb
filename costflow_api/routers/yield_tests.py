"""
Yield test endpoints.
Creating or editing a test also updates the material's yield percentage.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from costflow_api.routers._common import PaginatedResponse, Pagination, get_pagination
from costflow_api.services.domain import YieldTestService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.schemas import (
    DeleteOutput,
    YieldAverageOutput,
    YieldTestCreate,
    YieldTestOutput,
    YieldTestUpdate,
)


router = APIRouter(prefix="/api/yield-tests", tags=["yield-tests"])


@router.get("")
def list_yield_tests(
    raw_material_id: int | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict:
    """List tests newest first, optionally for one material and date range."""
    items, total = YieldTestService(db).list_tests(
        raw_material_id=raw_material_id,
        start_date=start_date,
        end_date=end_date,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return PaginatedResponse(items=items, pagination=pagination, total=total).to_dict()


# Must be declared before /{test_id}
@router.get("/material/{material_id}/average", response_model=YieldAverageOutput)
def get_average_yield(material_id: int, db: Session = Depends(get_db)) -> YieldAverageOutput:
    """Average yield over the material's most recent tests."""
    return YieldTestService(db).average_yield(material_id)


@router.get("/{test_id}", response_model=YieldTestOutput)
def get_yield_test(test_id: int, db: Session = Depends(get_db)) -> YieldTestOutput:
    return YieldTestService(db).get_by_id(test_id)


@router.post("", response_model=YieldTestOutput, status_code=status.HTTP_201_CREATED)
def create_yield_test(body: YieldTestCreate, db: Session = Depends(get_db)) -> YieldTestOutput:
    return YieldTestService(db).create(body.model_dump())


@router.put("/{test_id}", response_model=YieldTestOutput)
def update_yield_test(
    test_id: int,
    body: YieldTestUpdate,
    db: Session = Depends(get_db),
) -> YieldTestOutput:
    return YieldTestService(db).update(test_id, body.model_dump(exclude_unset=True))


@router.delete("/{test_id}", response_model=DeleteOutput)
def delete_yield_test(test_id: int, db: Session = Depends(get_db)) -> DeleteOutput:
    """Delete a test. The material keeps its current yield."""
    outcome = YieldTestService(db).delete(test_id)
    return DeleteOutput(message="Yield test deleted", outcome=outcome)
