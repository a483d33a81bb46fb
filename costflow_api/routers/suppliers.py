"""
Supplier management endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from costflow_api.routers._common import PaginatedResponse, Pagination, get_pagination
from costflow_api.services.domain import SupplierService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.schemas import (
    DeleteOutput,
    SupplierCreate,
    SupplierOutput,
    SupplierUpdate,
)


router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.get("")
def list_suppliers(
    search: str | None = None,
    is_active: bool | None = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict:
    """List suppliers by name, optionally filtered by a search term and active flag."""
    items, total = SupplierService(db).list_suppliers(
        search=search,
        is_active=is_active,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return PaginatedResponse(items=items, pagination=pagination, total=total).to_dict()


@router.get("/{supplier_id}", response_model=SupplierOutput)
def get_supplier(supplier_id: int, db: Session = Depends(get_db)) -> SupplierOutput:
    return SupplierService(db).get_by_id(supplier_id)


@router.post("", response_model=SupplierOutput, status_code=status.HTTP_201_CREATED)
def create_supplier(body: SupplierCreate, db: Session = Depends(get_db)) -> SupplierOutput:
    return SupplierService(db).create(body.model_dump())


@router.put("/{supplier_id}", response_model=SupplierOutput)
def update_supplier(
    supplier_id: int,
    body: SupplierUpdate,
    db: Session = Depends(get_db),
) -> SupplierOutput:
    return SupplierService(db).update(supplier_id, body.model_dump(exclude_unset=True))


@router.delete("/{supplier_id}", response_model=DeleteOutput)
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)) -> DeleteOutput:
    """Deactivate a supplier that still has materials, delete it otherwise."""
    outcome = SupplierService(db).delete(supplier_id)
    return DeleteOutput(message=f"Supplier {outcome}", outcome=outcome)
