"""
Raw material endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from costflow_api.routers._common import PaginatedResponse, Pagination, get_pagination
from costflow_api.services.domain import MaterialService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.schemas import (
    DeleteOutput,
    MaterialCreate,
    MaterialDetailOutput,
    MaterialOutput,
    MaterialUpdate,
)


router = APIRouter(prefix="/api/materials", tags=["materials"])


@router.get("")
def list_materials(
    search: str | None = None,
    category: str | None = None,
    supplier_id: int | None = None,
    is_active: bool | None = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict:
    """List materials, searchable by code or name."""
    items, total = MaterialService(db).list_materials(
        search=search,
        category=category,
        supplier_id=supplier_id,
        is_active=is_active,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return PaginatedResponse(items=items, pagination=pagination, total=total).to_dict()


# Must be declared before /{material_id}
@router.get("/categories/list", response_model=list[str])
def list_categories(db: Session = Depends(get_db)) -> list[str]:
    """Distinct categories of active materials."""
    return MaterialService(db).list_categories()


@router.get("/{material_id}", response_model=MaterialDetailOutput)
def get_material(material_id: int, db: Session = Depends(get_db)) -> MaterialDetailOutput:
    """Material with its supplier and most recent yield tests."""
    return MaterialService(db).get_detail(material_id)


@router.post("", response_model=MaterialOutput, status_code=status.HTTP_201_CREATED)
def create_material(body: MaterialCreate, db: Session = Depends(get_db)) -> MaterialOutput:
    return MaterialService(db).create(body.model_dump())


@router.put("/{material_id}", response_model=MaterialOutput)
def update_material(
    material_id: int,
    body: MaterialUpdate,
    db: Session = Depends(get_db),
) -> MaterialOutput:
    return MaterialService(db).update(material_id, body.model_dump(exclude_unset=True))


@router.delete("/{material_id}", response_model=DeleteOutput)
def delete_material(material_id: int, db: Session = Depends(get_db)) -> DeleteOutput:
    """Deactivate a material used by a recipe, delete it otherwise."""
    outcome = MaterialService(db).delete(material_id)
    return DeleteOutput(message=f"Material {outcome}", outcome=outcome)
