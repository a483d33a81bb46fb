"""
Menu item endpoints, including selling price history.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from costflow_api.routers._common import PaginatedResponse, Pagination, get_pagination
from costflow_api.services.domain import MenuItemService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.schemas import (
    DeleteOutput,
    MenuItemCreate,
    MenuItemOutput,
    MenuItemUpdate,
    MenuPricingCreate,
    MenuPricingOutput,
)


router = APIRouter(prefix="/api/menu-items", tags=["menu-items"])


@router.get("")
def list_menu_items(
    search: str | None = None,
    category: str | None = None,
    is_active: bool | None = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
) -> dict:
    items, total = MenuItemService(db).list_menu_items(
        search=search,
        category=category,
        is_active=is_active,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return PaginatedResponse(items=items, pagination=pagination, total=total).to_dict()


# Must be declared before /{menu_item_id}
@router.get("/categories/list", response_model=list[str])
def list_categories(db: Session = Depends(get_db)) -> list[str]:
    return MenuItemService(db).list_categories()


@router.get("/{menu_item_id}", response_model=MenuItemOutput)
def get_menu_item(menu_item_id: int, db: Session = Depends(get_db)) -> MenuItemOutput:
    return MenuItemService(db).get_by_id(menu_item_id)


@router.post("", response_model=MenuItemOutput, status_code=status.HTTP_201_CREATED)
def create_menu_item(body: MenuItemCreate, db: Session = Depends(get_db)) -> MenuItemOutput:
    return MenuItemService(db).create(body.model_dump())


@router.put("/{menu_item_id}", response_model=MenuItemOutput)
def update_menu_item(
    menu_item_id: int,
    body: MenuItemUpdate,
    db: Session = Depends(get_db),
) -> MenuItemOutput:
    return MenuItemService(db).update(menu_item_id, body.model_dump(exclude_unset=True))


@router.delete("/{menu_item_id}", response_model=DeleteOutput)
def delete_menu_item(menu_item_id: int, db: Session = Depends(get_db)) -> DeleteOutput:
    """Deactivate a menu item with production history, delete it otherwise."""
    outcome = MenuItemService(db).delete(menu_item_id)
    return DeleteOutput(message=f"Menu item {outcome}", outcome=outcome)


# =============================================================================
# Pricing
# =============================================================================


@router.get("/{menu_item_id}/pricing", response_model=list[MenuPricingOutput])
def list_pricing(menu_item_id: int, db: Session = Depends(get_db)) -> list[MenuPricingOutput]:
    """Selling price history, newest first. The first entry is the current price."""
    return MenuItemService(db).list_pricing(menu_item_id)


@router.post(
    "/{menu_item_id}/pricing",
    response_model=MenuPricingOutput,
    status_code=status.HTTP_201_CREATED,
)
def add_pricing(
    menu_item_id: int,
    body: MenuPricingCreate,
    db: Session = Depends(get_db),
) -> MenuPricingOutput:
    return MenuItemService(db).add_pricing(menu_item_id, body.model_dump())
