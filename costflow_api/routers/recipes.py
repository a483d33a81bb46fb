"""
Recipes router.
Ingredient lines (recipe details) of a menu item.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from costflow_api.services.domain import RecipeService
from costflow_shared.infrastructure.db import get_db
from costflow_shared.utils.schemas import (
    MessageOutput,
    RecipeDetailCreate,
    RecipeDetailOutput,
    RecipeDetailUpdate,
    RecipeDuplicateOutput,
    RecipeDuplicateRequest,
)


router = APIRouter(prefix="/api/recipes", tags=["recipes"])


@router.get("/{menu_item_id}/details", response_model=list[RecipeDetailOutput])
def list_details(menu_item_id: int, db: Session = Depends(get_db)) -> list[RecipeDetailOutput]:
    """Ingredient lines ordered by sequence."""
    return RecipeService(db).list_details(menu_item_id)


@router.post(
    "/{menu_item_id}/details",
    response_model=RecipeDetailOutput,
    status_code=status.HTTP_201_CREATED,
)
def add_detail(
    menu_item_id: int,
    body: RecipeDetailCreate,
    db: Session = Depends(get_db),
) -> RecipeDetailOutput:
    """Add an ingredient line. Without a sequence it is appended at the end."""
    return RecipeService(db).add_detail(menu_item_id, body.model_dump())


@router.put("/{menu_item_id}/details/{detail_id}", response_model=RecipeDetailOutput)
def update_detail(
    menu_item_id: int,
    detail_id: int,
    body: RecipeDetailUpdate,
    db: Session = Depends(get_db),
) -> RecipeDetailOutput:
    return RecipeService(db).update_detail(
        menu_item_id, detail_id, body.model_dump(exclude_unset=True)
    )


@router.delete("/{menu_item_id}/details/{detail_id}", response_model=MessageOutput)
def delete_detail(
    menu_item_id: int,
    detail_id: int,
    db: Session = Depends(get_db),
) -> MessageOutput:
    RecipeService(db).delete_detail(menu_item_id, detail_id)
    return MessageOutput(message="Recipe detail deleted")


@router.post("/{menu_item_id}/duplicate", response_model=RecipeDuplicateOutput)
def duplicate_recipe(
    menu_item_id: int,
    body: RecipeDuplicateRequest,
    db: Session = Depends(get_db),
) -> RecipeDuplicateOutput:
    """Copy this menu item's recipe onto the target menu item."""
    count = RecipeService(db).duplicate(menu_item_id, body.target_menu_item_id)
    return RecipeDuplicateOutput(message="Recipe duplicated", count=count)
