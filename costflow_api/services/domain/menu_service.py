"""
Menu Item, Menu Pricing and Recipe Services.

Usage:
    from costflow_api.services.domain import MenuItemService, RecipeService

    item = MenuItemService(db).create({...})
    RecipeService(db).add_detail(item.id, {"raw_material_id": 3, "quantity": 0.5, "unit": "kg"})
    RecipeService(db).duplicate(item.id, target_menu_item_id=8)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from costflow_api.models import MenuItem, MenuPricing, ProductionLog, RawMaterial, RecipeDetail
from costflow_api.models.base import utcnow
from costflow_api.services.base_service import BaseCRUDService, BaseService
from costflow_api.services.crud.repository import BaseRepository, search_filter
from costflow_api.services.validation import (
    validate_menu_item,
    validate_menu_pricing,
    validate_recipe_detail,
)
from costflow_shared.config.logging import get_logger
from costflow_shared.utils.exceptions import InvalidInputError, NotFoundError
from costflow_shared.utils.schemas import MenuItemOutput, MenuPricingOutput, RecipeDetailOutput

logger = get_logger(__name__)


class MenuItemService(BaseCRUDService[MenuItem, MenuItemOutput]):
    """
    Business rules:
    - Menu item code is unique
    - standard_portion is at least 1
    - Items with production history are deactivated, not deleted
    - Selling prices are append-only; the latest effective_date is current
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=MenuItem,
            output_schema=MenuItemOutput,
            entity_name="Menu item",
            code_field="code",
            dependent_column=ProductionLog.menu_item_id,
        )
        self._pricing_repo = BaseRepository(MenuPricing, db)

    def list_menu_items(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> tuple[list[MenuItemOutput], int]:
        filters = []
        cond = search_filter(search, MenuItem.name, MenuItem.code)
        if cond is not None:
            filters.append(cond)
        if category:
            filters.append(MenuItem.category == category)

        return self.list_page(
            filters=filters,
            is_active=is_active,
            limit=limit,
            offset=offset,
            order_by=MenuItem.name,
        )

    def list_categories(self) -> list[str]:
        return self._repo.distinct_values(MenuItem.category)

    # =========================================================================
    # Pricing
    # =========================================================================

    def list_pricing(self, menu_item_id: int) -> list[MenuPricingOutput]:
        """Price history, newest first."""
        self.get_entity(menu_item_id)
        rows = self._pricing_repo.find_all(
            filters=[MenuPricing.menu_item_id == menu_item_id],
            order_by=[MenuPricing.effective_date.desc(), MenuPricing.id.desc()],
        )
        return [MenuPricingOutput.model_validate(r) for r in rows]

    def add_pricing(self, menu_item_id: int, data: dict[str, Any]) -> MenuPricingOutput:
        self.get_entity(menu_item_id)
        validate_menu_pricing(data)

        pricing = MenuPricing(
            menu_item_id=menu_item_id,
            selling_price=data["selling_price"],
            effective_date=data.get("effective_date") or utcnow(),
            notes=data.get("notes"),
        )
        self._pricing_repo.add(pricing)
        self._commit("create menu pricing", menu_item_id=menu_item_id)
        self._db.refresh(pricing)

        logger.info(
            "Selling price set", menu_item_id=menu_item_id, selling_price=pricing.selling_price
        )
        return MenuPricingOutput.model_validate(pricing)

    def current_selling_price(self, menu_item_id: int) -> float:
        """Latest selling price, 0 when the item was never priced."""
        pricing = self._pricing_repo.find_latest(
            MenuPricing.effective_date,
            filters=[MenuPricing.menu_item_id == menu_item_id],
        )
        return pricing.selling_price if pricing else 0.0

    # =========================================================================
    # Validation Hooks
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> None:
        validate_menu_item(data)

    def _validate_update(self, entity: MenuItem, data: dict[str, Any]) -> None:
        validate_menu_item(data)


class RecipeService(BaseService[RecipeDetail]):
    """
    Ingredient lines of a menu item's recipe.

    Recipe rows are hard-deleted; nothing references them.
    """

    def __init__(self, db: Session):
        super().__init__(db, RecipeDetail)
        self._menu_repo = BaseRepository(MenuItem, db)
        self._material_repo = BaseRepository(RawMaterial, db)

    def _require_menu_item(self, menu_item_id: int) -> MenuItem:
        menu_item = self._menu_repo.find_by_id(menu_item_id)
        if menu_item is None:
            raise NotFoundError("Menu item", menu_item_id)
        return menu_item

    def _require_material(self, material_id: int) -> None:
        if not self._material_repo.exists(material_id):
            raise NotFoundError("Material", material_id)

    def _require_detail(self, menu_item_id: int, detail_id: int) -> RecipeDetail:
        detail = self._repo.find_one_by(
            RecipeDetail.id == detail_id,
            RecipeDetail.menu_item_id == menu_item_id,
        )
        if detail is None:
            raise NotFoundError("Recipe detail", detail_id, menu_item_id=menu_item_id)
        return detail

    def details_for(self, menu_item_id: int) -> list[RecipeDetail]:
        """Ordered ingredient rows with their materials loaded."""
        return list(
            self._repo.find_all(
                filters=[RecipeDetail.menu_item_id == menu_item_id],
                order_by=[RecipeDetail.sequence, RecipeDetail.id],
                options=[selectinload(RecipeDetail.raw_material)],
            )
        )

    def list_details(self, menu_item_id: int) -> list[RecipeDetailOutput]:
        self._require_menu_item(menu_item_id)
        return [RecipeDetailOutput.model_validate(d) for d in self.details_for(menu_item_id)]

    def add_detail(self, menu_item_id: int, data: dict[str, Any]) -> RecipeDetailOutput:
        """
        Raises:
            NotFoundError: If the menu item or material does not exist.
            InvalidInputError: If quantity or unit is invalid.
        """
        self._require_menu_item(menu_item_id)
        validate_recipe_detail(data)
        self._require_material(data["raw_material_id"])

        sequence = data.get("sequence")
        if sequence is None:
            sequence = self._next_sequence(menu_item_id)

        detail = RecipeDetail(
            menu_item_id=menu_item_id,
            raw_material_id=data["raw_material_id"],
            quantity=data["quantity"],
            unit=data["unit"],
            sequence=sequence,
            notes=data.get("notes"),
        )
        self._repo.add(detail)
        self._commit("add recipe ingredient", menu_item_id=menu_item_id)
        self._db.refresh(detail)
        return RecipeDetailOutput.model_validate(detail)

    def update_detail(
        self, menu_item_id: int, detail_id: int, data: dict[str, Any]
    ) -> RecipeDetailOutput:
        detail = self._require_detail(menu_item_id, detail_id)
        validate_recipe_detail(data)
        if data.get("raw_material_id") is not None:
            self._require_material(data["raw_material_id"])

        for field_name, value in data.items():
            if field_name == "sequence" and value is None:
                continue
            setattr(detail, field_name, value)

        self._commit("update recipe ingredient", detail_id=detail_id)
        self._db.refresh(detail)
        return RecipeDetailOutput.model_validate(detail)

    def delete_detail(self, menu_item_id: int, detail_id: int) -> None:
        detail = self._require_detail(menu_item_id, detail_id)
        self._repo.delete(detail)
        self._commit("remove recipe ingredient", detail_id=detail_id)

    def duplicate(self, source_menu_item_id: int, target_menu_item_id: int | None) -> int:
        """
        Copy every ingredient row of one recipe onto another menu item.

        Rows are appended to the target's existing recipe.

        Returns:
            Number of rows copied.
        """
        if target_menu_item_id is None:
            raise InvalidInputError.single(
                "target_menu_item_id", "Target menu item ID is required"
            )
        self._require_menu_item(source_menu_item_id)
        self._require_menu_item(target_menu_item_id)

        copies = [
            RecipeDetail(
                menu_item_id=target_menu_item_id,
                raw_material_id=row.raw_material_id,
                quantity=row.quantity,
                unit=row.unit,
                sequence=row.sequence,
                notes=row.notes,
            )
            for row in self.details_for(source_menu_item_id)
        ]
        self._repo.add_all(copies)
        self._commit(
            "duplicate recipe",
            source_menu_item_id=source_menu_item_id,
            target_menu_item_id=target_menu_item_id,
        )

        logger.info(
            "Recipe duplicated",
            source_menu_item_id=source_menu_item_id,
            target_menu_item_id=target_menu_item_id,
            count=len(copies),
        )
        return len(copies)

    def _next_sequence(self, menu_item_id: int) -> int:
        max_sequence = self._db.scalar(
            select(func.max(RecipeDetail.sequence)).where(
                RecipeDetail.menu_item_id == menu_item_id
            )
        )
        return (max_sequence or 0) + 1
