"""
Cost Standard Service.

Read → compute → append around the pure cost standard calculator.
Each calculation appends a new CostStandard; existing rows are never
recomputed, so history keeps the costs as they were when calculated.

Usage:
    from costflow_api.services.domain import CostStandardService

    standard, breakdown = CostStandardService(db).calculate(menu_item_id)
    breakdown.rounded()["cost_per_portion"]
"""

from __future__ import annotations

from sqlalchemy.orm import Session, selectinload

from costflow_api.models import CostStandard, MenuItem
from costflow_api.models.base import utcnow
from costflow_api.services.base_service import BaseService
from costflow_api.services.costing import CostStandardBreakdown, calculate_cost_standard
from costflow_api.services.crud.repository import BaseRepository
from costflow_api.services.domain.menu_service import RecipeService
from costflow_api.services.domain.settings_service import (
    BusinessSettingsProvider,
    OverheadPolicyProvider,
    OverheadPolicyService,
    SettingsService,
)
from costflow_shared.config.logging import costing_logger as logger
from costflow_shared.config.settings import settings
from costflow_shared.utils.exceptions import MissingCostStandardError, NotFoundError


class CostStandardService(BaseService[CostStandard]):
    """
    Business rules:
    - Labor rate and overhead policy are read fresh for every calculation
    - The current standard is the one with the latest effective_date
    """

    def __init__(
        self,
        db: Session,
        *,
        settings_provider: BusinessSettingsProvider | None = None,
        overhead_provider: OverheadPolicyProvider | None = None,
    ):
        super().__init__(db, CostStandard)
        self._menu_repo = BaseRepository(MenuItem, db)
        self._settings_provider = settings_provider or SettingsService(db)
        self._overhead_provider = overhead_provider or OverheadPolicyService(db)

    def calculate(self, menu_item_id: int) -> tuple[CostStandard, CostStandardBreakdown]:
        """
        Compute and persist a new cost standard for the menu item.

        Raises:
            NotFoundError: If the menu item does not exist.
            InvalidMaterialYieldError: If an ingredient has a zero yield.
        """
        menu_item = self._menu_repo.find_by_id(menu_item_id)
        if menu_item is None:
            raise NotFoundError("Menu item", menu_item_id)

        recipe = RecipeService(self._db).details_for(menu_item_id)
        breakdown = calculate_cost_standard(
            menu_item,
            recipe,
            self._settings_provider.current_labor_rate(),
            self._overhead_provider.current_overhead_config(),
        )

        standard = CostStandard(
            menu_item_id=menu_item_id,
            effective_date=utcnow(),
            material_cost=breakdown.material_cost,
            labor_cost=breakdown.labor_cost,
            overhead_cost=breakdown.overhead_cost,
            total_cost=breakdown.total_cost,
            cost_per_portion=breakdown.cost_per_portion,
        )
        self._repo.add(standard)
        self._commit("save cost standard", menu_item_id=menu_item_id)
        self._db.refresh(standard)

        logger.info(
            "Cost standard calculated",
            menu_item_id=menu_item_id,
            ingredients=len(recipe),
            total_cost=breakdown.total_cost,
            cost_per_portion=breakdown.cost_per_portion,
            allocation_method=breakdown.allocation_method,
        )
        return standard, breakdown

    def latest_for(self, menu_item_id: int) -> CostStandard | None:
        return self._repo.find_latest(
            CostStandard.effective_date,
            filters=[CostStandard.menu_item_id == menu_item_id],
            options=[selectinload(CostStandard.menu_item)],
        )

    def current(self, menu_item_id: int) -> CostStandard:
        """
        Raises:
            MissingCostStandardError: If none was ever calculated.
        """
        standard = self.latest_for(menu_item_id)
        if standard is None:
            raise MissingCostStandardError(menu_item_id)
        return standard

    def history(self, menu_item_id: int, limit: int | None = None) -> list[CostStandard]:
        """Standards for a menu item, newest first."""
        return list(
            self._repo.find_all(
                filters=[CostStandard.menu_item_id == menu_item_id],
                order_by=[CostStandard.effective_date.desc(), CostStandard.id.desc()],
                limit=limit or settings.cost_history_limit,
            )
        )
