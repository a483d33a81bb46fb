"""
Production Log Service.

Production runs and the material they consumed. Detail subtotals are
fixed at write time (quantity_used x unit_price) so later price changes
never rewrite what a run actually cost.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session, selectinload

from costflow_api.models import MenuItem, ProductionLog, ProductionLogDetail, RawMaterial
from costflow_api.services.base_service import BaseCRUDService
from costflow_api.services.crud.repository import BaseRepository, date_range_filters
from costflow_api.services.validation import validate_production_detail, validate_production_log
from costflow_shared.config.logging import get_logger
from costflow_shared.utils.exceptions import NotFoundError
from costflow_shared.utils.schemas import (
    ProductionDetailOutput,
    ProductionLogDetailOutput,
    ProductionLogOutput,
)

logger = get_logger(__name__)

# Columns that may be cleared with an explicit null
NULLABLE_LOG_FIELDS = {"portions_sold", "labor_hours_actual", "notes"}


class ProductionLogService(BaseCRUDService[ProductionLog, ProductionLogOutput]):
    """
    Business rules:
    - A run belongs to an existing menu item and produces at least one portion
    - Runs and their details are hard-deleted; variance records go with them
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=ProductionLog,
            output_schema=ProductionLogOutput,
            entity_name="Production log",
        )
        self._detail_repo = BaseRepository(ProductionLogDetail, db)

    def list_logs(
        self,
        *,
        menu_item_id: int | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> tuple[list[ProductionLogOutput], int]:
        filters = date_range_filters(ProductionLog.production_date, start_date, end_date)
        if menu_item_id is not None:
            filters.append(ProductionLog.menu_item_id == menu_item_id)

        return self.list_page(
            filters=filters,
            limit=limit,
            offset=offset,
            order_by=[ProductionLog.production_date.desc(), ProductionLog.id.desc()],
            options=[selectinload(ProductionLog.menu_item)],
        )

    def get_detail(self, log_id: int) -> ProductionLogDetailOutput:
        log = self.get_entity(
            log_id,
            options=[
                selectinload(ProductionLog.menu_item),
                selectinload(ProductionLog.details).selectinload(ProductionLogDetail.raw_material),
            ],
        )
        return ProductionLogDetailOutput.model_validate(log)

    def update(self, entity_id: int, data: dict[str, Any]) -> ProductionLogOutput:
        data = {
            k: v for k, v in data.items() if v is not None or k in NULLABLE_LOG_FIELDS
        }
        return super().update(entity_id, data)

    # =========================================================================
    # Material usage
    # =========================================================================

    def add_detail(self, log_id: int, data: dict[str, Any]) -> ProductionDetailOutput:
        """
        Record material used by a run, storing subtotal = quantity_used x unit_price.

        Raises:
            NotFoundError: If the run or material does not exist.
        """
        self.get_entity(log_id)
        validate_production_detail(data)
        self._require_material(data["raw_material_id"])

        detail = ProductionLogDetail(
            production_log_id=log_id,
            raw_material_id=data["raw_material_id"],
            quantity_used=data["quantity_used"],
            unit=data["unit"],
            unit_price=data["unit_price"],
            subtotal=data["quantity_used"] * data["unit_price"],
        )
        self._detail_repo.add(detail)
        self._commit("add production material usage", production_log_id=log_id)
        self._db.refresh(detail)
        return ProductionDetailOutput.model_validate(detail)

    def update_detail(
        self, log_id: int, detail_id: int, data: dict[str, Any]
    ) -> ProductionDetailOutput:
        detail = self._require_detail(log_id, detail_id)
        validate_production_detail(data)
        if data.get("raw_material_id") is not None:
            self._require_material(data["raw_material_id"])

        for field_name, value in data.items():
            if value is not None:
                setattr(detail, field_name, value)
        detail.subtotal = detail.quantity_used * detail.unit_price

        self._commit("update production material usage", detail_id=detail_id)
        self._db.refresh(detail)
        return ProductionDetailOutput.model_validate(detail)

    def delete_detail(self, log_id: int, detail_id: int) -> None:
        detail = self._require_detail(log_id, detail_id)
        self._detail_repo.delete(detail)
        self._commit("remove production material usage", detail_id=detail_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> None:
        validate_production_log(data)
        self._require_menu_item(data["menu_item_id"])

    def _validate_update(self, entity: ProductionLog, data: dict[str, Any]) -> None:
        validate_production_log(data)
        if data.get("menu_item_id") is not None:
            self._require_menu_item(data["menu_item_id"])

    def _require_menu_item(self, menu_item_id: int) -> None:
        if not BaseRepository(MenuItem, self._db).exists(menu_item_id):
            raise NotFoundError("Menu item", menu_item_id)

    def _require_material(self, material_id: int) -> None:
        if not BaseRepository(RawMaterial, self._db).exists(material_id):
            raise NotFoundError("Material", material_id)

    def _require_detail(self, log_id: int, detail_id: int) -> ProductionLogDetail:
        detail = self._detail_repo.find_one_by(
            ProductionLogDetail.id == detail_id,
            ProductionLogDetail.production_log_id == log_id,
        )
        if detail is None:
            raise NotFoundError("Production log detail", detail_id, production_log_id=log_id)
        return detail
