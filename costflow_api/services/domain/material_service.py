"""
Raw Material Service.

Usage:
    from costflow_api.services.domain import MaterialService

    service = MaterialService(db)
    material = service.create({"code": "BEEF", "name": "Beef", "unit": "kg", "current_price": 120000})
    categories = service.list_categories()
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session, selectinload

from costflow_api.models import RawMaterial, RecipeDetail, Supplier, YieldTest
from costflow_api.services.base_service import BaseCRUDService
from costflow_api.services.crud.repository import BaseRepository, search_filter
from costflow_api.services.validation import validate_material
from costflow_shared.config.logging import get_logger
from costflow_shared.utils.exceptions import InvalidInputError
from costflow_shared.utils.schemas import MaterialDetailOutput, MaterialOutput, YieldTestOutput

logger = get_logger(__name__)

RECENT_YIELD_TESTS = 5


class MaterialService(BaseCRUDService[RawMaterial, MaterialOutput]):
    """
    Business rules:
    - Material code is unique
    - yield_percentage is accepted only within (0, 100]
    - Materials used by a recipe are deactivated, not deleted
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=RawMaterial,
            output_schema=MaterialOutput,
            entity_name="Material",
            code_field="code",
            dependent_column=RecipeDetail.raw_material_id,
        )

    def list_materials(
        self,
        *,
        search: str | None = None,
        category: str | None = None,
        supplier_id: int | None = None,
        is_active: bool | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> tuple[list[MaterialOutput], int]:
        filters = []
        cond = search_filter(search, RawMaterial.name, RawMaterial.code)
        if cond is not None:
            filters.append(cond)
        if category:
            filters.append(RawMaterial.category == category)
        if supplier_id is not None:
            filters.append(RawMaterial.supplier_id == supplier_id)

        return self.list_page(
            filters=filters,
            is_active=is_active,
            limit=limit,
            offset=offset,
            order_by=RawMaterial.name,
            options=[selectinload(RawMaterial.supplier)],
        )

    def get_detail(self, material_id: int) -> MaterialDetailOutput:
        """Material with its supplier and five most recent yield tests."""
        material = self.get_entity(material_id)
        tests = BaseRepository(YieldTest, self._db).find_all(
            filters=[YieldTest.raw_material_id == material_id],
            order_by=[YieldTest.test_date.desc(), YieldTest.id.desc()],
            limit=RECENT_YIELD_TESTS,
        )
        output = MaterialDetailOutput.model_validate(material)
        output.recent_yield_tests = [YieldTestOutput.model_validate(t) for t in tests]
        return output

    def list_categories(self) -> list[str]:
        """Distinct categories of active materials, sorted."""
        return self._repo.distinct_values(RawMaterial.category)

    def _validate_create(self, data: dict[str, Any]) -> None:
        validate_material(data)
        self._check_supplier(data)

    def _validate_update(self, entity: RawMaterial, data: dict[str, Any]) -> None:
        validate_material(data)
        self._check_supplier(data)

    def _after_update(self, entity: RawMaterial, changes: dict[str, Any]) -> None:
        if "current_price" in changes or "yield_percentage" in changes:
            logger.info(
                "Material costing inputs changed",
                material_id=entity.id,
                current_price=entity.current_price,
                yield_percentage=entity.yield_percentage,
            )

    def _check_supplier(self, data: dict[str, Any]) -> None:
        supplier_id = data.get("supplier_id")
        if supplier_id is not None and not BaseRepository(Supplier, self._db).exists(supplier_id):
            raise InvalidInputError.single(
                "supplier_id", f"Supplier with ID {supplier_id} not found"
            )
