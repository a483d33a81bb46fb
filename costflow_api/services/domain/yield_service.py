"""
Yield Test Service.

Records As-Purchased / Edible-Portion measurements and keeps the owning
material's yield_percentage in step with the most recently written test.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session, selectinload

from costflow_api.models import RawMaterial, YieldTest
from costflow_api.services.base_service import BaseCRUDService
from costflow_api.services.costing import compute_yield
from costflow_api.services.crud.repository import BaseRepository, date_range_filters
from costflow_api.services.validation import validate_yield_test
from costflow_shared.config.constants import Limits
from costflow_shared.config.logging import get_logger
from costflow_shared.utils.exceptions import NotFoundError
from costflow_shared.utils.money import round_money
from costflow_shared.utils.schemas import YieldAverageOutput, YieldTestOutput

logger = get_logger(__name__)


class YieldTestService(BaseCRUDService[YieldTest, YieldTestOutput]):
    """
    Business rules:
    - yield_percentage is derived from the weights, never taken from input
    - Creating or updating a test overwrites the material's yield_percentage
      (last write wins, regardless of test_date)
    - Deleting a test leaves the material's yield unchanged
    """

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=YieldTest,
            output_schema=YieldTestOutput,
            entity_name="Yield test",
        )
        self._material_repo = BaseRepository(RawMaterial, db)

    def list_tests(
        self,
        *,
        raw_material_id: int | None = None,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> tuple[list[YieldTestOutput], int]:
        filters = date_range_filters(YieldTest.test_date, start_date, end_date)
        if raw_material_id is not None:
            filters.append(YieldTest.raw_material_id == raw_material_id)

        return self.list_page(
            filters=filters,
            limit=limit,
            offset=offset,
            order_by=[YieldTest.test_date.desc(), YieldTest.id.desc()],
            options=[selectinload(YieldTest.raw_material)],
        )

    def create(self, data: dict[str, Any]) -> YieldTestOutput:
        """
        Record a test and propagate its yield to the material.

        Raises:
            InvalidInputError: If ap_weight is not positive.
            NotFoundError: If the material does not exist.
        """
        validate_yield_test(data)
        material = self._require_material(data["raw_material_id"])

        yield_percentage = compute_yield(data["ap_weight"], data["ep_weight"])
        test = YieldTest(**data, yield_percentage=yield_percentage)
        self._repo.add(test)
        material.yield_percentage = yield_percentage

        self._commit("record yield test", raw_material_id=material.id)
        self._db.refresh(test)

        logger.info(
            "Material yield updated from test",
            material_id=material.id,
            yield_percentage=yield_percentage,
        )
        return self.to_output(test)

    def update(self, entity_id: int, data: dict[str, Any]) -> YieldTestOutput:
        """
        Rewrite a test, recompute its yield and propagate it to the material.
        """
        test = self.get_entity(entity_id)
        validate_yield_test(data)

        for field_name, value in data.items():
            if value is None and field_name != "notes":
                continue
            setattr(test, field_name, value)

        material = self._require_material(test.raw_material_id)
        test.yield_percentage = compute_yield(test.ap_weight, test.ep_weight)
        material.yield_percentage = test.yield_percentage

        self._commit("update yield test", yield_test_id=entity_id)
        self._db.refresh(test)

        logger.info(
            "Material yield updated from test",
            material_id=material.id,
            yield_percentage=test.yield_percentage,
        )
        return self.to_output(test)

    def average_yield(self, material_id: int) -> YieldAverageOutput:
        """
        Mean yield over the material's most recent tests by test_date.

        A material without tests averages 100 with a count of 0.
        """
        self._require_material(material_id)
        tests = self._repo.find_all(
            filters=[YieldTest.raw_material_id == material_id],
            order_by=[YieldTest.test_date.desc(), YieldTest.id.desc()],
            limit=Limits.YIELD_AVERAGE_WINDOW,
        )
        if not tests:
            return YieldAverageOutput(
                raw_material_id=material_id,
                average_yield=Limits.DEFAULT_YIELD_PERCENTAGE,
                test_count=0,
            )

        average = sum(t.yield_percentage for t in tests) / len(tests)
        return YieldAverageOutput(
            raw_material_id=material_id,
            average_yield=round_money(average),
            test_count=len(tests),
            latest_yield=tests[0].yield_percentage,
        )

    def _require_material(self, material_id: int) -> RawMaterial:
        material = self._material_repo.find_by_id(material_id)
        if material is None:
            raise NotFoundError("Material", material_id)
        return material
