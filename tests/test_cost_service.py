"""
Tests for CostStandardService and VarianceService against the database.

Tests cover:
- Cost standard calculation, persistence and history
- Fresh labor rate / overhead reads and provider injection
- Variance calculation, persistence and preconditions
"""

from datetime import datetime, timedelta, timezone

import pytest

from costflow_api.models import (
    CostStandard,
    OverheadConfig,
    ProductionLog,
    ProductionLogDetail,
    VarianceRecord,
)
from costflow_api.services.domain import CostStandardService, VarianceService
from costflow_shared.config.constants import AllocationMethod, VarianceClass, VarianceType
from costflow_shared.utils.exceptions import (
    InvalidMaterialYieldError,
    MissingCostStandardError,
    NotFoundError,
)


class FixedLaborRate:
    def __init__(self, rate):
        self.rate = rate

    def current_labor_rate(self) -> float:
        return self.rate


class NoOverhead:
    def current_overhead_config(self):
        return None


@pytest.fixture
def production_log(db_session, seed_menu_item, seed_material):
    """8 portions, 1.5 labor hours and 70,000 of material."""
    log = ProductionLog(
        menu_item_id=seed_menu_item.id,
        production_date=datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc),
        portions_produced=8,
        portions_sold=8,
        labor_hours_actual=1.5,
    )
    log.details = [
        ProductionLogDetail(
            raw_material_id=seed_material.id,
            quantity_used=5,
            unit="kg",
            unit_price=14_000,
            subtotal=70_000,
        )
    ]
    db_session.add(log)
    db_session.commit()
    db_session.refresh(log)
    return log


class TestCostStandardService:
    def test_calculate_reference_example(self, db_session, costing_setup):
        menu_item = costing_setup["menu_item"]

        standard, breakdown = CostStandardService(db_session).calculate(menu_item.id)

        assert standard.id is not None
        assert standard.material_cost == pytest.approx(62_500)
        assert standard.labor_cost == pytest.approx(100_000)
        assert standard.overhead_cost == pytest.approx(20_000)
        assert standard.total_cost == pytest.approx(182_500)
        assert standard.cost_per_portion == pytest.approx(18_250)
        assert breakdown.lines[0].material_code == "BEEF-01"
        assert db_session.query(CostStandard).count() == 1

    def test_every_calculation_appends(self, db_session, costing_setup):
        service = CostStandardService(db_session)
        menu_item = costing_setup["menu_item"]

        first, _ = service.calculate(menu_item.id)
        costing_setup["material"].current_price = 20_000
        db_session.commit()
        second, _ = service.calculate(menu_item.id)

        assert second.id != first.id
        assert first.material_cost == pytest.approx(62_500)
        assert second.material_cost == pytest.approx(125_000)
        assert service.current(menu_item.id).id == second.id
        assert [s.id for s in service.history(menu_item.id)] == [second.id, first.id]

    def test_current_resolves_latest_effective_date(self, db_session, seed_menu_item):
        newer = datetime(2026, 2, 1, tzinfo=timezone.utc)
        for effective_date, total in [(newer, 200), (newer - timedelta(days=10), 100)]:
            db_session.add(
                CostStandard(
                    menu_item_id=seed_menu_item.id,
                    effective_date=effective_date,
                    material_cost=total,
                    labor_cost=0,
                    overhead_cost=0,
                    total_cost=total,
                    cost_per_portion=total / 10,
                )
            )
        db_session.commit()

        assert CostStandardService(db_session).current(seed_menu_item.id).total_cost == 200

    def test_overhead_policy_read_fresh(self, db_session, costing_setup):
        service = CostStandardService(db_session)
        menu_item = costing_setup["menu_item"]

        db_session.add(
            OverheadConfig(
                allocation_method=AllocationMethod.PER_UNIT,
                allocation_rate=1_000,
                effective_date=datetime(2026, 3, 1, tzinfo=timezone.utc),
            )
        )
        db_session.commit()
        standard, breakdown = service.calculate(menu_item.id)

        assert breakdown.allocation_method == AllocationMethod.PER_UNIT
        assert standard.overhead_cost == pytest.approx(10_000)

    def test_injected_providers(self, db_session, seed_recipe, seed_menu_item):
        service = CostStandardService(
            db_session,
            settings_provider=FixedLaborRate(10_000),
            overhead_provider=NoOverhead(),
        )

        standard, _ = service.calculate(seed_menu_item.id)

        assert standard.labor_cost == pytest.approx(20_000)
        assert standard.overhead_cost == 0

    def test_without_settings_labor_is_free(self, db_session, seed_recipe, seed_menu_item):
        standard, _ = CostStandardService(db_session).calculate(seed_menu_item.id)

        assert standard.labor_cost == 0
        assert standard.total_cost == pytest.approx(62_500)

    def test_zero_yield_material_fails_without_saving(self, db_session, costing_setup):
        costing_setup["material"].yield_percentage = 0
        db_session.commit()

        with pytest.raises(InvalidMaterialYieldError):
            CostStandardService(db_session).calculate(costing_setup["menu_item"].id)

        assert db_session.query(CostStandard).count() == 0

    def test_unknown_menu_item(self, db_session):
        with pytest.raises(NotFoundError):
            CostStandardService(db_session).calculate(999)

    def test_current_without_standard(self, db_session, seed_menu_item):
        with pytest.raises(MissingCostStandardError):
            CostStandardService(db_session).current(seed_menu_item.id)


class TestVarianceService:
    def test_calculate_reference_example(self, db_session, costing_setup, production_log):
        CostStandardService(db_session).calculate(costing_setup["menu_item"].id)

        record, breakdown = VarianceService(db_session).calculate(production_log.id)

        assert record.standard_cost == pytest.approx(146_000)
        assert record.actual_cost == pytest.approx(160_000)
        assert record.variance_amount == pytest.approx(14_000)
        assert record.variance_percentage == pytest.approx(9.589, abs=1e-3)
        assert record.variance_type == VarianceType.MATERIAL_PRICE
        assert record.notes == "Variance for 8 portions"
        assert breakdown.classification == VarianceClass.UNFAVORABLE

    def test_missing_standard_saves_nothing(self, db_session, costing_setup, production_log):
        with pytest.raises(MissingCostStandardError):
            VarianceService(db_session).calculate(production_log.id)

        assert db_session.query(VarianceRecord).count() == 0

    def test_unknown_production_log(self, db_session):
        with pytest.raises(NotFoundError):
            VarianceService(db_session).calculate(999)

    def test_repeat_analysis_appends(self, db_session, costing_setup, production_log):
        CostStandardService(db_session).calculate(costing_setup["menu_item"].id)
        service = VarianceService(db_session)

        service.calculate(production_log.id)
        service.calculate(production_log.id)

        history = service.history(costing_setup["menu_item"].id)
        assert len(history) == 2

    def test_summary(self, db_session, costing_setup, production_log):
        CostStandardService(db_session).calculate(costing_setup["menu_item"].id)
        VarianceService(db_session).calculate(production_log.id)

        summary = VarianceService(db_session).summary(
            datetime(2026, 1, 1, tzinfo=timezone.utc),
            datetime(2026, 1, 31, tzinfo=timezone.utc),
        )
        outside = VarianceService(db_session).summary(
            start_date=datetime(2026, 2, 1, tzinfo=timezone.utc)
        )

        assert summary.total_records == 1
        assert summary.unfavorable_count == 1
        assert summary.total_variance == pytest.approx(14_000)
        assert outside.total_records == 0
