"""
Tests for ReportService over a seeded database.
"""

from datetime import datetime, timezone

import pytest

from costflow_api.models import ProductionLog, ProductionLogDetail
from costflow_api.services.domain import (
    CostStandardService,
    MenuItemService,
    ReportService,
    VarianceService,
)
from costflow_shared.utils.exceptions import InvalidInputError


@pytest.fixture
def sold_run(db_session, costing_setup):
    """Priced at 25,000; one January run selling 8 portions."""
    menu_item = costing_setup["menu_item"]
    MenuItemService(db_session).add_pricing(
        menu_item.id,
        {"selling_price": 25_000, "effective_date": datetime(2026, 1, 1, tzinfo=timezone.utc)},
    )
    log = ProductionLog(
        menu_item_id=menu_item.id,
        production_date=datetime(2026, 1, 20, 12, 0, tzinfo=timezone.utc),
        portions_produced=8,
        portions_sold=8,
        labor_hours_actual=1.5,
        details=[
            ProductionLogDetail(
                raw_material_id=costing_setup["material"].id,
                quantity_used=5,
                unit="kg",
                unit_price=14_000,
                subtotal=70_000,
            )
        ],
    )
    db_session.add(log)
    db_session.commit()
    db_session.refresh(log)
    return log


class TestReportService:
    @pytest.fixture
    def service(self, db_session):
        return ReportService(db_session)

    def test_monthly_summary(self, service, sold_run):
        summary = service.monthly_summary(1, 2026)

        assert summary.total_revenue == pytest.approx(200_000)
        assert summary.total_material_cost == pytest.approx(70_000)
        assert summary.total_labor_cost == pytest.approx(75_000)
        assert summary.total_overhead_cost == pytest.approx(15_000)
        assert summary.net_profit == pytest.approx(40_000)
        assert summary.profit_margin == pytest.approx(20)
        assert summary.production_count == 1

    def test_monthly_summary_other_month_is_empty(self, service, sold_run):
        summary = service.monthly_summary(2, 2026)

        assert summary.production_count == 0
        assert summary.total_revenue == 0
        assert summary.profit_margin == 0

    def test_monthly_summary_requires_period(self, service):
        with pytest.raises(InvalidInputError):
            service.monthly_summary(None, 2026)

    def test_profitability_uses_latest_standard(self, service, db_session, sold_run):
        CostStandardService(db_session).calculate(sold_run.menu_item_id)

        rows = service.menu_profitability()

        assert len(rows) == 1
        row = rows[0]
        assert row.cost_per_portion == pytest.approx(18_250)
        assert row.margin == pytest.approx(6_750)
        assert row.margin_percentage == pytest.approx(27)
        assert row.total_sold == 8

    def test_profitability_without_standard(self, service, sold_run):
        row = service.menu_profitability()[0]

        assert row.cost_per_portion == 0
        assert row.margin_percentage == pytest.approx(100)

    def test_profitability_date_range(self, service, sold_run):
        rows = service.menu_profitability(
            start_date=datetime(2026, 2, 1, tzinfo=timezone.utc),
        )

        assert rows == []

    def test_cost_trends(self, service, db_session, costing_setup):
        menu_item_id = costing_setup["menu_item"].id
        CostStandardService(db_session).calculate(menu_item_id)
        CostStandardService(db_session).calculate(menu_item_id)

        points = service.cost_trends(menu_item_id=menu_item_id)

        assert sum(p.record_count for p in points) == 2
        assert points[-1].average_total_cost == pytest.approx(182_500)

    def test_dashboard(self, service, db_session, sold_run):
        CostStandardService(db_session).calculate(sold_run.menu_item_id)
        VarianceService(db_session).calculate(sold_run.id)

        dashboard = service.dashboard()

        assert dashboard.counts.suppliers == 1
        assert dashboard.counts.materials == 1
        assert dashboard.counts.menu_items == 1
        assert dashboard.variance.recent_count == 1
        assert dashboard.variance.average == pytest.approx(9.59)
