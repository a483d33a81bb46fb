"""
Tests for the reporting aggregator: profitability, monthly summary,
cost trends and variance summary.
"""

from datetime import datetime, timezone

import pytest

from costflow_api.models import CostStandard, OverheadConfig, VarianceRecord
from costflow_api.services.costing import (
    MenuItemSales,
    ProductionRun,
    build_cost_trends,
    build_monthly_summary,
    build_profitability_rows,
    period_bounds,
    summarize_variances,
    validate_period,
)
from costflow_shared.config.constants import AllocationMethod
from costflow_shared.utils.exceptions import InvalidInputError


def sales(menu_item_id, cost, price, sold, name=None):
    return MenuItemSales(
        menu_item_id=menu_item_id,
        menu_name=name or f"Item {menu_item_id}",
        category="Main",
        cost_per_portion=cost,
        selling_price=price,
        total_sold=sold,
    )


class TestPeriod:
    def test_bounds_cover_whole_month(self):
        start, end = period_bounds(2, 2024)

        assert start == datetime(2024, 2, 1, tzinfo=timezone.utc)
        assert end == datetime(2024, 2, 29, 23, 59, 59, tzinfo=timezone.utc)

    def test_missing_month_and_year_reported_together(self):
        with pytest.raises(InvalidInputError) as exc_info:
            validate_period(None, None)

        assert {v.field for v in exc_info.value.violations} == {"month", "year"}

    @pytest.mark.parametrize("month", [0, 13])
    def test_month_out_of_range(self, month):
        with pytest.raises(InvalidInputError):
            validate_period(month, 2026)


class TestProfitability:
    def test_rows_sorted_by_total_profit(self):
        rows = build_profitability_rows(
            [
                sales(1, cost=10, price=15, sold=10),  # profit 50
                sales(2, cost=5, price=20, sold=10),  # profit 150
                sales(3, cost=1, price=2, sold=0),  # not sold
            ]
        )

        assert [r.menu_item_id for r in rows] == [2, 1]
        assert rows[0].margin == 15
        assert rows[0].margin_percentage == pytest.approx(75)
        assert rows[0].total_revenue == 200
        assert rows[0].total_cost == 50

    def test_unpriced_item_has_zero_margin_percentage(self):
        row = build_profitability_rows([sales(1, cost=10, price=0, sold=3)])[0]

        assert row.margin == -10
        assert row.margin_percentage == 0
        assert row.total_profit == -30


class TestMonthlySummary:
    def test_percentage_overhead_on_aggregates(self):
        runs = [
            ProductionRun(portions_sold=8, selling_price=25_000, material_cost=70_000, labor_hours_actual=1.5),
            ProductionRun(portions_sold=4, selling_price=25_000, material_cost=30_000, labor_hours_actual=0.5),
        ]
        config = OverheadConfig(allocation_method=AllocationMethod.PERCENTAGE_LABOR, allocation_rate=20)

        summary = build_monthly_summary(1, 2026, runs, 50_000, config)

        assert summary.period == "1/2026"
        assert summary.total_revenue == pytest.approx(300_000)
        assert summary.total_material_cost == pytest.approx(100_000)
        assert summary.total_labor_cost == pytest.approx(100_000)
        assert summary.total_overhead_cost == pytest.approx(20_000)
        assert summary.total_cost == pytest.approx(220_000)
        assert summary.net_profit == pytest.approx(80_000)
        assert summary.production_count == 2

        result = summary.rounded()
        assert result["food_cost_percentage"] == 33.33
        assert result["profit_margin"] == 26.67

    def test_per_unit_overhead_not_applied(self):
        runs = [ProductionRun(portions_sold=1, selling_price=10, material_cost=5, labor_hours_actual=0)]
        config = OverheadConfig(allocation_method=AllocationMethod.PER_UNIT, allocation_rate=1_000)

        summary = build_monthly_summary(3, 2026, runs, 50_000, config)

        assert summary.total_overhead_cost == 0

    def test_empty_month(self):
        summary = build_monthly_summary(6, 2026, [], 50_000, None)

        assert summary.total_revenue == 0
        assert summary.profit_margin == 0
        assert summary.rounded()["food_cost_percentage"] == 0


class TestCostTrends:
    def test_averages_per_day(self):
        def standard(id_, day, hour, total):
            return CostStandard(
                id=id_,
                menu_item_id=1,
                effective_date=datetime(2026, 1, day, hour, tzinfo=timezone.utc),
                material_cost=total / 2,
                labor_cost=total / 2,
                overhead_cost=0,
                total_cost=total,
                cost_per_portion=total / 10,
            )

        points = build_cost_trends(
            [standard(3, 2, 9, 300), standard(1, 1, 8, 100), standard(2, 1, 17, 200)]
        )

        assert [p.date for p in points] == ["2026-01-01", "2026-01-02"]
        assert points[0].average_total_cost == pytest.approx(150)
        assert points[0].record_count == 2
        assert points[1].average_material_cost == pytest.approx(150)


class TestVarianceSummary:
    def test_counts_and_recent_window(self):
        amounts = [100, -50, 0, 20] + [1] * 10
        records = [
            VarianceRecord(variance_amount=a, variance_percentage=a / 10) for a in amounts
        ]

        summary = summarize_variances(records)

        assert summary.total_records == 14
        assert summary.total_variance == pytest.approx(sum(amounts))
        assert summary.favorable_count == 1
        assert summary.unfavorable_count == 12
        assert len(summary.recent) == 10
        assert summary.recent[0] is records[0]

    def test_rounding_noise_counts_as_on_target(self):
        records = [
            VarianceRecord(variance_amount=1e-12, variance_percentage=0),
            VarianceRecord(variance_amount=-1e-12, variance_percentage=0),
        ]

        summary = summarize_variances(records)

        assert summary.favorable_count == 0
        assert summary.unfavorable_count == 0
        assert summary.total_records == 2

    def test_no_records(self):
        summary = summarize_variances([])

        assert summary.total_records == 0
        assert summary.average_variance_percentage == 0
