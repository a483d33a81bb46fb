"""
Reporting Aggregator.

Rolls cost standards, production runs and variance records up into
profitability, monthly summary, cost trend and variance summary views.
No new costing rules live here; inputs are plain values gathered by the
report service.
"""

from __future__ import annotations

import calendar
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from costflow_shared.config.constants import AllocationMethod, Limits, VarianceClass
from costflow_shared.utils.money import round_money
from costflow_shared.utils.validators import ViolationCollector

from .overhead import allocate_overhead
from .variance import classify_variance

if TYPE_CHECKING:
    from costflow_api.models import CostStandard, OverheadConfig, VarianceRecord


def _percent_of(part: float, whole: float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


# =============================================================================
# Period helpers
# =============================================================================


def validate_period(month: int | None, year: int | None) -> None:
    """
    Raises:
        InvalidInputError: If month or year is missing or out of range.
    """
    violations = ViolationCollector()
    if month is None:
        violations.add("month", "Month is required")
    else:
        violations.check(1 <= month <= 12, "month", "Month must be between 1 and 12")
    if year is None:
        violations.add("year", "Year is required")
    else:
        violations.check(
            Limits.MIN_YEAR <= year <= Limits.MAX_YEAR,
            "year",
            f"Year must be between {Limits.MIN_YEAR} and {Limits.MAX_YEAR}",
        )
    violations.raise_if_any(month=month, year=year)


def period_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    """First day 00:00:00 through last day 23:59:59 of the month, UTC."""
    validate_period(month, year)
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime(year, month, last_day, 23, 59, 59, tzinfo=timezone.utc)
    return start, end


# =============================================================================
# Menu profitability
# =============================================================================


@dataclass(frozen=True)
class MenuItemSales:
    """Inputs for one menu item's profitability row."""

    menu_item_id: int
    menu_name: str
    category: str | None
    cost_per_portion: float
    selling_price: float
    total_sold: int


@dataclass(frozen=True)
class ProfitabilityRow:
    menu_item_id: int
    menu_name: str
    category: str | None
    total_sold: int
    cost_per_portion: float
    selling_price: float

    @property
    def margin(self) -> float:
        return self.selling_price - self.cost_per_portion

    @property
    def margin_percentage(self) -> float:
        return _percent_of(self.margin, self.selling_price)

    @property
    def total_revenue(self) -> float:
        return self.total_sold * self.selling_price

    @property
    def total_cost(self) -> float:
        return self.total_sold * self.cost_per_portion

    @property
    def total_profit(self) -> float:
        return self.total_revenue - self.total_cost

    def rounded(self) -> dict[str, Any]:
        return {
            "menu_item_id": self.menu_item_id,
            "menu_name": self.menu_name,
            "category": self.category,
            "total_sold": self.total_sold,
            "cost_per_portion": round_money(self.cost_per_portion),
            "selling_price": round_money(self.selling_price),
            "margin": round_money(self.margin),
            "margin_percentage": round_money(self.margin_percentage),
            "total_revenue": round_money(self.total_revenue),
            "total_cost": round_money(self.total_cost),
            "total_profit": round_money(self.total_profit),
        }


def build_profitability_rows(sales: Iterable[MenuItemSales]) -> list[ProfitabilityRow]:
    """
    One row per menu item that sold at least one portion, most profitable first.

    Items without a cost standard or price contribute zero for that value.
    """
    rows = [
        ProfitabilityRow(
            menu_item_id=item.menu_item_id,
            menu_name=item.menu_name,
            category=item.category,
            total_sold=item.total_sold,
            cost_per_portion=item.cost_per_portion or 0.0,
            selling_price=item.selling_price or 0.0,
        )
        for item in sales
        if item.total_sold > 0
    ]
    rows.sort(key=lambda row: row.total_profit, reverse=True)
    return rows


# =============================================================================
# Monthly summary
# =============================================================================


@dataclass(frozen=True)
class ProductionRun:
    """One production log reduced to the numbers the monthly summary needs."""

    portions_sold: int
    selling_price: float
    material_cost: float
    labor_hours_actual: float


@dataclass(frozen=True)
class MonthlySummary:
    month: int
    year: int
    total_revenue: float
    total_material_cost: float
    total_labor_cost: float
    total_overhead_cost: float
    production_count: int

    @property
    def period(self) -> str:
        return f"{self.month}/{self.year}"

    @property
    def total_cost(self) -> float:
        return self.total_material_cost + self.total_labor_cost + self.total_overhead_cost

    @property
    def net_profit(self) -> float:
        return self.total_revenue - self.total_cost

    @property
    def profit_margin(self) -> float:
        return _percent_of(self.net_profit, self.total_revenue)

    def rounded(self) -> dict[str, Any]:
        return {
            "period": self.period,
            "total_revenue": round_money(self.total_revenue),
            "total_cost": round_money(self.total_cost),
            "total_material_cost": round_money(self.total_material_cost),
            "total_labor_cost": round_money(self.total_labor_cost),
            "total_overhead_cost": round_money(self.total_overhead_cost),
            "food_cost_percentage": round_money(
                _percent_of(self.total_material_cost, self.total_revenue)
            ),
            "labor_cost_percentage": round_money(
                _percent_of(self.total_labor_cost, self.total_revenue)
            ),
            "overhead_cost_percentage": round_money(
                _percent_of(self.total_overhead_cost, self.total_revenue)
            ),
            "net_profit": round_money(self.net_profit),
            "profit_margin": round_money(self.profit_margin),
            "production_count": self.production_count,
        }


def build_monthly_summary(
    month: int,
    year: int,
    runs: Sequence[ProductionRun],
    labor_rate_per_hour: float,
    overhead_config: OverheadConfig | None,
) -> MonthlySummary:
    """
    Aggregate revenue and cost for every production run in a month.

    Overhead is applied once on the aggregate labor and material totals,
    and only for the percentage methods; per_unit is not applied here.

    Raises:
        InvalidInputError: If month or year is out of range.
    """
    validate_period(month, year)

    total_revenue = 0.0
    total_material = 0.0
    total_labor = 0.0
    for run in runs:
        total_revenue += (run.portions_sold or 0) * (run.selling_price or 0)
        total_material += run.material_cost or 0
        total_labor += (run.labor_hours_actual or 0) * labor_rate_per_hour

    total_overhead = 0.0
    if (
        overhead_config is not None
        and overhead_config.allocation_method in AllocationMethod.PERCENTAGE
    ):
        total_overhead = allocate_overhead(
            overhead_config.allocation_method,
            overhead_config.allocation_rate,
            total_labor,
            total_material,
            0,
        )

    return MonthlySummary(
        month=month,
        year=year,
        total_revenue=total_revenue,
        total_material_cost=total_material,
        total_labor_cost=total_labor,
        total_overhead_cost=total_overhead,
        production_count=len(runs),
    )


# =============================================================================
# Cost trends
# =============================================================================


@dataclass(frozen=True)
class CostTrendPoint:
    date: str
    average_total_cost: float
    average_material_cost: float
    average_labor_cost: float
    average_overhead_cost: float
    record_count: int

    def rounded(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "average_total_cost": round_money(self.average_total_cost),
            "average_material_cost": round_money(self.average_material_cost),
            "average_labor_cost": round_money(self.average_labor_cost),
            "average_overhead_cost": round_money(self.average_overhead_cost),
            "record_count": self.record_count,
        }


def build_cost_trends(cost_standards: Iterable[CostStandard]) -> list[CostTrendPoint]:
    """Average each cost component per calendar day of effective_date, oldest day first."""
    by_day: OrderedDict[str, list[CostStandard]] = OrderedDict()
    for standard in sorted(cost_standards, key=lambda s: (s.effective_date, s.id)):
        day = standard.effective_date.date().isoformat()
        by_day.setdefault(day, []).append(standard)

    points = []
    for day, standards in by_day.items():
        count = len(standards)
        points.append(
            CostTrendPoint(
                date=day,
                average_total_cost=sum(s.total_cost for s in standards) / count,
                average_material_cost=sum(s.material_cost for s in standards) / count,
                average_labor_cost=sum(s.labor_cost for s in standards) / count,
                average_overhead_cost=sum(s.overhead_cost for s in standards) / count,
                record_count=count,
            )
        )
    return points


# =============================================================================
# Variance summary
# =============================================================================


@dataclass(frozen=True)
class VarianceSummary:
    total_variance: float
    average_variance_percentage: float
    favorable_count: int
    unfavorable_count: int
    total_records: int
    recent: list[VarianceRecord] = field(default_factory=list)


def summarize_variances(
    records: Sequence[VarianceRecord],
    recent_limit: int = Limits.SUMMARY_RECENT_RECORDS,
) -> VarianceSummary:
    """
    Totals over variance records given newest first.

    Records within tolerance of zero count as neither favorable nor unfavorable.
    """
    total_records = len(records)
    total_variance = sum((r.variance_amount for r in records), 0.0)
    average_percentage = (
        sum(r.variance_percentage for r in records) / total_records if total_records else 0.0
    )

    # Same tolerance as classification, so on-target records land in neither count
    classes = [classify_variance(r.variance_amount) for r in records]

    return VarianceSummary(
        total_variance=total_variance,
        average_variance_percentage=average_percentage,
        favorable_count=classes.count(VarianceClass.FAVORABLE),
        unfavorable_count=classes.count(VarianceClass.UNFAVORABLE),
        total_records=total_records,
        recent=list(records[:recent_limit]),
    )
