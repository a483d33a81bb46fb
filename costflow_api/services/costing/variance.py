"""
Variance Analyzer.

Compares the current cost standard of a menu item, scaled to the portions
actually produced, with the recorded cost of a production run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

from costflow_shared.config.constants import VARIANCE_ZERO_TOLERANCE, VarianceClass
from costflow_shared.utils.exceptions import MissingCostStandardError
from costflow_shared.utils.money import round_money

from .overhead import overhead_for

if TYPE_CHECKING:
    from costflow_api.models import CostStandard, OverheadConfig, ProductionLog, ProductionLogDetail


def classify_variance(amount: float) -> str:
    """Negative is favorable, positive is unfavorable, zero is on target."""
    if abs(amount) <= VARIANCE_ZERO_TOLERANCE:
        return VarianceClass.ON_TARGET
    if amount < 0:
        return VarianceClass.FAVORABLE
    return VarianceClass.UNFAVORABLE


def variance_percentage(variance: float, standard: float) -> float:
    return (variance / standard) * 100 if standard > 0 else 0.0


@dataclass(frozen=True)
class CategoryVariance:
    """Standard vs actual for one cost category."""

    standard: float
    actual: float

    @property
    def variance(self) -> float:
        return self.actual - self.standard

    @property
    def classification(self) -> str:
        return classify_variance(self.variance)

    def rounded(self) -> dict[str, Any]:
        return {
            "standard": round_money(self.standard),
            "actual": round_money(self.actual),
            "variance": round_money(self.variance),
            "classification": self.classification,
        }


@dataclass(frozen=True)
class VarianceBreakdown:
    """
    Full-precision variance of one production run.

    Use rounded() for the 2-decimal presentation view.
    """

    portions_produced: int
    standard_cost: float
    actual_cost: float
    material: CategoryVariance
    labor: CategoryVariance
    overhead: CategoryVariance

    @property
    def variance(self) -> float:
        return self.actual_cost - self.standard_cost

    @property
    def variance_percentage(self) -> float:
        return variance_percentage(self.variance, self.standard_cost)

    @property
    def classification(self) -> str:
        return classify_variance(self.variance)

    def rounded(self) -> dict[str, Any]:
        return {
            "standard_cost": round_money(self.standard_cost),
            "actual_cost": round_money(self.actual_cost),
            "variance": round_money(self.variance),
            "variance_percentage": round_money(self.variance_percentage),
            "classification": self.classification,
            "portions_produced": self.portions_produced,
            "breakdown": {
                "material": self.material.rounded(),
                "labor": self.labor.rounded(),
                "overhead": self.overhead.rounded(),
            },
        }


def analyze_variance(
    production_log: ProductionLog,
    production_log_details: Iterable[ProductionLogDetail],
    cost_standard: CostStandard | None,
    labor_rate_per_hour: float,
    overhead_config: OverheadConfig | None,
) -> VarianceBreakdown:
    """
    Compute total and per-category variance for a production run.

    Actual material cost is the sum of the stored detail subtotals, so the
    price at the time of use is what counts. Per-unit overhead is charged
    per portion produced.

    Raises:
        MissingCostStandardError: If no cost standard exists for the menu item.
    """
    if cost_standard is None:
        raise MissingCostStandardError(
            production_log.menu_item_id, production_log_id=production_log.id
        )

    portions = production_log.portions_produced

    actual_material = sum((detail.subtotal for detail in production_log_details), 0.0)
    actual_labor = (production_log.labor_hours_actual or 0) * labor_rate_per_hour
    actual_overhead = overhead_for(overhead_config, actual_labor, actual_material, portions)

    return VarianceBreakdown(
        portions_produced=portions,
        standard_cost=cost_standard.cost_per_portion * portions,
        actual_cost=actual_material + actual_labor + actual_overhead,
        material=CategoryVariance(cost_standard.material_cost * portions, actual_material),
        labor=CategoryVariance(cost_standard.labor_cost * portions, actual_labor),
        overhead=CategoryVariance(cost_standard.overhead_cost * portions, actual_overhead),
    )
