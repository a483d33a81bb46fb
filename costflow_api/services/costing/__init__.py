"""
Cost & Variance Calculation Engine.

Pure functions. Nothing here touches the database; the domain services
gather inputs, call the engine and persist the snapshots it produces.
"""

from .yield_calc import compute_yield
from .overhead import allocate_overhead, overhead_for
from .cost_standard import (
    CostLine,
    CostStandardBreakdown,
    calculate_cost_standard,
    yield_adjusted_price,
)
from .variance import (
    CategoryVariance,
    VarianceBreakdown,
    analyze_variance,
    classify_variance,
)
from .reporting import (
    CostTrendPoint,
    MenuItemSales,
    MonthlySummary,
    ProductionRun,
    ProfitabilityRow,
    VarianceSummary,
    build_cost_trends,
    build_monthly_summary,
    build_profitability_rows,
    period_bounds,
    summarize_variances,
    validate_period,
)

__all__ = [
    "compute_yield",
    "allocate_overhead",
    "overhead_for",
    "CostLine",
    "CostStandardBreakdown",
    "calculate_cost_standard",
    "yield_adjusted_price",
    "CategoryVariance",
    "VarianceBreakdown",
    "analyze_variance",
    "classify_variance",
    "CostTrendPoint",
    "MenuItemSales",
    "MonthlySummary",
    "ProductionRun",
    "ProfitabilityRow",
    "VarianceSummary",
    "build_cost_trends",
    "build_monthly_summary",
    "build_profitability_rows",
    "period_bounds",
    "summarize_variances",
    "validate_period",
]
