"""
Overhead Allocator.

Maps (labor cost, material cost, unit count) to an overhead amount
according to the configured allocation method.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from costflow_shared.config.constants import AllocationMethod
from costflow_shared.config.logging import costing_logger as logger

if TYPE_CHECKING:
    from costflow_api.models import OverheadConfig


def allocate_overhead(
    method: str | None,
    rate: float | None,
    labor_cost: float,
    material_cost: float,
    unit_count: float,
) -> float:
    """
    Compute overhead for one allocation method.

    - percentage_labor: labor_cost * rate / 100
    - percentage_material: material_cost * rate / 100
    - per_unit: rate * unit_count

    Unknown or missing methods allocate nothing.
    """
    if method is None or rate is None:
        return 0.0

    if method == AllocationMethod.PERCENTAGE_LABOR:
        return labor_cost * (rate / 100)
    if method == AllocationMethod.PERCENTAGE_MATERIAL:
        return material_cost * (rate / 100)
    if method == AllocationMethod.PER_UNIT:
        return rate * unit_count

    logger.warning("Unknown overhead allocation method", method=method)
    return 0.0


def overhead_for(
    config: OverheadConfig | None,
    labor_cost: float,
    material_cost: float,
    unit_count: float,
) -> float:
    """Apply the current overhead policy; no policy means no overhead tracked yet."""
    if config is None:
        return 0.0
    return allocate_overhead(
        config.allocation_method,
        config.allocation_rate,
        labor_cost,
        material_cost,
        unit_count,
    )
