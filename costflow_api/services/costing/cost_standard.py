"""
Cost Standard Calculator.

Computes the expected cost of one standard batch of a menu item:
yield-adjusted material cost, labor at the business labor rate, and
overhead from the current allocation policy.

The calculator is pure. Labor rate and overhead policy are passed in by
the caller; persisting the snapshot is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from costflow_shared.utils.exceptions import InvalidInputError, InvalidMaterialYieldError
from costflow_shared.utils.money import round_money

from .overhead import overhead_for

if TYPE_CHECKING:
    from costflow_api.models import MenuItem, OverheadConfig, RawMaterial, RecipeDetail


@dataclass(frozen=True)
class CostLine:
    """Cost of one recipe ingredient line."""

    raw_material_id: int | None
    material_code: str | None
    material_name: str | None
    quantity: float
    unit: str | None
    current_price: float
    yield_percentage: float
    yield_adjusted_price: float
    item_cost: float

    def rounded(self) -> dict[str, Any]:
        return {
            "raw_material_id": self.raw_material_id,
            "material_code": self.material_code,
            "material_name": self.material_name,
            "quantity": self.quantity,
            "unit": self.unit,
            "current_price": round_money(self.current_price),
            "yield_percentage": round_money(self.yield_percentage),
            "yield_adjusted_price": round_money(self.yield_adjusted_price),
            "item_cost": round_money(self.item_cost),
        }


@dataclass(frozen=True)
class CostStandardBreakdown:
    """
    Full-precision result of a cost standard calculation.

    Use rounded() for the 2-decimal presentation view.
    """

    material_cost: float
    labor_cost: float
    overhead_cost: float
    total_cost: float
    cost_per_portion: float
    standard_portion: int
    labor_rate_per_hour: float
    allocation_method: str | None = None
    lines: tuple[CostLine, ...] = field(default_factory=tuple)

    def rounded(self) -> dict[str, Any]:
        return {
            "material_cost": round_money(self.material_cost),
            "labor_cost": round_money(self.labor_cost),
            "overhead_cost": round_money(self.overhead_cost),
            "total_cost": round_money(self.total_cost),
            "cost_per_portion": round_money(self.cost_per_portion),
            "standard_portion": self.standard_portion,
            "labor_rate_per_hour": round_money(self.labor_rate_per_hour),
            "allocation_method": self.allocation_method,
            "lines": [line.rounded() for line in self.lines],
        }


def yield_adjusted_price(material: RawMaterial) -> float:
    """
    Price per usable unit: current_price / (yield_percentage / 100).

    Raises:
        InvalidMaterialYieldError: If the yield is zero, negative or missing.
    """
    yield_percentage = material.yield_percentage
    if not yield_percentage or yield_percentage <= 0:
        raise InvalidMaterialYieldError(
            material.id,
            material.code,
            yield_percentage,
        )
    return material.current_price / (yield_percentage / 100)


def material_cost_lines(recipe_details: Iterable[RecipeDetail]) -> list[CostLine]:
    lines = []
    for detail in recipe_details:
        material = detail.raw_material
        adjusted = yield_adjusted_price(material)
        lines.append(
            CostLine(
                raw_material_id=material.id,
                material_code=material.code,
                material_name=material.name,
                quantity=detail.quantity,
                unit=detail.unit,
                current_price=material.current_price,
                yield_percentage=material.yield_percentage,
                yield_adjusted_price=adjusted,
                item_cost=detail.quantity * adjusted,
            )
        )
    return lines


def calculate_cost_standard(
    menu_item: MenuItem,
    recipe_details: Iterable[RecipeDetail],
    labor_rate_per_hour: float,
    overhead_config: OverheadConfig | None,
) -> CostStandardBreakdown:
    """
    Compute material, labor, overhead, total and per-portion cost for one batch.

    Per-unit overhead is charged per portion of the standard batch.
    A recipe without ingredients has zero material cost.

    Raises:
        InvalidInputError: If the menu item's standard portion is not positive.
        InvalidMaterialYieldError: If an ingredient's material has a zero yield.
    """
    standard_portion = menu_item.standard_portion
    if standard_portion is None or standard_portion <= 0:
        raise InvalidInputError.single(
            "standard_portion",
            "Standard portion must be greater than 0",
            menu_item_id=menu_item.id,
        )

    lines = material_cost_lines(recipe_details)
    material_cost = sum((line.item_cost for line in lines), 0.0)

    labor_cost = (menu_item.standard_labor_hours or 0) * labor_rate_per_hour

    overhead_cost = overhead_for(overhead_config, labor_cost, material_cost, standard_portion)

    total_cost = material_cost + labor_cost + overhead_cost

    return CostStandardBreakdown(
        material_cost=material_cost,
        labor_cost=labor_cost,
        overhead_cost=overhead_cost,
        total_cost=total_cost,
        cost_per_portion=total_cost / standard_portion,
        standard_portion=standard_portion,
        labor_rate_per_hour=labor_rate_per_hour,
        allocation_method=overhead_config.allocation_method if overhead_config else None,
        lines=tuple(lines),
    )
