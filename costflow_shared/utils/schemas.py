"""
Pydantic schemas for the REST API.
Centralized to avoid circular imports between routers and services.

Request models check shape and types only. Range rules (positive weights,
yield bounds, known allocation methods) are enforced by the per-operation
validators in costflow_api.services.validation so that every violated
field is reported together.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_serializer

from costflow_shared.config.constants import DEFAULT_CURRENCY, Limits
from costflow_shared.utils.money import round_money

DeleteOutcome = Literal["deactivated", "deleted"]


# =============================================================================
# Common
# =============================================================================


class MessageOutput(BaseModel):
    message: str


class DeleteOutput(BaseModel):
    message: str
    outcome: DeleteOutcome = "deleted"


# =============================================================================
# Business Settings Schemas
# =============================================================================


class SettingsStatusOutput(BaseModel):
    initialized: bool
    business_name: str | None = None


class BusinessSettingsInit(BaseModel):
    business_name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    labor_rate_per_hour: float = 0.0
    currency: str = DEFAULT_CURRENCY


class BusinessSettingsUpdate(BaseModel):
    business_name: str | None = None
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    labor_rate_per_hour: float | None = None
    currency: str | None = None


class BusinessSettingsOutput(BaseModel):
    id: int
    business_name: str
    address: str | None = None
    phone: str | None = None
    email: str | None = None
    labor_rate_per_hour: float
    currency: str
    is_initialized: bool
    created_at: datetime

    class Config:
        from_attributes = True


class OverheadConfigCreate(BaseModel):
    allocation_method: str
    allocation_rate: float
    notes: str | None = None


class OverheadConfigOutput(BaseModel):
    id: int
    allocation_method: str
    allocation_rate: float
    effective_date: datetime
    notes: str | None = None

    class Config:
        from_attributes = True


# =============================================================================
# Supplier Schemas
# =============================================================================


class SupplierBrief(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class SupplierOutput(BaseModel):
    id: int
    name: str
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    payment_terms: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class SupplierCreate(BaseModel):
    name: str
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    payment_terms: str | None = None
    is_active: bool = True


class SupplierUpdate(BaseModel):
    name: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    payment_terms: str | None = None
    is_active: bool | None = None


# =============================================================================
# Raw Material Schemas
# =============================================================================


class MaterialBrief(BaseModel):
    id: int
    code: str
    name: str
    unit: str
    current_price: float
    yield_percentage: float

    class Config:
        from_attributes = True


class MaterialOutput(BaseModel):
    id: int
    code: str
    name: str
    unit: str
    category: str | None = None
    current_price: float
    yield_percentage: float
    supplier_id: int | None = None
    supplier: SupplierBrief | None = None
    notes: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class MaterialCreate(BaseModel):
    code: str
    name: str
    unit: str
    category: str | None = None
    current_price: float
    yield_percentage: float = Limits.DEFAULT_YIELD_PERCENTAGE
    supplier_id: int | None = None
    notes: str | None = None
    is_active: bool = True


class MaterialUpdate(BaseModel):
    code: str | None = None
    name: str | None = None
    unit: str | None = None
    category: str | None = None
    current_price: float | None = None
    yield_percentage: float | None = None
    supplier_id: int | None = None
    notes: str | None = None
    is_active: bool | None = None


# =============================================================================
# Yield Test Schemas
# =============================================================================


class YieldTestOutput(BaseModel):
    id: int
    raw_material_id: int
    test_date: datetime
    ap_weight: float
    ep_weight: float
    yield_percentage: float
    notes: str | None = None
    raw_material: MaterialBrief | None = None

    class Config:
        from_attributes = True


class YieldTestCreate(BaseModel):
    raw_material_id: int
    test_date: datetime
    ap_weight: float
    ep_weight: float
    notes: str | None = None


class YieldTestUpdate(BaseModel):
    raw_material_id: int | None = None
    test_date: datetime | None = None
    ap_weight: float | None = None
    ep_weight: float | None = None
    notes: str | None = None


class YieldAverageOutput(BaseModel):
    raw_material_id: int
    average_yield: float
    test_count: int
    latest_yield: float | None = None


class MaterialDetailOutput(MaterialOutput):
    """Material with its most recent yield tests."""

    recent_yield_tests: list[YieldTestOutput] = Field(default_factory=list)


# =============================================================================
# Menu Item Schemas
# =============================================================================


class MenuItemBrief(BaseModel):
    id: int
    code: str
    name: str
    category: str | None = None
    standard_portion: int

    class Config:
        from_attributes = True


class MenuItemOutput(BaseModel):
    id: int
    code: str
    name: str
    category: str | None = None
    standard_portion: int
    standard_portion_unit: str
    standard_labor_hours: float
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class MenuItemCreate(BaseModel):
    code: str
    name: str
    category: str | None = None
    standard_portion: int = 1
    standard_portion_unit: str
    standard_labor_hours: float = 0.0
    is_active: bool = True


class MenuItemUpdate(BaseModel):
    code: str | None = None
    name: str | None = None
    category: str | None = None
    standard_portion: int | None = None
    standard_portion_unit: str | None = None
    standard_labor_hours: float | None = None
    is_active: bool | None = None


class MenuPricingOutput(BaseModel):
    id: int
    menu_item_id: int
    selling_price: float
    effective_date: datetime
    notes: str | None = None

    class Config:
        from_attributes = True


class MenuPricingCreate(BaseModel):
    selling_price: float
    effective_date: datetime | None = None
    notes: str | None = None


# =============================================================================
# Recipe Schemas
# =============================================================================


class RecipeDetailOutput(BaseModel):
    id: int
    menu_item_id: int
    raw_material_id: int
    quantity: float
    unit: str
    sequence: int
    notes: str | None = None
    raw_material: MaterialBrief | None = None

    class Config:
        from_attributes = True


class RecipeDetailCreate(BaseModel):
    raw_material_id: int
    quantity: float
    unit: str
    sequence: int | None = None
    notes: str | None = None


class RecipeDetailUpdate(BaseModel):
    raw_material_id: int | None = None
    quantity: float | None = None
    unit: str | None = None
    sequence: int | None = None
    notes: str | None = None


class RecipeDuplicateRequest(BaseModel):
    target_menu_item_id: int | None = None


class RecipeDuplicateOutput(BaseModel):
    message: str
    count: int


# =============================================================================
# Production Log Schemas
# =============================================================================


class ProductionDetailOutput(BaseModel):
    id: int
    production_log_id: int
    raw_material_id: int | None = None
    quantity_used: float
    unit: str
    unit_price: float
    subtotal: float
    raw_material: MaterialBrief | None = None

    class Config:
        from_attributes = True


class ProductionDetailCreate(BaseModel):
    raw_material_id: int
    quantity_used: float
    unit: str
    unit_price: float


class ProductionDetailUpdate(BaseModel):
    raw_material_id: int | None = None
    quantity_used: float | None = None
    unit: str | None = None
    unit_price: float | None = None


class ProductionLogOutput(BaseModel):
    id: int
    menu_item_id: int
    production_date: datetime
    portions_produced: int
    portions_sold: int | None = None
    labor_hours_actual: float | None = None
    notes: str | None = None
    menu_item: MenuItemBrief | None = None

    class Config:
        from_attributes = True


class ProductionLogDetailOutput(ProductionLogOutput):
    """Production log with its material usage lines."""

    details: list[ProductionDetailOutput] = Field(default_factory=list)


class ProductionLogCreate(BaseModel):
    menu_item_id: int
    production_date: datetime
    portions_produced: int
    portions_sold: int | None = None
    labor_hours_actual: float | None = None
    notes: str | None = None


class ProductionLogUpdate(BaseModel):
    menu_item_id: int | None = None
    production_date: datetime | None = None
    portions_produced: int | None = None
    portions_sold: int | None = None
    labor_hours_actual: float | None = None
    notes: str | None = None


# =============================================================================
# Cost Standard Schemas
# =============================================================================


class CostStandardOutput(BaseModel):
    id: int
    menu_item_id: int
    effective_date: datetime
    material_cost: float
    labor_cost: float
    overhead_cost: float
    total_cost: float
    cost_per_portion: float

    class Config:
        from_attributes = True

    @field_serializer(
        "material_cost", "labor_cost", "overhead_cost", "total_cost", "cost_per_portion"
    )
    def _round_amounts(self, value: float) -> float:
        return round_money(value)


class CurrentCostStandardOutput(CostStandardOutput):
    menu_item: MenuItemBrief | None = None


class CostLineOutput(BaseModel):
    raw_material_id: int | None = None
    material_code: str | None = None
    material_name: str | None = None
    quantity: float
    unit: str | None = None
    current_price: float
    yield_percentage: float
    yield_adjusted_price: float
    item_cost: float


class CostBreakdownOutput(BaseModel):
    """Rounded to 2 decimals."""

    material_cost: float
    labor_cost: float
    overhead_cost: float
    total_cost: float
    cost_per_portion: float
    standard_portion: int
    labor_rate_per_hour: float
    allocation_method: str | None = None
    lines: list[CostLineOutput] = Field(default_factory=list)


class CostCalculationOutput(BaseModel):
    cost_standard: CostStandardOutput
    breakdown: CostBreakdownOutput


# =============================================================================
# Variance Schemas
# =============================================================================


class VarianceRecordOutput(BaseModel):
    id: int
    menu_item_id: int
    production_log_id: int
    variance_date: datetime
    standard_cost: float
    actual_cost: float
    variance_amount: float
    variance_percentage: float
    variance_type: str
    notes: str | None = None
    menu_item: MenuItemBrief | None = None

    class Config:
        from_attributes = True

    @field_serializer(
        "standard_cost", "actual_cost", "variance_amount", "variance_percentage"
    )
    def _round_amounts(self, value: float) -> float:
        return round_money(value)


class CategoryVarianceOutput(BaseModel):
    standard: float
    actual: float
    variance: float
    classification: str


class VarianceCategoriesOutput(BaseModel):
    material: CategoryVarianceOutput
    labor: CategoryVarianceOutput
    overhead: CategoryVarianceOutput


class VarianceAnalysisOutput(BaseModel):
    """Rounded to 2 decimals. Negative variance is favorable."""

    standard_cost: float
    actual_cost: float
    variance: float
    variance_percentage: float
    classification: str
    portions_produced: int
    breakdown: VarianceCategoriesOutput


class VarianceCalculationOutput(BaseModel):
    variance_record: VarianceRecordOutput
    analysis: VarianceAnalysisOutput


class VarianceSummaryOutput(BaseModel):
    total_variance: float
    average_variance_percentage: float
    favorable_count: int
    unfavorable_count: int
    total_records: int
    variances: list[VarianceRecordOutput] = Field(default_factory=list)


# =============================================================================
# Report Schemas
# =============================================================================


class ProfitabilityRowOutput(BaseModel):
    menu_item_id: int
    menu_name: str
    category: str | None = None
    total_sold: int
    cost_per_portion: float
    selling_price: float
    margin: float
    margin_percentage: float
    total_revenue: float
    total_cost: float
    total_profit: float


class MonthlySummaryOutput(BaseModel):
    period: str
    total_revenue: float
    total_cost: float
    total_material_cost: float
    total_labor_cost: float
    total_overhead_cost: float
    food_cost_percentage: float
    labor_cost_percentage: float
    overhead_cost_percentage: float
    net_profit: float
    profit_margin: float
    production_count: int


class CostTrendOutput(BaseModel):
    date: str
    average_total_cost: float
    average_material_cost: float
    average_labor_cost: float
    average_overhead_cost: float
    record_count: int


class DashboardCounts(BaseModel):
    suppliers: int
    materials: int
    menu_items: int
    recent_production: int


class DashboardVariance(BaseModel):
    average: float
    recent_count: int


class DashboardOutput(BaseModel):
    counts: DashboardCounts
    variance: DashboardVariance
