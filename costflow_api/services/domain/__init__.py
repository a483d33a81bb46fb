"""
Domain Services.

Each service wraps one aggregate: it reads through repositories, applies
business rules (or calls the costing engine) and commits one unit of work.

Usage:
    from costflow_api.services.domain import CostStandardService, VarianceService

    standard, breakdown = CostStandardService(db).calculate(menu_item_id)
    record, analysis = VarianceService(db).calculate(production_log_id)
"""

from .settings_service import (
    BusinessSettingsProvider,
    OverheadPolicyProvider,
    OverheadPolicyService,
    SettingsService,
)
from .supplier_service import SupplierService
from .material_service import MaterialService
from .menu_service import MenuItemService, RecipeService
from .yield_service import YieldTestService
from .production_service import ProductionLogService
from .cost_service import CostStandardService
from .variance_service import VarianceService
from .report_service import ReportService

__all__ = [
    "BusinessSettingsProvider",
    "OverheadPolicyProvider",
    "OverheadPolicyService",
    "SettingsService",
    "SupplierService",
    "MaterialService",
    "MenuItemService",
    "RecipeService",
    "YieldTestService",
    "ProductionLogService",
    "CostStandardService",
    "VarianceService",
    "ReportService",
]
