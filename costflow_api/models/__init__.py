"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class and AuditMixin
- supplier: Supplier
- material: RawMaterial, YieldTest
- menu: MenuItem, RecipeDetail, MenuPricing
- business: BusinessSettings, OverheadConfig
- costing: CostStandard, VarianceRecord
- production: ProductionLog, ProductionLogDetail
"""

# Base classes
from .base import Base, AuditMixin

# Purchasing
from .supplier import Supplier
from .material import RawMaterial, YieldTest

# Menu and recipes
from .menu import MenuItem, RecipeDetail, MenuPricing

# Business configuration
from .business import BusinessSettings, OverheadConfig

# Production
from .production import ProductionLog, ProductionLogDetail

# Costing snapshots
from .costing import CostStandard, VarianceRecord

__all__ = [
    "Base",
    "AuditMixin",
    "Supplier",
    "RawMaterial",
    "YieldTest",
    "MenuItem",
    "RecipeDetail",
    "MenuPricing",
    "BusinessSettings",
    "OverheadConfig",
    "ProductionLog",
    "ProductionLogDetail",
    "CostStandard",
    "VarianceRecord",
]
