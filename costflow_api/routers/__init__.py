"""
API routers, one module per resource.
"""

from .health import router as health_router
from .settings import router as settings_router
from .suppliers import router as suppliers_router
from .materials import router as materials_router
from .menu_items import router as menu_items_router
from .recipes import router as recipes_router
from .yield_tests import router as yield_tests_router
from .production_logs import router as production_logs_router
from .cost_standards import router as cost_standards_router
from .variance import router as variance_router
from .reports import router as reports_router

__all__ = [
    "health_router",
    "settings_router",
    "suppliers_router",
    "materials_router",
    "menu_items_router",
    "recipes_router",
    "yield_tests_router",
    "production_logs_router",
    "cost_standards_router",
    "variance_router",
    "reports_router",
]
