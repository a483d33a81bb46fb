"""
REST API main application.
Entry point for the CostFlow FastAPI server.
"""

from fastapi import FastAPI

from costflow_api.core import configure_cors, lifespan, register_middlewares
from costflow_api.routers import (
    cost_standards_router,
    health_router,
    materials_router,
    menu_items_router,
    production_logs_router,
    recipes_router,
    reports_router,
    settings_router,
    suppliers_router,
    variance_router,
    yield_tests_router,
)
from costflow_shared.config.settings import settings
from costflow_shared.infrastructure.correlation import CorrelationIdMiddleware


app = FastAPI(
    title="CostFlow API",
    description="Food cost accounting: cost standards, variance analysis and profitability reports",
    version="1.0.0",
    lifespan=lifespan,
)

configure_cors(app)
register_middlewares(app)
# Added last so it wraps every other middleware and all log lines carry the ID
app.add_middleware(CorrelationIdMiddleware)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(settings_router)
app.include_router(suppliers_router)
app.include_router(materials_router)
app.include_router(menu_items_router)
app.include_router(recipes_router)
app.include_router(yield_tests_router)
app.include_router(production_logs_router)
app.include_router(cost_standards_router)
app.include_router(variance_router)
app.include_router(reports_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "costflow_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=settings.debug,
    )
