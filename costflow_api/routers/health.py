"""
Health check endpoints.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from costflow_shared.config.logging import rest_api_logger as logger
from costflow_shared.config.settings import settings
from costflow_shared.infrastructure.db import get_db


router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check() -> dict:
    """Basic liveness check."""
    return {
        "status": "healthy",
        "service": "costflow-api",
        "environment": settings.environment,
    }


@router.get("/health/detailed")
def health_check_detailed(db: Session = Depends(get_db)):
    """
    Readiness check including the database connection.
    Returns 503 when the database does not answer.
    """
    checks: dict[str, dict] = {}
    try:
        db.execute(text("SELECT 1"))
        checks["database"] = {"status": "healthy"}
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        checks["database"] = {"status": "unhealthy", "error": str(e)}

    healthy = all(c["status"] == "healthy" for c in checks.values())
    body = {
        "status": "healthy" if healthy else "unhealthy",
        "service": "costflow-api",
        "checks": checks,
    }
    if not healthy:
        return JSONResponse(status_code=503, content=body)
    return body
