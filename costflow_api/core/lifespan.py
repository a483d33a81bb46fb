"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from costflow_api.models import Base
from costflow_shared.config.logging import rest_api_logger as logger, setup_logging
from costflow_shared.config.settings import settings
from costflow_shared.infrastructure.db import engine


def check_configuration() -> None:
    """
    Log configuration problems and refuse to start with them in production.

    Raises:
        RuntimeError: If the environment is production and settings are unsafe.
    """
    config_errors = settings.validate_production_settings()
    if not config_errors:
        return

    for error in config_errors:
        logger.error("Configuration error", error=error)
    if settings.environment == "production":
        raise RuntimeError(
            f"Production configuration errors: {'; '.join(config_errors)}. "
            "Server will not start with unsafe configuration."
        )


def create_tables() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    setup_logging()
    check_configuration()

    logger.info("Starting CostFlow API", port=settings.rest_api_port, env=settings.environment)
    create_tables()

    yield

    logger.info("Shutting down CostFlow API")
    engine.dispose()
