"""
FastAPI application factory.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.api.middleware.error_handler import ErrorHandlerMiddleware
from marketplace.api.middleware.logging import LoggingMiddleware
from marketplace.api.routes import (
    appointments,
    availability,
    contractors,
    health,
    jobs,
    webhooks,
)
from marketplace.config.database import dispose_engine
from marketplace.config.logging import get_logger
from marketplace.config.settings import settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Application startup", environment=settings.ENVIRONMENT)
    yield
    await dispose_engine()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Contractor marketplace scheduling and job claiming service",
        openapi_url=f"{settings.API_PREFIX}/openapi.json" if settings.DEBUG else None,
        docs_url=f"{settings.API_PREFIX}/docs" if settings.DEBUG else None,
        redoc_url=f"{settings.API_PREFIX}/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware
    ErrorHandlerMiddleware(app)
    LoggingMiddleware(app)

    # Add routes
    app.include_router(health.router, prefix=settings.API_PREFIX, tags=["health"])
    app.include_router(jobs.router, prefix=settings.API_PREFIX, tags=["jobs"])
    app.include_router(
        availability.router, prefix=settings.API_PREFIX, tags=["availability"]
    )
    app.include_router(
        appointments.router, prefix=settings.API_PREFIX, tags=["appointments"]
    )
    app.include_router(
        contractors.router, prefix=settings.API_PREFIX, tags=["contractors"]
    )
    app.include_router(webhooks.router, prefix=settings.API_PREFIX, tags=["webhooks"])

    return app
