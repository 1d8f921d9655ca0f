"""
Error handling middleware.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.authorization_error import AuthorizationError
from marketplace.domain.exceptions.claim_error import (
    ClaimError,
    JobAlreadyClaimedError,
)
from marketplace.domain.exceptions.not_found_error import NotFoundError
from marketplace.domain.exceptions.upstream_error import UpstreamServiceError
from marketplace.domain.exceptions.validation_error import ValidationError
from marketplace.infrastructure.monitoring.metrics import record_error

logger = get_logger(__name__)


def _error(status_code: int, error: str, message: str, error_type: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "type": error_type},
    )


class ErrorHandlerMiddleware:
    """Registers the application's exception handlers on a FastAPI app."""

    def __init__(self, app: FastAPI):
        self.app = app
        self.add_error_handlers()

    def add_error_handlers(self) -> None:
        """Add custom error handlers to FastAPI app."""
        add_error_handlers(self.app)


def add_error_handlers(app: FastAPI) -> None:
    """Add custom error handlers to FastAPI app."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning("Validation error", error=str(exc), path=request.url.path)
        return _error(400, "Validation Error", str(exc), "validation_error")

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(request: Request, exc: NotFoundError):
        logger.info("Resource not found", error=str(exc), path=request.url.path)
        return _error(404, "Not Found", str(exc), "not_found")

    @app.exception_handler(AuthorizationError)
    async def authorization_error_handler(request: Request, exc: AuthorizationError):
        logger.warning("Authorization error", error=str(exc), path=request.url.path)
        return _error(403, "Forbidden", str(exc), "authorization_error")

    @app.exception_handler(JobAlreadyClaimedError)
    async def already_claimed_handler(request: Request, exc: JobAlreadyClaimedError):
        logger.info("Job already claimed", job_id=exc.job_id, path=request.url.path)
        return _error(409, "Conflict", str(exc), "already_claimed")

    @app.exception_handler(ClaimError)
    async def claim_error_handler(request: Request, exc: ClaimError):
        logger.warning("Claim error", error=str(exc), path=request.url.path)
        return _error(409, "Conflict", str(exc), "claim_error")

    @app.exception_handler(UpstreamServiceError)
    async def upstream_error_handler(request: Request, exc: UpstreamServiceError):
        logger.error(
            "Upstream service error",
            service=exc.service,
            error=str(exc),
            path=request.url.path,
        )
        record_error("upstream_error", exc.service)
        return _error(502, "Upstream Error", str(exc), "upstream_error")

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error", error=str(exc), path=request.url.path)
        record_error("database_error", "api")
        return _error(500, "Database Error", "A database error occurred", "database_error")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "HTTP Error", "message": exc.detail, "type": "http_error"},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            path=request.url.path,
            exc_info=exc,
        )
        record_error(type(exc).__name__, "api")
        return _error(
            500, "Internal Server Error", "An unexpected error occurred", "internal_error"
        )
