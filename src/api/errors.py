"""
Global exception handlers.

Every failing endpoint answers with an ErrorResponse body.
"""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.exceptions import BusinessError, ResourceNotFoundError
from src.schemas import ErrorResponse

logger = structlog.get_logger(__name__)

_REASONS = {
    400: "Bad Request",
    404: "Not Found",
    405: "Method Not Allowed",
    500: "Internal Server Error",
    503: "Service Unavailable",
}


def error_response(request: Request, status: int, message: str) -> JSONResponse:
    """Build a JSONResponse carrying an ErrorResponse body."""
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status,
        error=_REASONS.get(status, "Error"),
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status, content=jsonable_encoder(body))


def setup_error_handlers(app: FastAPI) -> None:
    """Register global error handlers on the FastAPI app."""

    @app.exception_handler(ResourceNotFoundError)
    async def not_found_handler(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
        logger.info("resource_not_found", path=request.url.path, message=str(exc))
        return error_response(request, 404, str(exc))

    @app.exception_handler(BusinessError)
    async def business_error_handler(request: Request, exc: BusinessError) -> JSONResponse:
        logger.warning("business_error", path=request.url.path, message=str(exc))
        return error_response(request, 400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        logger.info("request_validation_failed", path=request.url.path, details=details)
        return error_response(request, 400, f"Validation error: {details}")

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(request, exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unexpected_error",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        # Internal details stay in the log
        return error_response(request, 500, "An unexpected error occurred")
