"""
Error Handling for KitCheckout API

Centralized error handling:
- Structured error responses
- Logging of errors
- Exception translation
"""

import traceback

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from kitcheckout.errors import CheckoutError
from kitcheckout.utils import utcnow
from .logging import get_request_id


def create_error_response(
    error: str,
    code: str,
    status_code: int,
    detail: str = None,
) -> JSONResponse:
    """Create standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "code": code,
            "detail": detail,
            "request_id": get_request_id() or None,
            "timestamp": utcnow().isoformat(),
        },
    )


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(CheckoutError)
    async def checkout_exception_handler(request: Request, exc: CheckoutError):
        if exc.status_code >= 500:
            logger.error(f"KitCheckout error: {exc.code} - {exc.message} ({request.url.path})")
        else:
            logger.warning(f"KitCheckout error: {exc.code} - {exc.message} ({request.url.path})")
        return create_error_response(
            error=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.detail,
        )

    @app.exception_handler(PydanticValidationError)
    async def validation_exception_handler(request: Request, exc: PydanticValidationError):
        logger.warning(f"Validation error: {str(exc)}")
        return create_error_response(
            error="Validation Error",
            code="VALIDATION_ERROR",
            status_code=400,
            detail=str(exc),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}\n{traceback.format_exc()}"
        )
        return create_error_response(
            error="Internal Server Error",
            code="INTERNAL_ERROR",
            status_code=500,
            detail="An unexpected error occurred",
        )
