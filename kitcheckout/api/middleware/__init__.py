"""
API middleware components.

Provides cross-cutting concerns for the API:
- Error handling
- Request/response logging
"""

from .error_handler import (
    setup_exception_handlers,
    create_error_response,
)

from .logging import (
    LoggingConfig,
    StructuredLogFormatter,
    RequestLoggingMiddleware,
    setup_logging,
    get_request_id,
    redact_sensitive_data,
)


__all__ = [
    # Error handling
    "setup_exception_handlers",
    "create_error_response",
    # Logging
    "LoggingConfig",
    "StructuredLogFormatter",
    "RequestLoggingMiddleware",
    "setup_logging",
    "get_request_id",
    "redact_sensitive_data",
]
