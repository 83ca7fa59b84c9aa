"""
Request/Response logging middleware.

Provides structured logging for all API requests with:
- Request timing
- Correlation IDs for tracing
- Redaction of credentials and truncation of photo payloads
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Set

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("kitcheckout.api")


@dataclass
class LoggingConfig:
    """Configuration for request logging."""

    enabled: bool = True

    # Log request bodies
    log_request_body: bool = False

    # Maximum body size to log (bytes); photo uploads are usually larger
    max_body_log_size: int = 4000

    # Paths to exclude from logging
    excluded_paths: Set[str] = field(default_factory=lambda: {
        "/health",
        "/favicon.ico",
    })

    # Headers to exclude from logging (sensitive)
    excluded_headers: Set[str] = field(default_factory=lambda: {
        "authorization",
        "cookie",
        "set-cookie",
    })

    # Fields to redact in request bodies
    redacted_fields: Set[str] = field(default_factory=lambda: {
        "password",
        "admin_code",
        "token",
        "access_token",
    })

    # Fields holding data URLs, logged by size only
    data_url_fields: Set[str] = field(default_factory=lambda: {
        "photo",
        "default_image",
        "logo_data_url",
    })

    slow_request_threshold: float = 1.0

    request_id_header: str = "X-Request-ID"


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        if hasattr(record, "request_data"):
            log_data["request"] = record.request_data
        if hasattr(record, "duration_ms"):
            log_data["duration_ms"] = record.duration_ms

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def redact_sensitive_data(
    data: Any,
    redacted_fields: Set[str],
    data_url_fields: Set[str] = frozenset(),
    replacement: str = "[REDACTED]",
) -> Any:
    """
    Recursively redact sensitive fields from a data structure.

    Args:
        data: Data to redact (dict, list, or primitive).
        redacted_fields: Field names replaced outright.
        data_url_fields: Field names replaced by a size marker.
        replacement: Replacement string for redacted values.

    Returns:
        Data with sensitive fields redacted.
    """
    if isinstance(data, dict):
        cleaned = {}
        for key, value in data.items():
            lowered = key.lower()
            if lowered in redacted_fields:
                cleaned[key] = replacement
            elif lowered in data_url_fields and isinstance(value, str):
                cleaned[key] = f"[{len(value)} chars]"
            else:
                cleaned[key] = redact_sensitive_data(value, redacted_fields, data_url_fields, replacement)
        return cleaned
    elif isinstance(data, list):
        return [redact_sensitive_data(item, redacted_fields, data_url_fields, replacement) for item in data]
    else:
        return data


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """FastAPI middleware for request/response logging."""

    def __init__(self, app: FastAPI, config: Optional[LoggingConfig] = None):
        super().__init__(app)
        self.config = config or LoggingConfig()

    def _should_log(self, path: str) -> bool:
        return path not in self.config.excluded_paths

    def _filter_headers(self, headers: Dict[str, str]) -> Dict[str, str]:
        return {
            key: value if key.lower() not in self.config.excluded_headers else "[REDACTED]"
            for key, value in headers.items()
        }

    async def _get_request_body(self, request: Request) -> Optional[str]:
        """Safely get request body for logging."""
        body = await request.body()
        if not body:
            return None

        try:
            body_json = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            if len(body) > self.config.max_body_log_size:
                return f"[BODY TOO LARGE: {len(body)} bytes]"
            return body.decode("utf-8", errors="replace")

        body_json = redact_sensitive_data(
            body_json,
            self.config.redacted_fields,
            self.config.data_url_fields,
        )
        text = json.dumps(body_json)
        if len(text) > self.config.max_body_log_size:
            return f"[BODY TOO LARGE: {len(body)} bytes]"
        return text

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(
            self.config.request_id_header,
            str(uuid.uuid4())[:8],
        )
        request_id_var.set(request_id)

        if not self.config.enabled or not self._should_log(request.url.path):
            response = await call_next(request)
            response.headers[self.config.request_id_header] = request_id
            return response

        start_time = time.time()

        request_data = {
            "method": request.method,
            "path": request.url.path,
            "query": str(request.url.query) if request.url.query else None,
            "headers": self._filter_headers(dict(request.headers)),
            "client_ip": request.client.host if request.client else None,
        }

        if self.config.log_request_body:
            body = await self._get_request_body(request)
            if body:
                request_data["body"] = body

        response = await call_next(request)

        duration = time.time() - start_time
        duration_ms = round(duration * 1000, 2)

        response.headers[self.config.request_id_header] = request_id

        if response.status_code >= 500:
            log_level = logging.ERROR
        elif response.status_code >= 400 or duration > self.config.slow_request_threshold:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        message = f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)"
        if duration > self.config.slow_request_threshold:
            message = f"[SLOW] {message}"

        logger.log(log_level, message, extra={"request_data": request_data, "duration_ms": duration_ms})

        return response


def setup_logging(
    app: FastAPI,
    config: Optional[LoggingConfig] = None,
    structured: bool = True,
) -> None:
    """
    Configure logging middleware and formatters.

    Args:
        app: FastAPI application instance.
        config: Logging configuration.
        structured: Use JSON structured logging format.
    """
    if config is None:
        config = LoggingConfig()

    if structured:
        api_logger = logging.getLogger("kitcheckout")
        if not any(isinstance(h.formatter, StructuredLogFormatter) for h in api_logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredLogFormatter())
            api_logger.addHandler(handler)
        api_logger.setLevel(logging.INFO)

    app.add_middleware(RequestLoggingMiddleware, config=config)
