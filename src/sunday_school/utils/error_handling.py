"""
Centralized error handling and logging.

Every error response has the shape {"error": "<message>"} plus a trace id
and timestamp; the same trace id is logged and returned in X-Trace-ID.
"""

import json
import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
from contextvars import ContextVar

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

# Context variables for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)

class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    # Security settings
    SANITIZE_SENSITIVE_FIELDS = True
    SENSITIVE_FIELD_PATTERNS = [
        'password', 'token', 'key', 'secret', 'authorization',
        'auth', 'bearer', 'credential', 'api_key'
    ]

    # Logging settings
    LOG_HEADERS = True
    LOG_CLIENT_ERRORS = True
    MAX_BODY_LOG_SIZE = 5000  # Truncate large values

    # Error response settings
    INCLUDE_TRACE_ID = True
    INCLUDE_TIMESTAMP = True

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        """Check if a field contains sensitive data"""
        field_lower = field_name.lower()
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data: Union[Dict, str, Any]) -> Any:
        """Recursively sanitize sensitive data from logs"""
        if not cls.SANITIZE_SENSITIVE_FIELDS:
            return data

        if isinstance(data, dict):
            return {
                key: "***REDACTED***" if cls.is_sensitive_field(str(key)) else cls.sanitize_data(value)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [cls.sanitize_data(item) for item in data]
        elif isinstance(data, str) and len(data) > cls.MAX_BODY_LOG_SIZE:
            return data[:cls.MAX_BODY_LOG_SIZE] + "...[TRUNCATED]"
        else:
            return data

def _new_trace_id() -> str:
    return str(uuid.uuid4())[:8]

def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()

class StructuredLogger:
    """Structured logging with consistent format and context"""

    @staticmethod
    def log_error(
        error_type: str,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        extra_context: Optional[Dict] = None,
        include_traceback: bool = True,
        level: int = logging.ERROR
    ) -> str:
        """Log structured error with full context, returning the trace id"""

        trace_id = request_id_var.get('') or _new_trace_id()

        log_entry = {
            "timestamp": _utc_timestamp(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": logging.getLevelName(level)
        }

        if request:
            headers = dict(request.headers)
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": ErrorHandlingConfig.sanitize_data(dict(request.query_params)),
                "headers": ErrorHandlingConfig.sanitize_data(headers) if ErrorHandlingConfig.LOG_HEADERS else {},
                "client_ip": request.client.host if request.client else None,
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception),
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = "".join(
                    traceback.format_exception(type(exception), exception, exception.__traceback__)
                )

        if extra_context:
            log_entry["context"] = ErrorHandlingConfig.sanitize_data(extra_context)

        logger.log(level, json.dumps(log_entry, indent=2, default=str))

        return trace_id

class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a trace id to every request"""

    async def dispatch(self, request: Request, call_next):
        trace_id = _new_trace_id()
        request_id_var.set(trace_id)
        request.state.trace_id = trace_id

        response = await call_next(request)
        response.headers["X-Trace-ID"] = trace_id
        return response

def error_response(status_code: int, message: str, trace_id: Optional[str] = None, **extra) -> JSONResponse:
    """Build the {"error": ...} response body"""
    content = {"error": message}
    content.update(extra)

    if ErrorHandlingConfig.INCLUDE_TRACE_ID and trace_id:
        content["traceId"] = trace_id

    if ErrorHandlingConfig.INCLUDE_TIMESTAMP:
        content["timestamp"] = _utc_timestamp()

    return JSONResponse(status_code=status_code, content=content)

# Global Exception Handlers
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions raised by routes"""

    trace_id = None
    if exc.status_code >= 500 or ErrorHandlingConfig.LOG_CLIENT_ERRORS:
        trace_id = StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            exception=exc if exc.status_code >= 500 else None,
            extra_context={"status_code": exc.status_code},
            include_traceback=False,
            level=logging.ERROR if exc.status_code >= 500 else logging.WARNING
        )

    return error_response(exc.status_code, str(exc.detail), trace_id)

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors as client errors (HTTP 400)"""

    validation_details = []
    for error in exc.errors():
        validation_details.append({
            "field": " -> ".join(str(loc) for loc in error.get("loc", []) if loc != "body"),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "unknown"),
        })

    message = "; ".join(
        f"{detail['field']}: {detail['message']}" if detail["field"] else detail["message"]
        for detail in validation_details
    ) or "Request validation failed"

    trace_id = StructuredLogger.log_error(
        "validation_error_400",
        f"Request validation failed: {len(validation_details)} validation errors",
        request=request,
        extra_context={"validation_errors": validation_details},
        include_traceback=False,
        level=logging.WARNING
    )

    return error_response(400, message, trace_id, detail=validation_details)

async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all other exceptions, surfacing the underlying message"""

    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        include_traceback=True
    )

    return error_response(500, str(exc) or "An unexpected error occurred", trace_id)

def setup_error_handling(app):
    """Setup error handling for FastAPI app"""

    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling initialized")

# Maps ServiceResult.error_type onto HTTP status codes
ERROR_STATUS = {
    "INVALID_QUERY": 400,
    "RESOURCE_NOT_FOUND": 404,
}

def status_for(error_type: Optional[str]) -> int:
    return ERROR_STATUS.get(error_type or "", 500)
