"""Global exception handlers for the FastAPI application.

Every error that leaves a route is classified here exactly once: it gets one
HTTP status, one log event and one ErrorResponse body.

Status mapping for the forum taxonomy:
- input validation and persistence failures: 422
- password and token failures: 416, with a fixed generic message
- missing or rejected session: 401
- moderation and task scheduling failures: 500
"""

import traceback
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from forum.api.constants import (
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_416_RANGE_NOT_SATISFIABLE,
    HTTP_422_UNPROCESSABLE_CONTENT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    ROUTE_NOT_FOUND_MESSAGE,
)
from forum.api.schemas.errors import ErrorResponse, ServiceInfo
from forum.api.utils.responses import ORJSONResponse
from forum.core.config import Settings, get_settings
from forum.core.context import RequestContext, generate_request_id
from forum.core.error_context import sanitize_error_context
from forum.core.exceptions import (
    CredentialError,
    DatabaseQueryError,
    ErrorCode,
    ForumError,
    Severity,
    UnauthorizedError,
    ValidationError,
)


def get_service_info(settings: Settings) -> ServiceInfo:
    """Create ServiceInfo from application settings.

    Args:
        settings: Application settings

    Returns:
        ServiceInfo: Instance with current service metadata
    """
    return ServiceInfo(
        name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )


def status_for(exc: ForumError) -> int:
    """Map an error of the forum taxonomy to its HTTP status.

    Args:
        exc: The error to classify.

    Returns:
        int: The response status code.
    """
    if isinstance(exc, ValidationError | DatabaseQueryError):
        return HTTP_422_UNPROCESSABLE_CONTENT
    if isinstance(exc, CredentialError):
        return HTTP_416_RANGE_NOT_SATISFIABLE
    if isinstance(exc, UnauthorizedError):
        return HTTP_401_UNAUTHORIZED
    return HTTP_500_INTERNAL_SERVER_ERROR


def _current_request_id() -> str:
    return RequestContext.get_request_id() or generate_request_id()


def _error_json(status_code: int, error_response: ErrorResponse) -> Response:
    return ORJSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


async def forum_error_handler(request: Request, exc: Exception) -> Response:
    """Handle ForumError exceptions.

    Credential and session failures are answered without details or debug
    information so the client can't learn why they failed.

    Args:
        request: The FastAPI request that caused the exception
        exc: The ForumError exception to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not a ForumError instance
    """
    if not isinstance(exc, ForumError):
        raise TypeError(f"Expected ForumError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()
    status_code = status_for(exc)

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
            "error_code": exc.error_code,
            "status_code": status_code,
        },
    )
    if exc.cause is not None:
        error_context["cause_type"] = type(exc.cause).__name__

    logger.error(
        "Handling {exception_type}: {message}",
        exception_type=type(exc).__name__,
        message=exc.message,
        correlation_id=correlation_id,
        **error_context,
    )

    opaque = isinstance(exc, CredentialError | UnauthorizedError)
    details = None if opaque or not exc.context else exc.context

    debug_info: dict[str, Any] | None = None
    if settings.environment == "development" and not opaque:
        debug_info = {
            "stack_trace": exc.stack_trace,
            "error_context": exc.context,
            "exception_type": type(exc).__name__,
        }
        if exc.cause:
            debug_info["cause"] = {
                "type": type(exc.cause).__name__,
                "message": str(exc.cause),
            }

    error_response = ErrorResponse(
        error_code=exc.error_code,
        message=exc.message,
        details=details,
        correlation_id=correlation_id,
        request_id=_current_request_id(),
        severity=exc.severity.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )
    return _error_json(status_code, error_response)


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Handle FastAPI RequestValidationError exceptions.

    Args:
        request: The FastAPI request that caused the exception
        exc: The RequestValidationError exception to handle

    Returns:
        Response: ORJSONResponse with field-level validation errors

    Raises:
        TypeError: If exc is not a RequestValidationError instance
    """
    if not isinstance(exc, RequestValidationError):
        raise TypeError(f"Expected RequestValidationError, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    # ['body', 'title'] -> 'title'
    field_errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field_path = error.get("loc", ())
        field_name = ".".join(str(loc) for loc in field_path[1:] if loc != "__root__")
        field_errors.setdefault(field_name or "root", []).append(
            error.get("msg", "Invalid value")
        )

    error_context = sanitize_error_context(
        exc,
        {
            "path": str(request.url.path),
            "method": request.method,
            "validation_errors": field_errors,
        },
    )

    logger.warning(
        "Request validation failed",
        correlation_id=correlation_id,
        status_code=HTTP_422_UNPROCESSABLE_CONTENT,
        **error_context,
    )

    error_response = ErrorResponse(
        error_code=ErrorCode.VALIDATION_ERROR.value,
        message="Request validation failed",
        details={"validation_errors": field_errors},
        correlation_id=correlation_id,
        request_id=_current_request_id(),
        severity=Severity.LOW.value,
        service_info=get_service_info(settings),
    )
    return _error_json(HTTP_422_UNPROCESSABLE_CONTENT, error_response)


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle Starlette HTTPException.

    Unmatched routes are answered with ``Route not found``; other framework
    errors (405 and friends) keep their status and detail.

    Args:
        request: The FastAPI request that caused the exception
        exc: The HTTPException to handle

    Returns:
        Response: ORJSONResponse with error details

    Raises:
        TypeError: If exc is not an HTTPException instance
    """
    if not isinstance(exc, HTTPException):
        raise TypeError(f"Expected HTTPException, got {type(exc).__name__}")

    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    if exc.status_code == HTTP_404_NOT_FOUND:
        error_code = ErrorCode.NOT_FOUND.value
        message = ROUTE_NOT_FOUND_MESSAGE
        severity = Severity.LOW
    elif exc.status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        error_code = ErrorCode.INTERNAL_ERROR.value
        message = str(exc.detail)
        severity = Severity.HIGH
    else:
        error_code = ErrorCode.VALIDATION_ERROR.value
        message = str(exc.detail)
        severity = Severity.LOW

    error_context = sanitize_error_context(
        exc,
        {
            "status": exc.status_code,
            "method": request.method,
            "path": str(request.url.path),
            "detail": exc.detail,
        },
    )

    logger.warning(
        "HTTP exception: {http_message}",
        http_message=message,
        correlation_id=correlation_id,
        **error_context,
    )

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        correlation_id=correlation_id,
        request_id=_current_request_id(),
        severity=severity.value,
        service_info=get_service_info(settings),
    )
    return ORJSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(mode="json"),
        headers=exc.headers,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle exceptions outside the forum taxonomy.

    In production, hides internal error details from clients.

    Args:
        request: The FastAPI request that caused the exception
        exc: The unhandled exception

    Returns:
        Response: ORJSONResponse with generic error message
    """
    settings = get_settings()
    correlation_id = RequestContext.get_correlation_id()

    error_context = sanitize_error_context(
        exc,
        {
            "request_method": request.method,
            "request_path": str(request.url.path),
        },
    )

    logger.opt(exception=exc).error(
        "Unhandled exception: {exception_type}",
        exception_type=type(exc).__name__,
        correlation_id=correlation_id,
        **error_context,
    )

    if settings.environment == "production":
        message = "An internal server error occurred"
        details = None
        debug_info = None
    else:
        message = f"Internal server error: {type(exc).__name__}"
        details = {"error": str(exc), "type": type(exc).__name__}
        debug_info = {
            "stack_trace": traceback.format_tb(exc.__traceback__),
            "exception_type": type(exc).__name__,
        }

    error_response = ErrorResponse(
        error_code=ErrorCode.INTERNAL_ERROR.value,
        message=message,
        details=details,
        correlation_id=correlation_id,
        request_id=_current_request_id(),
        severity=Severity.CRITICAL.value,
        service_info=get_service_info(settings),
        debug_info=debug_info,
    )
    return _error_json(HTTP_500_INTERNAL_SERVER_ERROR, error_response)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ForumError, forum_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers registered")
