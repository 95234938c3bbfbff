"""FastAPI Exception Handlers

Converts AppErrors, validation outcomes and stray exceptions into the
structured error body:

    {"error": {"code": ..., "message": ..., "metadata": {...}}}

Violation reports are client errors (400) and are logged as such; a
predicate that could not be evaluated is a dependency failure (502/503).
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger

from .types import AppError, ErrorCode, ErrorContext

log = get_logger("errors.handlers")


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use the Result monad (e.g., FastAPI dependencies).
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))


def result_to_response(error: AppError) -> JSONResponse:
    """Convert AppError to FastAPI JSONResponse."""
    status_code = error.code.http_status

    log_method = log.info if status_code < 500 else log.error
    log_method(
        "error_response",
        error_code=error.code.name,
        status=status_code,
        message=error.message,
        category=error.code.category,
        correlation_id=error.context.correlation_id,
        origin=error.context.origin,
        error_count=error.metadata.get("error_count"),
    )
    return JSONResponse(status_code=status_code, content=error.to_dict())


def _with_request(error: AppError, request: Request, origin: str | None = None) -> AppError:
    return error.with_context(
        correlation_id=request.headers.get("X-Correlation-ID"),
        request_id=request.headers.get("X-Request-ID"),
        origin=origin or error.context.origin,
    )


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    """Handle AppErrorException raised in route handlers."""
    return result_to_response(_with_request(exc.error, request))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle standard HTTP exceptions with structured error response."""
    status_code = exc.status_code
    code = {
        400: ErrorCode.E2000_VALIDATION_GENERIC,
        404: ErrorCode.E4010_NOT_FOUND,
        409: ErrorCode.E4011_DUPLICATE_KEY,
        422: ErrorCode.E2000_VALIDATION_GENERIC,
    }.get(status_code, ErrorCode.E9001_UNEXPECTED_ERROR if status_code >= 500 else ErrorCode.E9000_INTERNAL_GENERIC)

    error = AppError(
        code=code,
        message=str(exc.detail) if exc.detail else f"HTTP {status_code}",
        context=ErrorContext(origin="http"),
    )
    response = result_to_response(_with_request(error, request))
    response.status_code = status_code
    return response


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Shape errors (malformed JSON, wrong types) in the same body as rule violations."""
    from core.validation.errors import ValidationError
    from core.validation.report import ViolationReport

    report = ViolationReport.from_pydantic_errors(exc.errors())
    error = ValidationError(report, message="Request validation failed").to_app_error()
    return result_to_response(_with_request(error, request, origin="request_validation"))


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle a violation report raised by the validation engine."""
    return result_to_response(_with_request(exc.to_app_error(), request, origin="validation"))


async def predicate_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle an essential predicate that could not be evaluated."""
    return result_to_response(_with_request(exc.to_app_error(), request, origin="validation"))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler. Converts to internal error and logs the traceback."""
    error = AppError(
        code=ErrorCode.E9001_UNEXPECTED_ERROR,
        message="An unexpected error occurred",
        context=ErrorContext(origin="unhandled"),
        cause=exc,
    )
    error = _with_request(error, request)
    log.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        correlation_id=error.context.correlation_id,
    )
    return result_to_response(error)


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the app.

    Usage in main.py:
        app = FastAPI(...)
        register_error_handlers(app)
    """
    from core.validation.errors import PredicateExecutionError, ValidationError

    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(PredicateExecutionError, predicate_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def raise_error(error: AppError) -> None:
    """Raise AppError as exception.

    Use when you need to exit early from code that doesn't
    use the Result monad.
    """
    raise AppErrorException(error)


def raise_result(result) -> None:
    """Raise error if Result is Err, otherwise return."""
    if result.is_err():
        raise AppErrorException(result.unwrap_err())
