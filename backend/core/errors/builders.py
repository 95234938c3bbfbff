"""Error Builders

Ergonomic constructors for the typed errors this service produces.
Each builder returns an Err wrapping an AppError with the matching code.
"""
from .types import AppError, ErrorCode, ErrorContext, Err


def _compact(meta: dict) -> dict:
    return {k: v for k, v in meta.items() if v is not None}


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def predicate_failed(
    predicate: str,
    field: str,
    reason: str,
    *,
    timed_out: bool = False,
    origin: str = "",
    cause: Exception | None = None,
) -> Err[AppError]:
    """A custom predicate could not be evaluated."""
    return Err(AppError(
        code=ErrorCode.E1002_TIMEOUT if timed_out else ErrorCode.E2030_PREDICATE_FAILED,
        message=f"Validator '{predicate}' could not evaluate '{field}': {reason}",
        context=ErrorContext(origin=origin),
        metadata={"predicate": predicate, "field": field},
        cause=cause,
    ))


# =============================================================================
# Database Errors (E4xxx)
# =============================================================================

def db_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E4000_DATABASE_GENERIC,
    table: str | None = None,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create database error."""
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata=_compact({"table": table, **metadata}),
        cause=cause,
    ))


def duplicate_key(
    entity: str, field: str, value: str, origin: str = ""
) -> Err[AppError]:
    return db_error(
        f"{entity} with {field}='{value}' already exists",
        code=ErrorCode.E4011_DUPLICATE_KEY,
        entity=entity,
        field=field,
        origin=origin,
    )


def db_connection_failed(reason: str = "", origin: str = "") -> Err[AppError]:
    msg = "Database connection failed"
    if reason:
        msg += f": {reason}"
    return db_error(msg, code=ErrorCode.E4001_CONNECTION_FAILED, origin=origin)


def transaction_failed(reason: str = "", origin: str = "") -> Err[AppError]:
    msg = "Database transaction failed"
    if reason:
        msg += f": {reason}"
    return db_error(msg, code=ErrorCode.E4003_TRANSACTION_FAILED, origin=origin)


# =============================================================================
# Internal Errors (E9xxx)
# =============================================================================

def internal_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
    origin: str = "",
    cause: Exception | None = None,
    **metadata,
) -> Err[AppError]:
    """Create internal/unexpected error."""
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata=metadata,
        cause=cause,
    ))


def misconfigured(message: str, origin: str = "", **metadata) -> Err[AppError]:
    return internal_error(message, code=ErrorCode.E9004_MISCONFIGURED, origin=origin, **metadata)
