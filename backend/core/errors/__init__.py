"""Monadic Error Handling

Typed application errors and a Result container for expected failures.

- Result[T, E]: Ok(value) | Err(AppError)
- AppError: typed code, message, metadata and tracing context
- ErrorCode: hierarchical code taxonomy mapped to HTTP statuses
- Builders: ergonomic error construction

Usage:
    from core.errors import Ok, Err, Result, AppError, duplicate_key

    async def create_user(db, user) -> Result[User, AppError]:
        ...
        match await create_entity(db, user):
            case Ok(created):
                return created
            case Err(error):
                raise_error(error)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    predicate_failed,
    db_error,
    duplicate_key,
    db_connection_failed,
    transaction_failed,
    internal_error,
    misconfigured,
)

from .boundaries import (
    ErrorMapper,
    DatabaseErrorMapper,
)

from .handlers import (
    AppErrorException,
    register_error_handlers,
    result_to_response,
    raise_error,
    raise_result,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    # Builders
    "predicate_failed",
    "db_error",
    "duplicate_key",
    "db_connection_failed",
    "transaction_failed",
    "internal_error",
    "misconfigured",
    # Boundary mappers
    "ErrorMapper",
    "DatabaseErrorMapper",
    # Handlers
    "AppErrorException",
    "register_error_handlers",
    "result_to_response",
    "raise_error",
    "raise_result",
]
