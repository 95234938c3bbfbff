"""Structured Logging for the Scenario Backend

structlog configured over the stdlib root logger, so uvicorn, SQLAlchemy
and application events share one renderer:

- colored console output while developing, JSON lines in production
- correlation id and request data merged from structlog contextvars
- credential fields (passwords, tokens) redacted before rendering

Each layer logs through its own named logger:

    log = validation_logger()
    log.info("validation_prepared", types=[...])
"""
import logging
import sys
from typing import Any
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

SERVICE_NAME = "scenario-backend"

# Compared case-insensitively with snake_case and camelCase keys alike
REDACTED_FIELDS = frozenset({
    "password", "passwordconfirmation", "hashedpassword",
    "token", "secret", "authorization", "cookie",
})
_MAX_DEPTH = 5


def _is_redacted(key: Any) -> bool:
    return str(key).replace("_", "").lower() in REDACTED_FIELDS


def _redact(value: Any, depth: int = 0) -> Any:
    if depth > _MAX_DEPTH:
        return value
    if isinstance(value, dict):
        return {k: "[REDACTED]" if _is_redacted(k) else _redact(v, depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_redact(item, depth + 1) for item in value]
    return value


def redact_credentials(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Processor replacing credential values, including nested payload dumps."""
    return _redact(event_dict)


def _add_service(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service,
        redact_credentials,
    ]


def configure_logging(level: str = "INFO", json_logs: bool = False, log_sql: bool = False) -> None:
    """Route structlog and stdlib logging through one handler on stdout.

    Args:
        level: Root log level name.
        json_logs: JSON lines instead of colored console output.
        log_sql: Emit SQLAlchemy statements at DEBUG.
    """
    processors = shared_processors()
    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_logs
        else structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)
    )

    structlog.configure(
        processors=[
            *processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn propagates to root; access lines duplicate request_completed
    for name in ("uvicorn", "uvicorn.error"):
        logging.getLogger(name).handlers = []
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.DEBUG if log_sql else logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_correlation_id() -> str:
    """Short id used when a request carries no X-Correlation-ID."""
    return uuid4().hex[:8]


def bind_context(**kwargs) -> None:
    """Bind values to every event logged in the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LoggerRegistry:
    """One named logger per application layer."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, layer: str) -> structlog.stdlib.BoundLogger:
        if layer not in cls._loggers:
            cls._loggers[layer] = get_logger(f"scenario.{layer}")
        return cls._loggers[layer]


def api_logger() -> structlog.stdlib.BoundLogger:
    return LoggerRegistry.get("api")


def validation_logger() -> structlog.stdlib.BoundLogger:
    """Engine, registry and message catalog events."""
    return LoggerRegistry.get("validation")


def db_logger() -> structlog.stdlib.BoundLogger:
    return LoggerRegistry.get("db")
