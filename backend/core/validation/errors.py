"""Validation Error Taxonomy

- ConfigurationError: declarations reference something that does not exist.
  Fatal at startup, never converted into a violation.
- ValidationError: a completed validation produced violations. Expected,
  client-side outcome carrying the full report.
- PredicateExecutionError: a custom predicate could not be evaluated
  (raised, timed out). Reported as a violation unless the rule is essential.
- ContextInUseError: a context entered a second validation while the first
  was still running.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from core.errors import AppError, ErrorCode, ErrorContext, predicate_failed

if TYPE_CHECKING:
    from .report import ViolationReport


class ConfigurationError(Exception):
    """Invalid declaration or registry setup."""


class ContextInUseError(RuntimeError):
    """A validation context is owned by another running validation."""


class PredicateExecutionError(Exception):
    """A custom predicate failed to produce a verdict."""

    def __init__(self, predicate: str, field_path: str, cause: BaseException):
        self.predicate, self.field_path, self.cause = predicate, field_path, cause
        self.timed_out = isinstance(cause, TimeoutError)
        reason = "timed out" if self.timed_out else f"{type(cause).__name__}: {cause}"
        super().__init__(f"Validator '{predicate}' failed on '{field_path}': {reason}")

    def to_app_error(self) -> AppError:
        reason = "timed out" if self.timed_out else type(self.cause).__name__
        return predicate_failed(self.predicate, self.field_path, reason,
            timed_out=self.timed_out, origin="validation").error


class ValidationError(Exception):
    """Validation completed with violations.

    Carries the whole report so the HTTP boundary can render every violation.
    """

    def __init__(self, report: ViolationReport, message: str = "Validation failed"):
        self.report, self.message = report, message
        super().__init__(message)

    def __str__(self) -> str:
        if len(self.report) == 1:
            v = self.report.violations[0]
            return f"{v.field_path}: {v.message}"
        return f"{self.message} ({len(self.report)} errors)"

    @property
    def field_errors(self) -> dict[str, list[str]]:
        """Messages grouped by field path."""
        return {path: [v.message for v in found] for path, found in self.report.by_field().items()}

    def to_app_error(self) -> AppError:
        """Convert to AppError for the error handling system."""
        errors: list[dict[str, Any]] = self.report.to_dict()
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC,
            message=str(self) if len(errors) == 1 else f"{self.message}: {len(errors)} errors",
            context=ErrorContext(origin="validation"),
            metadata={"error_count": len(errors), "errors": errors})
