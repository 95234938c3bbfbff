"""Violation Report

An immutable, ordered snapshot of the violations found by one validation
call. Order is deterministic: field declaration order, then nested
traversal order, then element index order.

Report format (``to_dict``):
[
    {"field": "products[0].sku", "rule": "required", "message": "products[0].sku is required"},
    {"field": "email", "rule": "custom", "message": "email could not be validated", "outcome": "error"}
]
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Sequence


class ViolationOutcome(str, Enum):
    """Distinguishes a rejected value from a rule that could not be evaluated."""
    INVALID = "invalid"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Violation:
    """One failed rule instance."""
    field_path: str
    rule_kind: str
    message: str
    message_key: str = ""
    outcome: ViolationOutcome = ViolationOutcome.INVALID

    def to_dict(self) -> dict[str, Any]:
        result = {"field": self.field_path, "rule": self.rule_kind, "message": self.message}
        if self.outcome is ViolationOutcome.ERROR: result["outcome"] = self.outcome.value
        return result


@dataclass(frozen=True, slots=True)
class ViolationReport:
    """Ordered violations of one validation call. Empty means valid.

    Truthiness follows ``len``: a report is truthy when it holds violations.
    """
    violations: tuple[Violation, ...] = ()

    @property
    def is_valid(self) -> bool: return not self.violations

    @property
    def has_errors(self) -> bool:
        """True when at least one predicate could not be evaluated."""
        return any(v.outcome is ViolationOutcome.ERROR for v in self.violations)

    @property
    def field_paths(self) -> tuple[str, ...]: return tuple(v.field_path for v in self.violations)

    def __len__(self) -> int: return len(self.violations)

    def __iter__(self) -> Iterator[Violation]: return iter(self.violations)

    def for_field(self, field_path: str) -> list[Violation]:
        return [v for v in self.violations if v.field_path == field_path]

    def by_field(self) -> dict[str, list[Violation]]:
        """Group violations by field path, preserving report order."""
        result: dict[str, list[Violation]] = {}
        for violation in self.violations: result.setdefault(violation.field_path, []).append(violation)
        return result

    def to_dict(self) -> list[dict[str, Any]]:
        return [v.to_dict() for v in self.violations]

    def raise_if_invalid(self, message: str = "Validation failed") -> None:
        """Raise ValidationError carrying this report when it is not empty."""
        if self.violations:
            from .errors import ValidationError
            raise ValidationError(self, message)

    @classmethod
    def from_pydantic_errors(cls, errors: Sequence[dict[str, Any]]) -> ViolationReport:
        """Build a report from pydantic deserialization errors (``exc.errors()``)."""
        return cls(tuple(
            Violation(field_path=format_path(err.get("loc", ())), rule_kind=err.get("type", "invalid"),
                message=err.get("msg", "Invalid value"), message_key=err.get("type", ""))
            for err in errors
        ))


def format_path(loc: Sequence[str | int]) -> str:
    """Format a location tuple as a dot/bracket path, dropping the ``body`` root."""
    if loc and loc[0] == "body": loc = loc[1:]
    if not loc: return "$"
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int): parts.append(f"[{segment}]")
        elif parts: parts.append(f".{segment}")
        else: parts.append(str(segment))
    return "".join(parts)
