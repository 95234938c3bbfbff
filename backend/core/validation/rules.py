"""Constraint Rules

Rules are declared on payload fields through ``typing.Annotated`` metadata:

    class Product(BaseModel):
        name: Annotated[str | None, Required(), Length(min=3, max=100)] = None
        price: Annotated[float | None, Required(), Range(min=0.01, max=2000)] = None

Every rule is an immutable value. Built-in rules evaluate synchronously
against the field value (``SameAs`` also reads the owning instance).
``Valid`` marks structural recursion and ``Custom`` references a predicate
in the validator registry; both are executed by the engine.

Absent values (``None``) pass every rule except ``Required``.
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sized
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any


class RuleKind(str, Enum):
    """Identifier reported in every violation."""
    REQUIRED = "required"
    LENGTH = "length"
    RANGE = "range"
    PATTERN = "pattern"
    EMAIL = "email"
    ALPHA = "alpha"
    ACCEPTED = "accepted"
    SAME_AS = "same_as"
    SIZE = "size"
    VALID = "valid"
    EACH = "each"
    CUSTOM = "custom"


def _bounds_key(base: str, low: Any, high: Any, *, min_key: str, max_key: str) -> str:
    if low is not None and high is not None:
        return f"validation.{base}"
    if low is not None:
        return f"validation.{min_key}"
    return f"validation.{max_key}"


@dataclass(frozen=True, slots=True)
class Rule(ABC):
    """Base class for every field declaration.

    ``message`` overrides the default message key of the rule.
    """
    message: str | None = field(default=None, kw_only=True)

    @property
    @abstractmethod
    def kind(self) -> RuleKind:
        """Rule identifier."""

    @property
    def default_key(self) -> str:
        return f"validation.{self.kind.value}"

    @property
    def message_key(self) -> str:
        return self.message or self.default_key

    @property
    def checks_absence(self) -> bool:
        """Whether the rule is evaluated when the value is absent."""
        return False

    def params(self) -> dict[str, Any]:
        """Parameters interpolated into the resolved message."""
        return {}


@dataclass(frozen=True, slots=True)
class BuiltinRule(Rule):
    """Rule evaluated synchronously by the engine."""

    @abstractmethod
    def evaluate(self, value: Any, instance: Any = None) -> bool:
        """Return True when the value satisfies the rule."""


# ============================================================================
# Presence
# ============================================================================

@dataclass(frozen=True, slots=True)
class Required(BuiltinRule):
    """Value must be present. Blank strings fail when ``allow_blank`` is False."""
    allow_blank: bool = True

    @property
    def kind(self) -> RuleKind: return RuleKind.REQUIRED

    @property
    def checks_absence(self) -> bool: return True

    def evaluate(self, value: Any, instance: Any = None) -> bool:
        if value is None:
            return False
        if not self.allow_blank and isinstance(value, str):
            return bool(value.strip())
        return True


# ============================================================================
# String rules
# ============================================================================

@dataclass(frozen=True, slots=True)
class Length(BuiltinRule):
    """String length within ``[min, max]`` (inclusive)."""
    min: int | None = None
    max: int | None = None

    @property
    def kind(self) -> RuleKind: return RuleKind.LENGTH

    @property
    def default_key(self) -> str:
        return _bounds_key("length", self.min, self.max, min_key="min_length", max_key="max_length")

    def params(self) -> dict[str, Any]: return {"min": self.min, "max": self.max}

    def evaluate(self, value: Any, instance: Any = None) -> bool:
        if not isinstance(value, str):
            return False
        length = len(value)
        if self.min is not None and length < self.min:
            return False
        return self.max is None or length <= self.max


@dataclass(frozen=True, slots=True)
class Pattern(BuiltinRule):
    """String must fully match a regular expression."""
    regex: str
    flags: int = 0
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_compiled", re.compile(self.regex, self.flags))

    @property
    def kind(self) -> RuleKind: return RuleKind.PATTERN

    def params(self) -> dict[str, Any]: return {"pattern": self.regex}

    def evaluate(self, value: Any, instance: Any = None) -> bool:
        return isinstance(value, str) and self._compiled.fullmatch(value) is not None


_EMAIL = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


@dataclass(frozen=True, slots=True)
class Email(BuiltinRule):
    """Simplified RFC 5322 address."""

    @property
    def kind(self) -> RuleKind: return RuleKind.EMAIL

    def evaluate(self, value: Any, instance: Any = None) -> bool:
        return isinstance(value, str) and _EMAIL.match(value) is not None


@dataclass(frozen=True, slots=True)
class Alpha(BuiltinRule):
    """Letters only, plus any character listed in ``allow``."""
    allow: str = ""

    @property
    def kind(self) -> RuleKind: return RuleKind.ALPHA

    def evaluate(self, value: Any, instance: Any = None) -> bool:
        if not isinstance(value, str) or not value:
            return False
        return all(c.isalpha() or c in self.allow for c in value)


# ============================================================================
# Numeric rules
# ============================================================================

@dataclass(frozen=True, slots=True)
class Range(BuiltinRule):
    """Numeric value within ``[min, max]`` (inclusive)."""
    min: float | int | None = None
    max: float | int | None = None

    @property
    def kind(self) -> RuleKind: return RuleKind.RANGE

    @property
    def default_key(self) -> str:
        return _bounds_key("range", self.min, self.max, min_key="min", max_key="max")

    def params(self) -> dict[str, Any]: return {"min": self.min, "max": self.max}

    def evaluate(self, value: Any, instance: Any = None) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            return False
        if self.min is not None and value < self.min:
            return False
        return self.max is None or value <= self.max


# ============================================================================
# Boolean / cross-field / collection rules
# ============================================================================

@dataclass(frozen=True, slots=True)
class Accepted(BuiltinRule):
    """Boolean flag that must be True (terms acceptance)."""

    @property
    def kind(self) -> RuleKind: return RuleKind.ACCEPTED

    def evaluate(self, value: Any, instance: Any = None) -> bool:
        return value is True


@dataclass(frozen=True, slots=True)
class SameAs(BuiltinRule):
    """Value must equal the raw value of a sibling field."""
    other: str

    @property
    def kind(self) -> RuleKind: return RuleKind.SAME_AS

    def params(self) -> dict[str, Any]: return {"other": self.other}

    def evaluate(self, value: Any, instance: Any = None) -> bool:
        return value == getattr(instance, self.other, None)


@dataclass(frozen=True, slots=True)
class Size(BuiltinRule):
    """Collection size within ``[min, max]`` (inclusive)."""
    min: int | None = None
    max: int | None = None

    @property
    def kind(self) -> RuleKind: return RuleKind.SIZE

    @property
    def default_key(self) -> str:
        return _bounds_key("size", self.min, self.max, min_key="min_size", max_key="max_size")

    def params(self) -> dict[str, Any]: return {"min": self.min, "max": self.max}

    def evaluate(self, value: Any, instance: Any = None) -> bool:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sized):
            return False
        size = len(value)
        if self.min is not None and size < self.min:
            return False
        return self.max is None or size <= self.max


# ============================================================================
# Engine-executed rules
# ============================================================================

@dataclass(frozen=True, slots=True)
class Valid(Rule):
    """Recurse into a nested structure, or into every element when ``each``."""
    each: bool = False

    @property
    def kind(self) -> RuleKind:
        return RuleKind.EACH if self.each else RuleKind.VALID


@dataclass(frozen=True, slots=True)
class Custom(Rule):
    """Reference to a registered predicate.

    ``essential`` predicates propagate evaluation failures instead of
    reporting them as a violation on the field.
    """
    name: str
    essential: bool = False

    @property
    def kind(self) -> RuleKind: return RuleKind.CUSTOM

    def params(self) -> dict[str, Any]: return {"name": self.name}
