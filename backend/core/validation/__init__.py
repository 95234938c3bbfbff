"""Declarative Validation System

Constraints are declared on payload fields as ``Annotated`` metadata (or
through the declaration table) and evaluated by an async engine that
produces an ordered, localized violation report.

Key Features:
- Built-in rules: Required, Length, Range, Pattern, Email, Alpha,
  Accepted, SameAs, Size
- Structural recursion into nested objects and collections (Valid)
- Named custom predicates, sync or async, from a process-wide registry
- Per-request context carrying locale, correlation id and attributes
- YAML message catalogs with locale fallback
- Fail-fast or collect-all accumulation

Usage:
    from core.validation import Required, Email, Length, Custom, Valid

    class RegisterRequest(BaseModel):
        email: Annotated[str | None, Required(), Email(), Custom("unique_email")] = None

    report = await engine.validate(payload, ValidationContext.create(locale="fr"))
"""

from .rules import (
    RuleKind,
    Rule,
    BuiltinRule,
    Required,
    Length,
    Pattern,
    Email,
    Alpha,
    Range,
    Accepted,
    SameAs,
    Size,
    Valid,
    Custom,
)

from .declarations import (
    FieldDeclaration,
    declare,
    resolve_declarations,
    structural_targets,
)

from .context import (
    RequestInfo,
    ValidationContext,
    ContextProvider,
    get_context_provider,
    parse_accept_language,
)

from .registry import (
    Predicate,
    RuleViolation,
    ValidatorRegistry,
    get_registry,
    register,
    predicate,
)

from .messages import (
    DEFAULT_MESSAGES_DIR,
    MessageCatalog,
    MessageResolver,
    get_message_resolver,
)

from .report import (
    Violation,
    ViolationOutcome,
    ViolationReport,
)

from .errors import (
    ConfigurationError,
    ContextInUseError,
    PredicateExecutionError,
    ValidationError,
)

from .engine import (
    PREDICATE_ERROR_KEY,
    ValidationMode,
    PredicateErrorPolicy,
    ValidationConfig,
    ValidationEngine,
)

from .boundaries import (
    ValidationBoundary,
    get_engine,
    validation_boundary,
)

__all__ = [
    # Rules
    "RuleKind",
    "Rule",
    "BuiltinRule",
    "Required",
    "Length",
    "Pattern",
    "Email",
    "Alpha",
    "Range",
    "Accepted",
    "SameAs",
    "Size",
    "Valid",
    "Custom",
    # Declarations
    "FieldDeclaration",
    "declare",
    "resolve_declarations",
    "structural_targets",
    # Context
    "RequestInfo",
    "ValidationContext",
    "ContextProvider",
    "get_context_provider",
    "parse_accept_language",
    # Registry
    "Predicate",
    "RuleViolation",
    "ValidatorRegistry",
    "get_registry",
    "register",
    "predicate",
    # Messages
    "DEFAULT_MESSAGES_DIR",
    "MessageCatalog",
    "MessageResolver",
    "get_message_resolver",
    # Report
    "Violation",
    "ViolationOutcome",
    "ViolationReport",
    # Errors
    "ConfigurationError",
    "ContextInUseError",
    "PredicateExecutionError",
    "ValidationError",
    # Engine
    "PREDICATE_ERROR_KEY",
    "ValidationMode",
    "PredicateErrorPolicy",
    "ValidationConfig",
    "ValidationEngine",
    # Boundaries
    "ValidationBoundary",
    "get_engine",
    "validation_boundary",
]
