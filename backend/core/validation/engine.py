"""Validation Engine

Walks the declarations of a payload, recurses into nested structures and
collections, runs built-in rules and awaits custom predicates, and returns
every violation in a deterministic order.

Usage:
    engine = ValidationEngine(registry, resolver=resolver)
    engine.prepare(RegisterRequest)            # startup: fail fast on bad declarations
    report = await engine.validate(payload, context)
    report.raise_if_invalid()

Execution model:
- Rules of one field run in declaration order.
- In COLLECT_ALL mode sibling fields and collection elements run
  concurrently; ``asyncio.gather`` keeps results in submission order, which
  is the declaration / traversal / index order of the report.
- In FAIL_FAST mode everything runs sequentially and stops at the first
  violation.
- Cancellation is never converted into a violation. When one branch aborts,
  its siblings are cancelled and no report is produced.
"""
from __future__ import annotations

import asyncio
import inspect
import time
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Iterable, Mapping

from core.logging import validation_logger
from .context import ValidationContext
from .declarations import FieldDeclaration, resolve_declarations, structural_targets
from .errors import ConfigurationError, PredicateExecutionError
from .messages import MessageResolver, get_message_resolver
from .registry import Predicate, RuleViolation, ValidatorRegistry, get_registry
from .report import Violation, ViolationOutcome, ViolationReport
from .rules import BuiltinRule, Custom, Rule, RuleKind, Valid

log = validation_logger()

PREDICATE_ERROR_KEY = "validation.predicate_error"

Job = Callable[[], Awaitable[list[Violation]]]


class ValidationMode(str, Enum):
    """Violation accumulation strategy."""
    FAIL_FAST = "fail_fast"
    COLLECT_ALL = "collect_all"


class PredicateErrorPolicy(str, Enum):
    """What to do when a predicate cannot be evaluated."""
    VIOLATION = "violation"
    RAISE = "raise"


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Engine configuration."""
    mode: ValidationMode = ValidationMode.COLLECT_ALL
    predicate_timeout: float | None = None
    max_concurrency: int | None = None
    predicate_errors: PredicateErrorPolicy = PredicateErrorPolicy.VIOLATION

    @classmethod
    def from_settings(cls, settings) -> ValidationConfig:
        return cls(
            mode=ValidationMode(settings.VALIDATION_MODE),
            predicate_timeout=settings.VALIDATION_PREDICATE_TIMEOUT,
            max_concurrency=settings.VALIDATION_MAX_CONCURRENCY,
            predicate_errors=PredicateErrorPolicy(settings.VALIDATION_PREDICATE_ERRORS),
        )


@dataclass(slots=True)
class _Run:
    """State of one top-level validation call."""
    context: ValidationContext
    semaphore: asyncio.Semaphore | None
    halted: bool = False


def _is_collection(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes))


async def _gather(coros: Iterable[Awaitable[list[Violation]]]) -> list[list[Violation]]:
    """Run concurrently, preserving order. Siblings are cancelled if one branch aborts."""
    tasks = [asyncio.ensure_future(c) for c in coros]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


class ValidationEngine:
    """Declarative payload validator."""

    def __init__(self, registry: ValidatorRegistry | None = None, *,
                 resolver: MessageResolver | None = None, config: ValidationConfig | None = None):
        self.registry = registry if registry is not None else get_registry()
        self.resolver = resolver or get_message_resolver()
        self.config = config or ValidationConfig()
        self._prepared: set[type] = set()

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def prepare(self, *payload_types: type) -> None:
        """Resolve declarations and custom references of the types and everything nested in them.

        Raises ConfigurationError for unregistered predicates or invalid declarations.
        """
        pending, seen = list(payload_types), set()
        while pending:
            cls = pending.pop()
            if cls in seen or cls in self._prepared:
                continue
            seen.add(cls)
            for declaration in resolve_declarations(cls):
                for rule in declaration.custom_rules:
                    self.registry.resolve(rule.name)
                if declaration.is_structural:
                    pending.extend(structural_targets(declaration.annotation))
        self._prepared |= seen
        if seen:
            log.info("validation_prepared", types=sorted(c.__name__ for c in seen),
                predicates=self.registry.names())

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    async def validate(self, payload: Any, context: ValidationContext) -> ViolationReport:
        """Validate ``payload`` and return the complete report."""
        if payload is None:
            raise TypeError("Cannot validate a missing payload")
        if type(payload) not in self._prepared:
            self.prepare(type(payload))

        start = time.perf_counter()
        context.acquire()
        try:
            limit = self.config.max_concurrency
            run = _Run(context=context, semaphore=asyncio.Semaphore(limit) if limit else None)
            violations = await self._validate_object(payload, "", run)
        finally:
            context.release()

        report = ViolationReport(tuple(violations))
        log.debug("validation_completed", payload=type(payload).__name__, violations=len(report),
            duration_ms=round((time.perf_counter() - start) * 1000, 2), correlation_id=context.correlation_id)
        return report

    async def validate_or_raise(self, payload: Any, context: ValidationContext) -> None:
        """Validate and raise ValidationError carrying the report when it is not empty."""
        (await self.validate(payload, context)).raise_if_invalid()

    async def _collect(self, jobs: list[Job], run: _Run) -> list[Violation]:
        if self.config.mode is ValidationMode.FAIL_FAST:
            violations: list[Violation] = []
            for job in jobs:
                if run.halted:
                    break
                violations.extend(await job())
            return violations
        if len(jobs) == 1:
            return await jobs[0]()
        return [v for chunk in await _gather(job() for job in jobs) for v in chunk]

    async def _validate_object(self, instance: Any, prefix: str, run: _Run) -> list[Violation]:
        declarations = resolve_declarations(type(instance))
        if not declarations:
            return []
        return await self._collect(
            [partial(self._validate_field, instance, d, prefix, run) for d in declarations], run)

    async def _validate_elements(self, collection: Any, path: str, run: _Run) -> list[Violation]:
        items = collection.items() if isinstance(collection, Mapping) else enumerate(collection)
        return await self._collect(
            [partial(self._validate_object, element, f"{path}[{key}]", run)
             for key, element in items if element is not None], run)

    async def _validate_field(self, instance: Any, declaration: FieldDeclaration,
                              prefix: str, run: _Run) -> list[Violation]:
        value = getattr(instance, declaration.name, None)
        path = f"{prefix}.{declaration.path}" if prefix else declaration.path
        violations: list[Violation] = []

        for rule in declaration.rules:
            if run.halted:
                break
            if value is None and not rule.checks_absence:
                continue

            match rule:
                case Valid(each=True) if not _is_collection(value):
                    found = [self._violation(rule, path, run.context)]
                case Valid(each=True):
                    found = await self._validate_elements(value, path, run)
                case Valid():
                    found = await self._validate_object(value, path, run)
                case Custom():
                    found = await self._invoke(rule, value, path, run)
                case BuiltinRule():
                    found = [] if rule.evaluate(value, instance) else [
                        self._violation(rule, path, run.context, params=declaration.params(rule, prefix))]
                case _:
                    found = []

            if found:
                violations.extend(found)
                if self.config.mode is ValidationMode.FAIL_FAST:
                    run.halted = True
        return violations

    # ------------------------------------------------------------------
    # Custom predicates
    # ------------------------------------------------------------------

    async def _invoke(self, rule: Custom, value: Any, path: str, run: _Run) -> list[Violation]:
        predicate = self.registry.resolve(rule.name)
        try:
            if run.semaphore is None:
                accepted = await self._call(predicate, value, run.context)
            else:
                async with run.semaphore:
                    accepted = await self._call(predicate, value, run.context)
        except RuleViolation as rejection:
            return [self._violation(rule, path, run.context, rejection.message_key, rejection.params)]
        except (ConfigurationError, MemoryError):
            raise
        except Exception as exc:
            return [self._predicate_error(rule, path, exc, run)]
        return [] if accepted else [self._violation(rule, path, run.context)]

    async def _call(self, predicate: Predicate, value: Any, context: ValidationContext) -> bool:
        outcome = predicate(value, context)
        if inspect.isawaitable(outcome):
            if (timeout := self.config.predicate_timeout) is not None:
                outcome = await asyncio.wait_for(outcome, timeout=timeout)
            else:
                outcome = await outcome
        return bool(outcome)

    def _predicate_error(self, rule: Custom, path: str, exc: Exception, run: _Run) -> Violation:
        error = PredicateExecutionError(rule.name, path, exc)
        log.warning("predicate_failed", predicate=rule.name, field=path, error_type=type(exc).__name__,
            error=str(exc), timed_out=error.timed_out, correlation_id=run.context.correlation_id)
        if rule.essential or self.config.predicate_errors is PredicateErrorPolicy.RAISE:
            raise error from exc
        message = self.resolver.resolve(PREDICATE_ERROR_KEY, run.context.locale, {"field": path, "name": rule.name})
        return Violation(field_path=path, rule_kind=RuleKind.CUSTOM.value, message=message,
            message_key=PREDICATE_ERROR_KEY, outcome=ViolationOutcome.ERROR)

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def _violation(self, rule: Rule, path: str, context: ValidationContext,
                   key: str | None = None, params: dict[str, Any] | None = None) -> Violation:
        message_key = key or rule.message_key
        message = self.resolver.resolve(message_key, context.locale, {**rule.params(), **(params or {}), "field": path})
        return Violation(field_path=path, rule_kind=rule.kind.value, message=message, message_key=message_key)
