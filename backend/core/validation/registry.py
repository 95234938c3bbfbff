"""Custom Validator Registry

Process-wide mapping from a stable name to a predicate. Populated at import
/startup time, frozen once the application has started; lookups after that
are plain dict reads.

Predicates take ``(value, context)`` and return a bool, or an awaitable of
one. They may raise ``RuleViolation`` to reject a value with a specific
message key. By convention a predicate treats ``None`` as valid and leaves
presence to the ``Required`` rule.

    @predicate("strong_password")
    def validate_strong_password(value: str | None, context: ValidationContext) -> bool:
        ...
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeAlias

from .errors import ConfigurationError

Predicate: TypeAlias = Callable[[Any, Any], "bool | Awaitable[bool]"]


class RuleViolation(Exception):
    """Raised by a predicate to reject a value with its own message key."""

    def __init__(self, message_key: str | None = None, **params: Any):
        self.message_key, self.params = message_key, params
        super().__init__(message_key or "rule violation")


class ValidatorRegistry:
    """Name -> predicate lookup."""

    def __init__(self):
        self._predicates: dict[str, Predicate] = {}
        self._frozen = False

    def register(self, name: str, predicate: Predicate, *, replace: bool = False) -> Predicate:
        if self._frozen:
            raise ConfigurationError(f"Cannot register '{name}': validator registry is frozen")
        if not callable(predicate):
            raise ConfigurationError(f"Validator '{name}' is not callable")
        if name in self._predicates and not replace and self._predicates[name] is not predicate:
            raise ConfigurationError(f"Validator '{name}' is already registered")
        self._predicates[name] = predicate
        return predicate

    def predicate(self, name: str) -> Callable[[Predicate], Predicate]:
        """Decorator registering the function under ``name``."""
        return lambda fn: self.register(name, fn)

    def resolve(self, name: str) -> Predicate:
        if (found := self._predicates.get(name)) is None:
            available = ", ".join(sorted(self._predicates)) or "none"
            raise ConfigurationError(f"Validator '{name}' not registered. Available: {available}")
        return found

    def freeze(self) -> None: self._frozen = True

    @property
    def frozen(self) -> bool: return self._frozen

    def names(self) -> list[str]: return sorted(self._predicates)

    def __contains__(self, name: object) -> bool: return name in self._predicates

    def __len__(self) -> int: return len(self._predicates)


_REGISTRY = ValidatorRegistry()


def get_registry() -> ValidatorRegistry:
    """The process-wide registry used by application validators."""
    return _REGISTRY


def register(name: str, predicate: Predicate) -> Predicate:
    return _REGISTRY.register(name, predicate)


def predicate(name: str) -> Callable[[Predicate], Predicate]:
    return _REGISTRY.predicate(name)
