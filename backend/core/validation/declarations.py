"""Constraint Declarations

Resolves the ordered field declarations of a payload type. Rules come from
``Annotated`` metadata on pydantic models, dataclasses or plain annotated
classes, plus an explicit declaration table for types that cannot carry
annotations:

    declare(LegacyOrder, "reference", Required(), Length(max=32))

Resolution happens once per type; the result is cached and only read
afterwards. Fields without rules are omitted, so the engine never visits
them.
"""
from __future__ import annotations

import types
import typing
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Annotated, Any, ClassVar, get_args, get_origin

from pydantic import BaseModel

from .errors import ConfigurationError
from .rules import Custom, Rule, SameAs, Valid

_CACHE: dict[type, tuple[FieldDeclaration, ...]] = {}
_TABLE: dict[type, dict[str, list[Rule]]] = {}


@dataclass(frozen=True, slots=True)
class FieldDeclaration:
    """Rules declared on one field.

    ``name`` is the attribute read from the instance; ``path`` is the segment
    used in violation paths (the alias when the model defines one).
    """
    name: str
    path: str
    rules: tuple[Rule, ...]
    annotation: Any = None
    siblings: Mapping[str, str] = field(default_factory=dict, compare=False)

    def params(self, rule: Rule, prefix: str = "") -> dict[str, Any]:
        """Message parameters of ``rule`` with sibling references rendered as paths."""
        if isinstance(rule, SameAs):
            other = self.siblings.get(rule.other, rule.other)
            return {"other": f"{prefix}.{other}" if prefix else other}
        return rule.params()

    @property
    def custom_rules(self) -> tuple[Custom, ...]:
        return tuple(r for r in self.rules if isinstance(r, Custom))

    @property
    def is_structural(self) -> bool:
        return any(isinstance(r, Valid) for r in self.rules)


def declare(cls: type, field_name: str, *rules: Rule) -> None:
    """Attach rules to a field through the declaration table."""
    if not rules:
        raise ConfigurationError(f"No rules given for {cls.__name__}.{field_name}")
    if bad := [r for r in rules if not isinstance(r, Rule)]:
        raise ConfigurationError(f"Not a rule: {bad[0]!r}")
    _TABLE.setdefault(cls, {}).setdefault(field_name, []).extend(rules)
    _CACHE.pop(cls, None)


def resolve_declarations(cls: type) -> tuple[FieldDeclaration, ...]:
    """Ordered declarations of ``cls``. Raises ConfigurationError on invalid declarations."""
    if (cached := _CACHE.get(cls)) is not None:
        return cached

    fields = _collect_fields(cls)
    table = _TABLE.get(cls, {})
    if unknown := [name for name in table if name not in fields]:
        raise ConfigurationError(f"{cls.__name__} has no field(s) {', '.join(unknown)}")

    siblings = {name: path for name, (path, _, _) in fields.items()}
    declarations = []
    for name, (path, annotation, rules) in fields.items():
        rules = [*rules, *table.get(name, ())]
        if not rules:
            continue
        for rule in rules:
            if isinstance(rule, SameAs) and rule.other not in fields:
                raise ConfigurationError(
                    f"{cls.__name__}.{name}: SameAs references unknown field '{rule.other}'")
        declarations.append(FieldDeclaration(name=name, path=path, rules=tuple(rules), annotation=annotation,
                                             siblings=siblings))

    _CACHE[cls] = result = tuple(declarations)
    return result


def _collect_fields(cls: type) -> dict[str, tuple[str, Any, list[Rule]]]:
    """name -> (path segment, bare annotation, annotated rules), in field order."""
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return {
            name: (info.serialization_alias or info.alias or name, info.annotation,
                   [m for m in info.metadata if isinstance(m, Rule)])
            for name, info in cls.model_fields.items()
        }
    if cls.__module__ == "builtins" or not hasattr(cls, "__annotations__"):
        return {}

    try:
        hints = typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        raise ConfigurationError(f"Cannot resolve annotations of {cls.__name__}: {e}") from e

    fields: dict[str, tuple[str, Any, list[Rule]]] = {}
    for name, hint in hints.items():
        if get_origin(hint) is ClassVar:
            continue
        annotation, rules = hint, []
        if get_origin(hint) is Annotated:
            annotation, *metadata = get_args(hint)
            rules = [m for m in metadata if isinstance(m, Rule)]
        fields[name] = (name, annotation, rules)
    return fields


def structural_targets(annotation: Any) -> tuple[type, ...]:
    """Classes reachable through a nested or element annotation.

    ``Address | None`` -> (Address,), ``list[Product]`` -> (Product,),
    ``dict[str, Item]`` -> (Item,).
    """
    if annotation is None:
        return ()
    origin = get_origin(annotation)
    if origin is Annotated:
        return structural_targets(get_args(annotation)[0])
    if origin in (typing.Union, types.UnionType):
        return tuple(t for arg in get_args(annotation) for t in structural_targets(arg))
    if origin is not None:
        args = get_args(annotation)
        if isinstance(origin, type) and issubclass(origin, Mapping):
            args = args[1:]
        return tuple(t for arg in args if arg is not Ellipsis for t in structural_targets(arg))
    if isinstance(annotation, type) and annotation is not type(None) and annotation.__module__ != "builtins":
        return (annotation,)
    return ()
