"""Catch clause selectors.

A selector decides whether a clause accepts a thrown value. Selectors are
compiled once, when the handler chain is built, so malformed ones fail before
anything is thrown:

- a class, a tuple of classes or a dotted class name: ``isinstance`` test;
- a two-item list ``[key, value]``: the value is a mapping (or an object with
  that attribute) whose ``key`` equals ``value``;
- any other callable: a predicate over the thrown value; a truthy result
  matches.
"""

from __future__ import annotations

import builtins
import importlib
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from throwplus.errors import SetupError

_MISSING: Any = object()


@runtime_checkable
class Selector(Protocol):
    def matches(self, obj: Any) -> bool: ...


@dataclass(frozen=True)
class TypeSelector:
    types: type | tuple[type, ...]

    def matches(self, obj: Any) -> bool:
        return isinstance(obj, self.types)


@dataclass(frozen=True)
class KeyValueSelector:
    key: Any
    value: Any

    def matches(self, obj: Any) -> bool:
        if isinstance(obj, Mapping):
            return obj.get(self.key) == self.value
        if isinstance(self.key, str):
            found = getattr(obj, self.key, _MISSING)
            return found is not _MISSING and found == self.value
        return False


@dataclass(frozen=True)
class PredicateSelector:
    predicate: Callable[[Any], Any]

    def matches(self, obj: Any) -> bool:
        return bool(self.predicate(obj))


def resolve_type(name: str) -> type:
    """Resolve ``name`` (a builtin or a dotted path) to a class."""
    if "." not in name:
        found = getattr(builtins, name, None)
        if isinstance(found, type):
            return found
        raise SetupError(f"Unable to resolve type: {name!r}", offending=name)

    parts = name.split(".")
    if not all(parts):
        raise SetupError(f"Unable to resolve type: {name!r}", offending=name)
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            target: Any = importlib.import_module(module_name)
        except (ImportError, ValueError, TypeError):
            continue
        for attr in parts[split:]:
            target = getattr(target, attr, _MISSING)
            if target is _MISSING:
                break
        if isinstance(target, type):
            return target
        break
    raise SetupError(f"Unable to resolve type: {name!r}", offending=name)


def _compile_types(selector: tuple[Any, ...]) -> TypeSelector:
    if not selector:
        raise SetupError("type selector tuple must not be empty", offending=selector)
    types: list[type] = []
    for item in selector:
        if isinstance(item, str):
            types.append(resolve_type(item))
        elif isinstance(item, type):
            types.append(item)
        else:
            raise SetupError(
                f"type selector {selector!r} contains a non-type: {item!r}",
                offending=selector,
            )
    return TypeSelector(tuple(types))


def compile_selector(selector: Any) -> Selector:
    """Turn a user-facing selector into a Selector, or raise SetupError."""
    if isinstance(selector, type):
        return TypeSelector(selector)
    if isinstance(selector, str):
        return TypeSelector(resolve_type(selector))
    if isinstance(selector, tuple):
        return _compile_types(selector)
    if isinstance(selector, list):
        if len(selector) != 2:
            raise SetupError(
                f"key-value selector: {selector!r} does not match: [key, value]",
                offending=selector,
            )
        key, value = selector
        return KeyValueSelector(key, value)
    if isinstance(selector, (TypeSelector, KeyValueSelector, PredicateSelector)):
        return selector
    if callable(selector):
        return PredicateSelector(selector)
    raise SetupError(f"Unsupported selector: {selector!r}", offending=selector)


__all__ = [
    "KeyValueSelector",
    "PredicateSelector",
    "Selector",
    "TypeSelector",
    "compile_selector",
    "resolve_type",
]
