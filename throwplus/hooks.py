"""Dynamically scoped hooks around throwing and catching.

Two slots are kept in ``ContextVar``s, so an override installed in one thread or
asyncio task is never seen by another:

- the throw hook receives every :class:`~throwplus.types.Context` built by
  ``throw`` and decides what happens to it. The default raises it natively.
  Whatever the hook returns becomes the value of the ``throw`` call.
- the catch hook receives every context resolved by a handler chain before
  any clause is tried, and returns a (possibly modified) context. A hook can
  short-circuit clause selection by attaching a directive with
  ``Context.with_return``, ``Context.with_throw`` or ``Context.with_rethrow``.

Example::

    with catch_hook(catch_hook_return(0)):
        assert try_(lambda: throw("boom"), catch(str, len)) == 0
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, TypeAlias

from loguru import logger

from throwplus.carrier import context_to_exception
from throwplus.errors import ThrowUsageError
from throwplus.types import Context
from throwplus.utils import short_repr

ThrowHook: TypeAlias = Callable[[Context], Any]
CatchHook: TypeAlias = Callable[[Context], Context]


def default_throw_hook(context: Context) -> Any:
    """Raise the thrown exception, or a ThrowCarrier for any other value."""
    raise context_to_exception(context)


def identity_catch_hook(context: Context) -> Context:
    return context


_THROW_HOOK: ContextVar[ThrowHook] = ContextVar("_THROW_HOOK", default=default_throw_hook)
_CATCH_HOOK: ContextVar[CatchHook] = ContextVar("_CATCH_HOOK", default=identity_catch_hook)

# Context of the clause body currently running, if any
_HANDLING: ContextVar[Context | None] = ContextVar("_HANDLING", default=None)


def get_throw_hook() -> ThrowHook:
    return _THROW_HOOK.get()


def get_catch_hook() -> CatchHook:
    return _CATCH_HOOK.get()


@contextmanager
def throw_hook(hook: ThrowHook) -> Iterator[ThrowHook]:
    """Install ``hook`` as the throw hook for the duration of the block."""
    token = _THROW_HOOK.set(hook)
    try:
        yield hook
    finally:
        _THROW_HOOK.reset(token)


@contextmanager
def catch_hook(hook: CatchHook) -> Iterator[CatchHook]:
    """Install ``hook`` as the catch hook for the duration of the block."""
    token = _CATCH_HOOK.set(hook)
    try:
        yield hook
    finally:
        _CATCH_HOOK.reset(token)


@contextmanager
def handling(context: Context) -> Iterator[Context]:
    """Mark ``context`` as the one being handled while a clause body runs."""
    token = _HANDLING.set(context)
    try:
        yield context
    finally:
        _HANDLING.reset(token)


def current_context() -> Context | None:
    """Return the context being handled, or ``None`` outside clause bodies."""
    return _HANDLING.get()


def throw_context() -> Context:
    """Return the context being handled by the enclosing clause body."""
    context = _HANDLING.get()
    if context is None:
        raise ThrowUsageError("throw_context()")
    return context


def thrown_object() -> Any:
    """Return the value being handled by the enclosing clause body."""
    return throw_context().object


# ============================================
# Ready-made catch hooks
# ============================================


def catch_hook_return(value: Any) -> CatchHook:
    """Catch hook making every handler chain return ``value``."""

    def hook(context: Context) -> Context:
        return context.with_return(value)

    return hook


def catch_hook_throw(obj: Any, message: str | None = None) -> CatchHook:
    """Catch hook making every handler chain throw ``obj`` instead."""

    def hook(context: Context) -> Context:
        return context.with_throw(obj, message)

    return hook


def catch_hook_rethrow() -> CatchHook:
    """Catch hook making every handler chain propagate what it caught."""

    def hook(context: Context) -> Context:
        return context.with_rethrow()

    return hook


# ============================================
# Logging hooks
# ============================================

_log = logger.bind(component="throwplus.hooks")


def logging_throw_hook(context: Context) -> Any:
    """Log the throw, then raise it with the default throw hook."""
    _log.info(
        "throw {} ({}) at {}",
        short_repr(context.object),
        context.message or "no message",
        context.format_location(),
    )
    return default_throw_hook(context)


def logging_catch_hook(context: Context) -> Context:
    """Log the caught value and pass the context through unchanged."""
    _log.info(
        "catch {} from {}",
        short_repr(context.object),
        context.format_location(),
    )
    return context


__all__ = [
    "CatchHook",
    "ThrowHook",
    "catch_hook",
    "catch_hook_rethrow",
    "catch_hook_return",
    "catch_hook_throw",
    "current_context",
    "default_throw_hook",
    "get_catch_hook",
    "get_throw_hook",
    "handling",
    "identity_catch_hook",
    "logging_catch_hook",
    "logging_throw_hook",
    "thrown_object",
    "throw_context",
    "throw_hook",
]
