"""Recover a throw context from whatever exception a handler caught."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace

from loguru import logger

from throwplus.carrier import ThrowCarrier
from throwplus.types import Context
from throwplus.utils import DEBUG_THROW, short_repr, stack_trace_from_traceback

_log = logger.bind(component="throwplus.resolve")


def effective_cause(exc: BaseException) -> BaseException | None:
    """The exception ``exc`` was raised from, explicitly or implicitly."""
    if exc.__cause__ is not None:
        return exc.__cause__
    if exc.__suppress_context__:
        return None
    return exc.__context__


def cause_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` followed by its causes, outermost first.

    Stops at the first exception already seen, so hand-built cycles terminate.
    """
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = effective_cause(current)


def context_from_exception(exc: BaseException) -> Context:
    """Return the context associated with ``exc``.

    If ``exc`` or any exception in its cause chain is a ThrowCarrier, the
    innermost-wrapped value is recovered from the first such carrier, with
    ``wrapper`` pointing at ``exc`` itself. Otherwise ``exc`` is the thrown
    object.
    """
    for link in cause_chain(exc):
        if isinstance(link, ThrowCarrier):
            if DEBUG_THROW:
                _log.debug(
                    "resolved {} from a carrier inside {}",
                    short_repr(link.object),
                    type(exc).__name__,
                )
            return replace(link.context, wrapper=exc, throwable=exc, directive=None)

    message = str(exc) or None
    return Context(
        object=exc,
        message=message,
        cause=effective_cause(exc),
        stack_trace=stack_trace_from_traceback(exc.__traceback__),
        throwable=exc,
    )


__all__ = ["cause_chain", "context_from_exception", "effective_cause"]
