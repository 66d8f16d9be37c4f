"""Handler chains: run a body and dispatch whatever it throws to catch clauses.

Example::

    from throwplus import catch, finally_, throw, throw_context, try_

    def fetch():
        throw({"code": 404}, "not found")

    status = try_(
        fetch,
        catch(["code", 404], lambda obj: obj["code"]),
        catch(str, lambda obj: throw_context().message),
        finally_(lambda: print("done")),
    )
    assert status == 404

Clauses are tried in order and the first whose selector matches wins. If none
matches, the caught exception propagates unchanged. A clause body receives the
thrown value (or ``bind(value)`` when ``bind`` is given) and can read the full
context with :func:`~throwplus.hooks.throw_context`.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from functools import wraps
from typing import Any, TypeVar

from loguru import logger

from throwplus.errors import SetupError
from throwplus.hooks import get_catch_hook, handling
from throwplus.resolve import context_from_exception
from throwplus.selectors import Selector, compile_selector
from throwplus.throw import rethrow, throw
from throwplus.types import Context, RethrowDirective, ReturnDirective, ThrowDirective
from throwplus.utils import DEBUG_THROW, short_repr

T = TypeVar("T")

_log = logger.bind(component="throwplus.handle")

_FORM = "try_ clauses must match: catch(...)* finally_(...)?"


@dataclass(frozen=True)
class Catch:
    """A catch clause: selector, body and optional binding transform."""

    selector: Any
    body: Callable[[Any], Any]
    bind: Callable[[Any], Any] | None = None


@dataclass(frozen=True)
class Finally:
    """A clause whose body runs on every exit from the chain."""

    body: Callable[[], Any]


def catch(selector: Any, body: Callable[[Any], Any], *, bind: Callable[[Any], Any] | None = None) -> Catch:
    return Catch(selector=selector, body=body, bind=bind)


def finally_(body: Callable[[], Any]) -> Finally:
    return Finally(body=body)


def partition_clauses(clauses: Iterable[Any]) -> tuple[tuple[Catch, ...], Finally | None]:
    """Split clauses into catches and the optional finally, validating the shape."""
    catches: list[Catch] = []
    final: Finally | None = None
    for item in clauses:
        if isinstance(item, Catch):
            if final is not None:
                raise SetupError(f"{_FORM}; catch clause after finally_", offending=item)
            catches.append(item)
        elif isinstance(item, Finally):
            if final is not None:
                raise SetupError(f"{_FORM}; more than one finally_", offending=item)
            final = item
        else:
            raise SetupError(f"{_FORM}; got {item!r}", offending=item)
    return tuple(catches), final


@dataclass(frozen=True)
class _CompiledClause:
    selector: Selector
    clause: Catch

    def invoke(self, obj: Any) -> Any:
        bind = self.clause.bind
        return self.clause.body(obj if bind is None else bind(obj))


class HandlerChain:
    """An ordered list of catch clauses plus an optional finally clause.

    The chain is validated and its selectors compiled on construction, so it
    can be built once and run many times.
    """

    def __init__(self, *clauses: Catch | Finally) -> None:
        catches, self.finally_clause = partition_clauses(clauses)
        self.clauses = tuple(
            _CompiledClause(compile_selector(clause.selector), clause) for clause in catches
        )

    def __repr__(self) -> str:
        return f"HandlerChain(catches={len(self.clauses)}, finally={self.finally_clause is not None})"

    def run(self, body: Callable[..., T], /, *args: Any, **kwargs: Any) -> T | Any:
        """Call ``body(*args, **kwargs)`` under this chain."""
        try:
            return body(*args, **kwargs)
        except Exception as exc:
            if not self.clauses:
                raise
            context = self.resolve(exc)
            with handling(context):
                return self._apply(context)
        finally:
            if self.finally_clause is not None:
                self.finally_clause.body()

    async def run_async(
        self, body: Callable[..., Awaitable[T]], /, *args: Any, **kwargs: Any
    ) -> T | Any:
        """Await ``body(*args, **kwargs)`` under this chain.

        Clause and finally bodies may be plain functions or coroutine functions.
        """
        try:
            return await body(*args, **kwargs)
        except Exception as exc:
            if not self.clauses:
                raise
            context = self.resolve(exc)
            with handling(context):
                result = self._apply(context)
                if inspect.isawaitable(result):
                    result = await result
                return result
        finally:
            if self.finally_clause is not None:
                done = self.finally_clause.body()
                if inspect.isawaitable(done):
                    await done

    def resolve(self, exc: BaseException) -> Context:
        """Resolve the context for ``exc`` and pass it through the catch hook."""
        context = get_catch_hook()(context_from_exception(exc))
        if DEBUG_THROW:
            _log.debug("dispatching {} ({})", short_repr(context.object), type(exc).__name__)
        return context

    def select(self, obj: Any) -> _CompiledClause | None:
        """Return the first clause whose selector accepts ``obj``."""
        for compiled in self.clauses:
            if compiled.selector.matches(obj):
                return compiled
        return None

    def _apply(self, context: Context) -> Any:
        directive = context.directive
        if isinstance(directive, ReturnDirective):
            return directive.value
        if isinstance(directive, ThrowDirective):
            return throw(directive.object, directive.message)
        if isinstance(directive, RethrowDirective):
            return rethrow(context)

        compiled = self.select(context.object)
        if compiled is None:
            if DEBUG_THROW:
                _log.debug("no clause matched {}; rethrowing", short_repr(context.object))
            return rethrow(context)
        return compiled.invoke(context.object)


def try_(body: Callable[[], T], *clauses: Catch | Finally) -> T | Any:
    """Run ``body`` under a handler chain built from ``clauses``."""
    return HandlerChain(*clauses).run(body)


async def try_async(body: Callable[[], Awaitable[T]], *clauses: Catch | Finally) -> T | Any:
    """Await ``body()`` under a handler chain built from ``clauses``."""
    return await HandlerChain(*clauses).run_async(body)


def handles(*clauses: Catch | Finally) -> Callable[[Callable[..., T]], Callable[..., T | Any]]:
    """Decorate a function so every call runs under the given clauses.

    The chain is validated once, at decoration time. Coroutine functions are
    supported.
    """
    chain = HandlerChain(*clauses)

    def decorator(func: Callable[..., T]) -> Callable[..., T | Any]:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                return await chain.run_async(func, *args, **kwargs)

            return async_wrapper

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return chain.run(func, *args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "Catch",
    "Finally",
    "HandlerChain",
    "catch",
    "finally_",
    "handles",
    "partition_clauses",
    "try_",
    "try_async",
]
