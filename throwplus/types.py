"""
Core types for throwplus.

This module contains the records shared by the throw pipeline, the cause-chain
resolver and the catch dispatcher. It has zero internal dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, TypeAlias

from frozendict import frozendict

Bindings: TypeAlias = "frozendict[str, Any]"


@dataclass(frozen=True)
class StackFrame:
    """One call frame captured at a throw site."""

    filename: str
    line: int
    function: str
    code: str | None = None

    def format(self) -> str:
        """Format the frame the way Python tracebacks do."""
        text = f'  File "{self.filename}", line {self.line}, in {self.function}'
        if self.code:
            text += f"\n    {self.code}"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "line": self.line,
            "function": self.function,
            "code": self.code,
        }


# ============================================
# Catch directives
# ============================================


@dataclass(frozen=True)
class ReturnDirective:
    """Makes the dispatcher return ``value`` without running any clause."""

    value: Any


@dataclass(frozen=True)
class ThrowDirective:
    """Makes the dispatcher throw ``object`` instead of running clauses."""

    object: Any
    message: str | None = None


@dataclass(frozen=True)
class RethrowDirective:
    """Makes the dispatcher re-raise the caught exception unchanged."""


CatchDirective: TypeAlias = ReturnDirective | ThrowDirective | RethrowDirective


# ============================================
# Context
# ============================================


@dataclass(frozen=True)
class Context:
    """Everything known about one throw.

    Attributes:
        object: The thrown value. Never a ``ThrowCarrier``.
        message: Optional description supplied to ``throw`` (or the message of
            a native exception).
        cause: The exception that was being handled when the throw happened.
        stack_trace: Frames at the throw site, innermost first.
        bindings: Snapshot of the thrower's local variables. ``None`` when the
            thrown value is itself an exception.
        wrapper: Outermost exception carrying this context. Only set when the
            value travelled inside a ``ThrowCarrier``.
        throwable: The exception a handler actually caught. Re-raised on
            rethrow and recorded as ``cause`` by throws issued from a handler.
        directive: Set by catch hooks to short-circuit clause evaluation.
    """

    object: Any
    message: str | None = None
    cause: BaseException | None = None
    stack_trace: tuple[StackFrame, ...] = ()
    bindings: Bindings | None = None
    wrapper: BaseException | None = None
    throwable: BaseException | None = field(default=None, compare=False, repr=False)
    directive: CatchDirective | None = field(default=None, compare=False)

    def with_object(self, obj: Any) -> Context:
        """Return a copy whose clauses will see ``obj`` as the thrown value."""
        return replace(self, object=obj)

    def with_return(self, value: Any) -> Context:
        return replace(self, directive=ReturnDirective(value))

    def with_throw(self, obj: Any, message: str | None = None) -> Context:
        return replace(self, directive=ThrowDirective(obj, message))

    def with_rethrow(self) -> Context:
        return replace(self, directive=RethrowDirective())

    @property
    def location(self) -> StackFrame | None:
        """The innermost captured frame, if any."""
        return self.stack_trace[0] if self.stack_trace else None

    def format_location(self) -> str:
        loc = self.location
        if loc is None:
            return "<unknown>"
        return f"{loc.filename}:{loc.line} in {loc.function}"

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly summary with values rendered by ``repr``."""
        return {
            "object": repr(self.object),
            "type": type(self.object).__qualname__,
            "message": self.message,
            "cause": repr(self.cause) if self.cause is not None else None,
            "stack_trace": [frame.to_dict() for frame in self.stack_trace],
            "bindings": (
                {name: repr(value) for name, value in self.bindings.items()}
                if self.bindings is not None
                else None
            ),
            "wrapper": type(self.wrapper).__qualname__ if self.wrapper is not None else None,
        }


__all__ = [
    "Bindings",
    "CatchDirective",
    "Context",
    "RethrowDirective",
    "ReturnDirective",
    "StackFrame",
    "ThrowDirective",
]
