"""The exception that carries non-exception values through ``raise``."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from frozendict import frozendict

from throwplus.types import Context, StackFrame
from throwplus.utils import DEFAULT_MESSAGE, short_repr


def context_message(context: Context) -> str:
    """Return the carrier message for a context: message (or default) plus the value."""
    return f"{context.message or DEFAULT_MESSAGE}: {short_repr(context.object, limit=2000)}"


class ThrowCarrier(Exception):
    """Exception wrapping a thrown value that is not itself an exception.

    Code that never heard of throwplus can still catch it with
    ``except ThrowCarrier as e`` and read ``e.object``, ``e.message``,
    ``e.stack_trace``, ``e.bindings``, ``e.context`` and ``e.__cause__``.
    """

    def __init__(self, context: Context, message: str | None = None) -> None:
        if isinstance(context.object, BaseException):
            raise TypeError(
                f"ThrowCarrier only wraps non-exception values, got {type(context.object)!r}"
            )
        if message is None:
            message = context_message(context)
        super().__init__(message)
        self.context = context
        self.__cause__ = context.cause

    @property
    def message(self) -> str:
        return self.args[0]

    @property
    def object(self) -> Any:
        return self.context.object

    @property
    def stack_trace(self) -> tuple[StackFrame, ...]:
        return self.context.stack_trace

    @property
    def bindings(self) -> frozendict[str, Any] | None:
        return self.context.bindings

    def to_dict(self) -> dict[str, Any]:
        data = self.context.to_dict()
        data["carrier_message"] = self.message
        return data

    def __reduce__(self) -> tuple[Any, ...]:
        # Locals and live exceptions rarely survive pickling; keep the payload only.
        portable = replace(
            self.context,
            cause=None,
            bindings=frozendict() if self.context.bindings is not None else None,
            wrapper=None,
            throwable=None,
            directive=None,
        )
        return (type(self), (portable, self.message))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


def context_to_exception(context: Context) -> BaseException:
    """Return the thrown value if it is an exception, else a carrier for it.

    A context that came from a carrier maps back to that same carrier.
    """
    if isinstance(context.throwable, ThrowCarrier):
        return context.throwable
    if isinstance(context.object, BaseException):
        return context.object
    return ThrowCarrier(context)


__all__ = ["ThrowCarrier", "context_message", "context_to_exception"]
