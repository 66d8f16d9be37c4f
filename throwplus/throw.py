"""``throw``: raise any value, with its throw-site context attached."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from throwplus.carrier import ThrowCarrier, context_to_exception
from throwplus.errors import ThrowUsageError
from throwplus.hooks import current_context, get_throw_hook
from throwplus.types import Bindings, Context, StackFrame
from throwplus.utils import caller_frame, capture_bindings, capture_stack_trace, freeze_bindings

_MISSING: Any = object()


def make_context(
    obj: Any,
    message: str | None = None,
    stack_trace: tuple[StackFrame, ...] = (),
    bindings: Mapping[str, Any] | None = None,
    cause: BaseException | None = None,
) -> Context:
    """Build the context for throwing ``obj``.

    Exceptions never carry a bindings snapshot.
    """
    snapshot: Bindings | None = None
    if not isinstance(obj, BaseException):
        snapshot = freeze_bindings(bindings if bindings is not None else {})
    return Context(
        object=obj,
        message=message,
        cause=cause,
        stack_trace=tuple(stack_trace),
        bindings=snapshot,
    )


def rethrow(context: Context) -> Any:
    """Re-raise the exception a handler caught for ``context``."""
    if context.throwable is not None:
        raise context.throwable
    raise context_to_exception(context)


def throw(
    obj: Any = _MISSING,
    message: str | None = None,
    *,
    bindings: Mapping[str, Any] | None = None,
) -> Any:
    """
    Throw ``obj``, which may be any value.

    Exceptions are raised as they are. Other values travel inside a
    ThrowCarrier whose message is ``message`` (or a default) followed by the
    value's repr. Called with no arguments inside a catch clause body, the
    exception being handled is re-raised unchanged.

    Args:
        obj: The value to throw.
        message: Optional description, shown when the value goes uncaught.
        bindings: Explicit snapshot of local names. Defaults to the caller's locals.

    Returns:
        Only when the active throw hook returns instead of raising; the hook's
        return value is returned.
    """
    handled = current_context()
    if obj is _MISSING:
        if handled is None:
            raise ThrowUsageError("throw() without a value")
        return rethrow(handled)
    if isinstance(obj, ThrowCarrier):
        # Keep the carried payload as the object; the carrier itself is re-raised.
        return get_throw_hook()(replace(obj.context, throwable=obj, directive=None))

    frame = caller_frame()
    if isinstance(obj, BaseException):
        bindings = None
    elif bindings is None:
        bindings = capture_bindings(frame)
    context = make_context(
        obj,
        message,
        stack_trace=capture_stack_trace(frame),
        bindings=bindings,
        cause=handled.throwable if handled is not None else None,
    )
    return get_throw_hook()(context)


__all__ = ["make_context", "rethrow", "throw"]
