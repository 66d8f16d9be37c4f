"""
throwplus - throw any value, catch it by type, predicate or key.

Python's ``raise`` only accepts exceptions, and ``except`` only selects by
class. throwplus lets any value be thrown, lets catch clauses select by class,
predicate or ``[key, value]`` test, and hands every clause the context of the
throw: message, cause, stack trace and a snapshot of the thrower's locals.

Example:
    >>> from throwplus import catch, throw, throw_context, try_
    >>>
    >>> def lookup():
    ...     throw({"code": 404}, "not found")
    >>>
    >>> try_(lookup, catch(["code", 404], lambda obj: throw_context().message))
    'not found'
"""

from throwplus.carrier import ThrowCarrier, context_message, context_to_exception
from throwplus.errors import SetupError, ThrowPlusError, ThrowUsageError
from throwplus.handle import (
    Catch,
    Finally,
    HandlerChain,
    catch,
    finally_,
    handles,
    try_,
    try_async,
)
from throwplus.hooks import (
    catch_hook,
    catch_hook_rethrow,
    catch_hook_return,
    catch_hook_throw,
    default_throw_hook,
    get_catch_hook,
    get_throw_hook,
    identity_catch_hook,
    logging_catch_hook,
    logging_throw_hook,
    thrown_object,
    throw_context,
    throw_hook,
)
from throwplus.render import ContextRenderer, format_context
from throwplus.resolve import cause_chain, context_from_exception
from throwplus.selectors import KeyValueSelector, PredicateSelector, TypeSelector
from throwplus.throw import make_context, throw
from throwplus.types import (
    Context,
    RethrowDirective,
    ReturnDirective,
    StackFrame,
    ThrowDirective,
)

__version__ = "0.1.0"

__all__ = [
    # Types
    "Context",
    "StackFrame",
    "ReturnDirective",
    "ThrowDirective",
    "RethrowDirective",
    # Errors
    "ThrowCarrier",
    "ThrowPlusError",
    "SetupError",
    "ThrowUsageError",
    # Throwing
    "throw",
    "make_context",
    "context_message",
    "context_to_exception",
    # Catching
    "Catch",
    "Finally",
    "HandlerChain",
    "catch",
    "finally_",
    "handles",
    "try_",
    "try_async",
    "throw_context",
    "thrown_object",
    "cause_chain",
    "context_from_exception",
    # Selectors
    "TypeSelector",
    "KeyValueSelector",
    "PredicateSelector",
    # Hooks
    "throw_hook",
    "catch_hook",
    "get_throw_hook",
    "get_catch_hook",
    "default_throw_hook",
    "identity_catch_hook",
    "catch_hook_return",
    "catch_hook_throw",
    "catch_hook_rethrow",
    "logging_throw_hook",
    "logging_catch_hook",
    # Rendering
    "ContextRenderer",
    "format_context",
]
