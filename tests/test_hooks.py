"""Tests for the throw and catch hooks."""

import asyncio
import threading

import pytest

from throwplus import (
    ThrowCarrier,
    catch,
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
    throw,
    throw_hook,
    try_,
)


def test_defaults():
    assert get_throw_hook() is default_throw_hook
    assert get_catch_hook() is identity_catch_hook


def test_catch_hook_sees_resolved_context():
    seen = []

    def record(context):
        seen.append(context)
        return context

    def thrower():
        local_name = "value"
        throw("catch-hook-string")

    with catch_hook(record):
        result = try_(thrower, catch(str, lambda x: x))

    assert result == "catch-hook-string"
    context = seen[0]
    assert context.object == "catch-hook-string"
    assert isinstance(context.wrapper, ThrowCarrier)
    assert context.message is None
    assert context.bindings["local_name"] == "value"
    assert context.stack_trace


def test_catch_hook_return_skips_clauses():
    ran = []

    with catch_hook(catch_hook_return(42)):
        result = try_(lambda: throw("boo"), catch(str, ran.append))

    assert result == 42
    assert ran == []


def test_catch_hook_throw_raises_new_exception():
    with catch_hook(catch_hook_throw(ValueError("bleh"))):
        with pytest.raises(ValueError, match="bleh"):
            try_(lambda: throw("boo"), catch(str, lambda x: x))


def test_catch_hook_throw_records_caught_exception_as_cause():
    with catch_hook(catch_hook_throw("replacement", "swapped")):
        with pytest.raises(ThrowCarrier) as info:
            try_(lambda: throw("original"), catch(int, lambda x: x))

    assert info.value.object == "replacement"
    assert str(info.value) == "swapped: 'replacement'"
    assert info.value.__cause__.object == "original"


def test_catch_hook_throw_is_scoped_to_inner_chain():
    def inner():
        with catch_hook(catch_hook_throw("soup!")):
            return try_(lambda: throw("boo"), catch(str, lambda x: x))

    assert try_(inner, catch(str, lambda x: x)) == "soup!"


def test_catch_hook_rethrow_propagates_even_when_a_clause_matches():
    ran = []

    with catch_hook(catch_hook_rethrow()):
        with pytest.raises(ThrowCarrier) as info:
            try_(lambda: throw("boo"), catch(str, ran.append))

    assert info.value.object == "boo"
    assert ran == []


def test_catch_hook_can_substitute_the_object():
    with catch_hook(lambda context: context.with_object(context.object.upper())):
        assert try_(lambda: throw("quiet"), catch(str, lambda x: x)) == "QUIET"


def test_throw_hook_restored_after_exception_in_block():
    def hook(context):
        return "hooked"

    with pytest.raises(RuntimeError):
        with throw_hook(hook):
            assert get_throw_hook() is hook
            raise RuntimeError("leaving")

    assert get_throw_hook() is default_throw_hook


def test_throw_hook_restored_when_hook_itself_raises():
    def exploding(context):
        raise LookupError("hook failed")

    with pytest.raises(LookupError):
        with throw_hook(exploding):
            throw("anything")

    assert get_throw_hook() is default_throw_hook


def test_nested_throw_hooks_use_innermost_then_revert():
    seen = []

    def outer(context):
        seen.append(("outer", context.object))
        return default_throw_hook(context)

    def handler(obj):
        with throw_hook(lambda context: f"inner:{context.object}"):
            return throw("second")

    with throw_hook(outer):
        result = try_(lambda: throw("first"), catch(str, handler))
        assert get_throw_hook() is outer

    assert result == "inner:second"
    assert seen == [("outer", "first")]
    assert get_throw_hook() is default_throw_hook


def test_throw_hook_is_invisible_to_other_threads():
    installed = threading.Event()
    release = threading.Event()
    seen = {}

    def worker():
        with throw_hook(lambda context: "from worker"):
            installed.set()
            release.wait(5)
            seen["worker"] = throw("x")

    thread = threading.Thread(target=worker)
    thread.start()
    assert installed.wait(5)
    seen["main"] = get_throw_hook()
    release.set()
    thread.join(5)

    assert seen["main"] is default_throw_hook
    assert seen["worker"] == "from worker"


@pytest.mark.asyncio
async def test_catch_hooks_are_isolated_between_tasks():
    async def task(value):
        with catch_hook(catch_hook_return(value)):
            await asyncio.sleep(0)
            return try_(lambda: throw("x"), catch(str, lambda x: x))

    results = await asyncio.gather(task(1), task(2))

    assert results == [1, 2]
    assert get_catch_hook() is identity_catch_hook


def test_logging_throw_hook_logs_then_raises(log_messages):
    with throw_hook(logging_throw_hook):
        result = try_(lambda: throw("logged", "with message"), catch(str, lambda x: x))

    assert result == "logged"
    assert any(message.startswith("throw 'logged' (with message) at ") for message in log_messages)


def test_logging_catch_hook_passes_context_through(log_messages):
    with catch_hook(logging_catch_hook):
        result = try_(lambda: throw(3), catch(int, lambda x: x + 1))

    assert result == 4
    assert any(message.startswith("catch 3 from ") for message in log_messages)
