"""Tests for the environment-driven capture limits and debug logging."""

import pytest

import throwplus.handle
import throwplus.resolve
import throwplus.utils
from throwplus import ThrowCarrier, catch, throw, throw_context, try_


def test_bindings_capture_can_be_disabled(monkeypatch):
    monkeypatch.setattr(throwplus.utils, "CAPTURE_BINDINGS", False)

    def thrower():
        secret = "hidden"
        throw("oops")

    context = try_(thrower, catch(str, lambda _: throw_context()))

    assert dict(context.bindings) == {}


def test_explicit_bindings_still_apply_when_capture_is_disabled(monkeypatch):
    monkeypatch.setattr(throwplus.utils, "CAPTURE_BINDINGS", False)

    context = try_(
        lambda: throw("oops", bindings={"given": 1}),
        catch(str, lambda _: throw_context()),
    )

    assert dict(context.bindings) == {"given": 1}


def test_stack_depth_is_capped(monkeypatch):
    monkeypatch.setattr(throwplus.utils, "MAX_STACK_DEPTH", 2)
    monkeypatch.setattr(throwplus.utils, "DEBUG_THROW", False)

    def deep(n):
        if n == 0:
            throw("bottom")
        deep(n - 1)

    context = try_(lambda: deep(5), catch(str, lambda _: throw_context()))

    assert len(context.stack_trace) == 2
    assert context.stack_trace[0].function == "deep"


def test_debug_mode_lifts_the_stack_cap(monkeypatch):
    monkeypatch.setattr(throwplus.utils, "MAX_STACK_DEPTH", 2)
    monkeypatch.setattr(throwplus.utils, "DEBUG_THROW", True)

    def deep(n):
        if n == 0:
            throw("bottom")
        deep(n - 1)

    context = try_(lambda: deep(5), catch(str, lambda _: throw_context()))

    assert len(context.stack_trace) > 2


def test_debug_mode_logs_resolution_and_dispatch(monkeypatch, log_messages):
    monkeypatch.setattr(throwplus.resolve, "DEBUG_THROW", True)
    monkeypatch.setattr(throwplus.handle, "DEBUG_THROW", True)

    with pytest.raises(ThrowCarrier):
        try_(lambda: throw(1), catch(str, lambda x: x))

    assert "resolved 1 from a carrier inside ThrowCarrier" in log_messages
    assert "dispatching 1 (ThrowCarrier)" in log_messages
    assert "no clause matched 1; rethrowing" in log_messages


def test_debug_records_are_silent_by_default(monkeypatch, log_messages):
    monkeypatch.setattr(throwplus.resolve, "DEBUG_THROW", False)
    monkeypatch.setattr(throwplus.handle, "DEBUG_THROW", False)

    try_(lambda: throw(1), catch(int, lambda x: x))

    assert log_messages == []
