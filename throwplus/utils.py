"""
Utility functions for throwplus: configuration and throw-site capture.
"""

from __future__ import annotations

import linecache
import os
import sys
from collections.abc import Mapping
from types import FrameType, TracebackType
from typing import Any

from frozendict import frozendict

from throwplus.types import StackFrame

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Environment variables controlling debug output and capture limits
DEBUG_THROW = _env_flag("THROWPLUS_DEBUG", False)
MAX_STACK_DEPTH = _env_int("THROWPLUS_MAX_STACK_DEPTH", 64)
CAPTURE_BINDINGS = _env_flag("THROWPLUS_CAPTURE_BINDINGS", True)

DEFAULT_MESSAGE = "Object thrown by throw"


def _is_throwplus_internal(path: str) -> bool:
    return os.path.dirname(os.path.abspath(path)) == _PACKAGE_DIR


def caller_frame() -> FrameType | None:
    """Return the innermost frame that does not belong to throwplus."""
    frame: FrameType | None = sys._getframe(1)
    while frame is not None and _is_throwplus_internal(frame.f_code.co_filename):
        frame = frame.f_back
    return frame


def _source_line(filename: str, line: int) -> str | None:
    code = linecache.getline(filename, line).strip()
    return code or None


def frame_to_stack_frame(frame: FrameType) -> StackFrame:
    filename = frame.f_code.co_filename
    return StackFrame(
        filename=filename,
        line=frame.f_lineno,
        function=frame.f_code.co_name,
        code=_source_line(filename, frame.f_lineno),
    )


def capture_stack_trace(start: FrameType | None = None) -> tuple[StackFrame, ...]:
    """
    Capture the call stack beginning at the caller's frame.

    Args:
        start: Frame to begin at. Defaults to the innermost frame outside throwplus.

    Returns:
        Frames ordered innermost first. Capped at THROWPLUS_MAX_STACK_DEPTH frames
        unless THROWPLUS_DEBUG is enabled.
    """
    frame = start if start is not None else caller_frame()
    limit = None if DEBUG_THROW else MAX_STACK_DEPTH
    frames: list[StackFrame] = []
    while frame is not None:
        if limit is not None and len(frames) >= limit:
            break
        frames.append(frame_to_stack_frame(frame))
        frame = frame.f_back
    return tuple(frames)


def capture_bindings(start: FrameType | None = None) -> frozendict[str, Any]:
    """Snapshot the local variables of the caller's frame.

    Module-level frames yield an empty snapshot rather than the module globals.
    """
    if not CAPTURE_BINDINGS:
        return frozendict()
    frame = start if start is not None else caller_frame()
    if frame is None or frame.f_code.co_name == "<module>":
        return frozendict()
    return frozendict(dict(frame.f_locals))


def freeze_bindings(bindings: Mapping[str, Any]) -> frozendict[str, Any]:
    if isinstance(bindings, frozendict):
        return bindings
    return frozendict(bindings)


def stack_trace_from_traceback(tb: TracebackType | None) -> tuple[StackFrame, ...]:
    """Convert a native traceback into frames ordered innermost first."""
    frames: list[StackFrame] = []
    while tb is not None:
        filename = tb.tb_frame.f_code.co_filename
        frames.append(
            StackFrame(
                filename=filename,
                line=tb.tb_lineno,
                function=tb.tb_frame.f_code.co_name,
                code=_source_line(filename, tb.tb_lineno),
            )
        )
        tb = tb.tb_next
    frames.reverse()
    return tuple(frames)


def short_repr(value: Any, limit: int = 80) -> str:
    try:
        text = repr(value)
    except Exception as exc:  # repr of user objects may fail
        text = f"<unrepresentable {type(value).__name__}: {exc!r}>"
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


__all__ = [
    "CAPTURE_BINDINGS",
    "DEBUG_THROW",
    "DEFAULT_MESSAGE",
    "MAX_STACK_DEPTH",
    "caller_frame",
    "capture_bindings",
    "capture_stack_trace",
    "frame_to_stack_frame",
    "freeze_bindings",
    "short_repr",
    "stack_trace_from_traceback",
]
