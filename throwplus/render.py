"""Rendering utilities for throw contexts."""

from __future__ import annotations

from dataclasses import dataclass

from throwplus.types import Context, StackFrame
from throwplus.utils import short_repr


@dataclass
class ContextRenderer:
    """Renders a Context for human consumption."""

    max_frames: int | None = None
    head_frames: int = 10
    value_limit: int = 40

    def render(self, context: Context) -> str:
        lines: list[str] = []
        obj_type = type(context.object).__name__
        lines.append(f"Thrown: {obj_type}: {short_repr(context.object, self.value_limit * 2)}")
        if context.message:
            lines.append(f"Message: {context.message}")
        if context.cause is not None:
            lines.append(f"Caused by: {type(context.cause).__name__}: {context.cause}")
        if context.wrapper is not None and context.wrapper is not context.object:
            lines.append(f"Wrapped in: {type(context.wrapper).__name__}")
        lines.append("")

        if context.bindings:
            lines.append("Bindings at throw site:")
            for name, value in context.bindings.items():
                lines.append(f"  {name} = {short_repr(value, self.value_limit)}")
            lines.append("")

        lines.append("Stack (most recent call first):")
        head, tail, omitted = self._maybe_truncate(context.stack_trace)
        for frame in head:
            lines.append(frame.format())
        if omitted:
            lines.append(f"  ... ({omitted} frames omitted) ...")
        for frame in tail:
            lines.append(frame.format())
        if not context.stack_trace:
            lines.append("  (no stack trace captured)")

        return "\n".join(lines)

    def _maybe_truncate(
        self, frames: tuple[StackFrame, ...]
    ) -> tuple[tuple[StackFrame, ...], tuple[StackFrame, ...], int]:
        if self.max_frames is None or len(frames) <= self.max_frames:
            return frames, (), 0

        head_count = min(self.head_frames, self.max_frames)
        tail_count = self.max_frames - head_count
        tail = frames[len(frames) - tail_count :] if tail_count else ()
        omitted = len(frames) - head_count - tail_count
        return frames[:head_count], tail, omitted


def format_context(context: Context, *, max_frames: int | None = 20) -> str:
    return ContextRenderer(max_frames=max_frames).render(context)


__all__ = ["ContextRenderer", "format_context"]
