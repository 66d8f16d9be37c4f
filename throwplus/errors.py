from __future__ import annotations

from typing import Any


class ThrowPlusError(Exception):
    """Base class for errors raised by throwplus itself."""


class SetupError(ThrowPlusError, ValueError):
    """Raised when a handler chain is malformed, before any body runs."""

    def __init__(self, message: str, *, offending: Any = None) -> None:
        self.offending = offending
        super().__init__(message)


class ThrowUsageError(ThrowPlusError, RuntimeError):
    """Raised when an operation needs an active handler and none is running."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"{operation} can only be used inside a catch clause body\n"
            f"Hint: call it from a function passed to `catch(selector, body)`"
        )


__all__ = ["SetupError", "ThrowPlusError", "ThrowUsageError"]
