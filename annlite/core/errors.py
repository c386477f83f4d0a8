"""Exception types raised by the annlite core."""

from __future__ import annotations


class ShapeMismatchError(ValueError):
    """A vector does not match the width expected by a layer or network."""

    def __init__(self, what: str, expected: int, actual: int) -> None:
        super().__init__(f"{what}: expected length {expected}, got {actual}")
        self.what = what
        self.expected = expected
        self.actual = actual


class NotInitializedError(RuntimeError):
    """A forward pass was requested on a zero-sized layer or network."""


__all__ = ["ShapeMismatchError", "NotInitializedError"]
