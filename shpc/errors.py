"""
errors.py – exception types raised while compiling shape files.

All errors derive from ``ShapeError`` (itself a ``ValueError``) so callers
can catch a single type.  Errors tied to one shape carry its name and render
as ``In shape "<name>": <message>``.
"""

from __future__ import annotations

from typing import Optional


class ShapeError(ValueError):
    """Base class for every compile, validation and decode failure."""

    def __init__(self, message: str, shape: Optional[str] = None) -> None:
        self.message = message
        self.shape = shape
        if shape is not None:
            message = f'In shape "{shape}": {message}'
        super().__init__(message)


class ShapeFormatError(ShapeError):
    """Malformed source: bad header, bad spec byte, overflowing buffer."""


class ShapeValidationError(ShapeError):
    """A parsed shape breaks a registry or instruction-stream rule."""
