"""
shape.py – shape records and the compile context that owns them.

The ``CompileContext`` is the shape registry plus the container metadata
(signature, Unicode flag).  The driver creates one per compilation and passes
it explicitly to the parser, the checker and the encoder.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Optional

from .errors import ShapeFormatError, ShapeValidationError


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# All names inside an SHX file are stored in this code page.
SHX_ENCODING = "cp1252"

SIG_UNIFONT   = b"AutoCAD-86 unifont 1.0\r\n\x1a"
SIG_SHAPES_11 = b"AutoCAD-86 shapes 1.1\r\n\x1a"
SIG_SHAPES_10 = b"AutoCAD-86 shapes 1.0\r\n\x1a"

MAX_U16 = 0xFFFF


# ---------------------------------------------------------------------------
# Shape record
# ---------------------------------------------------------------------------

@dataclass
class Shape:
    number: int
    length: int
    name: str
    cursor: int = 0
    buffer: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.buffer = bytearray(self.length)

    @classmethod
    def from_bytes(cls, number: int, name: str, spec: bytes) -> "Shape":
        """Build a fully written shape, e.g. one read back from an SHX file."""
        shape = cls(number, len(spec), name)
        shape.append(*spec)
        return shape

    @property
    def encoded_name(self) -> bytes:
        return self.name.encode(SHX_ENCODING, errors="replace")

    @property
    def entry_length(self) -> int:
        """Size of the name (NUL included) plus the spec bytes."""
        return self.length + len(self.encoded_name) + 1

    @property
    def spec(self) -> bytes:
        return bytes(self.buffer)

    def append(self, *values: int) -> None:
        """Write spec bytes at the cursor; never grows past ``length``."""
        if self.cursor + len(values) > self.length:
            raise ShapeFormatError("Too many spec bytes.", self.name)
        for v in values:
            self.buffer[self.cursor] = v & 0xFF
            self.cursor += 1


# ---------------------------------------------------------------------------
# Registry / compile context
# ---------------------------------------------------------------------------

def _is_symbol_name(name: str) -> bool:
    return all("0" <= c <= "9" or "A" <= c <= "Z" for c in name)


@dataclass
class CompileContext:
    """State of one compilation pass."""

    verbose: bool = False
    signature: bytes = b""
    is_unicode: bool = False
    shapes: list[Shape] = field(default_factory=list)
    # Header lines seen; checked against len(shapes) once input is exhausted.
    header_count: int = 0
    current: Optional[Shape] = None
    warnings: list[str] = field(default_factory=list)

    def info(self, message: str) -> None:
        if self.verbose:
            print(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        print(f"Warning: {message}", file=sys.stderr)

    def add_shape(self, shape: Shape) -> None:
        self.shapes.append(shape)
        self.current = shape

    @property
    def low_number(self) -> int:
        return self.shapes[0].number

    @property
    def high_number(self) -> int:
        return self.shapes[-1].number

    def check(self) -> None:
        """
        Run the cross-shape checks and validate every instruction stream.

        Raises ShapeValidationError for the first violation found.
        """
        from .validate import validate_shape

        if not self.shapes:
            raise ShapeValidationError("No shapes found.")
        if self.header_count != len(self.shapes):
            raise ShapeValidationError("Shape count differs from found shapes.")

        # A file whose first shape is not number 0 is a symbol set rather
        # than a font, and its names are expected to be upper case.
        symbol_set = self.shapes[0].number != 0
        last = -1

        for shape in self.shapes:
            if symbol_set and not _is_symbol_name(shape.name):
                self.warn(f'In shape "{shape.name}": '
                          "Characters of name should be upper case or numbers.")

            if shape.length == 0 or shape.buffer[-1] != 0:
                raise ShapeValidationError("Last spec byte must be 0.", shape.name)

            if shape.cursor != shape.length:
                raise ShapeValidationError("Wrong spec byte count.", shape.name)

            if shape.number <= last:
                raise ShapeValidationError(
                    "Number of shape is lower or equal than in shape before.",
                    shape.name)
            last = shape.number

            validate_shape(shape, self.is_unicode)
