"""
shx.py – SHX compiled shape container writer and reader.

Every file starts with one of three signatures:

  b"AutoCAD-86 shapes 1.0\\r\\n\\x1a"   plain shape / symbol file
  b"AutoCAD-86 shapes 1.1\\r\\n\\x1a"   font (first shape is number 0)
  b"AutoCAD-86 unifont 1.0\\r\\n\\x1a"  Unicode font

All integers are uint16 little-endian.  Names are Windows-1252, NUL
terminated.  ``entry_length`` = len(name) + 1 + spec byte count.

Normal layout (shapes 1.0 / 1.1)
--------------------------------
  signature
  lowest number, highest number, shape count
  header table : count × (number, entry_length)
  body table   : count × (name NUL, spec bytes)
  b"EOF"

Unicode layout (unifont 1.0)
----------------------------
  signature
  shape count
  count × (number, entry_length, name NUL, spec bytes)
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ShapeError
from .shape import (
    MAX_U16,
    SHX_ENCODING,
    SIG_SHAPES_10,
    SIG_SHAPES_11,
    SIG_UNIFONT,
    CompileContext,
    Shape,
)

EOF_MARKER = b"EOF"

_SIGNATURES = (SIG_UNIFONT, SIG_SHAPES_11, SIG_SHAPES_10)


@dataclass
class ShxFile:
    signature: bytes
    shapes: list[Shape] = field(default_factory=list)

    @property
    def is_unicode(self) -> bool:
        return self.signature == SIG_UNIFONT


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

def _u16(value: int, what: str) -> bytes:
    if not 0 <= value <= MAX_U16:
        raise ShapeError(f"{what} does not fit in 16 bits: {value}")
    return struct.pack("<H", value)


def _body(shape: Shape) -> bytes:
    return shape.encoded_name + b"\x00" + shape.spec


def build_unicode(ctx: CompileContext) -> bytes:
    """Serialise *ctx* in the Unicode layout."""
    out = bytearray(ctx.signature)
    out += _u16(len(ctx.shapes), "Shape count")
    for shape in ctx.shapes:
        out += _u16(shape.number, "Shape number")
        out += _u16(shape.entry_length, f'Entry length of shape "{shape.name}"')
        out += _body(shape)
    return bytes(out)


def build_normal(ctx: CompileContext) -> bytes:
    """Serialise *ctx* in the Normal layout (header table, bodies, EOF)."""
    out = bytearray(ctx.signature)
    out += _u16(ctx.low_number, "Lowest shape number")
    out += _u16(ctx.high_number, "Highest shape number")
    out += _u16(len(ctx.shapes), "Shape count")

    for shape in ctx.shapes:
        out += _u16(shape.number, "Shape number")
        out += _u16(shape.entry_length, f'Entry length of shape "{shape.name}"')

    for shape in ctx.shapes:
        out += _body(shape)

    out += EOF_MARKER
    return bytes(out)


def build_shx(ctx: CompileContext) -> bytes:
    """Return the complete SHX file for a checked compile context."""
    if not ctx.shapes or not ctx.signature:
        raise ShapeError("Nothing to write: no shapes compiled.")
    if ctx.is_unicode:
        return build_unicode(ctx)
    return build_normal(ctx)


def write_shx(ctx: CompileContext, path: str | Path) -> Path:
    """Build the SHX bytes first, then create / truncate *path* and write."""
    data = build_shx(ctx)
    path = Path(path)
    path.write_bytes(data)
    return path


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------

def _signature_of(data: bytes | bytearray) -> bytes | None:
    for sig in _SIGNATURES:
        if data[:len(sig)] == sig:
            return sig
    return None


def _split_entry(number: int, entry: bytes) -> Shape:
    """Split a ``name NUL spec`` entry into a Shape."""
    nul = entry.find(b"\x00")
    if nul == -1:
        raise ShapeError(f"Entry of shape {number} has no name terminator.")
    name = entry[:nul].decode(SHX_ENCODING, errors="replace")
    return Shape.from_bytes(number, name, entry[nul + 1:])


def _take(data: bytes, pos: int, length: int) -> bytes:
    chunk = data[pos: pos + length]
    if len(chunk) != length:
        raise ShapeError("Truncated SHX file.")
    return chunk


def _read_unicode(data: bytes, pos: int) -> list[Shape]:
    count, = struct.unpack_from("<H", data, pos)
    pos += 2
    shapes = []
    for _ in range(count):
        number, length = struct.unpack_from("<HH", data, pos)
        pos += 4
        shapes.append(_split_entry(number, _take(data, pos, length)))
        pos += length
    return shapes


def _read_normal(data: bytes, pos: int) -> list[Shape]:
    _low, _high, count = struct.unpack_from("<3H", data, pos)
    pos += 6
    headers = [struct.unpack_from("<HH", data, pos + i * 4) for i in range(count)]
    pos += count * 4

    shapes = []
    for number, length in headers:
        shapes.append(_split_entry(number, _take(data, pos, length)))
        pos += length

    if data[pos: pos + len(EOF_MARKER)] != EOF_MARKER:
        raise ShapeError("Missing EOF marker at end of SHX file.")
    return shapes


def read_shx(data: bytes | bytearray) -> ShxFile:
    """
    Decode a compiled SHX blob.

    Raises ShapeError for unknown signatures and truncated or malformed data.
    """
    data = bytes(data)
    sig = _signature_of(data)
    if sig is None:
        raise ShapeError("Not an SHX file (unknown signature).")
    try:
        if sig == SIG_UNIFONT:
            shapes = _read_unicode(data, len(sig))
        else:
            shapes = _read_normal(data, len(sig))
    except struct.error:
        raise ShapeError("Truncated SHX file.") from None
    return ShxFile(sig, shapes)


def is_shx(path: str | Path) -> bool:
    """Return True if the file starts with a known SHX signature."""
    try:
        with open(path, "rb") as fh:
            head = fh.read(len(SIG_UNIFONT))
    except OSError:
        return False
    return _signature_of(head) is not None
