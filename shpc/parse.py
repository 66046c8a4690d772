"""
parse.py – shape header and spec byte line parsing.

Header line::

    *<number>,<spec byte count>,<name>
    *UNIFONT,<spec byte count>,<font name>

Spec byte line: comma / parenthesis separated tokens, e.g. ``2,014,(-3,6),0``.
Tokens of up to four characters are bytes; longer tokens are 16-bit words
stored high byte first.  A literal starting with ``0`` is hexadecimal,
anything else decimal.  A leading ``-`` negates the value (two's complement).
"""

from __future__ import annotations

import re

from .errors import ShapeFormatError
from .shape import (
    MAX_U16,
    SIG_SHAPES_10,
    SIG_SHAPES_11,
    SIG_UNIFONT,
    CompileContext,
    Shape,
)

_TOKEN_SPLIT_RE = re.compile(r"[,()]")
_HEX_RE = re.compile(r"[0-9A-Fa-f]+")
_DEC_RE = re.compile(r"[0-9]+")

_UNIFONT = "*UNIFONT"


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

def parse_number(literal: str) -> int:
    """Parse an unsigned literal: hex when it starts with ``0``, else decimal."""
    text = literal.strip()
    if text.startswith("0"):
        pattern, base = _HEX_RE, 16
    else:
        pattern, base = _DEC_RE, 10
    if not pattern.fullmatch(text):
        raise ShapeFormatError(f"Invalid number: {literal!r}")
    return int(text, base)


def parse_spec_value(token: str, width: int = 1) -> int:
    """
    Return the encoded value of one spec token, *width* bytes wide.

    Negative tokens are stored as two's complement, so ``-2`` becomes
    ``0xFE`` as a byte and ``0xFFFE`` as a word.
    """
    text = token.strip()
    negative = text.startswith("-")
    if negative:
        text = text[1:]
    mask = 0xFF if width == 1 else MAX_U16
    magnitude = parse_number(text)
    if magnitude > mask:
        raise ShapeFormatError(f"Spec byte out of range: {token.strip()!r}")
    return (-magnitude if negative else magnitude) & mask


# ---------------------------------------------------------------------------
# Header lines
# ---------------------------------------------------------------------------

def select_signature(ctx: CompileContext, line: str) -> None:
    """Fix the container type from the first header line of the file."""
    if line.upper().startswith(_UNIFONT + ","):
        ctx.signature = SIG_UNIFONT
        ctx.is_unicode = True
    elif line.startswith("*0,"):
        ctx.signature = SIG_SHAPES_11
        ctx.is_unicode = False
    else:
        ctx.signature = SIG_SHAPES_10
        ctx.is_unicode = False


def parse_header(line: str) -> Shape:
    """Parse a ``*number,count,name`` line into a new, empty Shape."""
    fields = line.split(",", 2)
    if len(fields) < 3:
        raise ShapeFormatError(f"Incomplete shape header: {line!r}")
    number_text, count_text, name = fields

    number_text = number_text.strip()
    if number_text.upper() == _UNIFONT:
        number_text = "0"
    elif number_text.startswith("*"):
        number_text = number_text[1:]
    else:
        raise ShapeFormatError(f"'*' expected in shape header: {line!r}")

    number = parse_number(number_text)
    length = parse_number(count_text)
    if number > MAX_U16:
        raise ShapeFormatError(f"Shape number out of range: {number}", name)
    if length > MAX_U16:
        raise ShapeFormatError(f"Spec byte count out of range: {length}", name)
    return Shape(number, length, name)


def handle_header(ctx: CompileContext, line: str) -> Shape:
    """Register the shape started by header *line* as the current shape."""
    if ctx.header_count == 0:
        select_signature(ctx, line)
    ctx.header_count += 1
    shape = parse_header(line)
    ctx.info(f"Shape: {shape.number}, Spec Bytes: {shape.length}, "
             f"Name: {shape.name}")
    ctx.add_shape(shape)
    return shape


# ---------------------------------------------------------------------------
# Spec byte lines
# ---------------------------------------------------------------------------

def handle_definition(ctx: CompileContext, line: str) -> None:
    """Append the spec bytes of one data line to the current shape."""
    shape = ctx.current
    if shape is None:
        raise ShapeFormatError("Corrupt file. Shape header not found.")

    for token in _TOKEN_SPLIT_RE.split(line):
        token = token.strip()
        if not token:
            continue
        try:
            if len(token) > 4:
                word = parse_spec_value(token, width=2)
                shape.append(word >> 8, word & 0xFF)
            else:
                shape.append(parse_spec_value(token))
        except ShapeFormatError as exc:
            if exc.shape is not None:
                raise
            raise ShapeFormatError(exc.message, shape.name) from None
