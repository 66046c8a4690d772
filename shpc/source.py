"""
source.py – line reading and comment stripping for .shp sources.

Every CR and every LF terminates a line, so a CRLF pair produces one empty
line that the compiler skips like any other blank line.  The generator ending
is the end-of-input signal.
"""

from __future__ import annotations

import re
from typing import Iterator

MAX_LINE_LENGTH = 128

# Encoding used when a source line is not valid UTF-8.
LEGACY_ENCODING = "cp1252"

_LINE_BREAK_RE = re.compile(rb"[\r\n]")


def iter_lines(data: bytes | bytearray) -> Iterator[bytes]:
    """Yield the raw lines of *data* without their terminators."""
    lines = _LINE_BREAK_RE.split(bytes(data))
    # A trailing terminator leaves one empty piece that is not a line.
    if lines and lines[-1] == b"":
        lines.pop()
    yield from lines


def decode_line(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode(LEGACY_ENCODING, errors="replace")


def strip_comment(line: str) -> str:
    """Drop everything from the first ``;`` on."""
    return line.partition(";")[0]
