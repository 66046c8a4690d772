"""
validate.py – syntactic check of a shape's instruction stream.

Opcode table
------------
  0   End-Of-Shape     no operands, only allowed as the last byte
  1   Pen-Down         no operands
  2   Pen-Up           no operands
  3   Scale-Down       1 byte
  4   Scale-Up         1 byte
  5   Push             no operands, stack depth at most 4
  6   Pop              no operands, stack depth never below 0
  7   Subshape         1 byte (2 bytes in Unicode fonts)
  8   Line-To          dx, dy
  9   Multi-Line-To    (dx, dy) pairs up to and including (0, 0)
  10  Octant-Arc       radius, octant spec
  11  Fractional-Arc   5 bytes
  12  Arc-To           dx, dy, bulge
  13  Multi-Arc-To     (dx, dy, bulge) records up to a (0, 0) pair
  14  Do-Next          must be followed by another byte
  0x0F-0xFF            vector byte: high nibble length, low nibble direction

An operand of *k* bytes at position *pos* must fit before the final
End-Of-Shape byte, i.e. ``pos + k < length - 1``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ShapeValidationError
from .shape import Shape

MAX_PUSH_DEPTH = 4

# Operand kinds
FIXED     = "fixed"
END       = "end"
PUSH      = "push"
POP       = "pop"
CALL      = "call"
PAIRS     = "pairs"
ARC_PAIRS = "arc_pairs"
NEXT      = "next"


@dataclass(frozen=True)
class Opcode:
    code: int
    name: str
    kind: str = FIXED
    operands: int = 0


OPCODES: dict[int, Opcode] = {op.code: op for op in (
    Opcode(0,  "End-Of-Shape",   END),
    Opcode(1,  "Pen-Down"),
    Opcode(2,  "Pen-Up"),
    Opcode(3,  "Scale-Down",     FIXED, 1),
    Opcode(4,  "Scale-Up",       FIXED, 1),
    Opcode(5,  "Push",           PUSH),
    Opcode(6,  "Pop",            POP),
    Opcode(7,  "Subshape",       CALL),
    Opcode(8,  "Line-To",        FIXED, 2),
    Opcode(9,  "Multi-Line-To",  PAIRS),
    Opcode(10, "Octant-Arc",     FIXED, 2),
    Opcode(11, "Fractional-Arc", FIXED, 5),
    Opcode(12, "Arc-To",         FIXED, 3),
    Opcode(13, "Multi-Arc-To",   ARC_PAIRS),
    Opcode(14, "Do-Next",        NEXT),
)}


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------

class _Scan:
    """Read-only cursor over one shape's spec bytes."""

    def __init__(self, shape: Shape, is_unicode: bool) -> None:
        self.shape = shape
        self.data = shape.buffer
        self.end = shape.length
        self.is_unicode = is_unicode
        self.pos = 0
        self.depth = 0

    def fail(self, message: str) -> None:
        raise ShapeValidationError(message, self.shape.name)

    def fits(self, count: int) -> bool:
        return self.pos + count < self.end - 1

    def take(self, op: Opcode, count: int) -> bytes:
        """Consume *count* operand bytes following the current position."""
        if not self.fits(count):
            self.fail(f"{op.name}-Command ({op.code}) not complete.")
        operands = bytes(self.data[self.pos + 1: self.pos + 1 + count])
        self.pos += count
        return operands


# ---------------------------------------------------------------------------
# Operand handlers, one per kind
# ---------------------------------------------------------------------------

def _fixed(scan: _Scan, op: Opcode) -> None:
    if op.operands:
        scan.take(op, op.operands)


def _end(scan: _Scan, op: Opcode) -> None:
    if scan.pos != scan.end - 1:
        scan.fail(f"{op.name}-Command ({op.code}) before end of shape found.")


def _push(scan: _Scan, op: Opcode) -> None:
    scan.depth += 1
    if scan.depth > MAX_PUSH_DEPTH:
        scan.fail(f"Too many {op.name}-Commands ({op.code}).")


def _pop(scan: _Scan, op: Opcode) -> None:
    scan.depth -= 1
    if scan.depth < 0:
        scan.fail(f"Too many {op.name}-Commands ({op.code}).")


def _call(scan: _Scan, op: Opcode) -> None:
    scan.take(op, 2 if scan.is_unicode else 1)


def _pairs(scan: _Scan, op: Opcode) -> None:
    while scan.take(op, 2) != b"\x00\x00":
        pass


def _arc_pairs(scan: _Scan, op: Opcode) -> None:
    while scan.take(op, 2) != b"\x00\x00":
        scan.take(op, 1)   # bulge


def _next(scan: _Scan, op: Opcode) -> None:
    # The following command is checked on its own by the main loop.
    if not scan.fits(1):
        scan.fail(f"No command after {op.name}-Command ({op.code}).")


_HANDLERS = {
    FIXED:     _fixed,
    END:       _end,
    PUSH:      _push,
    POP:       _pop,
    CALL:      _call,
    PAIRS:     _pairs,
    ARC_PAIRS: _arc_pairs,
    NEXT:      _next,
}


def _vector(scan: _Scan, code: int) -> None:
    if code >> 4 == 0:
        scan.fail(f"Vector length is zero ({code:02X}).")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_shape(shape: Shape, is_unicode: bool = False) -> None:
    """
    Check the instruction stream of *shape*.

    Returns None when the stream is well formed; raises ShapeValidationError
    naming the shape and the offending command otherwise.
    """
    scan = _Scan(shape, is_unicode)
    while scan.pos < scan.end:
        code = scan.data[scan.pos]
        op = OPCODES.get(code)
        if op is None:
            _vector(scan, code)
        else:
            _HANDLERS[op.kind](scan, op)
        scan.pos += 1
