"""
__main__.py – CLI entry-point for the shpc package.

Usage:  python -m shpc [options] FILE.shp

Options
-------
-h, -H      Print help (nothing is compiled).
-v          Print detailed information.
-o NAME     Name of the output file (default: input name with .shx).
-l          List the shapes of a compiled .shx file instead of compiling.

Exit codes: 0 success, 1 usage error or help, 2 compilation error.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from . import __version__

EXIT_OK    = 0
EXIT_USAGE = 1
EXIT_ERROR = 2

_BANNER = f"shpc {__version__} - SHP shape compiler"


class _UsageError(Exception):
    pass


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise _UsageError(message)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_compile(args: argparse.Namespace) -> int:
    from shpc.compiler import compile_file
    from shpc.errors import ShapeError

    try:
        compile_file(args.input, args.output, verbose=args.verbose)
    except (ShapeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    print("Done.")
    return EXIT_OK


def cmd_list(args: argparse.Namespace) -> int:
    """Print the contents of a compiled SHX file."""
    from shpc.errors import ShapeError
    from shpc.shx import read_shx

    path = Path(args.input)
    try:
        shx = read_shx(path.read_bytes())
    except (ShapeError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    layout = "unicode" if shx.is_unicode else "normal"
    print(f"{path.name}: {len(shx.shapes)} shape(s), {layout} layout")
    for shape in shx.shapes:
        print(f"  {shape.number:5d} (0x{shape.number:04X})  "
              f"{shape.length:5d} byte(s)  {shape.name}")
    return EXIT_OK


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> _Parser:
    parser = _Parser(
        prog="shpc",
        usage="shpc [options] *.shp",
        description="Compile AutoCAD SHP shape / font sources into SHX files.",
        add_help=False,
    )
    parser.add_argument("-h", "-H", dest="help", action="store_true",
                        help="Print help.")
    parser.add_argument("-v", dest="verbose", action="store_true",
                        help="Print detailed information.")
    parser.add_argument("-o", dest="output", metavar="<name>",
                        help="Name of output file.")
    parser.add_argument("-l", "--list", dest="list", action="store_true",
                        help="List the shapes of a compiled .shx file.")
    parser.add_argument("input", nargs="?", metavar="FILE",
                        help="Shape source (.shp), or .shx with -l.")
    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    print(_BANNER)
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except _UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_USAGE

    if args.help or not args.input:
        if not args.help:
            print("Error: No input file.", file=sys.stderr)
        parser.print_help()
        return EXIT_USAGE

    if args.list:
        return cmd_list(args)
    return cmd_compile(args)


if __name__ == "__main__":
    sys.exit(main())
