"""
compiler.py – drives a complete .shp → .shx compilation.

The work is strictly phased: read and parse every line, check the registry,
build the output bytes, and only then create the output file.  A failure in
any phase leaves an existing output file untouched.

Entry points: ``compile_source(data)`` and
``compile_file(input_path, output_path=None, verbose=False)``.
"""

from __future__ import annotations

from pathlib import Path

from .errors import ShapeError
from .parse import handle_definition, handle_header
from .shape import CompileContext
from .shx import write_shx
from .source import MAX_LINE_LENGTH, decode_line, iter_lines, strip_comment


def default_output_path(input_path: str | Path) -> Path:
    """``FOO.shp`` / ``FOO.SHP`` → ``FOO.shx``; other names get ``.shx`` appended."""
    name = str(input_path)
    if name.lower().endswith(".shp"):
        name = name[:-4]
    return Path(name + ".shx")


def compile_source(data: bytes | bytearray, verbose: bool = False) -> CompileContext:
    """
    Parse and check a shape source held in memory.

    Returns the checked CompileContext, ready for ``shx.build_shx``.
    Raises ShapeError on the first problem found.
    """
    ctx = CompileContext(verbose=verbose)

    for raw in iter_lines(data):
        if len(raw) > MAX_LINE_LENGTH:
            ctx.warn(f"Line is longer than {MAX_LINE_LENGTH} bytes.")
        line = strip_comment(decode_line(raw))
        if not line.strip():
            continue
        if line[0] == "*":
            handle_header(ctx, line)
        else:
            handle_definition(ctx, line)

    ctx.check()
    return ctx


def compile_file(input_path: str | Path,
                 output_path: str | Path | None = None,
                 verbose: bool = False) -> Path:
    """
    Compile the .shp file *input_path* and write the SHX container.

    Parameters
    ----------
    input_path:
        Shape source file.
    output_path:
        Target file; defaults to ``default_output_path(input_path)``.
    verbose:
        Print progress information to stdout.

    Returns
    -------
    Path of the written file.
    """
    input_path = Path(input_path)
    output_path = (Path(output_path) if output_path is not None
                   else default_output_path(input_path))

    if verbose:
        print(f"input file: {input_path}")
        print(f"output file: {output_path}")

    if not input_path.is_file():
        raise ShapeError(f'Input file "{input_path}" does not exist')

    ctx = compile_source(input_path.read_bytes(), verbose=verbose)

    ctx.info("Write file in "
             f"{'UNICODE' if ctx.is_unicode else 'NORMAL'} file format.")
    written = write_shx(ctx, output_path)
    ctx.info(f"{len(ctx.shapes)} Shapes compiled.")
    ctx.info(f"Output file created: {written}")
    return written
