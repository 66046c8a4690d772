"""
shpc – compiler for AutoCAD SHP shape / font sources into SHX containers.

Public API re-exports:

  from shpc.compiler import compile_source, compile_file, default_output_path
  from shpc.shape    import Shape, CompileContext
  from shpc.validate import validate_shape, OPCODES
  from shpc.shx      import build_shx, write_shx, read_shx, is_shx
  from shpc.errors   import ShapeError, ShapeFormatError, ShapeValidationError
"""

__version__ = "1.3.0"

from .errors   import ShapeError, ShapeFormatError, ShapeValidationError
from .shape    import Shape, CompileContext
from .validate import validate_shape, OPCODES
from .shx      import build_shx, write_shx, read_shx, is_shx, ShxFile
from .compiler import compile_source, compile_file, default_output_path

__all__ = [
    "__version__",
    "ShapeError", "ShapeFormatError", "ShapeValidationError",
    "Shape", "CompileContext",
    "validate_shape", "OPCODES",
    "build_shx", "write_shx", "read_shx", "is_shx", "ShxFile",
    "compile_source", "compile_file", "default_output_path",
]
