"""
binlayout – assemble a binary image from a line-oriented layout script.

Public API re-exports:

  from binlayout.lexer       import Token, TokenKind, tokenize
  from binlayout.parser      import Parser, parse_line
  from binlayout.evaluate    import Variables, evaluate
  from binlayout.functions   import Builtin
  from binlayout.crc         import CrcAlgorithm, crc16
  from binlayout.interpreter import execute, run_layout, assemble_layout
"""

from .errors      import LayoutError
from .lexer       import Token, TokenKind, tokenize
from .parser      import Parser, parse_line
from .evaluate    import Variables, evaluate
from .functions   import Builtin
from .crc         import CrcAlgorithm, crc16
from .interpreter import execute, run_layout, assemble_layout

__all__ = [
    "LayoutError",
    "Token", "TokenKind", "tokenize",
    "Parser", "parse_line",
    "Variables", "evaluate",
    "Builtin",
    "CrcAlgorithm", "crc16",
    "execute", "run_layout", "assemble_layout",
]
