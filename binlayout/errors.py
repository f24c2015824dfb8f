"""
errors.py – Exception taxonomy for layout scripts.

Every error raised while lexing, parsing or executing a layout line derives
from LayoutError.  The driver stamps the 1-based line number onto the
exception before it reaches the user.
"""

from __future__ import annotations

from typing import Optional


class LayoutError(Exception):
    """Base class for every failure raised by a layout script."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


# Lexical / syntax

class LexError(LayoutError):
    pass


class ParseError(LayoutError):
    pass


# Semantic

class EvalError(LayoutError):
    pass


class UndefinedVariable(EvalError):

    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined variable {name}")
        self.name = name


class UndefinedConstant(EvalError):

    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined constant {name}")
        self.name = name


class UnknownFunction(EvalError):

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown function name '{name}'")
        self.name = name


class ArgumentCountError(EvalError):

    def __init__(self, name: str, expected: int, got: int) -> None:
        super().__init__(
            f"{name}: expected {expected} argument(s), got {got}")
        self.expected = expected
        self.got = got


class UnknownAlgorithm(EvalError):

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown CRC algorithm '{name}'")
        self.name = name


class DuplicateDefinition(EvalError):

    def __init__(self, name: str) -> None:
        super().__init__(f"Variables with name '{name}' already defined")
        self.name = name


# I/O

class LayoutIOError(LayoutError):
    pass


class FetchError(LayoutIOError):
    pass


# Numeric

class NumericError(LayoutError):
    pass
