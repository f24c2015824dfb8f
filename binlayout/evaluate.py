"""
evaluate.py – Region variables and expression evaluation.

Variables are only ever created in groups of three by an executed statement:
``<name>.start``, ``<name>.size`` and ``<name>.end``.  Constants are the
caller-supplied ``-D NAME=value`` strings and are never modified here.
"""

from __future__ import annotations

import re
from typing import Iterator, Mapping

from .errors import (
    DuplicateDefinition,
    EvalError,
    NumericError,
    UndefinedConstant,
    UndefinedVariable,
)
from .nodes import Binary, Const, Expr, Literal, Str, Variable


DISCARD = "_"

_DECIMAL_RE = re.compile(r"[0-9]+", re.ASCII)


class Variables:
    """Environment of region variables, filled in script order."""

    def __init__(self) -> None:
        self._values: dict[str, int] = {}
        self._regions: list[str] = []

    def __getitem__(self, key: str) -> int:
        return self._values[key]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def get(self, key: str, default=None):
        return self._values.get(key, default)

    def is_defined(self, name: str) -> bool:
        return f"{name}.start" in self._values

    def define(self, name: str, start: int, size: int) -> None:
        """
        Record region *name* as ``[start, start + size)``.

        The discard name ``_`` is ignored.  Raises DuplicateDefinition (and
        records nothing) if *name* already exists.
        """
        if name == DISCARD:
            return
        if self.is_defined(name):
            raise DuplicateDefinition(name)
        self._values[f"{name}.start"] = start
        self._values[f"{name}.size"] = size
        self._values[f"{name}.end"] = start + size
        self._regions.append(name)

    def regions(self) -> Iterator[tuple[str, int, int, int]]:
        """Yield ``(name, start, size, end)`` in definition order."""
        for name in self._regions:
            yield (name,
                   self._values[f"{name}.start"],
                   self._values[f"{name}.size"],
                   self._values[f"{name}.end"])


def const_string(name: str, consts: Mapping[str, str]) -> str:
    try:
        return consts[name]
    except KeyError:
        raise UndefinedConstant(name) from None


def const_int(name: str, consts: Mapping[str, str]) -> int:
    """Return constant *name* parsed as a base-10 unsigned integer."""
    text = const_string(name, consts)
    if not _DECIMAL_RE.fullmatch(text):
        raise NumericError(f"Constant {name}={text!r} is not a decimal integer")
    return int(text, 10)


def evaluate(expr: Expr, consts: Mapping[str, str], variables: Variables) -> int:
    """Evaluate a numeric expression to a non-negative integer."""
    if isinstance(expr, Literal):
        return expr.value
    if isinstance(expr, Variable):
        try:
            return variables[expr.name]
        except KeyError:
            raise UndefinedVariable(expr.name) from None
    if isinstance(expr, Const):
        return const_int(expr.name, consts)
    if isinstance(expr, Binary):
        lhs = evaluate(expr.left, consts, variables)
        rhs = evaluate(expr.right, consts, variables)
        if expr.op == "+":
            return lhs + rhs
        if expr.op == "-":
            if rhs > lhs:
                raise NumericError(f"Subtraction underflow: {lhs} - {rhs}")
            return lhs - rhs
    raise EvalError("Invalid expression")


def resolve_string(expr: Expr, consts: Mapping[str, str]) -> str:
    """Return the text of a string literal or a constant."""
    if isinstance(expr, Str):
        return expr.value
    if isinstance(expr, Const):
        return const_string(expr.name, consts)
    raise EvalError("Expected string or constant")
