"""
nodes.py – Expression and statement nodes produced by the parser.

Nodes are immutable.  ``str(node)`` renders it back as layout-script text,
e.g. ``str(stmt) == '$hdr.end + 2:body:file,"body.bin"'``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Literal:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Variable:
    # Qualified name: "<region>.<field>"
    name: str

    def __str__(self) -> str:
        return f"${self.name}"


@dataclass(frozen=True)
class Const:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Str:
    value: str

    def __str__(self) -> str:
        return f'"{self.value}"'


@dataclass(frozen=True)
class Binary:
    op: str
    left: "Expr"
    right: "Expr"

    def __str__(self) -> str:
        return f"{self.left} {self.op} {self.right}"


@dataclass(frozen=True)
class Call:
    callee: str
    args: tuple = ()

    def __str__(self) -> str:
        return "".join([self.callee] + [f",{arg}" for arg in self.args])


@dataclass(frozen=True)
class Statement:
    offset: "Expr"
    destination: str
    call: "Expr"

    def __str__(self) -> str:
        return f"{self.offset}:{self.destination}:{self.call}"


Expr = Union[Literal, Variable, Const, Str, Binary, Call, Statement]
