"""
interpreter.py – Execute layout scripts against a random-access output.

Entry point: ``assemble_layout(layout_path, output_path, consts=None)``

Each script line is lexed, parsed and executed on its own, strictly in
order.  The first failing line aborts the run; the raised LayoutError has
its ``line`` attribute set to the 1-based line number.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import BinaryIO, Iterable, Mapping, Optional

from .errors import (
    DuplicateDefinition,
    EvalError,
    LayoutError,
    LayoutIOError,
    LexError,
)
from .evaluate import DISCARD, Variables, evaluate
from .functions import Builtin
from .nodes import Call, Statement
from .parser import parse_line


def execute(stmt: Statement, consts: Mapping[str, str],
            variables: Variables, out: BinaryIO) -> int:
    """
    Run one statement and record its region.  Returns the produced length.

    A destination that is already defined is rejected before the function
    runs, so the output is left untouched.
    """
    pos = evaluate(stmt.offset, consts, variables)

    call = stmt.call
    if not isinstance(call, Call):
        raise EvalError("Invalid statement")
    builtin = Builtin.lookup(call.callee)

    if stmt.destination != DISCARD and variables.is_defined(stmt.destination):
        raise DuplicateDefinition(stmt.destination)

    length = builtin.invoke(consts, variables, call.args, pos, out)
    variables.define(stmt.destination, pos, length)
    return length


def run_layout(
    lines: Iterable[str],
    out: BinaryIO,
    consts: Optional[Mapping[str, str]] = None,
    variables: Optional[Variables] = None,
    verbose: bool = False,
) -> Variables:
    """
    Execute every line of a layout script against *out*.

    *variables* may be passed to continue from an earlier run; otherwise a
    fresh environment is created.  Returns the populated environment.
    """
    consts = {} if consts is None else consts
    variables = Variables() if variables is None else variables

    for line_no, line in enumerate(lines, start=1):
        try:
            stmt = parse_line(line.rstrip("\r\n"))
            if stmt is None:
                continue
            length = execute(stmt, consts, variables, out)
        except LayoutError as exc:
            exc.line = line_no
            raise
        if verbose:
            pos = variables.get(f"{stmt.destination}.start")
            where = f"  [{pos:#x}, {pos + length:#x})" if pos is not None else ""
            print(f"{line_no:4d}: {stmt}  -> {length} byte(s){where}")

    return variables


def decode_lines(raw: bytes) -> list[str]:
    """
    Split a UTF-8 script into lines.

    Raises LexError carrying the 1-based line number of the first line that
    is not valid UTF-8.
    """
    lines = []
    for line_no, chunk in enumerate(raw.split(b"\n"), start=1):
        try:
            lines.append(chunk.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise LexError(f"Invalid UTF-8 at column {exc.start + 1}",
                           line=line_no) from exc
    return lines


def assemble_layout(
    layout_path: str | os.PathLike,
    output_path: str | os.PathLike,
    consts: Optional[Mapping[str, str]] = None,
    verbose: bool = False,
) -> Variables:
    """
    Read the layout script at *layout_path* and build *output_path*.

    The output is created or truncated first, so any byte no statement
    writes reads back as zero.
    """
    layout_path = Path(layout_path)
    output_path = Path(output_path)
    try:
        raw = layout_path.read_bytes()
    except OSError as exc:
        raise LayoutIOError(f"could not open file `{layout_path}`: {exc.strerror or exc}") from exc
    lines = decode_lines(raw)
    try:
        out = open(output_path, "w+b")
    except OSError as exc:
        raise LayoutIOError(f"could not create file `{output_path}`: {exc.strerror or exc}") from exc

    with out:
        return run_layout(lines, out, consts=consts, verbose=verbose)
