"""
functions.py – Builtin placement functions callable from a layout script.

  file,  PATH                 copy a local file to the statement offset
  url,   URL                  download a resource to the statement offset
  u8 / u16 / u32, VALUE       write a little-endian integer
  crc16, ALGO, ADDR, LEN      checksum LEN bytes at ADDR, write it at offset

Every function has the same signature::

    func(consts, variables, args, pos, out) -> int

and returns the number of bytes it produced.  All arguments are evaluated
before the output is touched; all output positioning is absolute.
"""

from __future__ import annotations

import enum
import struct
from typing import BinaryIO, Callable, Mapping, Sequence

import requests

from .crc import CrcAlgorithm
from .errors import (
    ArgumentCountError,
    FetchError,
    LayoutIOError,
    NumericError,
    UnknownFunction,
)
from .evaluate import Variables, evaluate, resolve_string
from .nodes import Expr


CHUNK_SIZE = 64 * 1024


def _check_args(name: str, args: Sequence[Expr], expected: int) -> None:
    if len(args) != expected:
        raise ArgumentCountError(name, expected, len(args))


def _seek(out: BinaryIO, pos: int) -> None:
    try:
        out.seek(pos)
    except (OSError, ValueError, OverflowError) as exc:
        raise LayoutIOError(f"Could not seek output to {pos}: {exc}") from exc


def _write(out: BinaryIO, data: bytes) -> None:
    try:
        out.write(data)
    except OSError as exc:
        raise LayoutIOError(f"Could not write output: {exc}") from exc


# ---------------------------------------------------------------------------
# file / url
# ---------------------------------------------------------------------------

def func_file(consts: Mapping[str, str], variables: Variables,
              args: Sequence[Expr], pos: int, out: BinaryIO) -> int:
    _check_args("file", args, 1)
    path = resolve_string(args[0], consts)
    try:
        src = open(path, "rb")
    except OSError as exc:
        raise LayoutIOError(f"Could not open file {path}: {exc.strerror or exc}") from exc

    length = 0
    with src:
        _seek(out, pos)
        while True:
            try:
                chunk = src.read(CHUNK_SIZE)
            except OSError as exc:
                raise LayoutIOError(f"Could not read file {path}: {exc}") from exc
            if not chunk:
                break
            _write(out, chunk)
            length += len(chunk)
    return length


def func_url(consts: Mapping[str, str], variables: Variables,
             args: Sequence[Expr], pos: int, out: BinaryIO) -> int:
    _check_args("url", args, 1)
    url = resolve_string(args[0], consts)
    try:
        resp = requests.get(url, stream=True)
    except requests.RequestException as exc:
        raise FetchError(f"Could not fetch {url}: {exc}") from exc

    length = 0
    with resp:
        if not 200 <= resp.status_code < 300:
            raise FetchError(f"Could not fetch {url}: HTTP {resp.status_code}")
        _seek(out, pos)
        try:
            for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    _write(out, chunk)
                    length += len(chunk)
        except requests.RequestException as exc:
            raise FetchError(f"Could not fetch {url}: {exc}") from exc
    return length


# ---------------------------------------------------------------------------
# Fixed-width integers
# ---------------------------------------------------------------------------

def _make_int_func(name: str, fmt: str) -> Callable[..., int]:
    width = struct.calcsize(fmt)
    limit = 1 << (8 * width)

    def func(consts: Mapping[str, str], variables: Variables,
             args: Sequence[Expr], pos: int, out: BinaryIO) -> int:
        _check_args(name, args, 1)
        value = evaluate(args[0], consts, variables)
        if value >= limit:
            raise NumericError(f"{name}: value {value:#x} does not fit in {width * 8} bits")
        _seek(out, pos)
        _write(out, struct.pack(fmt, value))
        return width

    func.__name__ = f"func_{name}"
    return func


func_u8  = _make_int_func("u8",  "<B")
func_u16 = _make_int_func("u16", "<H")
func_u32 = _make_int_func("u32", "<I")


# ---------------------------------------------------------------------------
# crc16
# ---------------------------------------------------------------------------

def func_crc16(consts: Mapping[str, str], variables: Variables,
               args: Sequence[Expr], pos: int, out: BinaryIO) -> int:
    _check_args("crc16", args, 3)
    algorithm = CrcAlgorithm.lookup(resolve_string(args[0], consts))
    addr = evaluate(args[1], consts, variables)
    length = evaluate(args[2], consts, variables)

    _seek(out, addr)
    crc = algorithm.start()
    remaining = length
    while remaining:
        try:
            chunk = out.read(min(remaining, CHUNK_SIZE))
        except OSError as exc:
            raise LayoutIOError(f"Could not read output: {exc}") from exc
        if not chunk:
            break
        crc = algorithm.update(crc, chunk)
        remaining -= len(chunk)
    # Bytes past the current end of output count as zero
    zeros = bytes(min(remaining, CHUNK_SIZE))
    while remaining:
        step = min(remaining, CHUNK_SIZE)
        crc = algorithm.update(crc, zeros[:step])
        remaining -= step

    _seek(out, pos)
    _write(out, struct.pack("<H", algorithm.finish(crc)))
    return 2


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class Builtin(enum.Enum):
    FILE  = "file"
    URL   = "url"
    U8    = "u8"
    U16   = "u16"
    U32   = "u32"
    CRC16 = "crc16"

    @classmethod
    def lookup(cls, name: str) -> "Builtin":
        try:
            return cls(name)
        except ValueError:
            raise UnknownFunction(name) from None

    def invoke(self, consts: Mapping[str, str], variables: Variables,
               args: Sequence[Expr], pos: int, out: BinaryIO) -> int:
        return _FUNCS[self](consts, variables, args, pos, out)


_FUNCS: dict[Builtin, Callable[..., int]] = {
    Builtin.FILE:  func_file,
    Builtin.URL:   func_url,
    Builtin.U8:    func_u8,
    Builtin.U16:   func_u16,
    Builtin.U32:   func_u32,
    Builtin.CRC16: func_crc16,
}
