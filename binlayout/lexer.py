"""
lexer.py – Tokenizer for a single layout-script line.

Token stream for ``0x10 + $hdr.end : body : file, "body.bin"``::

    INT 16, ADD, DOLLAR, IDENT hdr, DOT, IDENT end, COLON, IDENT body,
    COLON, IDENT file, COMMA, STR body.bin, EOL

``tokenize`` is a generator: tokens are produced one at a time and errors
surface only when the offending character is reached.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Optional, Union

from .errors import LexError, NumericError


class TokenKind(enum.Enum):
    ADD    = "+"
    SUB    = "-"
    COMMA  = ","
    COLON  = ":"
    DOLLAR = "$"
    DOT    = "."
    IDENT  = "ident"
    STR    = "str"
    NUM    = "num"
    EOL    = "eol"


# Single-character punctuation → kind
_PUNCT: dict[str, TokenKind] = {
    "+": TokenKind.ADD,
    "-": TokenKind.SUB,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    "$": TokenKind.DOLLAR,
    ".": TokenKind.DOT,
}

_DIGITS     = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_ALPHA      = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
_ALNUM      = _ALPHA | _DIGITS
_BLANK      = frozenset(" \t")


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: Optional[Union[str, int]] = None
    column: int = 0

    def __str__(self) -> str:
        if self.kind is TokenKind.IDENT:
            return f"IDENT {self.value}"
        if self.kind is TokenKind.STR:
            return f"STR {self.value}"
        if self.kind is TokenKind.NUM:
            return f"INT {self.value}"
        return self.kind.name


def _scan_while(line: str, pos: int, chars: frozenset) -> int:
    while pos < len(line) and line[pos] in chars:
        pos += 1
    return pos


def _integer(line: str, start: int) -> tuple[Token, int]:
    """Read a decimal literal, or a hex literal when it begins with ``0x``."""
    if line.startswith("0x", start):
        end = _scan_while(line, start + 2, _HEX_DIGITS)
        digits = line[start + 2: end]
        if not digits:
            raise NumericError(f"Invalid integer literal '{line[start:end]}'")
        return Token(TokenKind.NUM, int(digits, 16), start + 1), end
    end = _scan_while(line, start, _DIGITS)
    return Token(TokenKind.NUM, int(line[start:end], 10), start + 1), end


def _string(line: str, start: int) -> tuple[Token, int]:
    close = line.find('"', start + 1)
    if close == -1:
        raise LexError("Unterminated string.")
    return Token(TokenKind.STR, line[start + 1: close], start + 1), close + 1


def tokenize(line: str) -> Iterator[Token]:
    """
    Yield the tokens of *line*, ending with exactly one EOL token.

    Raises LexError for an unterminated string or an unknown character and
    NumericError for a malformed integer literal.
    """
    pos = 0
    while True:
        pos = _scan_while(line, pos, _BLANK)
        if pos >= len(line):
            yield Token(TokenKind.EOL, column=pos + 1)
            return

        ch = line[pos]
        if ch == "#":
            # Comment: the rest of the line is ignored
            yield Token(TokenKind.EOL, column=pos + 1)
            return
        if ch in _PUNCT:
            yield Token(_PUNCT[ch], column=pos + 1)
            pos += 1
        elif ch == '"':
            token, pos = _string(line, pos)
            yield token
        elif ch in _DIGITS:
            token, pos = _integer(line, pos)
            yield token
        elif ch in _ALPHA:
            end = _scan_while(line, pos, _ALNUM)
            yield Token(TokenKind.IDENT, line[pos:end], pos + 1)
            pos = end
        else:
            raise LexError(f"Unknown character '{ch}' at column {pos + 1}")
