"""
parser.py – Recursive-descent parser for one layout-script line.

Grammar
-------
    statement := expr ':' IDENT ':' IDENT ( ',' expr )* EOL
    expr      := primary ( ('+' | '-') expr )?
    primary   := NUMBER | STRING | IDENT | '$' IDENT '.' IDENT

The right operand of ``+`` / ``-`` is a full ``expr``, so ``a - b - c``
groups as ``a - (b - c)``.  Existing scripts rely on this grouping.
"""

from __future__ import annotations

from typing import Optional, Sequence

from .errors import ParseError
from .lexer import Token, TokenKind, tokenize
from .nodes import Binary, Call, Const, Expr, Literal, Statement, Str, Variable


_BINOPS: dict[TokenKind, str] = {
    TokenKind.ADD: "+",
    TokenKind.SUB: "-",
}


class Parser:
    """Parse a token sequence (as produced by ``tokenize``) into a Statement."""

    def __init__(self, tokens: Sequence[Token]) -> None:
        self.tokens = tokens
        self.current = 0

    # -- token helpers ------------------------------------------------------

    def _peek(self) -> Optional[Token]:
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        return None

    def _check(self, kind: TokenKind) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind is kind

    def _expect(self, kind: TokenKind, what: str) -> Token:
        tok = self._peek()
        if tok is None:
            raise ParseError("Unexpected end of input")
        if tok.kind is not kind:
            raise ParseError(f"Expected {what}, got {tok} at column {tok.column}")
        self.current += 1
        return tok

    # -- grammar ------------------------------------------------------------

    def parse(self) -> Optional[Statement]:
        """Return the line's Statement, or None for a blank / comment line."""
        tok = self._peek()
        if tok is None:
            raise ParseError("Unexpected end of input")
        if tok.kind is TokenKind.EOL:
            return None
        return self.statement()

    def statement(self) -> Statement:
        offset = self.expr()
        self._expect(TokenKind.COLON, "':'")
        destination = self._expect(TokenKind.IDENT, "destination name").value
        self._expect(TokenKind.COLON, "':'")
        callee = self._expect(TokenKind.IDENT, "function name").value

        args: list[Expr] = []
        while self._check(TokenKind.COMMA):
            self.current += 1
            args.append(self.expr())

        tok = self._peek()
        if tok is None or tok.kind is not TokenKind.EOL:
            where = f", got {tok} at column {tok.column}" if tok else ""
            raise ParseError(f"End of line expected{where}")
        self.current += 1

        return Statement(offset, destination, Call(callee, tuple(args)))

    def expr(self) -> Expr:
        left = self.primary()
        tok = self._peek()
        if tok is not None and tok.kind in _BINOPS:
            self.current += 1
            return Binary(_BINOPS[tok.kind], left, self.expr())
        return left

    def primary(self) -> Expr:
        tok = self._peek()
        if tok is None or tok.kind is TokenKind.EOL:
            raise ParseError("Unexpected end of input")
        if tok.kind is TokenKind.DOLLAR:
            return self.variable()

        self.current += 1
        if tok.kind is TokenKind.NUM:
            return Literal(tok.value)
        if tok.kind is TokenKind.STR:
            return Str(tok.value)
        if tok.kind is TokenKind.IDENT:
            return Const(tok.value)
        raise ParseError(f"Unexpected primary token {tok} at column {tok.column}")

    def variable(self) -> Variable:
        self.current += 1   # '$'
        region = self._expect(TokenKind.IDENT, "identifier after '$'").value
        self._expect(TokenKind.DOT, "'.'")
        field = self._expect(TokenKind.IDENT, "field name after '.'").value
        return Variable(f"{region}.{field}")


def parse_line(line: str) -> Optional[Statement]:
    """Lex and parse a single script line.  Returns None for blank lines."""
    return Parser(list(tokenize(line))).parse()
