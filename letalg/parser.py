"""Tokenizer and parser for the small let-language."""

from __future__ import annotations

import re

from .nodes import (
    BinopExpr,
    CallExpr,
    ExprNode,
    LambdaExpr,
    LetExpr,
    NumberExpr,
    VarExpr,
)

_SEPARATORS = frozenset(" \n;")
_PUNCTUATION = frozenset("(){}+-*/^!~><")
_TERMINATORS = frozenset({";", "in", "then", "else"})
_LEADING_DIGITS = re.compile(r"[0-9]+")
_INT32_MAX = 2**31 - 1


class ParseError(ValueError):
    """Raised when the input cannot be turned into an expression."""


def tokenize(text: str) -> list[str]:
    """Split source text into tokens."""
    tokens: list[str] = []
    current: list[str] = []

    def flush() -> None:
        if current:
            tokens.append("".join(current))
            current.clear()

    for ch in text:
        if ch in _SEPARATORS:
            flush()
        elif ch in _PUNCTUATION:
            flush()
            tokens.append(ch)
        else:
            current.append(ch)
    flush()
    return tokens


def _to_int(token: str) -> int:
    match = _LEADING_DIGITS.match(token)
    if match is None:
        raise ParseError(f"invalid number {token!r}")
    value = int(match.group())
    if value > _INT32_MAX:
        raise ParseError(f"number out of range: {token!r}")
    return value


class _Parser:
    """Operand/operator stack parser over a token list."""

    def __init__(self, tokens: list[str]) -> None:
        self.tokens = tokens
        self.stack: list[ExprNode] = []
        self.operators: list[str] = []
        self.functions: set[str] = set()

    def token(self, index: int) -> str:
        try:
            return self.tokens[index]
        except IndexError:
            raise ParseError("unexpected end of input") from None

    def pop(self) -> ExprNode:
        if not self.stack:
            raise ParseError("expected an expression")
        return self.stack.pop()

    def reduce(self, start: int) -> None:
        if start >= len(self.stack):
            raise ParseError("expected an expression")
        head = self.stack[start]
        if isinstance(head, VarExpr) and head.name in self.functions:
            call = CallExpr(head, self.stack[start + 1:])
            self.stack.clear()
            self.stack.append(call)
            return

        operands = self.stack[start:]
        pending = self.operators[start:]
        if len(operands) < len(pending) + 1:
            raise ParseError(f"missing operand after {pending[len(operands) - 1]!r}")
        result = operands[0]
        for op, right in zip(pending, operands[1:]):
            result = BinopExpr(op, result, right)
        del self.stack[start:]
        del self.operators[start:]
        self.stack.append(result)

    def parse_expr(self, start: int) -> int:
        base = len(self.stack)
        index = start
        while index < len(self.tokens):
            tok = self.tokens[index]
            if tok in _TERMINATORS:
                self.reduce(base)
                return index + 1
            if tok == "let":
                return self.parse_let(index)
            if tok == "if":
                return self.parse_if(index)
            if "0" <= tok[0] <= "9":
                self.stack.append(NumberExpr(_to_int(tok)))
            elif tok[0] in "+-":
                self.operators.append(tok[0])
            else:
                self.stack.append(VarExpr(tok))
            index += 1
            if index == len(self.tokens):
                self.reduce(base)
        return index

    def parse_let(self, index: int) -> int:
        name = self.token(index + 1)
        if self.token(index + 2) == "=":
            nxt = self.parse_expr(index + 3)
            decl = self.pop()
            nxt = self.parse_expr(nxt)
            body = self.pop()
            self.stack.append(LetExpr(name, decl, body))
            return nxt

        try:
            equals = self.tokens.index("=", index + 2)
        except ValueError:
            raise ParseError(f"expected '=' in definition of {name!r}") from None
        params = self.tokens[index + 2:equals]
        nxt = self.parse_expr(equals + 1)
        decl = self.pop()
        lam = LambdaExpr(name, params, decl)
        self.functions.add(name)
        nxt = self.parse_expr(nxt)
        body = self.pop()
        self.stack.append(LetExpr(name, lam, body))
        return nxt

    def parse_if(self, index: int) -> int:
        nxt = self.parse_expr(index + 1)
        cond = self.pop()
        nxt = self.parse_expr(nxt)
        then = self.pop()
        nxt = self.parse_expr(nxt)
        els = self.pop()
        self.stack.append(IfExpr(cond, then, els))
        return nxt


from .nodes import IfExpr  # noqa: E402


def parse(text: str) -> ExprNode:
    """Parse source text into an expression tree."""
    parser = _Parser(tokenize(text))
    parser.parse_expr(0)
    if not parser.stack:
        raise ParseError("empty input")
    return parser.stack[0]