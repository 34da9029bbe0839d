"""Grammar-driven Lox front end built on lark.

Parses the same language as parser_rd.py from grammar.lark and transforms
the parse tree into the dataclasses in syntax.py. The two front ends are
kept in lockstep by the parity tests.
"""
from __future__ import annotations

import math
from functools import lru_cache
from pathlib import Path
from typing import List

from lark import Lark, Token, Transformer, UnexpectedInput, v_args
from lark.exceptions import VisitError

from .lexer_rd import Lexer
from .parser_rd import ParseError, TooDeep
from .syntax import (
    Binary,
    BinOp,
    Expr,
    ExprStmt,
    Grouping,
    Literal,
    PrintStmt,
    Stmt,
    UnOp,
    Unary,
    VarStmt,
)
from .utils import recursion_headroom

GRAMMAR_PATH = Path(__file__).resolve().with_name("grammar.lark")

# Reserved words the grammar never mentions still may not be identifiers.
RESERVED = {word: word.upper() for word in Lexer.KEYWORDS}

def _remap_ident(t: Token) -> Token:
    # Only remap exact word matches, never prefixes
    t.type = RESERVED.get(t.value, t.type)
    return t

@lru_cache(maxsize=None)
def build_parser() -> Lark:
    return Lark(
        GRAMMAR_PATH.read_text(encoding="utf-8"),
        parser="lalr",
        lexer="basic",
        start=["start", "expr_start"],
        maybe_placeholders=True,
        propagate_positions=True,
        lexer_callbacks={"IDENT": _remap_ident},
    )

def _binary(op: BinOp):
    def build(self, left: Expr, right: Expr) -> Binary:
        return Binary(left, op, right)

    return build

@v_args(inline=True)
class ToSyntax(Transformer):
    """Parse tree -> syntax.py nodes."""

    def start(self, *stmts: Stmt) -> List[Stmt]:
        return list(stmts)

    def expr_start(self, expr: Expr) -> Expr:
        return expr

    def print_stmt(self, expr: Expr) -> PrintStmt:
        return PrintStmt(expr)

    def var_stmt(self, name: Token, initializer) -> VarStmt:
        return VarStmt(str(name), initializer)

    def expr_stmt(self, expr: Expr) -> ExprStmt:
        return ExprStmt(expr)

    and_ = _binary(BinOp.AND)
    or_ = _binary(BinOp.OR)
    eq = _binary(BinOp.EQ)
    ne = _binary(BinOp.NE)
    lt = _binary(BinOp.LT)
    le = _binary(BinOp.LE)
    gt = _binary(BinOp.GT)
    ge = _binary(BinOp.GE)
    add = _binary(BinOp.ADD)
    sub = _binary(BinOp.SUB)
    mul = _binary(BinOp.MUL)
    div = _binary(BinOp.DIV)

    def not_(self, expr: Expr) -> Unary:
        return Unary(UnOp.NOT, expr)

    def neg(self, expr: Expr) -> Unary:
        return Unary(UnOp.NEG, expr)

    def group(self, expr: Expr) -> Grouping:
        return Grouping(expr)

    def true(self) -> Literal:
        return Literal.boolean(True)

    def false(self) -> Literal:
        return Literal.boolean(False)

    def nil(self) -> Literal:
        return Literal.nil()

    def number(self, tok: Token) -> Literal:
        value = float(tok)
        if math.isinf(value):
            raise ParseError(f"{str(tok)!r} is an invalid number", row=tok.line, col=tok.column)
        return Literal.number(value)

    def string(self, tok: Token) -> Literal:
        return Literal.string(str(tok)[1:-1])

    def ident(self, tok: Token) -> Literal:
        return Literal.ident(str(tok))

def _parse(source: str, start: str):
    try:
        tree = build_parser().parse(source, start=start)
    except UnexpectedInput as exc:
        line = exc.line if exc.line > 0 else None
        column = exc.column if exc.column > 0 else None
        raise ParseError(str(exc).strip().splitlines()[0], row=line, col=column) from exc

    with recursion_headroom():
        try:
            return ToSyntax().transform(tree)
        except RecursionError:
            raise TooDeep("Expression nests too deeply") from None
        except VisitError as exc:
            # Transformer callbacks surface wrapped
            if isinstance(exc.orig_exc, ParseError):
                raise exc.orig_exc from None
            if isinstance(exc.orig_exc, RecursionError):
                raise TooDeep("Expression nests too deeply") from None
            raise

def parse_source(source: str) -> List[Stmt]:
    """Parse a program with the lark grammar."""
    return _parse(source, "start")

def parse_expr_fragment(source: str) -> Expr:
    """Parse a single expression with the lark grammar."""
    return _parse(source, "expr_start")
