"""Canonical parenthesized-prefix rendering of the AST.

`(== true (group (> 1 2)))` style; used by tests, `--tree` and the REPL.
"""
from __future__ import annotations

from typing import Union

from .syntax import (
    Binary,
    Expr,
    ExprStmt,
    Grouping,
    LitKind,
    Literal,
    PrintStmt,
    Stmt,
    Unary,
    VarStmt,
)
from .parser_rd import TooDeep, parse_expr_fragment
from .types import format_number, quote_string
from .utils import recursion_headroom


def _literal(lit: Literal) -> str:
    match lit.kind:
        case LitKind.STRING:
            return quote_string(lit.value)
        case LitKind.IDENT:
            return f"`{lit.value}`"
        case LitKind.NUMBER:
            return format_number(lit.value)
        case LitKind.TRUE:
            return "true"
        case LitKind.FALSE:
            return "false"
        case LitKind.NIL:
            return "nil"
    raise ValueError(f"unknown literal kind {lit.kind!r}")


def to_lisp(node: Union[Expr, Stmt]) -> str:
    with recursion_headroom():
        try:
            return _render(node)
        except RecursionError:
            raise TooDeep("Tree nests too deeply to print") from None


def _render(node: Union[Expr, Stmt]) -> str:
    match node:
        case Binary(left=left, operator=op, right=right):
            return f"({op} {_render(left)} {_render(right)})"
        case Grouping(expression=inner):
            return f"(group {_render(inner)})"
        case Unary(operator=op, expression=inner):
            return f"({op} {_render(inner)})"
        case Literal():
            return _literal(node)
        case ExprStmt(expression=expr):
            return _render(expr)
        case PrintStmt(expression=expr):
            return f"(print {_render(expr)})"
        case VarStmt(name=name, initializer=None):
            return f"(var {name})"
        case VarStmt(name=name, initializer=init):
            return f"(var {name} {_render(init)})"
    raise TypeError(f"cannot print {type(node).__name__}")


def parse_and_print(source: str) -> str:
    """Parse one expression and return its canonical form."""
    return to_lisp(parse_expr_fragment(source))
