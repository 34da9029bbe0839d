from __future__ import annotations

import sys
from typing import Iterable, List, Optional, TextIO

from .syntax import (
    Binary,
    Expr,
    ExprStmt,
    Grouping,
    Literal,
    PrintStmt,
    Stmt,
    Unary,
    VarStmt,
)
from .types import LoxRuntimeError, LoxTooDeepError, LoxUnsupportedError, LoxValue
from .utils import recursion_headroom

from .eval.expr import eval_binary, eval_unary
from .eval.literals import eval_literal

# ---------------- Public API ----------------

def eval_expr(ast: Expr) -> LoxValue:
    with recursion_headroom():
        try:
            return eval_node(ast)
        except RecursionError:
            raise LoxTooDeepError("expression nests too deeply to evaluate") from None

def exec_stmt(stmt: Stmt, out: Optional[TextIO] = None) -> LoxValue:
    """Run one statement; returns the value it evaluated."""
    match stmt:
        case ExprStmt(expression=expr):
            return eval_expr(expr)
        case PrintStmt(expression=expr):
            value = eval_expr(expr)
            print(value, file=out if out is not None else sys.stdout)
            return value
        case VarStmt(name=name):
            raise LoxUnsupportedError(f"variable declarations are not supported yet (var {name})")

    raise LoxRuntimeError(f"Unsupported statement {type(stmt).__name__}")

def exec_program(stmts: Iterable[Stmt], out: Optional[TextIO] = None) -> List[LoxValue]:
    """Run statements in source order, stopping at the first runtime error."""
    return [exec_stmt(stmt, out) for stmt in stmts]

# ---------------- Core evaluator ----------------

def eval_node(n: Expr) -> LoxValue:
    match n:
        case Literal():
            return eval_literal(n)
        case Grouping(expression=inner):
            return eval_node(inner)
        case Unary():
            return eval_unary(n, eval_node)
        case Binary():
            return eval_binary(n, eval_node)

    raise LoxRuntimeError(f"Unsupported node {type(n).__name__}")
