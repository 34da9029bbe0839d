from __future__ import annotations

import math
from typing import Callable

from ..syntax import Binary, BinOp, Expr, UnOp, Unary
from ..types import (
    LoxBool,
    LoxNumber,
    LoxString,
    LoxTypeError,
    LoxValue,
    type_name,
)
from .helpers import is_truthy, lox_equals

EvalFunc = Callable[[Expr], LoxValue]

def require_number(op: object, value: LoxValue) -> float:
    if not isinstance(value, LoxNumber):
        raise LoxTypeError(
            f"Operand of '{op}' must be a number; got {type_name(value)} {value!r}",
            value,
        )
    return value.value

def _numbers(op: BinOp, lhs: LoxValue, rhs: LoxValue) -> tuple[float, float]:
    # Left operand is reported first when both are wrong.
    return require_number(op, lhs), require_number(op, rhs)

def _divide(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)

def eval_unary(node: Unary, eval_func: EvalFunc) -> LoxValue:
    rhs = eval_func(node.expression)

    match node.operator:
        case UnOp.NEG:
            return LoxNumber(-require_number(node.operator, rhs))
        case UnOp.NOT:
            return LoxBool(not is_truthy(rhs))

    raise ValueError(f"Unsupported unary op {node.operator!r}")

def eval_logical(node: Binary, eval_func: EvalFunc) -> LoxBool:
    """`and` / `or` on truthiness, skipping the right operand once decided."""
    lhs = is_truthy(eval_func(node.left))

    if node.operator is BinOp.AND and not lhs:
        return LoxBool(False)
    if node.operator is BinOp.OR and lhs:
        return LoxBool(True)

    return LoxBool(is_truthy(eval_func(node.right)))

def eval_binary(node: Binary, eval_func: EvalFunc) -> LoxValue:
    if node.operator in (BinOp.AND, BinOp.OR):
        return eval_logical(node, eval_func)

    lhs = eval_func(node.left)
    rhs = eval_func(node.right)
    return apply_binary_operator(node.operator, lhs, rhs)

def apply_binary_operator(op: BinOp, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match op:
        case BinOp.ADD:
            return _add(lhs, rhs)
        case BinOp.SUB:
            a, b = _numbers(op, lhs, rhs)
            return LoxNumber(a - b)
        case BinOp.MUL:
            a, b = _numbers(op, lhs, rhs)
            return LoxNumber(a * b)
        case BinOp.DIV:
            a, b = _numbers(op, lhs, rhs)
            return LoxNumber(_divide(a, b))
        case BinOp.LT:
            a, b = _numbers(op, lhs, rhs)
            return LoxBool(a < b)
        case BinOp.LE:
            a, b = _numbers(op, lhs, rhs)
            return LoxBool(a <= b)
        case BinOp.GT:
            a, b = _numbers(op, lhs, rhs)
            return LoxBool(a > b)
        case BinOp.GE:
            a, b = _numbers(op, lhs, rhs)
            return LoxBool(a >= b)
        case BinOp.EQ:
            return LoxBool(lox_equals(lhs, rhs))
        case BinOp.NE:
            return LoxBool(not lox_equals(lhs, rhs))

    raise ValueError(f"Unknown operator {op!r}")

def _add(lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match (lhs, rhs):
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a + b)
        case (LoxString(value=a), LoxString(value=b)):
            return LoxString(a + b)
        case (LoxNumber() | LoxString(), _):
            offending = rhs
        case _:
            offending = lhs

    raise LoxTypeError(
        f"Operands of '+' must be two numbers or two strings; got {lhs!r} and {rhs!r}",
        offending,
    )
