"""AST node types produced by the parsers and walked by the evaluator.

Every node owns its children exclusively; trees are built bottom-up during
parsing and consumed top-down exactly once.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union
from typing_extensions import TypeAlias


class BinOp(Enum):
    EQ = "=="
    NE = "!="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    AND = "and"
    OR = "or"

    def __str__(self) -> str:
        return self.value


class UnOp(Enum):
    NEG = "-"
    NOT = "!"

    def __str__(self) -> str:
        return self.value


class LitKind(Enum):
    STRING = "string"
    IDENT = "ident"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NIL = "nil"


# ---------- Expressions ----------

@dataclass(frozen=True)
class Binary:
    left: Expr
    operator: BinOp
    right: Expr

@dataclass(frozen=True)
class Grouping:
    expression: Expr

@dataclass(frozen=True)
class Literal:
    kind: LitKind
    value: Union[str, float, None] = None

    @classmethod
    def string(cls, text: str) -> Literal:
        return cls(LitKind.STRING, text)

    @classmethod
    def ident(cls, name: str) -> Literal:
        return cls(LitKind.IDENT, name)

    @classmethod
    def number(cls, n: float) -> Literal:
        return cls(LitKind.NUMBER, float(n))

    @classmethod
    def boolean(cls, b: bool) -> Literal:
        return cls(LitKind.TRUE if b else LitKind.FALSE)

    @classmethod
    def nil(cls) -> Literal:
        return cls(LitKind.NIL)

@dataclass(frozen=True)
class Unary:
    operator: UnOp
    expression: Expr


Expr: TypeAlias = Union[Binary, Grouping, Literal, Unary]


# ---------- Statements ----------

@dataclass(frozen=True)
class ExprStmt:
    expression: Expr

@dataclass(frozen=True)
class PrintStmt:
    expression: Expr

@dataclass(frozen=True)
class VarStmt:
    """``var name = initializer;`` -- parsed, but rejected by the evaluator."""
    name: str
    initializer: Optional[Expr]


Stmt: TypeAlias = Union[ExprStmt, PrintStmt, VarStmt]
