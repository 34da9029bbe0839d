"""
Token Types for the Lox front end

Shared between lexer, parser and highlighter to avoid circular dependencies.
"""

from typing import Any, FrozenSet
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Structure
    LPAR = auto()
    RPAR = auto()
    LBRACE = auto()
    RBRACE = auto()
    COMMA = auto()
    DOT = auto()
    SEMI = auto()

    # Arithmetic
    MINUS = auto()
    PLUS = auto()
    SLASH = auto()
    STAR = auto()

    # Comparison / equality
    BANG = auto()  # !
    NEQ = auto()
    ASSIGN = auto()  # =
    EQ = auto()
    GT = auto()
    GTE = auto()
    LT = auto()
    LTE = auto()

    # Logical
    AND = auto()
    OR = auto()

    # Keywords
    CLASS = auto()
    ELSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    VAR = auto()
    WHILE = auto()

    # Literals
    TRUE = auto()
    FALSE = auto()
    NIL = auto()
    IDENT = auto()
    STRING = auto()
    NUMBER = auto()

    # Special
    EOF = auto()


STRUCTURE: FrozenSet[TT] = frozenset({
    TT.LPAR, TT.RPAR, TT.LBRACE, TT.RBRACE, TT.COMMA, TT.DOT, TT.SEMI,
})

OPERATORS: FrozenSet[TT] = frozenset({
    TT.MINUS, TT.PLUS, TT.SLASH, TT.STAR,
    TT.BANG, TT.NEQ, TT.ASSIGN, TT.EQ,
    TT.GT, TT.GTE, TT.LT, TT.LTE,
    TT.AND, TT.OR,
})

KEYWORDS: FrozenSet[TT] = frozenset({
    TT.CLASS, TT.ELSE, TT.FUN, TT.FOR, TT.IF, TT.PRINT,
    TT.RETURN, TT.SUPER, TT.THIS, TT.VAR, TT.WHILE,
})

LITERALS: FrozenSet[TT] = frozenset({
    TT.TRUE, TT.FALSE, TT.NIL, TT.IDENT, TT.STRING, TT.NUMBER,
})


@dataclass(frozen=True)
class Tok:
    """Token with position info.

    ``value`` holds the payload for IDENT (name), STRING (contents without
    quotes) and NUMBER (float); every other kind carries its lexeme.
    """

    type: TT
    value: Any
    row: int = 0
    col: int = 0
    lexeme: str = ""

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.row}:{self.col})"
