"""Lox front end and tree-walking evaluator."""

from .lexer_rd import tokenize
from .parser_rd import parse_source
from .printer import parse_and_print
from .runner import evaluate, run

__all__ = [
    "evaluate",
    "parse_and_print",
    "parse_source",
    "run",
    "tokenize",
]
