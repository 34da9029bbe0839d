"""
Recursive Descent Parser for Lox

Structure:
- Lexer: lazy token stream from source, pulled one token at a time
- Parser: recursive descent, one method per precedence tier
- AST: dataclasses from syntax.py

The parser fails fast: the first malformed construct aborts the whole
parse and no partial statement list is returned.
"""

from typing import Callable, Iterator, List, Optional, TypeVar

from .lexer_rd import LexError, Lexer
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
from .token_types import KEYWORDS, OPERATORS, STRUCTURE, TT, Tok
from .utils import recursion_headroom

T = TypeVar("T")

# ============================================================================
# Errors
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""

    tag = "parse-error"

    def __init__(self, message: str, token: Optional[Tok] = None,
                 row: Optional[int] = None, col: Optional[int] = None):
        self.message = message
        self.token = token
        self.row = token.row if token is not None else row
        self.col = token.col if token is not None else col
        if self.row is not None and self.col is not None:
            super().__init__(f"[{self.row}:{self.col}] {self.tag}: {message}")
        else:
            super().__init__(f"{self.tag}: {message}")

class Unsupported(ParseError):
    tag = "unsupported"

class BadOperator(ParseError):
    tag = "bad-operator"

class BadStructure(ParseError):
    tag = "bad-structure"

class EndOfFile(ParseError):
    tag = "end-of-file"

class TooDeep(ParseError):
    tag = "too-deep"

class LexicalParseError(ParseError):
    """A lexical error surfaced while the parser pulled its next token."""

    tag = "lexical"

    def __init__(self, lex_error: LexError):
        self.lex_error = lex_error
        super().__init__(lex_error.message, row=lex_error.row, col=lex_error.col)

    def __str__(self) -> str:
        return str(self.lex_error)

# ============================================================================
# Operator tables
# ============================================================================

LOGICAL_OPS = {TT.AND: BinOp.AND, TT.OR: BinOp.OR}
EQUALITY_OPS = {TT.EQ: BinOp.EQ, TT.NEQ: BinOp.NE}
COMPARISON_OPS = {TT.LT: BinOp.LT, TT.LTE: BinOp.LE, TT.GT: BinOp.GT, TT.GTE: BinOp.GE}
TERM_OPS = {TT.PLUS: BinOp.ADD, TT.MINUS: BinOp.SUB}
FACTOR_OPS = {TT.STAR: BinOp.MUL, TT.SLASH: BinOp.DIV}
UNARY_OPS = {TT.BANG: UnOp.NOT, TT.MINUS: UnOp.NEG}

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for Lox.

    Expression precedence (lowest to highest):
    1. logical (and, or)
    2. equality (==, !=)
    3. comparison (<, <=, >, >=)
    4. term (+, -)
    5. factor (*, /)
    6. unary (!, -)
    7. primary (literals, identifiers, parens)
    """

    def __init__(self, source: str):
        self.lexer = Lexer(source)
        self._tokens: Iterator[Tok] = self.lexer.tokens()
        self._peeked: Optional[Tok] = None

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self) -> Tok:
        """Look ahead at the next token, buffering at most one"""
        if self._peeked is None:
            self._peeked = self._pull()
        return self._peeked

    def advance(self) -> Tok:
        """Consume the next token"""
        tok = self.peek()
        if tok.type != TT.EOF:
            self._peeked = None
        return tok

    def check(self, *types: TT) -> bool:
        """Check if the next token matches any of the given types"""
        return self.peek().type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if the next token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        tok = self.peek()
        if tok.type == token_type:
            return self.advance()

        msg = message or f"Expected {token_type.name}, got {tok.type.name}"
        if tok.type == TT.EOF:
            raise EndOfFile(msg, tok)
        raise BadStructure(msg, tok)

    def _pull(self) -> Tok:
        try:
            return next(self._tokens)
        except StopIteration:
            lx = self.lexer
            return Tok(TT.EOF, None, lx.row, lx.col, "")
        except LexError as err:
            raise LexicalParseError(err) from err

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> List[Stmt]:
        """Parse entire program"""
        return self._guarded(self._parse_program)

    def parse_single_expr(self) -> Expr:
        """Parse one expression spanning the whole input"""
        return self._guarded(self._parse_single_expr)

    def _parse_program(self) -> List[Stmt]:
        stmts: List[Stmt] = []
        while not self.check(TT.EOF):
            stmts.append(self.parse_statement())
        return stmts

    def _parse_single_expr(self) -> Expr:
        expr = self.parse_expr()
        tok = self.peek()
        if tok.type != TT.EOF:
            raise BadStructure(f"Unexpected {tok.lexeme!r} after expression", tok)
        return expr

    def _guarded(self, parse_fn: Callable[[], T]) -> T:
        """Run a top-level parse, reporting stack exhaustion as TooDeep"""
        with recursion_headroom():
            try:
                return parse_fn()
            except RecursionError:
                lx = self.lexer
                raise TooDeep("Expression nests too deeply", row=lx.row, col=lx.col) from None

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Stmt:
        """
        Parse a single statement:
        - var IDENT [= expr] ;
        - print expr ;
        - expr ;
        """
        if self.match(TT.VAR):
            stmt = self.parse_var_stmt()
        elif self.match(TT.PRINT):
            stmt = PrintStmt(self.parse_expr())
        else:
            stmt = ExprStmt(self.parse_expr())

        self.expect(TT.SEMI, "Expected ';' after statement")
        return stmt

    def parse_var_stmt(self) -> VarStmt:
        """Parse the tail of: var IDENT [= expr]"""
        name = self.expect(TT.IDENT, "Expected variable name after 'var'")

        initializer = None
        if self.match(TT.ASSIGN):
            initializer = self.parse_expr()

        return VarStmt(name.value, initializer)

    # ========================================================================
    # Expressions - Precedence Climbing
    # ========================================================================

    def parse_expr(self) -> Expr:
        """Parse expression (top level)"""
        return self.parse_logical_expr()

    def _binary_level(self, operand: Callable[[], Expr], ops: dict) -> Expr:
        """Left-associative tier: operand (op operand)*"""
        left = operand()

        while self.peek().type in ops:
            op = ops[self.advance().type]
            right = operand()
            left = Binary(left, op, right)

        return left

    def parse_logical_expr(self) -> Expr:
        """Parse logical: expr and expr, expr or expr"""
        return self._binary_level(self.parse_equality_expr, LOGICAL_OPS)

    def parse_equality_expr(self) -> Expr:
        """Parse equality: expr == expr, expr != expr"""
        return self._binary_level(self.parse_comparison_expr, EQUALITY_OPS)

    def parse_comparison_expr(self) -> Expr:
        """Parse comparison: <, <=, >, >="""
        return self._binary_level(self.parse_term_expr, COMPARISON_OPS)

    def parse_term_expr(self) -> Expr:
        """Parse addition/subtraction: expr + expr"""
        return self._binary_level(self.parse_factor_expr, TERM_OPS)

    def parse_factor_expr(self) -> Expr:
        """Parse multiplication/division: expr * expr"""
        return self._binary_level(self.parse_unary_expr, FACTOR_OPS)

    def parse_unary_expr(self) -> Expr:
        """Parse unary operators: -expr, !expr (right associative)"""
        if self.peek().type in UNARY_OPS:
            op = UNARY_OPS[self.advance().type]
            return Unary(op, self.parse_unary_expr())

        return self.parse_primary_expr()

    def parse_primary_expr(self) -> Expr:
        """
        Parse primary expressions:
        - Literals (numbers, strings, true, false, nil)
        - Identifiers
        - Parenthesized expressions
        """
        tok = self.peek()

        if tok.type == TT.EOF:
            raise EndOfFile("Expected an expression", tok)

        if self.match(TT.TRUE):
            return Literal.boolean(True)
        if self.match(TT.FALSE):
            return Literal.boolean(False)
        if self.match(TT.NIL):
            return Literal.nil()

        if self.match(TT.NUMBER):
            return Literal.number(tok.value)
        if self.match(TT.STRING):
            return Literal.string(tok.value)
        if self.match(TT.IDENT):
            return Literal.ident(tok.value)

        # Parenthesized expression
        if self.match(TT.LPAR):
            expr = self.parse_expr()
            self.expect(TT.RPAR, "Expected ')' after expression")
            return Grouping(expr)

        if tok.type in KEYWORDS:
            raise Unsupported(f"Keyword {tok.lexeme!r} is not supported here", tok)
        if tok.type in OPERATORS:
            raise BadOperator(f"Operator {tok.lexeme!r} where an operand was expected", tok)
        if tok.type in STRUCTURE:
            raise BadStructure(f"Unexpected {tok.lexeme!r}", tok)

        raise ParseError(f"Unexpected token {tok.type.name}", tok)

# ============================================================================
# Convenience
# ============================================================================

def parse_source(source: str) -> List[Stmt]:
    """Parse Lox source code to a statement list"""
    return Parser(source).parse()


def parse_expr_fragment(source: str) -> Expr:
    """
    Parse a standalone expression fragment.
    Used by the REPL echo path and the canonical printer.
    """
    return Parser(source).parse_single_expr()


if __name__ == '__main__':
    import sys

    from .printer import to_lisp

    source = sys.stdin.read()

    try:
        for stmt in parse_source(source):
            print(to_lisp(stmt))
    except ParseError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
