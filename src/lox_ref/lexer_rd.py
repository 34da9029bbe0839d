"""
Lexer for Lox - Recursive Descent Parser

Tokenizes Lox source code into a lazy stream of tokens.

Features:
- Single-pass tokenization with one/two character lookahead
- Position tracking (row, column), 1-based, taken at the start of each lexeme
- Lexical errors are yielded in-stream so callers decide whether to stop
"""

import math
from typing import Iterator, List, Union

from .token_types import TT, Tok

_DIGITS = "0123456789"
_IDENT_START = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"

# ============================================================================
# Errors
# ============================================================================

class LexError(Exception):
    """Lexical analysis error"""

    tag = "lexical-error"

    def __init__(self, message: str, row: int, col: int):
        self.message = message
        self.row = row
        self.col = col
        super().__init__(f"[{row}:{col}] {self.tag}: {message}")

class UnexpectedChar(LexError):
    tag = "unexpected-char"

    def __init__(self, char: str, row: int, col: int):
        self.char = char
        super().__init__(f"Unexpected {char!r}", row, col)

class UnterminatedString(LexError):
    tag = "unterminated-string"

    def __init__(self, row: int, col: int):
        super().__init__("string starting here is not terminated", row, col)

class ParseNumberError(LexError):
    tag = "invalid-number"

    def __init__(self, text: str, row: int, col: int):
        self.text = text
        super().__init__(f"{text!r} is an invalid number", row, col)

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Lox lexer.

    Iterating a Lexer yields ``Tok`` or ``LexError`` items. The stream is
    not restartable; build a new Lexer over the same text to scan again.
    """

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'fun': TT.FUN,
        'for': TT.FOR,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('<', TT.LT),
        ('>', TT.GT),
        ('!', TT.BANG),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('.', TT.DOT),
        (',', TT.COMMA),
        (';', TT.SEMI),
    ]

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.row = 1
        self.col = 1

        # Start of the lexeme being scanned
        self.start_pos = 0
        self.start_row = 1
        self.start_col = 1

    def __iter__(self) -> Iterator[Union[Tok, LexError]]:
        return self.scan()

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def scan(self) -> Iterator[Union[Tok, LexError]]:
        """Lazily yield tokens, or the error that ended a lexeme"""
        while True:
            self.skip_trivia()
            if self.at_end():
                return

            try:
                yield self.scan_token()
            except LexError as err:
                yield err

    def tokens(self) -> Iterator[Tok]:
        """Lazily yield tokens, raising the first lexical error"""
        for item in self.scan():
            if isinstance(item, LexError):
                raise item
            yield item

    def scan_token(self) -> Tok:
        """Scan next token"""
        self.start_pos = self.pos
        self.start_row = self.row
        self.start_col = self.col

        ch = self.peek()

        if ch == '"':
            return self.scan_string()

        if ch in _DIGITS:
            return self.scan_number()

        if ch in _IDENT_START:
            return self.scan_identifier()

        return self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self) -> Tok:
        """Scan string literal: "...", newlines allowed, no escapes"""
        self.advance()  # opening quote

        while not self.at_end() and self.peek() != '"':
            self.advance()

        if self.at_end():
            raise UnterminatedString(self.start_row, self.start_col)

        self.advance()  # closing quote
        return self.emit(TT.STRING, self.source[self.start_pos + 1:self.pos - 1])

    def scan_number(self) -> Tok:
        """Scan number literal: digits with an optional fractional part"""
        while self.peek() in _DIGITS:
            self.advance()

        # A trailing dot is left for the DOT token
        if self.peek() == '.' and self.peek(1) in _DIGITS:
            self.advance()
            while self.peek() in _DIGITS:
                self.advance()

        text = self.source[self.start_pos:self.pos]
        try:
            value = float(text)
        except ValueError:
            raise ParseNumberError(text, self.start_row, self.start_col) from None

        if math.isinf(value):
            raise ParseNumberError(text, self.start_row, self.start_col)

        return self.emit(TT.NUMBER, value)

    def scan_identifier(self) -> Tok:
        """Scan identifier or keyword"""
        while self.peek().isalnum() or self.peek() == '_':
            self.advance()

        text = self.source[self.start_pos:self.pos]

        # Check if keyword
        token_type = self.KEYWORDS.get(text, TT.IDENT)
        return self.emit(token_type, text)

    def scan_operator(self) -> Tok:
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                return self.emit(op_type, op_str)

        ch = self.advance()
        raise UnexpectedChar(ch, self.start_row, self.start_col)

    # ========================================================================
    # Utilities
    # ========================================================================

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters, tracking row/col, and return them"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        start = self.pos
        for _ in range(n):
            if self.pos >= len(self.source):
                break
            ch = self.source[self.pos]
            self.pos += 1
            if ch == '\n':
                self.row += 1
                self.col = 1
            else:
                self.col += 1
        return self.source[start:self.pos]

    def skip_trivia(self) -> None:
        """Skip whitespace and // comments, newlines included"""
        while not self.at_end():
            ch = self.peek()
            if ch in (' ', '\t', '\r', '\n'):
                self.advance()
            elif ch == '/' and self.peek(1) == '/':
                self.skip_comment()
            else:
                return

    def skip_comment(self):
        """Skip comment until end of line; the newline itself is trivia"""
        while not self.at_end() and self.peek() != '\n':
            self.advance()

    def emit(self, token_type: TT, value) -> Tok:
        """Build a token anchored at the current lexeme start"""
        return Tok(
            type=token_type,
            value=value,
            row=self.start_row,
            col=self.start_col,
            lexeme=self.source[self.start_pos:self.pos],
        )

# ============================================================================
# Convenience
# ============================================================================

def tokenize(source: str) -> List[Tok]:
    """Tokenize entire source, raising the first lexical error"""
    return list(Lexer(source).tokens())


if __name__ == '__main__':
    import sys

    for item in Lexer(sys.stdin.read()):
        print(item)
