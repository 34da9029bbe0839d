"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as LoxScanner, LexError
from .token_types import KEYWORDS, OPERATORS, STRUCTURE, TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}


def token_group(tok: Tok) -> str:
    """Token type → highlight group."""
    t = tok.type
    if t in (TT.AND, TT.OR) or t in KEYWORDS:
        return "keyword"
    if t in (TT.TRUE, TT.FALSE):
        return "boolean"
    if t == TT.NIL:
        return "constant"
    if t == TT.NUMBER:
        return "number"
    if t == TT.STRING:
        return "string"
    if t == TT.IDENT:
        return "identifier"
    if t in OPERATORS:
        return "operator"
    if t in STRUCTURE:
        return "punctuation"
    return ""


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    result: StyleAndTextTuples = []
    pos = 0

    for item in LoxScanner(text):
        if isinstance(item, LexError):
            # Unterminated strings swallow the rest of the line.
            start = item.col - 1
            if start > pos:
                result.append(("", text[pos:start]))
            end = len(text) if item.tag == "unterminated-string" else start + 1
            result.append((GROUP_STYLE["error"], text[start:end]))
            pos = end
            continue

        start = item.col - 1
        if start < pos:
            continue

        # Unstyled gap before token; comments are the only non-space gaps.
        if start > pos:
            result.append(_gap(text[pos:start]))

        style = GROUP_STYLE.get(token_group(item), "")
        result.append((style, item.lexeme))
        pos = start + len(item.lexeme)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(_gap(text[pos:]))

    return result if result else [("", text)]


def _gap(chunk: str) -> tuple[str, str]:
    if chunk.lstrip().startswith("//"):
        return (GROUP_STYLE["comment"], chunk)
    return ("", chunk)


class LoxLexer(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights lazily per line.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
