from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import pytest

from lox_ref.lexer_rd import (
    LexError,
    Lexer,
    ParseNumberError,
    UnexpectedChar,
    UnterminatedString,
    tokenize,
)
from lox_ref.token_types import TT, Tok


@dataclass(frozen=True)
class Case:
    """Unified lexer case payload."""

    name: str
    source: str
    expected: Optional[Tuple[Tuple[TT, object], ...]] = None
    expected_types: Optional[Tuple[TT, ...]] = None
    expected_positions: Optional[Tuple[Tuple[int, int], ...]] = None
    exc: Optional[type[Exception]] = None
    msg: Optional[str] = None
    err_row: Optional[int] = None
    err_col: Optional[int] = None


BASIC_TOKEN_CASES: List[Case] = [
    Case("number-int", "123", expected=((TT.NUMBER, 123.0),)),
    Case("number-float", "3.14", expected=((TT.NUMBER, 3.14),)),
    Case("number-trailing-dot", "123.", expected=((TT.NUMBER, 123.0), (TT.DOT, "."))),
    Case("number-dot-ident", "1.x", expected=((TT.NUMBER, 1.0), (TT.DOT, "."), (TT.IDENT, "x"))),
    Case("ident-single", "x", expected=((TT.IDENT, "x"),)),
    Case("ident-snake", "foo_bar", expected=((TT.IDENT, "foo_bar"),)),
    Case("ident-underscore-digits", "_x1", expected=((TT.IDENT, "_x1"),)),
    Case("ident-keyword-prefix", "orchid", expected=((TT.IDENT, "orchid"),)),
    Case("ident-keyword-suffix", "classy", expected=((TT.IDENT, "classy"),)),
    Case("string-double", '"hello"', expected=((TT.STRING, "hello"),)),
    Case("string-empty", '""', expected=((TT.STRING, ""),)),
    Case("string-no-escapes", r'"a\n"', expected=((TT.STRING, r"a\n"),)),
    Case("bool-true", "true", expected=((TT.TRUE, "true"),)),
    Case("bool-false", "false", expected=((TT.FALSE, "false"),)),
    Case("nil-literal", "nil", expected=((TT.NIL, "nil"),)),
]

OPERATOR_CASES: List[Case] = [
    Case("plus", "+", expected_types=(TT.PLUS,)),
    Case("minus", "-", expected_types=(TT.MINUS,)),
    Case("star", "*", expected_types=(TT.STAR,)),
    Case("slash", "/", expected_types=(TT.SLASH,)),
    Case("eq", "==", expected_types=(TT.EQ,)),
    Case("neq", "!=", expected_types=(TT.NEQ,)),
    Case("lte", "<=", expected_types=(TT.LTE,)),
    Case("gte", ">=", expected_types=(TT.GTE,)),
    Case("lt", "<", expected_types=(TT.LT,)),
    Case("gt", ">", expected_types=(TT.GT,)),
    Case("bang", "!", expected_types=(TT.BANG,)),
    Case("assign", "=", expected_types=(TT.ASSIGN,)),
    Case("eq-then-assign", "===", expected_types=(TT.EQ, TT.ASSIGN)),
    Case("bang-bang-eq", "!!=", expected_types=(TT.BANG, TT.NEQ)),
    Case(
        "structure",
        "{ } ( ) , . - + ; *",
        expected_types=(
            TT.LBRACE,
            TT.RBRACE,
            TT.LPAR,
            TT.RPAR,
            TT.COMMA,
            TT.DOT,
            TT.MINUS,
            TT.PLUS,
            TT.SEMI,
            TT.STAR,
        ),
    ),
]

KEYWORD_CASES: List[Case] = [
    Case(word, word, expected_types=(tt,)) for word, tt in sorted(Lexer.KEYWORDS.items())
]

POSITION_CASES: List[Case] = [
    Case(
        "same-line",
        "print 1;",
        expected_types=(TT.PRINT, TT.NUMBER, TT.SEMI),
        expected_positions=((1, 1), (1, 7), (1, 8)),
    ),
    Case(
        "newline-resets-col",
        "1\n  2",
        expected_types=(TT.NUMBER, TT.NUMBER),
        expected_positions=((1, 1), (2, 3)),
    ),
    Case(
        "comment-newline",
        "// note\nprint",
        expected_types=(TT.PRINT,),
        expected_positions=((2, 1),),
    ),
    Case(
        "multiline-string",
        '"a\nb" x',
        expected_types=(TT.STRING, TT.IDENT),
        expected_positions=((1, 1), (2, 4)),
    ),
    Case(
        "crlf",
        "a\r\nb",
        expected_types=(TT.IDENT, TT.IDENT),
        expected_positions=((1, 1), (2, 1)),
    ),
]

LEX_ERROR_CASES: List[Case] = [
    Case(
        "unexpected-char",
        "1 @ 2",
        exc=UnexpectedChar,
        msg="[1:3] unexpected-char: Unexpected '@'",
        err_row=1,
        err_col=3,
    ),
    Case(
        "unterminated-at-open-quote",
        'x = "abc\ndef',
        exc=UnterminatedString,
        err_row=1,
        err_col=5,
    ),
    Case(
        "number-overflow",
        "1" * 400,
        exc=ParseNumberError,
        err_row=1,
        err_col=1,
    ),
    Case(
        "unexpected-second-line",
        "1\n  #",
        exc=UnexpectedChar,
        err_row=2,
        err_col=3,
    ),
]


@pytest.mark.parametrize("case", BASIC_TOKEN_CASES, ids=lambda case: case.name)
def test_basic_tokens(case: Case) -> None:
    tokens = tokenize(case.source)

    assert case.expected is not None
    assert len(tokens) == len(case.expected)
    for token, (expected_type, expected_value) in zip(tokens, case.expected):
        assert token.type == expected_type
        assert token.value == expected_value


@pytest.mark.parametrize("case", OPERATOR_CASES, ids=lambda case: case.name)
def test_operators(case: Case) -> None:
    tokens = tokenize(case.source)

    assert tuple(tok.type for tok in tokens) == case.expected_types


@pytest.mark.parametrize("case", KEYWORD_CASES, ids=lambda case: case.name)
def test_keywords(case: Case) -> None:
    tokens = tokenize(case.source)

    assert tuple(tok.type for tok in tokens) == case.expected_types
    assert tokens[0].lexeme == case.source


def test_comments() -> None:
    tokens = tokenize("a / b // c / d\ne")

    assert [tok.type for tok in tokens] == [TT.IDENT, TT.SLASH, TT.IDENT, TT.IDENT]
    assert tokens[-1].value == "e"


def test_comment_only_source() -> None:
    assert tokenize("// nothing here") == []
    assert tokenize("") == []
    assert tokenize(" \t\r\n") == []


@pytest.mark.parametrize("case", POSITION_CASES, ids=lambda case: case.name)
def test_position_tracking(case: Case) -> None:
    tokens = tokenize(case.source)

    assert tuple(tok.type for tok in tokens) == case.expected_types
    assert tuple((tok.row, tok.col) for tok in tokens) == case.expected_positions


@pytest.mark.parametrize("case", LEX_ERROR_CASES, ids=lambda case: case.name)
def test_lex_errors(case: Case) -> None:
    assert case.exc is not None

    with pytest.raises(case.exc) as exc_info:
        tokenize(case.source)

    err = exc_info.value
    assert isinstance(err, LexError)
    assert (err.row, err.col) == (case.err_row, case.err_col)
    if case.msg is not None:
        assert str(err) == case.msg


def test_unterminated_string_after_string() -> None:
    items = list(Lexer('"hello" "world'))

    assert len(items) == 2
    first, second = items
    assert isinstance(first, Tok)
    assert (first.type, first.value, first.lexeme) == (TT.STRING, "hello", '"hello"')
    assert isinstance(second, UnterminatedString)
    assert (second.row, second.col) == (1, 9)
    assert second.tag == "unterminated-string"


def test_scanning_continues_after_unexpected_char() -> None:
    items = list(Lexer("1 @ 2"))

    assert [type(item) for item in items] == [Tok, UnexpectedChar, Tok]
    assert items[1].char == "@"
    assert items[2].value == 2.0
    assert (items[2].row, items[2].col) == (1, 5)


def test_tokens_stops_at_first_error() -> None:
    seen = []
    with pytest.raises(UnexpectedChar):
        for tok in Lexer("1 2 $ 3").tokens():
            seen.append(tok.value)

    assert seen == [1.0, 2.0]


def test_lexer_is_not_restartable() -> None:
    lexer = Lexer("1 2")

    assert len(list(lexer)) == 2
    assert list(lexer) == []
    assert len(list(Lexer("1 2"))) == 2


def test_number_value_is_float() -> None:
    (tok,) = tokenize("42")

    assert isinstance(tok.value, float)
    assert tok.lexeme == "42"


def test_scanning_is_deterministic() -> None:
    source = 'print (1 + 2.5) * -x >= "s";\n// tail\nvar y = nil;'

    assert tokenize(source) == tokenize(source)


def test_positions_never_decrease() -> None:
    tokens = tokenize("a\n b c\n\n  d // e\nf")
    positions = [(tok.row, tok.col) for tok in tokens]

    assert positions == sorted(positions)


def test_tok_repr() -> None:
    (tok,) = tokenize("foo")

    assert repr(tok) == "Tok(IDENT, 'foo', 1:1)"
