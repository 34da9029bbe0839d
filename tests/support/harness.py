from __future__ import annotations

import io
import math
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from lox_ref import lark_parse
from lox_ref.lexer_rd import LexError, Lexer
from lox_ref.parser_rd import ParseError, parse_expr_fragment, parse_source
from lox_ref.printer import to_lisp
from lox_ref.runner import evaluate, run as run_program
from lox_ref.types import (
    LoxBool,
    LoxNil,
    LoxNumber,
    LoxRuntimeError,
    LoxString,
    LoxTypeError,
    LoxUndefinedError,
    LoxUnsupportedError,
    LoxValue,
)

RuntimeExpectation = Optional[Tuple[str, object]]

KEYWORDS = Lexer.KEYWORDS

FRONTENDS = ["rd", "lark"]


def lisp_program(source: str, frontend: str = "rd") -> List[str]:
    """Parse a program and render every statement in canonical form."""
    parse = lark_parse.parse_source if frontend == "lark" else parse_source
    return [to_lisp(stmt) for stmt in parse(source)]


def lisp_expr(source: str, frontend: str = "rd") -> str:
    parse = lark_parse.parse_expr_fragment if frontend == "lark" else parse_expr_fragment
    return to_lisp(parse(source))


def run_capture(source: str, frontend: str = "rd") -> Tuple[List[LoxValue], str]:
    """Run a program, returning its statement values and printed output."""
    out = io.StringIO()
    values = run_program(source, out=out, frontend=frontend)
    return values, out.getvalue()


def verify_result(value: object, kind: str, expected: object) -> None:
    """Assert runtime result shape/value."""
    match kind:
        case "string":
            assert isinstance(
                value, LoxString
            ), f"expected LoxString, got {type(value).__name__}"
            assert (
                value.value == expected
            ), f"expected {expected!r}, got {value.value!r}"
            return
        case "number":
            assert isinstance(
                value, LoxNumber
            ), f"expected number, got {type(value).__name__}"
            if isinstance(expected, float) and math.isnan(expected):
                assert math.isnan(value.value), f"expected NaN, got {value.value}"
                return
            if isinstance(expected, float) and math.isinf(expected):
                assert value.value == expected, f"expected {expected}, got {value.value}"
                return
            assert (
                abs(value.value - float(expected)) <= 1e-9
            ), f"expected {expected}, got {value.value}"
            return
        case "bool":
            assert isinstance(
                value, LoxBool
            ), f"expected bool, got {type(value).__name__}"
            assert value.value is bool(
                expected
            ), f"expected {expected}, got {value.value}"
            return
        case "nil":
            assert isinstance(
                value, LoxNil
            ), f"expected LoxNil, got {type(value).__name__}"
            return
        case _:
            raise AssertionError(f"unknown expectation kind {kind}")


def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
    frontend: str = "rd",
) -> None:
    """Evaluate one expression scenario with optional expected exception."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            evaluate(source, frontend)
        return

    result = evaluate(source, frontend)
    if expectation is not None:
        verify_result(result, expectation[0], expectation[1])


__all__ = [
    "FRONTENDS",
    "KEYWORDS",
    "LexError",
    "LoxRuntimeError",
    "LoxTypeError",
    "LoxUndefinedError",
    "LoxUnsupportedError",
    "ParseError",
    "evaluate",
    "lisp_expr",
    "lisp_program",
    "run_capture",
    "run_program",
    "run_runtime_case",
    "verify_result",
]
