from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, TextIO, Tuple

from . import lark_parse, parser_rd
from .evaluator import eval_expr, exec_program
from .lexer_rd import LexError
from .parser_rd import ParseError
from .printer import to_lisp
from .syntax import Expr, Stmt
from .types import LoxRuntimeError, LoxValue
from .utils import debug_py_trace_enabled

# sysexits.h codes, as conventional for Lox front ends
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70
EX_IOERR = 74

USAGE = "Usage: lox [--parser rd|lark] [--tree] [script]"

ProgramParser = Callable[[str], List[Stmt]]
ExprParser = Callable[[str], Expr]

FRONTENDS: Dict[str, Tuple[ProgramParser, ExprParser]] = {
    "rd": (parser_rd.parse_source, parser_rd.parse_expr_fragment),
    "lark": (lark_parse.parse_source, lark_parse.parse_expr_fragment),
}

def _frontend(name: str) -> Tuple[ProgramParser, ExprParser]:
    try:
        return FRONTENDS[name]
    except KeyError:
        raise ValueError(f"Unknown parser front end {name!r}; expected one of {sorted(FRONTENDS)}") from None

def parse_program(src: str, frontend: str = "rd") -> List[Stmt]:
    parse_stmts, _ = _frontend(frontend)
    return parse_stmts(src)

def parse_expr(src: str, frontend: str = "rd") -> Expr:
    _, parse_one = _frontend(frontend)
    return parse_one(src)

def run(src: str, out: Optional[TextIO] = None, frontend: str = "rd") -> List[LoxValue]:
    """Parse the whole program, then execute it statement by statement."""
    stmts = parse_program(src, frontend)
    return exec_program(stmts, out)

def evaluate(src: str, frontend: str = "rd") -> LoxValue:
    """Evaluate a single expression (no trailing `;`)."""
    return eval_expr(parse_expr(src, frontend))

def repl_eval(src: str, out: Optional[TextIO] = None, frontend: str = "rd") -> Tuple[Optional[LoxValue], bool]:
    """
    Evaluate one REPL entry.

    Returns (value, stmt): a bare expression comes back with stmt=False so
    the caller can echo it; statement input is run and the last value is
    returned with stmt=True.
    """
    try:
        expr = parse_expr(src, frontend)
    except ParseError:
        values = run(src, out, frontend)
        return (values[-1] if values else None), True

    return eval_expr(expr), False

def report_error(exc: BaseException, stream: Optional[TextIO] = None) -> None:
    stream = stream if stream is not None else sys.stderr
    print(f"Error: {exc}", file=stream)

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=stream)
        print("".join(traceback.format_tb(exc.__traceback__)), file=stream, end="")

def run_file(path: str, out: Optional[TextIO] = None, frontend: str = "rd", tree: bool = False) -> int:
    """Run a script file; returns a process exit code."""
    try:
        source = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        report_error(exc)
        return EX_IOERR

    return run_source(source, out=out, frontend=frontend, tree=tree)

def run_source(source: str, out: Optional[TextIO] = None, frontend: str = "rd", tree: bool = False) -> int:
    out = out if out is not None else sys.stdout

    try:
        if tree:
            for stmt in parse_program(source, frontend):
                print(to_lisp(stmt), file=out)
        else:
            run(source, out, frontend)
    except (ParseError, LexError) as exc:
        report_error(exc)
        return EX_DATAERR
    except LoxRuntimeError as exc:
        report_error(exc)
        return EX_SOFTWARE

    return EX_OK

def main(argv: Optional[Sequence[str]] = None) -> int:
    frontend = "rd"
    tree = False
    args: List[str] = []
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--tree":
            tree = True
            continue

        if token.startswith("--parser="):
            frontend = token.split("=", 1)[1]
            continue

        if token == "--parser":
            try:
                frontend = next(it)
            except StopIteration:
                print("--parser flag requires a value", file=sys.stderr)
                return EX_USAGE
            continue

        if token in ("-h", "--help"):
            print(USAGE)
            return EX_OK

        args.append(token)

    if frontend not in FRONTENDS or len(args) > 1:
        print(USAGE, file=sys.stderr)
        return EX_USAGE

    if args and args[0] == "-":
        return run_source(sys.stdin.read(), frontend=frontend, tree=tree)

    if args:
        return run_file(args[0], frontend=frontend, tree=tree)

    from .repl import repl

    repl(frontend=frontend, show_tree=tree)
    return EX_OK

if __name__ == "__main__":
    sys.exit(main())
