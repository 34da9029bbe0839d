"""Interactive REPL for Lox, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import LexError, tokenize
from .parser_rd import ParseError
from .printer import to_lisp
from .repl_highlight import LoxLexer
from .runner import parse_expr, parse_program, report_error, repl_eval
from .token_types import TT
from .types import LoxNil, LoxRuntimeError
from .utils import debug_py_trace_enabled, set_debug_py_trace

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/tree": ("Toggle printing the parse tree instead of evaluating", "[on|off]"),
}

_ON = ("on", "1", "true", "yes")
_OFF = ("off", "0", "false", "no")


@dataclass
class ReplState:
    frontend: str = "rd"
    show_tree: bool = False


def _open_depth(text: str) -> int:
    """Unclosed `(` / `{` count; 0 when the text does not lex."""
    try:
        tokens = tokenize(text)
    except LexError:
        return 0

    depth = 0
    for tok in tokens:
        if tok.type in (TT.LPAR, TT.LBRACE):
            depth += 1
        elif tok.type in (TT.RPAR, TT.RBRACE):
            depth = max(depth - 1, 0)

    return depth


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def _parse_switch(arg: str, current: bool) -> Optional[bool]:
    """on/off/empty(toggle) -> new value; None on a bad argument."""
    lowered = arg.lower()
    if lowered in _ON:
        return True
    if lowered in _OFF:
        return False
    if arg == "":
        return not current
    return None


def _handle_slash(line: str, state: ReplState) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1].strip() if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        enabled = _parse_switch(arg, debug_py_trace_enabled())
        if enabled is None:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        set_debug_py_trace(enabled)
        print(f"Python traceback: {'on' if enabled else 'off'}")
        return True

    if cmd == "/tree":
        enabled = _parse_switch(arg, state.show_tree)
        if enabled is None:
            print("Usage: /tree [on|off]", file=sys.stderr)
            return True

        state.show_tree = enabled
        print(f"Parse tree: {'on' if enabled else 'off'}")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def _print_tree(text: str, state: ReplState, out: TextIO) -> None:
    try:
        nodes = [parse_expr(text, state.frontend)]
    except ParseError:
        nodes = parse_program(text, state.frontend)

    for node in nodes:
        print(to_lisp(node), file=out)


def handle_entry(text: str, state: ReplState, out: Optional[TextIO] = None) -> None:
    """Run one normalized REPL entry, echoing bare expression values."""
    out = out if out is not None else sys.stdout

    try:
        if state.show_tree:
            _print_tree(text, state, out)
            return

        result, stmt = repl_eval(text, out, state.frontend)
    except (ParseError, LexError, LoxRuntimeError) as exc:
        report_error(exc)
        return

    if not stmt and not isinstance(result, LoxNil):
        print(result, file=out)


def repl(frontend: str = "rd", show_tree: bool = False) -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    state = ReplState(frontend=frontend, show_tree=show_tree)

    history = InMemoryHistory()
    lexer = LoxLexer()

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer

        # Keep reading while a group or block is still open.
        if _open_depth(buf.text) > 0:
            buf.insert_text("\n    ")
            return

        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=lexer,
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("lox repl: Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, state):
            continue

        handle_entry(text, state)
