from __future__ import annotations

import os as _os
import sys as _sys
from contextlib import contextmanager
from typing import Iterator

DEBUG_PY_TRACE_ENV = "LOX_DEBUG_PY_TRACE"

# Frames allowed while parsing, printing or evaluating one program.
RECURSION_HEADROOM = 5000

_TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str) -> bool:
    """Check if an env var is set to a truthy switch value."""
    value = _os.environ.get(name)
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def debug_py_trace_enabled() -> bool:
    return env_flag(DEBUG_PY_TRACE_ENV)


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_ENV, None)


@contextmanager
def recursion_headroom(limit: int = RECURSION_HEADROOM) -> Iterator[None]:
    """Raise the interpreter recursion limit to at least `limit` for the block."""
    previous = _sys.getrecursionlimit()
    if previous < limit:
        _sys.setrecursionlimit(limit)
    try:
        yield
    finally:
        _sys.setrecursionlimit(previous)
