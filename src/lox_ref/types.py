from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union
from typing_extensions import TypeAlias

# ---------- Value Model ----------

_ESCAPES = {'\\': '\\\\', '"': '\\"', '\n': '\\n', '\t': '\\t', '\r': '\\r'}

def quote_string(text: str) -> str:
    """Double-quote `text` on one line, escaping quotes, backslashes and line breaks."""
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in text) + '"'

def format_number(v: float) -> str:
    """Render a number the way `print` shows it: 3, 2.5, 0.0000001, -0, inf, NaN.

    Shortest round-trip digits, always positional (never exponent notation).
    """
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "inf" if v > 0 else "-inf"
    if v == 0 and math.copysign(1.0, v) < 0:
        return "-0"
    text = format(Decimal(repr(v)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text

@dataclass
class LoxNil:
    def __str__(self) -> str:
        return "nil"

    def __repr__(self) -> str:
        return "nil"

@dataclass
class LoxNumber:
    value: float

    def __str__(self) -> str:
        return format_number(self.value)

    def __repr__(self) -> str:
        return format_number(self.value)

@dataclass
class LoxString:
    value: str

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return quote_string(self.value)

@dataclass
class LoxBool:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"

    def __repr__(self) -> str:
        return "true" if self.value else "false"

LoxValue: TypeAlias = Union[LoxNil, LoxNumber, LoxString, LoxBool]

def type_name(value: LoxValue) -> str:
    match value:
        case LoxNumber():
            return "number"
        case LoxString():
            return "string"
        case LoxBool():
            return "bool"
        case LoxNil():
            return "nil"
        case _:
            return type(value).__name__

# ---------- Exceptions ----------

class LoxRuntimeError(Exception):
    tag = "runtime-error"

    def __init__(self, message: str, row: Optional[int] = None, col: Optional[int] = None):
        self.message = message
        self.row = row
        self.col = col
        super().__init__(message)

    def __str__(self) -> str:
        if self.row is not None and self.col is not None:
            return f"[{self.row}:{self.col}] {self.tag}: {self.message}"
        return f"{self.tag}: {self.message}"

class LoxTypeError(LoxRuntimeError):
    """Operand of the wrong variant; ``value`` is the offending operand."""
    tag = "type-error"

    def __init__(self, message: str, value: LoxValue):
        self.value = value
        super().__init__(message)

class LoxUndefinedError(LoxRuntimeError):
    tag = "undefined"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"undefined reference `{name}`")

class LoxUnsupportedError(LoxRuntimeError):
    tag = "unsupported"

class LoxTooDeepError(LoxRuntimeError):
    tag = "too-deep"
