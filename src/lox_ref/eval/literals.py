from __future__ import annotations

from ..syntax import LitKind, Literal
from ..types import LoxBool, LoxNil, LoxNumber, LoxString, LoxUndefinedError, LoxValue

def eval_literal(lit: Literal) -> LoxValue:
    match lit.kind:
        case LitKind.NUMBER:
            return LoxNumber(lit.value)
        case LitKind.STRING:
            return LoxString(lit.value)
        case LitKind.TRUE:
            return LoxBool(True)
        case LitKind.FALSE:
            return LoxBool(False)
        case LitKind.NIL:
            return LoxNil()
        case LitKind.IDENT:
            # No environment exists yet, so every name is unbound.
            raise LoxUndefinedError(lit.value)

    raise ValueError(f"Unknown literal kind {lit.kind!r}")
