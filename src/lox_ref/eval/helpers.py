from __future__ import annotations

from ..types import LoxBool, LoxNil, LoxNumber, LoxString, LoxValue

def is_truthy(val: LoxValue) -> bool:
    match val:
        case LoxBool(value=b):
            return b
        case LoxNil():
            return False
        case _:
            return True

def lox_equals(lhs: LoxValue, rhs: LoxValue) -> bool:
    """Same-variant value equality; any cross-variant pair is unequal."""
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case _:
            return False
