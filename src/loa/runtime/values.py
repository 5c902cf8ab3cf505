"""
Runtime values for the Loa interpreter.

Every value carries its kind: Number (64-bit integer), Float, String,
Bool or None. None is what unbound reads, unsupported operations and
function calls evaluate to.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


class ValueKind(Enum):
    NUMBER = "Number"
    FLOAT = "Float"
    STRING = "String"
    BOOL = "Bool"
    NONE = "None"


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def wrap_int64(n: int) -> int:
    """Wrap an integer into the signed 64-bit range (two's complement)."""
    return ((n - INT64_MIN) % (2 ** 64)) + INT64_MIN


@dataclass(frozen=True)
class Value:
    """
    A runtime value with its kind.

    The `data` field holds the Python object (int, float, str, bool or None).
    """
    kind: ValueKind
    data: Any

    def __repr__(self) -> str:
        return f"Value({self.kind.value}, {self.data!r})"

    def __str__(self) -> str:
        return render(self)

    def is_truthy(self) -> bool:
        """Bool true and nonzero Numbers are truthy; everything else is not."""
        if self.kind == ValueKind.BOOL:
            return bool(self.data)
        if self.kind == ValueKind.NUMBER:
            return self.data != 0
        return False

    @property
    def is_none(self) -> bool:
        return self.kind == ValueKind.NONE


# Convenience constructors

def number_val(n: int) -> Value:
    """Create an integer value, wrapped to 64 bits."""
    return Value(ValueKind.NUMBER, wrap_int64(int(n)))


def float_val(x: float) -> Value:
    return Value(ValueKind.FLOAT, float(x))


def string_val(s: str) -> Value:
    return Value(ValueKind.STRING, str(s))


def bool_val(b: bool) -> Value:
    return Value(ValueKind.BOOL, bool(b))


NONE = Value(ValueKind.NONE, None)


def from_literal(data: Any) -> Value:
    """Map a literal payload from the parser onto a runtime value."""
    if isinstance(data, bool):
        return bool_val(data)
    if isinstance(data, int):
        return number_val(data)
    if isinstance(data, float):
        return float_val(data)
    if isinstance(data, str):
        return string_val(data)
    return NONE


def format_float(x: float) -> str:
    """Render a float without exponent; integral values drop the fraction."""
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    if x.is_integer():
        text = str(int(x))
        if x == 0 and math.copysign(1.0, x) < 0:
            text = "-0"
        return text
    return format(Decimal(repr(x)), "f")


def render(value: Value) -> str:
    """Render a value the way print shows it."""
    if value.kind == ValueKind.NUMBER:
        return str(value.data)
    if value.kind == ValueKind.FLOAT:
        return format_float(value.data)
    if value.kind == ValueKind.STRING:
        return value.data
    if value.kind == ValueKind.BOOL:
        return "true" if value.data else "false"
    return "None"
