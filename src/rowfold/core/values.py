"""Runtime cell values.

A Value is one cell of a row: a variant tag plus its payload. Values render
themselves as text and, where numerically meaningful, coerce to a 64-bit
integer. Coercion is always explicit; two Values are never compared by
punning their payloads.

Usage:
    from rowfold.core.values import Value

    v = Value.text("42")
    v.try_long()      # 42
    Value.null().is_missing  # True
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|nan|inf(?:inity)?)",
    re.IGNORECASE,
)

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


def parse_int(text: str | None, bits: int = 32) -> int | None:
    """Parse a strict decimal integer of the given width.

    Accepts an optional sign followed by ASCII digits; no whitespace, no
    underscores. Returns None when the text is not such an integer or does
    not fit in ``bits`` bits.
    """
    if not text or not _INT_PATTERN.fullmatch(text):
        return None
    number = int(text)
    if bits == 32:
        low, high = INT32_MIN, INT32_MAX
    else:
        low, high = INT64_MIN, INT64_MAX
    if number < low or number > high:
        return None
    return number


def parse_float(text: str | None) -> float | None:
    """Parse a decimal / scientific float, including nan and inf."""
    if not text:
        return None
    stripped = text.strip()
    if not _FLOAT_PATTERN.fullmatch(stripped):
        return None
    return float(stripped)


class ValueKind(str, Enum):
    """Variant tag of a Value."""

    INTEGER = "Integer"
    LONG = "Long"
    DOUBLE = "Double"
    STRING = "String"
    TIME = "Time"
    NULL = "Null"


@dataclass(frozen=True, slots=True)
class Value:
    """One immutable cell value.

    ``data`` holds an int for INTEGER/LONG/TIME (time as epoch
    milliseconds), a float for DOUBLE, a str for STRING and None for NULL.
    """

    kind: ValueKind
    data: int | float | str | None = None

    # --- constructors ---

    @classmethod
    def integer(cls, value: int) -> Value:
        return cls(ValueKind.INTEGER, int(value))

    @classmethod
    def long(cls, value: int) -> Value:
        return cls(ValueKind.LONG, int(value))

    @classmethod
    def double(cls, value: float) -> Value:
        return cls(ValueKind.DOUBLE, float(value))

    @classmethod
    def text(cls, value: str | None) -> Value:
        return cls(ValueKind.STRING, value)

    @classmethod
    def time(cls, epoch_millis: int) -> Value:
        return cls(ValueKind.TIME, int(epoch_millis))

    @classmethod
    def null(cls) -> Value:
        return _NULL

    @classmethod
    def of(cls, obj: Any) -> Value:
        """Wrap a plain Python scalar: None, int, float or str."""
        if obj is None:
            return _NULL
        if isinstance(obj, Value):
            return obj
        if isinstance(obj, bool):
            raise TypeError("Boolean values have no Value variant")
        if isinstance(obj, int):
            return cls.long(obj)
        if isinstance(obj, float):
            return cls.double(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        raise TypeError(f"Cannot convert {type(obj).__name__} to a Value")

    # --- tests ---

    @property
    def is_missing(self) -> bool:
        """NULL, or a STRING whose text is empty or absent."""
        if self.kind is ValueKind.NULL:
            return True
        return self.kind is ValueKind.STRING and not self.data

    # --- coercion ---

    def to_text(self) -> str:
        if self.data is None:
            return ""
        if self.kind is ValueKind.DOUBLE:
            return repr(self.data)
        return str(self.data)

    def try_long(self) -> int | None:
        """Coerce to a 64-bit integer, or None when not meaningful.

        DOUBLE truncates toward zero; NaN and infinities do not coerce.
        STRING coerces only when its text is a strict integer.
        """
        kind = self.kind
        if kind in (ValueKind.INTEGER, ValueKind.LONG, ValueKind.TIME):
            return self.data  # type: ignore[return-value]
        if kind is ValueKind.DOUBLE:
            number = self.data
            assert isinstance(number, float)
            if math.isnan(number) or math.isinf(number):
                return None
            return int(number)
        if kind is ValueKind.STRING:
            return parse_int(self.data, bits=64)  # type: ignore[arg-type]
        return None

    def to_long(self) -> int:
        """Coerce to a 64-bit integer, raising ValueError if impossible."""
        number = self.try_long()
        if number is None:
            raise ValueError(f"{self.kind.value} value {self.to_text()!r} has no long value")
        return number

    def try_double(self) -> float | None:
        kind = self.kind
        if kind is ValueKind.DOUBLE:
            return self.data  # type: ignore[return-value]
        if kind in (ValueKind.INTEGER, ValueKind.LONG, ValueKind.TIME):
            return float(self.data)  # type: ignore[arg-type]
        if kind is ValueKind.STRING:
            return parse_float(self.data)  # type: ignore[arg-type]
        return None

    def to_double(self) -> float:
        number = self.try_double()
        if number is None:
            raise ValueError(f"{self.kind.value} value {self.to_text()!r} has no double value")
        return number

    def __str__(self) -> str:
        return self.to_text()


_NULL = Value(ValueKind.NULL, None)

# A row is positionally aligned to its schema
Row = tuple[Value, ...]
# Rows ordered ascending by a time column
Sequence = list[Row]


def make_row(*cells: Any) -> Row:
    """Build a row from plain Python scalars or Values."""
    return tuple(Value.of(cell) for cell in cells)
