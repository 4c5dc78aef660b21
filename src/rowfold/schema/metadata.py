"""Column metadata: the validity predicate behind each column type.

Each metadata class answers one question, ``is_valid(value)``, for the
column type it describes. Accumulators consult it to split values into
valid / invalid / missing buckets.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import ClassVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rowfold.core.models.base import ColumnType, ConfigurationError
from rowfold.core.values import Value, ValueKind, parse_int


def _in_range(number: float, low: float | None, high: float | None) -> bool:
    if low is not None and number < low:
        return False
    return not (high is not None and number > high)


@dataclass(frozen=True)
class IntegerMetaData:
    """32-bit integer column with an optional inclusive range."""

    column_type: ClassVar[ColumnType] = ColumnType.INTEGER
    bits: ClassVar[int] = 32

    min_allowed: int | None = None
    max_allowed: int | None = None

    def is_valid(self, value: Value) -> bool:
        if value.is_missing:
            return False
        if value.kind in (ValueKind.INTEGER, ValueKind.LONG):
            number = parse_int(value.to_text(), bits=self.bits)
        elif value.kind is ValueKind.STRING:
            number = parse_int(value.data, bits=self.bits)  # type: ignore[arg-type]
        else:
            return False
        if number is None:
            return False
        return _in_range(number, self.min_allowed, self.max_allowed)


@dataclass(frozen=True)
class LongMetaData(IntegerMetaData):
    """64-bit integer column with an optional inclusive range."""

    column_type: ClassVar[ColumnType] = ColumnType.LONG
    bits: ClassVar[int] = 64


@dataclass(frozen=True)
class DoubleMetaData:
    """Floating point column; NaN and infinities are invalid unless allowed."""

    column_type: ClassVar[ColumnType] = ColumnType.DOUBLE

    min_allowed: float | None = None
    max_allowed: float | None = None
    allow_nan: bool = False
    allow_infinite: bool = False

    def is_valid(self, value: Value) -> bool:
        if value.is_missing:
            return False
        number = value.try_double()
        if number is None:
            return False
        if math.isnan(number):
            return self.allow_nan
        if math.isinf(number):
            return self.allow_infinite
        return _in_range(number, self.min_allowed, self.max_allowed)


@dataclass(frozen=True)
class StringMetaData:
    """Free text column, optionally constrained by a regex and length bounds."""

    column_type: ClassVar[ColumnType] = ColumnType.STRING

    regex: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    _pattern: re.Pattern[str] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.regex is not None:
            try:
                object.__setattr__(self, "_pattern", re.compile(self.regex))
            except re.error as e:
                raise ConfigurationError(f"Invalid regex {self.regex!r}: {e}") from e

    def is_valid(self, value: Value) -> bool:
        if value.kind is ValueKind.NULL:
            return False
        text = value.to_text()
        if not _in_range(len(text), self.min_length, self.max_length):
            return False
        return self._pattern is None or self._pattern.fullmatch(text) is not None


@dataclass(frozen=True)
class CategoricalMetaData:
    """Column whose text must be one of a fixed set of states."""

    column_type: ClassVar[ColumnType] = ColumnType.CATEGORICAL

    state_names: tuple[str, ...] = ()

    def is_valid(self, value: Value) -> bool:
        return value.kind is not ValueKind.NULL and value.to_text() in self.state_names


@dataclass(frozen=True)
class TimeMetaData:
    """Epoch-millisecond time column in a named time zone."""

    column_type: ClassVar[ColumnType] = ColumnType.TIME

    time_zone: str = "UTC"
    min_valid_millis: int | None = None
    max_valid_millis: int | None = None

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.time_zone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown time zone {self.time_zone!r}") from e

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.time_zone)

    def is_valid(self, value: Value) -> bool:
        if value.is_missing or value.kind is ValueKind.DOUBLE:
            return False
        millis = value.try_long()
        if millis is None:
            return False
        return _in_range(millis, self.min_valid_millis, self.max_valid_millis)


ColumnMetaData = (
    IntegerMetaData
    | LongMetaData
    | DoubleMetaData
    | StringMetaData
    | CategoricalMetaData
    | TimeMetaData
)

_DEFAULT_METADATA: dict[ColumnType, type[ColumnMetaData]] = {
    ColumnType.INTEGER: IntegerMetaData,
    ColumnType.LONG: LongMetaData,
    ColumnType.DOUBLE: DoubleMetaData,
    ColumnType.STRING: StringMetaData,
    ColumnType.CATEGORICAL: CategoricalMetaData,
    ColumnType.TIME: TimeMetaData,
}


def default_metadata(column_type: ColumnType) -> ColumnMetaData:
    """Unconstrained metadata for a column type."""
    return _DEFAULT_METADATA[column_type]()
