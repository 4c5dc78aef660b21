"""Reduce models: row groups and column reduction operations."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum

from rowfold.core.models.base import ColumnType
from rowfold.core.values import Row


@dataclass(frozen=True)
class RowGroup:
    """Rows sharing one key, e.g. one entity or one time window."""

    key: Hashable
    rows: tuple[Row, ...]

    def __len__(self) -> int:
        return len(self.rows)


class ReduceOp(str, Enum):
    """Per-column reduction applied to all rows of a key."""

    MIN = "min"
    MAX = "max"
    SUM = "sum"
    MEAN = "mean"
    COUNT = "count"
    COUNT_UNIQUE = "count_unique"
    FIRST = "first"
    LAST = "last"
    CONCAT = "concat"

    def supports(self, column_type: ColumnType) -> bool:
        """Whether this operation can reduce a column of ``column_type``."""
        if self in (ReduceOp.SUM, ReduceOp.MEAN):
            return column_type.is_numeric
        if self in (ReduceOp.MIN, ReduceOp.MAX):
            return column_type.is_numeric or column_type is ColumnType.TIME
        return True

    def output_type(self, column_type: ColumnType) -> ColumnType:
        """Column type of this operation's result."""
        if self in (ReduceOp.COUNT, ReduceOp.COUNT_UNIQUE):
            return ColumnType.LONG
        if self is ReduceOp.MEAN:
            return ColumnType.DOUBLE
        if self is ReduceOp.CONCAT:
            return ColumnType.STRING
        if self in (ReduceOp.SUM, ReduceOp.MIN, ReduceOp.MAX):
            if column_type in (ColumnType.INTEGER, ColumnType.LONG):
                return ColumnType.LONG
            return column_type
        return column_type
