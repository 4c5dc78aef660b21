"""Per-row column transforms.

A column transform rewrites one column of every row it maps and leaves the
other columns untouched. Sequences are transformed row by row.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rowfold.core.models.base import ColumnType, ConfigurationError
from rowfold.core.values import Row, Sequence, Value, ValueKind
from rowfold.schema.models import Schema


class BaseColumnTransform(ABC):
    """Transform that maps a single column's values."""

    allowed_types: tuple[ColumnType, ...] = tuple(ColumnType)

    def __init__(self, column: str):
        self.column = column
        self._input_schema: Schema | None = None
        self._idx: int | None = None

    def set_input_schema(self, schema: Schema) -> None:
        spec = schema.column(self.column)
        if spec.type not in self.allowed_types:
            raise ConfigurationError(
                f"{type(self).__name__} cannot transform {spec.type.value} column {self.column!r}"
            )
        self._input_schema = schema
        self._idx = schema.index_of(self.column)

    @property
    def input_schema(self) -> Schema | None:
        return self._input_schema

    @abstractmethod
    def map_value(self, value: Value) -> Value:
        """Map one value of the transformed column."""

    def map(self, row: Row) -> Row:
        if self._idx is None:
            raise ConfigurationError(f"Input schema not set on {type(self).__name__}")
        idx = self._idx
        return (*row[:idx], self.map_value(row[idx]), *row[idx + 1 :])

    def map_sequence(self, sequence: Sequence) -> Sequence:
        return [self.map(row) for row in sequence]


class ReplaceEmptyStringTransform(BaseColumnTransform):
    """Replace empty (or NULL) text with a fixed string.

    Non-empty STRING values pass through unchanged; any other variant is
    turned into its text.
    """

    allowed_types = (ColumnType.STRING, ColumnType.CATEGORICAL)

    def __init__(self, column: str, replacement: str):
        super().__init__(column)
        self.replacement = replacement

    def map_value(self, value: Value) -> Value:
        if value.is_missing:
            return Value.text(self.replacement)
        if value.kind is ValueKind.STRING:
            return value
        return Value.text(value.to_text())

    def __str__(self) -> str:
        return (
            f'ReplaceEmptyStringTransform(column="{self.column}",'
            f'replacement="{self.replacement}")'
        )
