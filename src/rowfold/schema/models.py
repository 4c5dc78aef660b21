"""Schema models.

A Schema is the ordered list of ColumnSpecs rows are aligned to. A
SequenceSchema marks a schema whose records are time-ordered sequences of
rows rather than independent rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Self

from rowfold.core.models.base import ColumnType, ConfigurationError
from rowfold.core.values import Value
from rowfold.schema.metadata import ColumnMetaData, default_metadata


@dataclass(frozen=True)
class ColumnSpec:
    """One column: its name, type tag and validity predicate."""

    name: str
    metadata: ColumnMetaData

    @classmethod
    def of(cls, name: str, column_type: ColumnType) -> ColumnSpec:
        """Column with unconstrained metadata for its type."""
        return cls(name=name, metadata=default_metadata(column_type))

    @property
    def type(self) -> ColumnType:
        return self.metadata.column_type

    def is_valid(self, value: Value) -> bool:
        return self.metadata.is_valid(value)

    def __str__(self) -> str:
        return f"{self.name}:{self.type.value}"


class Schema:
    """Ordered, uniquely named columns."""

    def __init__(self, columns: Iterable[ColumnSpec]):
        self.columns: tuple[ColumnSpec, ...] = tuple(columns)
        self._index: dict[str, int] = {}
        for idx, column in enumerate(self.columns):
            if column.name in self._index:
                raise ConfigurationError(f"Duplicate column name {column.name!r} in schema")
            self._index[column.name] = idx

    @classmethod
    def of(cls, *columns: tuple[str, ColumnType]) -> Self:
        """Build a schema from (name, type) pairs with default metadata."""
        return cls(ColumnSpec.of(name, column_type) for name, column_type in columns)

    @property
    def names(self) -> list[str]:
        return [c.name for c in self.columns]

    @property
    def types(self) -> list[ColumnType]:
        return [c.type for c in self.columns]

    def has_column(self, name: str) -> bool:
        return name in self._index

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise ConfigurationError(f"Schema has no column named {name!r}") from None

    def column(self, name: str) -> ColumnSpec:
        return self.columns[self.index_of(name)]

    def with_columns(self, *extra: ColumnSpec) -> Self:
        """New schema of the same kind with ``extra`` columns appended."""
        return type(self)([*self.columns, *extra])

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[ColumnSpec]:
        return iter(self.columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return type(self) is type(other) and self.columns == other.columns

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.columns))

    def __repr__(self) -> str:
        cols = ",".join(str(c) for c in self.columns)
        return f"{type(self).__name__}({cols})"


class SequenceSchema(Schema):
    """Schema for records that are sequences of rows."""
