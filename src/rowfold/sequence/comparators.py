"""Ordering of values and sequences by coerced long value."""

from __future__ import annotations

from collections.abc import Iterable

from rowfold.core.values import Row, Sequence, Value
from rowfold.schema.models import Schema


def long_key(value: Value) -> int:
    """Sort key ordering values by their long coercion."""
    return value.to_long()


def compare_long(a: Value, b: Value) -> int:
    """Three-way comparison of two values' long coercions."""
    left, right = a.to_long(), b.to_long()
    return (left > right) - (left < right)


def sort_sequence(schema: Schema, sequence: Iterable[Row], column: str) -> Sequence:
    """Return a new sequence sorted ascending by ``column``'s long value.

    The sort is stable, so rows sharing a time keep their relative order.
    """
    idx = schema.index_of(column)
    return sorted(sequence, key=lambda row: long_key(row[idx]))


def is_sorted(schema: Schema, sequence: Sequence, column: str) -> bool:
    """Whether ``sequence`` is already ascending by ``column``."""
    idx = schema.index_of(column)
    return all(
        sequence[i][idx].to_long() <= sequence[i + 1][idx].to_long()
        for i in range(len(sequence) - 1)
    )
