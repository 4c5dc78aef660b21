"""Shared pytest fixtures for all tests."""

import pytest

from rowfold.core.models.base import ColumnType
from rowfold.core.values import Sequence, Value
from rowfold.schema import (
    ColumnSpec,
    IntegerMetaData,
    Schema,
    SequenceSchema,
    StringMetaData,
    TimeMetaData,
)


@pytest.fixture
def sequence_schema() -> SequenceSchema:
    """Sequence schema with a time column, a key and a measure."""
    return SequenceSchema(
        [
            ColumnSpec("timestamp", TimeMetaData()),
            ColumnSpec("sensor", StringMetaData()),
            ColumnSpec("reading", IntegerMetaData()),
        ]
    )


@pytest.fixture
def sales_schema() -> Schema:
    """Flat schema used for analysis and reduce tests."""
    return Schema(
        [
            ColumnSpec("customer", StringMetaData()),
            ColumnSpec("quantity", IntegerMetaData(min_allowed=0)),
            ColumnSpec.of("price", ColumnType.DOUBLE),
            ColumnSpec.of("sold_at", ColumnType.TIME),
        ]
    )


def make_sequence(times_ms: list[int], sensor: str = "s1") -> Sequence:
    """Rows for ``sequence_schema`` at the given epoch-millisecond times."""
    return [
        (Value.time(t), Value.text(sensor), Value.integer(i)) for i, t in enumerate(times_ms)
    ]


@pytest.fixture
def seconds_sequence() -> Sequence:
    """Ten rows at 0s, 1s, ..., 9s."""
    return make_sequence([s * 1000 for s in range(10)])


@pytest.fixture
def sequence_factory():
    """Factory building ``sequence_schema`` rows from epoch-millisecond times."""
    return make_sequence
