"""Tests for the double, categorical and time accumulators."""

import math

from rowfold.analysis.accumulators import (
    CategoricalAnalysis,
    DoubleQuality,
    TimeAnalysis,
    fold,
)
from rowfold.core.models.base import ColumnType
from rowfold.core.values import Value
from rowfold.schema.metadata import CategoricalMetaData, DoubleMetaData, TimeMetaData
from rowfold.schema.models import ColumnSpec


class TestDoubleQuality:
    """Tests for DoubleQuality."""

    def test_classification(self):
        spec = ColumnSpec("price", DoubleMetaData(min_allowed=0.0))
        values = [
            Value.double(1.5),
            Value.text("2"),
            Value.double(-1.0),
            Value.double(math.nan),
            Value.double(math.inf),
            Value.text("cheap"),
            Value.null(),
        ]
        result = fold(values, spec)

        assert isinstance(result, DoubleQuality)
        assert result.count_valid == 2
        assert result.count_invalid == 4
        assert result.count_missing == 1
        assert result.count_non_real == 1
        assert result.count_nan == 1
        assert result.count_infinite == 1
        assert result.count_total == 7

    def test_allow_nan(self):
        spec = ColumnSpec("x", DoubleMetaData(allow_nan=True))
        result = fold([Value.double(math.nan)], spec)
        assert result.count_valid == 1
        assert result.count_nan == 1

    def test_merge(self):
        spec = ColumnSpec.of("x", ColumnType.DOUBLE)
        a = fold([Value.double(1.0), Value.text("?")], spec)
        b = fold([Value.double(math.inf)], spec)
        merged = a.merge(b)
        assert merged.count_total == 3
        assert merged.count_non_real == 1
        assert merged.count_infinite == 1
        assert merged == b.merge(a)


class TestCategoricalAnalysis:
    """Tests for CategoricalAnalysis."""

    def test_state_counts(self):
        spec = ColumnSpec("color", CategoricalMetaData(state_names=("red", "blue")))
        values = [Value.text(s) for s in ["red", "blue", "red", "green"]]
        result = fold(values, spec)

        assert isinstance(result, CategoricalAnalysis)
        assert result.state_counts == {"red": 2, "blue": 1, "green": 1}
        assert result.count_invalid == 1
        assert result.count_total == 4

    def test_merge_and_most_common(self):
        spec = ColumnSpec("color", CategoricalMetaData(state_names=("a", "b", "c")))
        left = fold([Value.text("a"), Value.text("b")], spec)
        right = fold([Value.text("b"), Value.text("c"), Value.text("b")], spec)
        merged = left.merge(right)

        assert merged.state_counts == {"a": 1, "b": 3, "c": 1}
        assert merged.most_common(2) == [("b", 3), ("a", 1)]
        assert merged == right.merge(left)

    def test_identity(self):
        spec = ColumnSpec.of("c", ColumnType.CATEGORICAL)
        acc = fold([Value.text("x")], spec)
        assert acc.merge(CategoricalAnalysis()) == acc


class TestTimeAnalysis:
    """Tests for TimeAnalysis."""

    def test_counts_and_extremes(self):
        spec = ColumnSpec("t", TimeMetaData(min_valid_millis=0))
        values = [
            Value.time(5_000),
            Value.time(1_000),
            Value.time(-10),
            Value.null(),
            Value.text("noon"),
        ]
        result = fold(values, spec)

        assert isinstance(result, TimeAnalysis)
        assert result.count_valid == 2
        assert result.count_invalid == 2
        assert result.count_missing == 1
        assert result.min_time == -10
        assert result.max_time == 5_000

    def test_merge(self):
        spec = ColumnSpec.of("t", ColumnType.TIME)
        a = fold([Value.time(10), Value.time(20)], spec)
        b = fold([Value.time(5)], spec)
        merged = a.merge(b)
        assert (merged.min_time, merged.max_time) == (5, 20)
        assert merged.count_total == 3
        assert TimeAnalysis().merge(a) == a
