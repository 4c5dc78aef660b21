"""Tests for overlapping time window segmentation."""

import pytest

from rowfold.core.models.base import ColumnType, ConfigurationError, TimeUnit
from rowfold.core.values import Value
from rowfold.schema.models import Schema, SequenceSchema
from rowfold.sequence import (
    WINDOW_END_COLUMN,
    WINDOW_START_COLUMN,
    OverlappingTimeWindowFunction,
)
from rowfold.sequence.window import ceil_to_grid, floor_to_grid


def window_function(schema, **params) -> OverlappingTimeWindowFunction:
    params.setdefault("time_column", "timestamp")
    params.setdefault("window_size_unit", TimeUnit.SECONDS)
    params.setdefault("window_separation_unit", TimeUnit.SECONDS)
    return OverlappingTimeWindowFunction.build(schema, **params)


def times_of(rows) -> list[int]:
    return [row[0].to_long() for row in rows]


class TestGrid:
    """Tests for grid rounding."""

    def test_floor(self):
        assert floor_to_grid(4_999, 2_000, 0) == 4_000
        assert floor_to_grid(4_000, 2_000, 0) == 4_000
        assert floor_to_grid(-1, 2_000, 0) == -2_000
        assert floor_to_grid(600, 2_000, 500) == 500
        assert floor_to_grid(400, 2_000, 500) == -1_500

    def test_ceil(self):
        assert ceil_to_grid(-3_999, 2_000, 0) == -2_000
        assert ceil_to_grid(-4_000, 2_000, 0) == -4_000
        assert ceil_to_grid(1, 2_000, 500) == 500
        assert ceil_to_grid(501, 2_000, 500) == 2_500


class TestSegmentation:
    """Tests for OverlappingTimeWindowFunction.windows."""

    def test_overlapping_windows(self, sequence_schema, seconds_sequence):
        fn = window_function(sequence_schema, window_size=4, window_separation=2)
        windows = fn.windows(seconds_sequence)

        assert [(w.start, w.end) for w in windows] == [
            (-2_000, 2_000),
            (0, 4_000),
            (2_000, 6_000),
            (4_000, 8_000),
            (6_000, 10_000),
            (8_000, 12_000),
        ]
        assert [times_of(w.rows) for w in windows] == [
            [0, 1_000],
            [0, 1_000, 2_000, 3_000],
            [2_000, 3_000, 4_000, 5_000],
            [4_000, 5_000, 6_000, 7_000],
            [6_000, 7_000, 8_000, 9_000],
            [8_000, 9_000],
        ]

    def test_end_boundary_is_exclusive(self, sequence_schema, seconds_sequence):
        fn = window_function(sequence_schema, window_size=4, window_separation=2)
        for window in fn.windows(seconds_sequence):
            for t in times_of(window.rows):
                assert window.start <= t < window.end

    def test_every_row_in_size_over_separation_windows(self, sequence_schema, seconds_sequence):
        fn = window_function(sequence_schema, window_size=6, window_separation=2)
        windows = fn.windows(seconds_sequence)
        for row in seconds_sequence:
            assert sum(row in w.rows for w in windows) == 3

    def test_size_not_multiple_of_separation(self, sequence_schema, seconds_sequence):
        fn = window_function(sequence_schema, window_size=3, window_separation=2)
        windows = fn.windows(seconds_sequence)
        assert all(w.start % 2_000 == 0 for w in windows)
        assert times_of(windows[1].rows) == [0, 1_000, 2_000]
        assert times_of(windows[2].rows) == [2_000, 3_000, 4_000]

    def test_gaps_when_size_below_separation(self, sequence_schema, seconds_sequence):
        fn = window_function(sequence_schema, window_size=1, window_separation=2)
        windows = fn.windows(seconds_sequence)
        assert [times_of(w.rows) for w in windows] == [[0], [2_000], [4_000], [6_000], [8_000]]

    def test_negative_times(self, sequence_schema, sequence_factory):
        fn = window_function(sequence_schema, window_size=2, window_separation=2)
        windows = fn.windows(sequence_factory([-5_000, -1_000]))
        assert [(w.start, len(w)) for w in windows] == [(-6_000, 1), (-4_000, 0), (-2_000, 1)]

    def test_single_row(self, sequence_schema, sequence_factory):
        fn = window_function(sequence_schema, window_size=4, window_separation=2)
        windows = fn.windows(sequence_factory([5_000]))
        assert [w.start for w in windows] == [2_000, 4_000]
        assert all(len(w) == 1 for w in windows)

    def test_empty_sequence(self, sequence_schema):
        fn = window_function(sequence_schema, window_size=4, window_separation=2)
        assert fn.windows([]) == []
        assert fn.segment([]) == []

    def test_duplicate_times(self, sequence_schema, sequence_factory):
        fn = window_function(sequence_schema, window_size=2, window_separation=2)
        segments = fn.segment(sequence_factory([0, 0, 1_000, 2_000]))
        assert [times_of(s) for s in segments] == [[0, 0, 1_000], [2_000]]


class TestEmptyWindows:
    """Tests for exclude_empty_windows."""

    def test_sparse_sequence(self, sequence_schema, sequence_factory):
        sparse = sequence_factory([0, 100_000])
        kept = window_function(sequence_schema, window_size=4, window_separation=2)
        dropped = window_function(
            sequence_schema, window_size=4, window_separation=2, exclude_empty_windows=True
        )

        all_windows = kept.windows(sparse)
        non_empty = dropped.windows(sparse)

        assert len(all_windows) == 52
        assert [w.start for w in non_empty] == [-2_000, 0, 98_000, 100_000]
        assert all(len(w) > 0 for w in non_empty)
        assert [w.start for w in non_empty] == [w.start for w in all_windows if len(w) > 0]

    def test_dense_sequence_unchanged(self, sequence_schema, seconds_sequence):
        kept = window_function(sequence_schema, window_size=4, window_separation=2)
        dropped = window_function(
            sequence_schema, window_size=4, window_separation=2, exclude_empty_windows=True
        )
        assert dropped.segment(seconds_sequence) == kept.segment(seconds_sequence)


class TestRoundTrip:
    """Non-overlapping windows partition the sequence."""

    @pytest.mark.parametrize("size", [1, 3, 5])
    def test_concatenation_reproduces_sequence(self, sequence_schema, sequence_factory, size):
        sequence = sequence_factory([0, 400, 900, 2_500, 2_500, 7_100, 30_000, 30_001])
        fn = window_function(sequence_schema, window_size=size, window_separation=size)
        rows = [row for segment in fn.segment(sequence) for row in segment]
        assert rows == sequence

    def test_with_exclusion(self, sequence_schema, sequence_factory):
        sequence = sequence_factory([0, 50_000, 51_000, 999_000])
        fn = window_function(
            sequence_schema, window_size=2, window_separation=2, exclude_empty_windows=True
        )
        rows = [row for segment in fn.segment(sequence) for row in segment]
        assert rows == sequence


class TestOffset:
    """Tests for the window grid offset."""

    def test_offset_shifts_grid(self, sequence_schema, seconds_sequence):
        fn = window_function(
            sequence_schema,
            window_size=4,
            window_separation=2,
            offset=500,
            offset_unit=TimeUnit.MILLISECONDS,
        )
        windows = fn.windows(seconds_sequence)
        assert [w.start for w in windows] == [-3_500, -1_500, 500, 2_500, 4_500, 6_500, 8_500]
        assert times_of(windows[0].rows) == [0]
        assert times_of(windows[1].rows) == [0, 1_000, 2_000]

    def test_quarter_hour_offset(self, sequence_schema, sequence_factory):
        hour = 3_600_000
        fn = window_function(
            sequence_schema,
            window_size=12,
            window_size_unit=TimeUnit.HOURS,
            window_separation=1,
            window_separation_unit=TimeUnit.HOURS,
            offset=15,
            offset_unit=TimeUnit.MINUTES,
        )
        windows = fn.windows(sequence_factory([hour, 2 * hour]))
        assert all((w.start - 15 * 60_000) % hour == 0 for w in windows)
        assert all(w.end - w.start == 12 * hour for w in windows)

    def test_offset_without_unit_ignored(self, sequence_schema, seconds_sequence):
        fn = window_function(sequence_schema, window_size=4, window_separation=2, offset=500)
        assert fn.config.offset_millis == 0
        assert fn.windows(seconds_sequence)[0].start == -2_000


class TestWindowColumns:
    """Tests for the optional window start / end columns."""

    def test_columns_appended(self, sequence_schema, seconds_sequence):
        fn = window_function(
            sequence_schema,
            window_size=4,
            window_separation=2,
            add_window_start_column=True,
            add_window_end_column=True,
        )
        first = fn.segment(seconds_sequence)[0]
        assert first[0][-2:] == (Value.time(-2_000), Value.time(2_000))
        assert first[0][:3] == seconds_sequence[0]

    def test_transform_schema(self, sequence_schema):
        fn = window_function(
            sequence_schema, window_size=4, window_separation=2, add_window_end_column=True
        )
        out = fn.transform_schema(sequence_schema)
        assert isinstance(out, SequenceSchema)
        assert out.names == ["timestamp", "sensor", "reading", WINDOW_END_COLUMN]
        assert out.column(WINDOW_END_COLUMN).type is ColumnType.TIME

    def test_both_columns_in_order(self, sequence_schema):
        fn = window_function(
            sequence_schema,
            window_size=4,
            window_separation=2,
            add_window_start_column=True,
            add_window_end_column=True,
        )
        names = fn.transform_schema(sequence_schema).names
        assert names[-2:] == [WINDOW_START_COLUMN, WINDOW_END_COLUMN]

    def test_no_columns_keeps_schema(self, sequence_schema):
        fn = window_function(sequence_schema, window_size=4, window_separation=2)
        assert fn.transform_schema(sequence_schema) is sequence_schema


class TestSetup:
    """Tests for schema binding and configuration errors."""

    def test_requires_sequence_schema(self):
        flat = Schema.of(("timestamp", ColumnType.TIME))
        with pytest.raises(ConfigurationError, match="SequenceSchema"):
            window_function(flat, window_size=4, window_separation=2)

    def test_missing_time_column(self, sequence_schema):
        with pytest.raises(ConfigurationError, match="does not have a column"):
            window_function(
                sequence_schema, time_column="ts", window_size=4, window_separation=2
            )

    def test_time_column_type(self, sequence_schema):
        with pytest.raises(ConfigurationError, match="not of type Time"):
            window_function(
                sequence_schema, time_column="reading", window_size=4, window_separation=2
            )

    def test_schema_required_before_segmenting(self, seconds_sequence):
        fn = OverlappingTimeWindowFunction.build(
            time_column="timestamp",
            window_size=4,
            window_size_unit=TimeUnit.SECONDS,
            window_separation=2,
            window_separation_unit=TimeUnit.SECONDS,
        )
        assert fn.input_schema is None
        with pytest.raises(ConfigurationError, match="Input schema not set"):
            fn.windows(seconds_sequence)

    def test_time_zone_taken_from_column(self, sequence_schema):
        fn = window_function(sequence_schema, window_size=4, window_separation=2)
        assert fn.time_zone == "UTC"
        assert fn.input_schema is sequence_schema

    def test_invalid_parameters(self, sequence_schema):
        with pytest.raises(ConfigurationError, match="Window separation"):
            window_function(sequence_schema, window_size=4, window_separation=None)


class TestDescribe:
    """Tests for the human-readable description."""

    def test_minimal(self, sequence_schema):
        fn = window_function(sequence_schema, window_size=4, window_separation=2)
        assert str(fn) == (
            'OverlappingTimeWindowFunction(column="timestamp",'
            "windowSize=4SECONDS,windowSeparation=2SECONDS,offset=0)"
        )

    def test_all_options(self, sequence_schema):
        fn = window_function(
            sequence_schema,
            window_size=1,
            window_size_unit=TimeUnit.DAYS,
            window_separation=1,
            window_separation_unit=TimeUnit.HOURS,
            offset=15,
            offset_unit=TimeUnit.MINUTES,
            add_window_start_column=True,
            add_window_end_column=True,
            exclude_empty_windows=True,
        )
        assert str(fn) == (
            'OverlappingTimeWindowFunction(column="timestamp",'
            "windowSize=1DAYS,windowSeparation=1HOURS,offset=15MINUTES,"
            "addWindowStartTimeColumn=true,addWindowEndTimeColumn=true,"
            "excludeEmptyWindows=true)"
        )
