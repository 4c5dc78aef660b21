"""Tests for shared models: Result and TimeUnit."""

import pytest

from rowfold.core.models.base import ColumnType, ConfigurationError, Result, TimeUnit


class TestResult:
    """Tests for the Result type."""

    def test_ok(self):
        result = Result.ok(5, warnings=["careful"])
        assert result.success
        assert result.unwrap() == 5
        assert result.warnings == ["careful"]

    def test_fail(self):
        result: Result[int] = Result.fail("broken")
        assert not result.success
        assert result.error == "broken"
        with pytest.raises(ValueError, match="broken"):
            result.unwrap()

    def test_unwrap_with_error_class(self):
        result: Result[int] = Result.fail("bad window")
        with pytest.raises(ConfigurationError, match="bad window"):
            result.unwrap(ConfigurationError)

    def test_map(self):
        assert Result.ok(2).map(lambda v: v * 10).unwrap() == 20
        failed: Result[int] = Result.fail("nope")
        assert failed.map(lambda v: v * 10) is failed


class TestTimeUnit:
    """Tests for millisecond conversion."""

    def test_whole_units(self):
        assert TimeUnit.MILLISECONDS.to_millis(7) == 7
        assert TimeUnit.SECONDS.to_millis(2) == 2_000
        assert TimeUnit.MINUTES.to_millis(1) == 60_000
        assert TimeUnit.HOURS.to_millis(1) == 3_600_000
        assert TimeUnit.DAYS.to_millis(1) == 86_400_000

    def test_sub_millisecond_truncates(self):
        assert TimeUnit.MICROSECONDS.to_millis(1_999) == 1
        assert TimeUnit.NANOSECONDS.to_millis(999_999) == 0
        assert TimeUnit.MICROSECONDS.to_millis(-1_999) == -1

    def test_negative_amounts(self):
        assert TimeUnit.SECONDS.to_millis(-3) == -3_000


class TestColumnType:
    def test_numeric(self):
        assert ColumnType.INTEGER.is_numeric
        assert ColumnType.DOUBLE.is_numeric
        assert not ColumnType.TIME.is_numeric
        assert not ColumnType.STRING.is_numeric

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)
