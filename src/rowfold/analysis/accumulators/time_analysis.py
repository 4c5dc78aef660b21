"""Time column analysis counter.

Valid / missing / invalid follow the same precedence as the quality
counters. Every value that coerces to epoch milliseconds also feeds the
running minimum and maximum time.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal

from rowfold.analysis.accumulators.base import (
    AccumulatorKind,
    BaseAccumulator,
    register_accumulator,
)
from rowfold.core.values import Value
from rowfold.schema.models import ColumnSpec


def _pick(a: int | None, b: int | None, fn: Callable[[int, int], int]) -> int | None:
    if a is None:
        return b
    if b is None:
        return a
    return fn(a, b)


@register_accumulator(AccumulatorKind.TIME_ANALYSIS)
class TimeAnalysis(BaseAccumulator):
    """Counts and extremal epoch-millisecond times for a time column."""

    kind: Literal[AccumulatorKind.TIME_ANALYSIS] = AccumulatorKind.TIME_ANALYSIS

    count_valid: int = 0
    count_invalid: int = 0
    count_missing: int = 0
    min_time: int | None = None
    max_time: int | None = None

    def add(self, value: Value, spec: ColumnSpec) -> TimeAnalysis:
        valid, invalid, missing = self.count_valid, self.count_invalid, self.count_missing
        if spec.is_valid(value):
            valid += 1
        elif value.is_missing:
            missing += 1
        else:
            invalid += 1

        millis = None if value.is_missing else value.try_long()
        return TimeAnalysis(
            count_valid=valid,
            count_invalid=invalid,
            count_missing=missing,
            min_time=_pick(self.min_time, millis, min),
            max_time=_pick(self.max_time, millis, max),
            count_total=self.count_total + 1,
        )

    def merge(self, other: TimeAnalysis) -> TimeAnalysis:
        self._check_mergeable(other)
        return TimeAnalysis(
            count_valid=self.count_valid + other.count_valid,
            count_invalid=self.count_invalid + other.count_invalid,
            count_missing=self.count_missing + other.count_missing,
            min_time=_pick(self.min_time, other.min_time, min),
            max_time=_pick(self.max_time, other.max_time, max),
            count_total=self.count_total + other.count_total,
        )
