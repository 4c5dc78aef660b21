"""String length analysis counter.

Tracks, over the text length of every value: how many are zero length, the
minimum and maximum length seen with the number of values tying each, the
sum of lengths and the total count.

Merging extremes: equal extremes sum their tie counts; otherwise the side
with the strictly better extreme (smaller minimum, larger maximum) keeps its
own tie count alone. The rule only looks at the two (extreme, count) pairs,
never at which side is ``self``, so it is commutative. An accumulator that
has seen nothing has no extremes and is the identity.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Literal

from rowfold.analysis.accumulators.base import (
    AccumulatorKind,
    BaseAccumulator,
    register_accumulator,
)
from rowfold.core.values import Value
from rowfold.schema.models import ColumnSpec


def _merge_extreme(
    seen: int | None,
    count: int,
    other_seen: int | None,
    other_count: int,
    better: Callable[[int, int], bool],
) -> tuple[int | None, int]:
    if other_seen is None:
        return seen, count
    if seen is None:
        return other_seen, other_count
    if seen == other_seen:
        return seen, count + other_count
    if better(other_seen, seen):
        return other_seen, other_count
    return seen, count


@register_accumulator(AccumulatorKind.STRING_ANALYSIS)
class StringAnalysis(BaseAccumulator):
    """Length statistics for a text column."""

    kind: Literal[AccumulatorKind.STRING_ANALYSIS] = AccumulatorKind.STRING_ANALYSIS

    count_zero_length: int = 0
    min_length_seen: int | None = None
    count_min_length: int = 0
    max_length_seen: int | None = None
    count_max_length: int = 0
    sum_length: int = 0

    @property
    def mean_length(self) -> float | None:
        if self.count_total == 0:
            return None
        return self.sum_length / self.count_total

    def add(self, value: Value, spec: ColumnSpec) -> StringAnalysis:
        length = len(value.to_text())
        min_seen, count_min = _merge_extreme(
            self.min_length_seen, self.count_min_length, length, 1, operator.lt
        )
        max_seen, count_max = _merge_extreme(
            self.max_length_seen, self.count_max_length, length, 1, operator.gt
        )
        return StringAnalysis(
            count_zero_length=self.count_zero_length + (1 if length == 0 else 0),
            min_length_seen=min_seen,
            count_min_length=count_min,
            max_length_seen=max_seen,
            count_max_length=count_max,
            sum_length=self.sum_length + length,
            count_total=self.count_total + 1,
        )

    def merge(self, other: StringAnalysis) -> StringAnalysis:
        self._check_mergeable(other)
        min_seen, count_min = _merge_extreme(
            self.min_length_seen,
            self.count_min_length,
            other.min_length_seen,
            other.count_min_length,
            operator.lt,
        )
        max_seen, count_max = _merge_extreme(
            self.max_length_seen,
            self.count_max_length,
            other.max_length_seen,
            other.count_max_length,
            operator.gt,
        )
        return StringAnalysis(
            count_zero_length=self.count_zero_length + other.count_zero_length,
            min_length_seen=min_seen,
            count_min_length=count_min,
            max_length_seen=max_seen,
            count_max_length=count_max,
            sum_length=self.sum_length + other.sum_length,
            count_total=self.count_total + other.count_total,
        )
