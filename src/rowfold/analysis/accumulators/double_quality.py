"""Floating point column quality counter.

Same valid / missing / invalid precedence as the integer counter. Non-missing
values are additionally tagged ``non_real`` (text is not a number), ``nan``
or ``infinite``.
"""

from __future__ import annotations

import math
from typing import Literal

from rowfold.analysis.accumulators.base import (
    AccumulatorKind,
    BaseAccumulator,
    register_accumulator,
)
from rowfold.core.values import Value
from rowfold.schema.models import ColumnSpec


@register_accumulator(AccumulatorKind.DOUBLE_QUALITY)
class DoubleQuality(BaseAccumulator):
    """Valid / invalid / missing counts plus non-real, NaN and infinite tags."""

    kind: Literal[AccumulatorKind.DOUBLE_QUALITY] = AccumulatorKind.DOUBLE_QUALITY

    count_valid: int = 0
    count_invalid: int = 0
    count_missing: int = 0
    count_non_real: int = 0
    count_nan: int = 0
    count_infinite: int = 0

    def add(self, value: Value, spec: ColumnSpec) -> DoubleQuality:
        valid, invalid, missing = self.count_valid, self.count_invalid, self.count_missing
        if spec.is_valid(value):
            valid += 1
        elif value.is_missing:
            missing += 1
        else:
            invalid += 1

        non_real, nan, infinite = self.count_non_real, self.count_nan, self.count_infinite
        if not value.is_missing:
            number = value.try_double()
            if number is None:
                non_real += 1
            elif math.isnan(number):
                nan += 1
            elif math.isinf(number):
                infinite += 1

        return DoubleQuality(
            count_valid=valid,
            count_invalid=invalid,
            count_missing=missing,
            count_non_real=non_real,
            count_nan=nan,
            count_infinite=infinite,
            count_total=self.count_total + 1,
        )

    def merge(self, other: DoubleQuality) -> DoubleQuality:
        self._check_mergeable(other)
        return DoubleQuality(
            count_valid=self.count_valid + other.count_valid,
            count_invalid=self.count_invalid + other.count_invalid,
            count_missing=self.count_missing + other.count_missing,
            count_non_real=self.count_non_real + other.count_non_real,
            count_nan=self.count_nan + other.count_nan,
            count_infinite=self.count_infinite + other.count_infinite,
            count_total=self.count_total + other.count_total,
        )
