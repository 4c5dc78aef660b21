"""Integer column quality counter.

Primary classification, in precedence order:
1. the column's validity predicate accepts the value -> valid
2. the value is missing (NULL or empty text)        -> missing
3. anything else                                    -> invalid

Independently, a non-missing value whose text is not a strict integer of
the column's width (32-bit for INTEGER columns, 64-bit for LONG) is tagged
``non_integer``. The tag overlaps valid/invalid; missing values never carry
it.
"""

from __future__ import annotations

from typing import Literal

from rowfold.analysis.accumulators.base import (
    AccumulatorKind,
    BaseAccumulator,
    register_accumulator,
)
from rowfold.core.models.base import ColumnType
from rowfold.core.values import Value, parse_int
from rowfold.schema.models import ColumnSpec


@register_accumulator(AccumulatorKind.INTEGER_QUALITY)
class IntegerQuality(BaseAccumulator):
    """Valid / invalid / missing / non-integer counts for an integer column."""

    kind: Literal[AccumulatorKind.INTEGER_QUALITY] = AccumulatorKind.INTEGER_QUALITY

    count_valid: int = 0
    count_invalid: int = 0
    count_missing: int = 0
    count_non_integer: int = 0

    def add(self, value: Value, spec: ColumnSpec) -> IntegerQuality:
        valid, invalid, missing = self.count_valid, self.count_invalid, self.count_missing
        if spec.is_valid(value):
            valid += 1
        elif value.is_missing:
            missing += 1
        else:
            invalid += 1

        non_integer = self.count_non_integer
        if not value.is_missing:
            bits = 64 if spec.type is ColumnType.LONG else 32
            if parse_int(value.to_text(), bits=bits) is None:
                non_integer += 1

        return IntegerQuality(
            count_valid=valid,
            count_invalid=invalid,
            count_missing=missing,
            count_non_integer=non_integer,
            count_total=self.count_total + 1,
        )

    def merge(self, other: IntegerQuality) -> IntegerQuality:
        self._check_mergeable(other)
        return IntegerQuality(
            count_valid=self.count_valid + other.count_valid,
            count_invalid=self.count_invalid + other.count_invalid,
            count_missing=self.count_missing + other.count_missing,
            count_non_integer=self.count_non_integer + other.count_non_integer,
            count_total=self.count_total + other.count_total,
        )
