"""Per-column accumulators.

One immutable accumulator per column kind, each with ``add`` and an
associative, commutative ``merge`` whose identity is the empty accumulator.

- IntegerQuality: valid / invalid / missing / non-integer counts
- DoubleQuality: valid / invalid / missing / non-real / NaN / infinite counts
- StringAnalysis: text length extremes, tie counts and sums
- CategoricalAnalysis: per-state frequencies
- TimeAnalysis: counts and extremal times

``Accumulator`` is the discriminated union of all of them, so a partial
result can be dumped on one worker and validated back on another:

    payload = quality.model_dump_json()
    restored = ACCUMULATOR_ADAPTER.validate_json(payload)
"""

from typing import Annotated

from pydantic import Field, TypeAdapter

from rowfold.analysis.accumulators.base import (
    AccumulatorKind,
    BaseAccumulator,
    accumulator_class,
    accumulator_kind_for,
    check_registry,
    fold,
    fold_partitions,
    merge_all,
    register_accumulator,
    tree_merge,
    zero,
)
from rowfold.analysis.accumulators.categorical import CategoricalAnalysis
from rowfold.analysis.accumulators.double_quality import DoubleQuality
from rowfold.analysis.accumulators.integer_quality import IntegerQuality
from rowfold.analysis.accumulators.string_analysis import StringAnalysis
from rowfold.analysis.accumulators.time_analysis import TimeAnalysis

check_registry()

Accumulator = Annotated[
    IntegerQuality | DoubleQuality | StringAnalysis | CategoricalAnalysis | TimeAnalysis,
    Field(discriminator="kind"),
]

ACCUMULATOR_ADAPTER: TypeAdapter[Accumulator] = TypeAdapter(Accumulator)

__all__ = [
    # Framework
    "ACCUMULATOR_ADAPTER",
    "Accumulator",
    "AccumulatorKind",
    "BaseAccumulator",
    "accumulator_class",
    "accumulator_kind_for",
    "check_registry",
    "register_accumulator",
    # Drivers
    "fold",
    "fold_partitions",
    "merge_all",
    "tree_merge",
    "zero",
    # Accumulators
    "CategoricalAnalysis",
    "DoubleQuality",
    "IntegerQuality",
    "StringAnalysis",
    "TimeAnalysis",
]
