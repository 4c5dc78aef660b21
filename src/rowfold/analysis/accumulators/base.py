"""Accumulator base type, registry and fold drivers.

Every accumulator is an immutable pydantic model with two operations:

- ``add(value, spec)`` folds one more value in and returns a new accumulator
- ``merge(other)`` combines two partial results

``merge`` is associative and commutative and the default-constructed
accumulator is its identity, so a sequential fold over all values equals
any per-partition fold recombined in any order or tree shape. The drivers
below (``fold``, ``merge_all``, ``tree_merge``, ``fold_partitions``) are the
shapes a runtime typically uses; none of them owns threads or processes.

Usage:
    from rowfold.analysis.accumulators import fold, fold_partitions

    quality = fold(values, spec)
    same = fold_partitions([values[:10], values[10:]], spec)
    assert quality == same
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import Executor
from enum import Enum
from functools import partial
from typing import Self

from pydantic import BaseModel, ConfigDict

from rowfold.core.models.base import ColumnType
from rowfold.core.values import Value
from rowfold.schema.models import ColumnSpec


class AccumulatorKind(str, Enum):
    """Closed set of accumulator variants."""

    INTEGER_QUALITY = "integer_quality"
    DOUBLE_QUALITY = "double_quality"
    STRING_ANALYSIS = "string_analysis"
    CATEGORICAL_ANALYSIS = "categorical_analysis"
    TIME_ANALYSIS = "time_analysis"


class BaseAccumulator(BaseModel):
    """Immutable per-column running summary."""

    model_config = ConfigDict(frozen=True)

    kind: AccumulatorKind
    count_total: int = 0

    def add(self, value: Value, spec: ColumnSpec) -> Self:
        raise NotImplementedError

    def merge(self, other: Self) -> Self:
        raise NotImplementedError

    def _check_mergeable(self, other: BaseAccumulator) -> None:
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot merge {type(self).__name__} with {type(other).__name__}"
            )


# Registry of accumulator implementations (kind -> class)
_ACCUMULATORS: dict[AccumulatorKind, type[BaseAccumulator]] = {}


def register_accumulator(
    kind: AccumulatorKind,
) -> Callable[[type[BaseAccumulator]], type[BaseAccumulator]]:
    """Decorator to register the implementation of an accumulator kind."""

    def decorator(cls: type[BaseAccumulator]) -> type[BaseAccumulator]:
        if kind in _ACCUMULATORS:
            raise ValueError(f"Accumulator '{kind.value}' is already registered")
        _ACCUMULATORS[kind] = cls
        return cls

    return decorator


def check_registry() -> None:
    """Fail loudly if any accumulator kind has no implementation."""
    missing = [kind.value for kind in AccumulatorKind if kind not in _ACCUMULATORS]
    if missing:
        raise RuntimeError(f"Accumulator kinds without implementation: {missing}")


def accumulator_class(kind: AccumulatorKind) -> type[BaseAccumulator]:
    return _ACCUMULATORS[kind]


# Default accumulator for each column type
_KIND_FOR_COLUMN_TYPE: dict[ColumnType, AccumulatorKind] = {
    ColumnType.INTEGER: AccumulatorKind.INTEGER_QUALITY,
    ColumnType.LONG: AccumulatorKind.INTEGER_QUALITY,
    ColumnType.DOUBLE: AccumulatorKind.DOUBLE_QUALITY,
    ColumnType.STRING: AccumulatorKind.STRING_ANALYSIS,
    ColumnType.CATEGORICAL: AccumulatorKind.CATEGORICAL_ANALYSIS,
    ColumnType.TIME: AccumulatorKind.TIME_ANALYSIS,
}

_unmapped = set(ColumnType) - set(_KIND_FOR_COLUMN_TYPE)
if _unmapped:
    raise RuntimeError(
        f"Column types without an accumulator: {sorted(t.value for t in _unmapped)}"
    )


def accumulator_kind_for(column_type: ColumnType) -> AccumulatorKind:
    """The accumulator kind used to summarize a column type."""
    return _KIND_FOR_COLUMN_TYPE[column_type]


# =============================================================================
# Fold drivers
# =============================================================================


def zero(kind: AccumulatorKind) -> BaseAccumulator:
    """Identity element of ``kind``'s merge."""
    return accumulator_class(kind)()


def fold(
    values: Iterable[Value],
    spec: ColumnSpec,
    kind: AccumulatorKind | None = None,
) -> BaseAccumulator:
    """Sequentially fold values into a fresh accumulator.

    Args:
        values: Values of one column, in any order
        spec: Column the values belong to
        kind: Accumulator to use (defaults to the column type's accumulator)

    Returns:
        The accumulated summary
    """
    acc = zero(kind or accumulator_kind_for(spec.type))
    for value in values:
        acc = acc.add(value, spec)
    return acc


def merge_all(accumulators: Iterable[BaseAccumulator], kind: AccumulatorKind) -> BaseAccumulator:
    """Left-to-right merge starting from the identity."""
    result = zero(kind)
    for acc in accumulators:
        result = result.merge(acc)
    return result


def tree_merge(accumulators: Iterable[BaseAccumulator], kind: AccumulatorKind) -> BaseAccumulator:
    """Balanced pairwise merge, the shape of a distributed tree reduce."""
    level = list(accumulators)
    if not level:
        return zero(kind)
    while len(level) > 1:
        paired = [level[i].merge(level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            paired.append(level[-1])
        level = paired
    return level[0]


def fold_partitions(
    partitions: Iterable[Iterable[Value]],
    spec: ColumnSpec,
    kind: AccumulatorKind | None = None,
    executor: Executor | None = None,
) -> BaseAccumulator:
    """Fold each partition independently, then tree-merge the partials.

    Args:
        partitions: Disjoint slices of one column's values
        spec: Column the values belong to
        kind: Accumulator to use (defaults to the column type's accumulator)
        executor: Optional caller-owned executor to fold partitions on

    Returns:
        Summary equal to a sequential fold over all partitions' values
    """
    kind = kind or accumulator_kind_for(spec.type)
    fold_one = partial(fold, spec=spec, kind=kind)
    if executor is None:
        partials = [fold_one(p) for p in partitions]
    else:
        partials = list(executor.map(fold_one, [list(p) for p in partitions]))
    return tree_merge(partials, kind)
