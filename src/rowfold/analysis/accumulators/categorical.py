"""Categorical state frequency counter."""

from __future__ import annotations

from collections import Counter
from typing import Literal

from pydantic import Field

from rowfold.analysis.accumulators.base import (
    AccumulatorKind,
    BaseAccumulator,
    register_accumulator,
)
from rowfold.core.values import Value
from rowfold.schema.models import ColumnSpec


@register_accumulator(AccumulatorKind.CATEGORICAL_ANALYSIS)
class CategoricalAnalysis(BaseAccumulator):
    """Count of values per state text, plus how many fell outside the schema's states."""

    kind: Literal[AccumulatorKind.CATEGORICAL_ANALYSIS] = AccumulatorKind.CATEGORICAL_ANALYSIS

    state_counts: dict[str, int] = Field(default_factory=dict)
    count_invalid: int = 0

    def add(self, value: Value, spec: ColumnSpec) -> CategoricalAnalysis:
        state = value.to_text()
        counts = dict(self.state_counts)
        counts[state] = counts.get(state, 0) + 1
        return CategoricalAnalysis(
            state_counts=counts,
            count_invalid=self.count_invalid + (0 if spec.is_valid(value) else 1),
            count_total=self.count_total + 1,
        )

    def merge(self, other: CategoricalAnalysis) -> CategoricalAnalysis:
        self._check_mergeable(other)
        counts = Counter(self.state_counts)
        counts.update(other.state_counts)
        return CategoricalAnalysis(
            state_counts=dict(counts),
            count_invalid=self.count_invalid + other.count_invalid,
            count_total=self.count_total + other.count_total,
        )

    def most_common(self, n: int | None = None) -> list[tuple[str, int]]:
        """States ordered by descending count, ties broken by state text."""
        ordered = sorted(self.state_counts.items(), key=lambda item: (-item[1], item[0]))
        return ordered if n is None else ordered[:n]
