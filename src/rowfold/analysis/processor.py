"""Column analysis over whole row sets.

Folds every column of a schema into its default accumulator, either in one
pass over all rows or per partition with the partials tree-merged. Both
paths produce identical DataAnalysis results.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Executor
from functools import partial

from pydantic import BaseModel, ConfigDict, Field

from rowfold.analysis.accumulators import (
    Accumulator,
    accumulator_kind_for,
    fold,
)
from rowfold.core.logging import get_logger, log_context
from rowfold.core.values import Row
from rowfold.schema.models import Schema

logger = get_logger(__name__)


class DataAnalysis(BaseModel):
    """Per-column accumulators for one schema."""

    model_config = ConfigDict(frozen=True)

    column_names: list[str]
    columns: dict[str, Accumulator] = Field(default_factory=dict)
    row_count: int = 0

    def __getitem__(self, column_name: str) -> Accumulator:
        return self.columns[column_name]

    def merge(self, other: DataAnalysis) -> DataAnalysis:
        """Combine two analyses of the same schema."""
        if self.column_names != other.column_names:
            raise ValueError(
                f"Cannot merge analyses of different schemas: "
                f"{self.column_names} vs {other.column_names}"
            )
        return DataAnalysis(
            column_names=self.column_names,
            columns={
                name: self.columns[name].merge(other.columns[name])  # type: ignore[arg-type]
                for name in self.column_names
            },
            row_count=self.row_count + other.row_count,
        )


def _check_row_shapes(schema: Schema, rows: list[Row]) -> None:
    width = len(schema)
    for idx, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(
                f"Row {idx} has {len(row)} values but the schema has {width} columns"
            )


def analyze_rows(schema: Schema, rows: Iterable[Row]) -> DataAnalysis:
    """Fold all rows, column by column.

    Args:
        schema: Schema the rows are aligned to
        rows: Rows in any order

    Returns:
        DataAnalysis with one accumulator per column
    """
    materialized = list(rows)
    _check_row_shapes(schema, materialized)

    columns = {}
    for idx, spec in enumerate(schema):
        columns[spec.name] = fold(
            (row[idx] for row in materialized), spec, accumulator_kind_for(spec.type)
        )
    return DataAnalysis(
        column_names=schema.names,
        columns=columns,
        row_count=len(materialized),
    )


def analyze_partitions(
    schema: Schema,
    partitions: Iterable[Iterable[Row]],
    executor: Executor | None = None,
) -> DataAnalysis:
    """Analyze each partition independently and merge the partial results.

    Args:
        schema: Schema the rows are aligned to
        partitions: Disjoint row partitions
        executor: Optional caller-owned executor to analyze partitions on

    Returns:
        DataAnalysis equal to ``analyze_rows`` over all rows
    """
    analyze_one = partial(analyze_rows, schema)
    materialized = [list(p) for p in partitions]
    if executor is None:
        partials = [analyze_one(p) for p in materialized]
    else:
        partials = list(executor.map(analyze_one, materialized))

    result = DataAnalysis(
        column_names=schema.names,
        columns={spec.name: fold((), spec) for spec in schema},
    )
    for analysis in partials:
        result = result.merge(analysis)

    with log_context(partitions=len(materialized)):
        logger.debug("partitions_analyzed", columns=len(schema), rows=result.row_count)
    return result
