"""Reduce-by-key.

``KeyedReducer`` is the stage a runtime calls once per key: it flattens every
row group that arrived for the key, from however many partitions, and hands
the combined rows to a row reduction strategy. It holds no column logic of
its own.

``ColumnReducer`` is the stock strategy: one ReduceOp per non-key column,
key columns carried through from the first row.

Usage:
    reducer = ColumnReducer(
        schema,
        key_columns=["customer"],
        default_op=ReduceOp.SUM,
        column_ops={"last_seen": ReduceOp.MAX},
    )
    keyed = KeyedReducer(reducer, schema)
    group = keyed.reduce(key, groups)
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping
from collections.abc import Sequence as SequenceABC
from typing import Protocol

from rowfold.core.config import get_settings
from rowfold.core.logging import get_logger
from rowfold.core.models.base import ColumnType, ConfigurationError
from rowfold.core.values import Row, Value
from rowfold.reduce.models import ReduceOp, RowGroup
from rowfold.schema.metadata import default_metadata
from rowfold.schema.models import ColumnSpec, Schema

logger = get_logger(__name__)


class RowReducer(Protocol):
    """Strategy combining all rows of one key into a single row."""

    @property
    def input_schema(self) -> Schema:
        """Schema of the rows this strategy expects."""
        ...

    def reduce(self, rows: SequenceABC[Row]) -> Row:
        """Combine a non-empty list of rows into one row."""
        ...


def _schema_mismatch(expected: Schema, actual: Schema) -> str | None:
    """Describe the first positional difference between two schemas."""
    if len(expected) != len(actual):
        return f"expected {len(expected)} columns, got {len(actual)}"
    for idx, (want, got) in enumerate(zip(expected, actual, strict=True)):
        if want.name != got.name or want.type is not got.type:
            return f"column {idx}: expected {want}, got {got}"
    return None


class KeyedReducer:
    """Flatten-then-delegate reduction of all row groups sharing a key."""

    def __init__(self, reducer: RowReducer, input_schema: Schema):
        mismatch = _schema_mismatch(reducer.input_schema, input_schema)
        if mismatch:
            raise ConfigurationError(
                f"Reducer does not match the grouped rows' schema: {mismatch}"
            )
        self.reducer = reducer
        self.input_schema = input_schema
        logger.debug("keyed_reducer_configured", reducer=str(reducer))

    def reduce(self, key: Hashable, groups: Iterable[RowGroup]) -> RowGroup:
        """Reduce every row of every group for ``key`` into one row group.

        Args:
            key: The key all groups share
            groups: Row groups contributed by any number of partitions

        Returns:
            RowGroup holding ``key`` and the single reduced row
        """
        rows: list[Row] = []
        for group in groups:
            if group.key != key:
                raise ValueError(f"Row group for key {group.key!r} passed to reduce of {key!r}")
            rows.extend(group.rows)
        if not rows:
            raise ValueError(f"No rows to reduce for key {key!r}")
        return RowGroup(key=key, rows=(self.reducer.reduce(rows),))

    def __str__(self) -> str:
        return f"KeyedReducer({self.reducer})"


def group_rows(schema: Schema, rows: Iterable[Row], key_columns: list[str]) -> list[RowGroup]:
    """Group rows by the text of their key columns, in first-seen key order.

    Local stand-in for a runtime's group-by-key shuffle.
    """
    indices = [schema.index_of(name) for name in key_columns]
    grouped: dict[tuple[str, ...], list[Row]] = {}
    for row in rows:
        key = tuple(row[idx].to_text() for idx in indices)
        grouped.setdefault(key, []).append(row)
    return [RowGroup(key=key, rows=tuple(group)) for key, group in grouped.items()]


# =============================================================================
# Column reduction strategy
# =============================================================================


def _numbers(values: list[Value], column_type: ColumnType) -> list[int] | list[float]:
    present = [v for v in values if not v.is_missing]
    if column_type is ColumnType.DOUBLE:
        return [n for n in (v.try_double() for v in present) if n is not None]
    return [n for n in (v.try_long() for v in present) if n is not None]


def _wrap_number(number: float, column_type: ColumnType) -> Value:
    if column_type is ColumnType.DOUBLE:
        return Value.double(number)
    if column_type is ColumnType.TIME:
        return Value.time(int(number))
    return Value.long(int(number))


def _apply(
    op: ReduceOp, values: list[Value], column_type: ColumnType, delimiter: str
) -> Value:
    if op is ReduceOp.FIRST:
        return values[0]
    if op is ReduceOp.LAST:
        return values[-1]
    if op is ReduceOp.COUNT:
        return Value.long(sum(1 for v in values if not v.is_missing))
    if op is ReduceOp.COUNT_UNIQUE:
        return Value.long(len({v.to_text() for v in values if not v.is_missing}))
    if op is ReduceOp.CONCAT:
        return Value.text(delimiter.join(v.to_text() for v in values if not v.is_missing))

    numbers = _numbers(values, column_type)
    if not numbers:
        return Value.null()
    if op is ReduceOp.SUM:
        return _wrap_number(sum(numbers), column_type)
    if op is ReduceOp.MIN:
        return _wrap_number(min(numbers), column_type)
    if op is ReduceOp.MAX:
        return _wrap_number(max(numbers), column_type)
    if op is ReduceOp.MEAN:
        return Value.double(sum(numbers) / len(numbers))
    raise ValueError(f"Unsupported reduce operation: {op}")


class ColumnReducer:
    """Reduce rows column by column with one ReduceOp per non-key column.

    Args:
        input_schema: Schema of the rows to reduce
        key_columns: Columns identifying the group; carried from the first row
        default_op: Operation for non-key columns without an explicit op
        column_ops: Explicit operation per column name
        concat_delimiter: Separator for CONCAT (defaults to settings)

    Raises:
        ConfigurationError: unknown columns, ops on key columns, ops the
            column type does not support, or columns left without an op
    """

    def __init__(
        self,
        input_schema: Schema,
        key_columns: list[str],
        default_op: ReduceOp | None = None,
        column_ops: Mapping[str, ReduceOp] | None = None,
        concat_delimiter: str | None = None,
    ):
        column_ops = dict(column_ops or {})
        for name in [*key_columns, *column_ops]:
            if not input_schema.has_column(name):
                raise ConfigurationError(f"Reducer references unknown column {name!r}")
        overlap = set(key_columns) & set(column_ops)
        if overlap:
            raise ConfigurationError(
                f"Key columns cannot have reduce operations: {sorted(overlap)}"
            )

        self._input_schema = input_schema
        self.key_columns = list(key_columns)
        self.default_op = default_op
        self.column_ops = column_ops
        self.delimiter = (
            concat_delimiter if concat_delimiter is not None else get_settings().concat_delimiter
        )

        # Per column: None for key columns, otherwise the op to apply
        self._plan: list[ReduceOp | None] = []
        output_columns: list[ColumnSpec] = []
        for spec in input_schema:
            if spec.name in self.key_columns:
                self._plan.append(None)
                output_columns.append(spec)
                continue
            op = column_ops.get(spec.name, default_op)
            if op is None:
                raise ConfigurationError(f"No reduce operation for column {spec.name!r}")
            if not op.supports(spec.type):
                raise ConfigurationError(
                    f"Reduce operation {op.value} not supported for "
                    f"{spec.type.value} column {spec.name!r}"
                )
            self._plan.append(op)
            output_columns.append(self._output_column(op, spec))
        self._output_schema = Schema(output_columns)

    @staticmethod
    def _output_column(op: ReduceOp, spec: ColumnSpec) -> ColumnSpec:
        name = f"{op.value}({spec.name})"
        if op in (ReduceOp.FIRST, ReduceOp.LAST):
            return ColumnSpec(name=name, metadata=spec.metadata)
        return ColumnSpec(name=name, metadata=default_metadata(op.output_type(spec.type)))

    @property
    def input_schema(self) -> Schema:
        return self._input_schema

    @property
    def output_schema(self) -> Schema:
        return self._output_schema

    def reduce(self, rows: SequenceABC[Row]) -> Row:
        if not rows:
            raise ValueError("Cannot reduce an empty list of rows")
        width = len(self._input_schema)
        for row in rows:
            if len(row) != width:
                raise ValueError(f"Row has {len(row)} values, expected {width}")

        out: list[Value] = []
        for idx, (spec, op) in enumerate(zip(self._input_schema, self._plan, strict=True)):
            if op is None:
                out.append(rows[0][idx])
                continue
            column = [row[idx] for row in rows]
            out.append(_apply(op, column, spec.type, self.delimiter))
        return tuple(out)

    def __str__(self) -> str:
        ops = ",".join(
            f"{spec.name}={op.value}"
            for spec, op in zip(self._input_schema, self._plan, strict=True)
            if op is not None
        )
        keys = ",".join(self.key_columns)
        return f"ColumnReducer(keyColumns=[{keys}],ops=[{ops}])"
