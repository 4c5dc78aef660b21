"""Reduce module - combine all rows sharing a key into one row group."""

from rowfold.reduce.models import ReduceOp, RowGroup
from rowfold.reduce.reducer import ColumnReducer, KeyedReducer, RowReducer, group_rows

__all__ = [
    "ColumnReducer",
    "KeyedReducer",
    "ReduceOp",
    "RowGroup",
    "RowReducer",
    "group_rows",
]
