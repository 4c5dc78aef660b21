"""rowfold.

Schema-driven column quality accumulators, reduce-by-key and overlapping
time windows, built to run unchanged under any sequential, parallel or
distributed fold.

Example:
    from rowfold import Schema, fold
    from rowfold.core.models.base import ColumnType

    schema = Schema.of(("amount", ColumnType.INTEGER))
    quality = fold(values, schema.column("amount"))
"""

__version__ = "0.1.0"

from rowfold.analysis import DataAnalysis, analyze_partitions, analyze_rows
from rowfold.analysis.accumulators import fold, fold_partitions, tree_merge
from rowfold.core.models.base import ConfigurationError, Result
from rowfold.core.values import Value
from rowfold.reduce import ColumnReducer, KeyedReducer, ReduceOp
from rowfold.schema import ColumnSpec, Schema, SequenceSchema
from rowfold.sequence import OverlappingTimeWindowFunction, WindowConfig

__all__ = [
    "ColumnReducer",
    "ColumnSpec",
    "ConfigurationError",
    "DataAnalysis",
    "KeyedReducer",
    "OverlappingTimeWindowFunction",
    "ReduceOp",
    "Result",
    "Schema",
    "SequenceSchema",
    "Value",
    "WindowConfig",
    "__version__",
    "analyze_partitions",
    "analyze_rows",
    "fold",
    "fold_partitions",
    "tree_merge",
]
