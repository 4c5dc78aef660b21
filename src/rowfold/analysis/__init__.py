"""Analysis module.

Per-column accumulators and whole-schema column analysis:
- accumulators/: the immutable add/merge counters and fold drivers
- processor: folds a row set (or its partitions) against a schema
"""

from rowfold.analysis.processor import DataAnalysis, analyze_partitions, analyze_rows

__all__ = [
    "DataAnalysis",
    "analyze_partitions",
    "analyze_rows",
]
