"""Schema module - column specs, metadata and validity predicates."""

from rowfold.schema.metadata import (
    CategoricalMetaData,
    ColumnMetaData,
    DoubleMetaData,
    IntegerMetaData,
    LongMetaData,
    StringMetaData,
    TimeMetaData,
    default_metadata,
)
from rowfold.schema.models import ColumnSpec, Schema, SequenceSchema

__all__ = [
    # Schema
    "ColumnSpec",
    "Schema",
    "SequenceSchema",
    # Metadata
    "CategoricalMetaData",
    "ColumnMetaData",
    "DoubleMetaData",
    "IntegerMetaData",
    "LongMetaData",
    "StringMetaData",
    "TimeMetaData",
    "default_metadata",
]
