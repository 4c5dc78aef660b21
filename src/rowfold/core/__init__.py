"""Core module - configuration, logging, values and shared models."""

from rowfold.core.config import Settings, get_settings
from rowfold.core.models.base import ColumnType, ConfigurationError, Result, TimeUnit
from rowfold.core.values import Row, Sequence, Value, ValueKind, make_row

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Models
    "ColumnType",
    "ConfigurationError",
    "Result",
    "TimeUnit",
    # Values
    "Row",
    "Sequence",
    "Value",
    "ValueKind",
    "make_row",
]
