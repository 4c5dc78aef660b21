"""Shared models: Result, enums and configuration errors."""

from rowfold.core.models.base import ColumnType, ConfigurationError, Result, TimeUnit

__all__ = [
    "ColumnType",
    "ConfigurationError",
    "Result",
    "TimeUnit",
]
