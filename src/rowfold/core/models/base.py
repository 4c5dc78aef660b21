"""Base models and types used across all modules.

This module contains the fundamental types that don't belong to any specific
component (schema, accumulators, reducers, windowing).
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field


class ConfigurationError(ValueError):
    """A component was configured in a way that can never process rows.

    Raised at construction or setup time, before any row is seen.
    """


T = TypeVar("T")


class Result(BaseModel, Generic[T]):
    """Result type for operations that can fail.

    Use this instead of exceptions for expected failures.
    Exceptions are reserved for unexpected/programming errors.
    """

    success: bool
    value: T | None = None
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def ok(cls, value: T, warnings: list[str] | None = None) -> Result[T]:
        """Create a successful result."""
        return cls(success=True, value=value, warnings=warnings or [])

    @classmethod
    def fail(cls, error: str) -> Result[T]:
        """Create a failed result."""
        return cls(success=False, error=error)

    def unwrap(self, error_cls: type[Exception] = ValueError) -> T:
        """Get the value or raise ``error_cls`` if failed."""
        if not self.success:
            raise error_cls(f"Result failed: {self.error}")
        assert self.value is not None
        return self.value

    def map(self, fn: Callable[[T], Any]) -> Result[Any]:
        """Transform the value if successful."""
        if self.success and self.value is not None:
            return Result.ok(fn(self.value), self.warnings)
        return self


# === Enums ===


class ColumnType(str, Enum):
    """Supported column types."""

    INTEGER = "Integer"
    LONG = "Long"
    DOUBLE = "Double"
    STRING = "String"
    CATEGORICAL = "Categorical"
    TIME = "Time"

    @property
    def is_numeric(self) -> bool:
        return self in (ColumnType.INTEGER, ColumnType.LONG, ColumnType.DOUBLE)


class TimeUnit(str, Enum):
    """Time units accepted by time-based components.

    Conversion to milliseconds truncates, so sub-millisecond amounts round
    toward zero.
    """

    NANOSECONDS = "NANOSECONDS"
    MICROSECONDS = "MICROSECONDS"
    MILLISECONDS = "MILLISECONDS"
    SECONDS = "SECONDS"
    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"

    def to_millis(self, amount: int) -> int:
        """Convert ``amount`` of this unit to milliseconds."""
        numerator, denominator = _MILLIS_RATIO[self]
        if denominator == 1:
            return amount * numerator
        # Truncate toward zero for negative amounts too
        millis = abs(amount) // denominator
        return millis if amount >= 0 else -millis


# unit -> (multiplier, divisor) relative to milliseconds
_MILLIS_RATIO: dict[TimeUnit, tuple[int, int]] = {
    TimeUnit.NANOSECONDS: (1, 1_000_000),
    TimeUnit.MICROSECONDS: (1, 1_000),
    TimeUnit.MILLISECONDS: (1, 1),
    TimeUnit.SECONDS: (1_000, 1),
    TimeUnit.MINUTES: (60_000, 1),
    TimeUnit.HOURS: (3_600_000, 1),
    TimeUnit.DAYS: (86_400_000, 1),
}
