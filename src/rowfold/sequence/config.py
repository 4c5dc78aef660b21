"""Window configuration.

``WindowConfig`` is the validated parameter record of a time window
function. All durations are normalized to milliseconds when the record is
built, so a bad combination (zero separation, a size that truncates to zero
milliseconds, ...) is rejected before any sequence is segmented.

Usage:
    from rowfold.sequence.config import build_window_config, load_window_config

    result = build_window_config(
        time_column="timestamp",
        window_size=1,
        window_size_unit=TimeUnit.DAYS,
        window_separation=1,
        window_separation_unit=TimeUnit.HOURS,
    )
    config = result.unwrap()

    # Or from config/windows/hourly.yaml
    config = load_window_config("windows/hourly.yaml").unwrap()
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from rowfold.core.config import get_settings
from rowfold.core.logging import get_logger
from rowfold.core.models.base import Result, TimeUnit

logger = get_logger(__name__)


class WindowConfig(BaseModel):
    """Parameters of an overlapping time window function."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    time_column: str = Field(min_length=1, description="Time column to window on")
    window_size: int = Field(description="Size of each window, in window_size_unit")
    window_size_unit: TimeUnit
    window_separation: int = Field(
        description="Separation between consecutive window starts, in window_separation_unit"
    )
    window_separation_unit: TimeUnit
    offset: int = Field(default=0, description="Shift of the window grid, in offset_unit")
    offset_unit: TimeUnit | None = None
    add_window_start_column: bool = False
    add_window_end_column: bool = False
    exclude_empty_windows: bool = False

    @model_validator(mode="after")
    def _check_durations(self) -> WindowConfig:
        if self.window_separation_millis <= 0:
            raise ValueError(
                f"Window separation must be positive, got "
                f"{self.window_separation}{self.window_separation_unit.value}"
            )
        if self.window_size_millis <= 0:
            raise ValueError(
                f"Window size must be positive, got {self.window_size}{self.window_size_unit.value}"
            )
        return self

    @property
    def window_size_millis(self) -> int:
        return self.window_size_unit.to_millis(self.window_size)

    @property
    def window_separation_millis(self) -> int:
        return self.window_separation_unit.to_millis(self.window_separation)

    @property
    def offset_millis(self) -> int:
        if self.offset == 0 or self.offset_unit is None:
            return 0
        return self.offset_unit.to_millis(self.offset)


def _unit(value: TimeUnit | str | None) -> TimeUnit | str | None:
    if isinstance(value, str) and not isinstance(value, TimeUnit):
        return value.upper()
    return value


def build_window_config(
    time_column: str | None = None,
    window_size: int | None = None,
    window_size_unit: TimeUnit | str | None = None,
    window_separation: int | None = None,
    window_separation_unit: TimeUnit | str | None = None,
    offset: int = 0,
    offset_unit: TimeUnit | str | None = None,
    add_window_start_column: bool = False,
    add_window_end_column: bool = False,
    exclude_empty_windows: bool = False,
) -> Result[WindowConfig]:
    """Validate window parameters once, all together.

    Units may be TimeUnit members or their names in any case.

    Returns:
        Result containing the WindowConfig, or the first configuration error
    """
    if time_column is None:
        return Result.fail("Time column is null (not specified)")
    if window_size is None or window_size_unit is None:
        return Result.fail("Window size/unit not set")
    if window_separation is None or window_separation_unit is None:
        return Result.fail("Window separation and/or unit not set")

    try:
        config = WindowConfig(
            time_column=time_column,
            window_size=window_size,
            window_size_unit=_unit(window_size_unit),  # type: ignore[arg-type]
            window_separation=window_separation,
            window_separation_unit=_unit(window_separation_unit),  # type: ignore[arg-type]
            offset=offset,
            offset_unit=_unit(offset_unit),  # type: ignore[arg-type]
            add_window_start_column=add_window_start_column,
            add_window_end_column=add_window_end_column,
            exclude_empty_windows=exclude_empty_windows,
        )
    except ValidationError as e:
        return Result.fail(f"Invalid window configuration: {e}")

    warnings = []
    if offset != 0 and offset_unit is None:
        warnings.append(f"Offset {offset} has no unit and is ignored")
    return Result.ok(config, warnings=warnings)


def load_window_config(path: str | Path) -> Result[WindowConfig]:
    """Load a window configuration from YAML.

    Relative paths are resolved against the configured ``config_path``. The
    YAML keys are the WindowConfig field names.

    Args:
        path: YAML file path

    Returns:
        Result containing the WindowConfig
    """
    config_file = Path(path)
    if not config_file.is_absolute():
        config_file = get_settings().config_path / config_file

    if not config_file.exists():
        return Result.fail(f"Window config not found: {config_file}")

    try:
        with open(config_file) as f:
            data: dict[str, Any] | None = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return Result.fail(f"Failed to parse window config {config_file}: {e}")

    if not isinstance(data, dict):
        return Result.fail(f"Window config {config_file} must be a mapping")

    unknown = set(data) - set(WindowConfig.model_fields)
    if unknown:
        return Result.fail(f"Unknown window config keys in {config_file}: {sorted(unknown)}")

    result = build_window_config(**data)
    if result.success:
        logger.debug("window_config_loaded", path=str(config_file))
    return result
