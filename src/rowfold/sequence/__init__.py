"""Sequence module - ordering and time windowing of time-ordered sequences."""

from rowfold.sequence.comparators import compare_long, is_sorted, long_key, sort_sequence
from rowfold.sequence.config import WindowConfig, build_window_config, load_window_config
from rowfold.sequence.window import (
    WINDOW_END_COLUMN,
    WINDOW_START_COLUMN,
    OverlappingTimeWindowFunction,
    Window,
)

__all__ = [
    # Ordering
    "compare_long",
    "is_sorted",
    "long_key",
    "sort_sequence",
    # Windowing
    "WINDOW_END_COLUMN",
    "WINDOW_START_COLUMN",
    "OverlappingTimeWindowFunction",
    "Window",
    "WindowConfig",
    "build_window_config",
    "load_window_config",
]
